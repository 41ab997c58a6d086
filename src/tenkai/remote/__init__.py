"""GitHub-backed workflow engine."""

from tenkai.remote.engine import RemoteEngine

__all__ = ["RemoteEngine"]
