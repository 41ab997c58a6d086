"""Local repository workflow engine."""

from tenkai.local.engine import LocalEngine, default_message
from tenkai.local.workspace import LocalWorkspace

__all__ = ["LocalEngine", "LocalWorkspace", "default_message"]
