"""GitHub REST API access."""

from tenkai.github.client import GitHubClient

__all__ = ["GitHubClient"]
