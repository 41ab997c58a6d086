"""Authentication helpers: GitHub bearer tokens."""

from tenkai.auth.middleware import get_access_token, require_access_token

__all__ = ["get_access_token", "require_access_token"]
