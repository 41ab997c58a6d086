"""Bearer-token extraction for the GitHub-backed endpoints.

There is no server-side session: every request carries the caller's GitHub
access token, either in the ``Authorization`` header or in the JSON body.
"""

from __future__ import annotations

from fastapi import Request

from tenkai.errors import AuthenticationError

_BEARER_PREFIX = "Bearer "


def get_access_token(request: Request) -> str | None:
    """Return the token from the Authorization header with any ``Bearer`` prefix stripped."""
    header = request.headers.get("Authorization", "").strip()
    if header.startswith(_BEARER_PREFIX):
        header = header[len(_BEARER_PREFIX) :].strip()
    return header or None


def require_access_token(request: Request, fallback: str | None = None) -> str:
    """Return the header token (or ``fallback``) or raise ``AuthenticationError``."""
    token = get_access_token(request) or fallback
    if not token:
        raise AuthenticationError("missing access token")
    return token
