"""GitHub OAuth code exchange for the sign-in callback."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from urllib.parse import urlencode

import httpx

from tenkai.errors import UpstreamError, ValidationError
from tenkai.github.client import GitHubClient

if TYPE_CHECKING:
    from tenkai.config import GitHubConfig
    from tenkai.models.github import GitHubUser

logger = logging.getLogger(__name__)


async def exchange_code(http: httpx.AsyncClient, config: GitHubConfig, code: str) -> str:
    """Exchange an authorization code for an access token."""
    try:
        response = await http.post(
            config.oauth_url,
            data={
                "client_id": config.client_id,
                "client_secret": config.client_secret,
                "code": code,
                "redirect_uri": config.redirect_uri,
            },
            headers={"Accept": "application/json", "User-Agent": config.user_agent},
            timeout=config.timeout_seconds,
        )
    except httpx.HTTPError as exc:
        raise UpstreamError(f"token exchange failed: {exc}") from exc
    try:
        payload = response.json()
    except ValueError as exc:
        raise UpstreamError(
            f"token response is not JSON: {exc}",
            status=response.status_code,
            body=response.text,
        ) from exc
    token = payload.get("access_token") if isinstance(payload, dict) else None
    if not token:
        raise ValidationError(
            str(payload.get("error_description") or payload.get("error") or "no access token")
            if isinstance(payload, dict)
            else "no access token",
            message="アクセストークンが取得できませんでした",
        )
    return token


async def sign_in(
    http: httpx.AsyncClient, config: GitHubConfig, code: str
) -> tuple[str, GitHubUser]:
    """Exchange ``code`` and resolve the identity behind the new token."""
    token = await exchange_code(http, config, code)
    user = await GitHubClient(http, token, config).get_user()
    logger.info("GitHub sign-in completed: user=%s", user.login)
    return token, user


def app_redirect(frontend_url: str, token: str, login: str) -> str:
    query = urlencode({"auth_success": "true", "token": token, "user": login})
    return f"{frontend_url.rstrip('/')}/app?{query}"


def error_redirect(frontend_url: str, error: str) -> str:
    return f"{frontend_url.rstrip('/')}/auth?{urlencode({'error': error})}"
