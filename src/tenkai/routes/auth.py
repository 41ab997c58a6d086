"""GitHub OAuth callback: exchange the code and hand the token to the front end."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Request
from fastapi.responses import RedirectResponse, Response

from tenkai.errors import describe_failure
from tenkai.responses import envelope
from tenkai.services.oauth import app_redirect, error_redirect, sign_in

router = APIRouter(prefix="/api/auth", tags=["auth"])
logger = logging.getLogger(__name__)


@router.get("/github/callback")
async def github_callback(request: Request, code: str = "", error: str = "") -> Response:
    """Redirect to the front end with the token and login as query parameters."""
    settings = request.app.state.settings
    frontend_url = settings.app.frontend_url
    if error:
        logger.info("OAuth callback returned an error: error=%s", error)
        return RedirectResponse(error_redirect(frontend_url, error), status_code=307)
    if not code:
        return RedirectResponse(error_redirect(frontend_url, "missing_code"), status_code=307)
    if not settings.github.oauth_configured:
        return envelope(success=False, message="OAuth設定が不足しています", status_code=500)

    with describe_failure("GitHubトークン取得に失敗しました"):
        token, user = await sign_in(request.app.state.http, settings.github, code)
    return RedirectResponse(app_redirect(frontend_url, token, user.login), status_code=307)
