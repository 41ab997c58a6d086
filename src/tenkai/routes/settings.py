"""Per-user settings and repository listing, authenticated by GitHub token."""

from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from tenkai.auth.middleware import require_access_token
from tenkai.errors import describe_failure
from tenkai.github.client import GitHubClient
from tenkai.models.settings import SettingsRequest
from tenkai.responses import envelope
from tenkai.services.settings_store import SettingsStore

router = APIRouter(prefix="/api", tags=["settings"])


def _store(request: Request, token: str) -> SettingsStore:
    client = GitHubClient(request.app.state.http, token, request.app.state.settings.github)
    return SettingsStore(client)


@router.get("/settings")
async def get_settings(request: Request) -> JSONResponse:
    """Return the stored settings, or the default document if none were saved."""
    token = require_access_token(request)
    with describe_failure("設定の取得に失敗しました"):
        document, stored = await _store(request, token).get()
    message = "" if stored else "デフォルト設定を返しました"
    return envelope(message=message, data=document)


@router.post("/settings")
async def save_settings(request: Request, body: SettingsRequest) -> JSONResponse:
    """Replace the whole settings document."""
    token = require_access_token(request, fallback=body.access_token)
    with describe_failure("設定の保存に失敗しました"):
        document = await _store(request, token).save(body.settings)
    return envelope(message="設定を保存しました", data=document)


@router.get("/repositories")
async def list_repositories(request: Request) -> JSONResponse:
    token = require_access_token(request)
    with describe_failure("リポジトリ一覧の取得に失敗しました"):
        repositories = await _store(request, token).list_repositories()
    return envelope(data=repositories)
