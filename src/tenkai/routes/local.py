"""Local repository routes: init, save, history, drafts, status."""

from __future__ import annotations

from fastapi import APIRouter, Query, Request
from fastapi.responses import JSONResponse

from tenkai.errors import describe_failure
from tenkai.models.local import DraftRequest, InitRequest, SaveRequest
from tenkai.responses import envelope

router = APIRouter(prefix="/api", tags=["local"])


@router.post("/init")
async def init_repository(request: Request, body: InitRequest) -> JSONResponse:
    """Open or create the repository at ``workDir`` and make it the active one."""
    workspace = request.app.state.workspace
    generator = request.app.state.generator
    with describe_failure("Gitリポジトリの初期化に失敗しました"):
        engine = await workspace.open(body.work_dir)
    return envelope(
        message="原稿管理を開始しました",
        data={"workDir": str(engine.path), "aiEnabled": generator.enabled},
    )


@router.post("/save")
async def save(request: Request, body: SaveRequest) -> JSONResponse:
    """Commit every change in the working tree."""
    engine = request.app.state.workspace.require_active()
    with describe_failure("保存に失敗しました"):
        result = await engine.save(body.message, use_generated_message=body.use_ai)
    return envelope(message="保存しました", data=result)


@router.get("/history")
async def history(request: Request, limit: int = Query(20, ge=1, le=100)) -> JSONResponse:
    engine = request.app.state.workspace.require_active()
    with describe_failure("履歴の取得に失敗しました"):
        entries = await engine.history(limit)
    return envelope(data=entries)


@router.post("/draft/create")
async def create_draft(request: Request, body: DraftRequest) -> JSONResponse:
    engine = request.app.state.workspace.require_active()
    with describe_failure("草案の作成に失敗しました"):
        await engine.create_draft(body.name)
    return envelope(message=f"草案「{body.name}」を作成しました", data={"draft": body.name})


@router.get("/draft/list")
async def list_drafts(request: Request) -> JSONResponse:
    engine = request.app.state.workspace.require_active()
    with describe_failure("草案一覧の取得に失敗しました"):
        drafts = await engine.list_drafts()
    return envelope(data=drafts)


@router.post("/draft/switch")
async def switch_draft(request: Request, body: DraftRequest) -> JSONResponse:
    engine = request.app.state.workspace.require_active()
    with describe_failure("草案の切り替えに失敗しました"):
        await engine.switch_draft(body.name)
    return envelope(message=f"草案「{body.name}」に切り替えました", data={"draft": body.name})


@router.get("/status")
async def status(request: Request) -> JSONResponse:
    engine = request.app.state.workspace.require_active()
    with describe_failure("状態の取得に失敗しました"):
        summary = await engine.status()
    return envelope(data=summary)
