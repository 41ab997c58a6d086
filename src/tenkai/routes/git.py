"""GitHub-backed draft and review routes.

Every request carries its own access token (header or body) and repository
name; nothing about the caller is kept between requests.
"""

from __future__ import annotations

from fastapi import APIRouter, Query, Request
from fastapi.responses import JSONResponse

from tenkai.auth.middleware import require_access_token
from tenkai.errors import ValidationError, describe_failure
from tenkai.github.client import GitHubClient
from tenkai.models.remote import (
    FileWriteStatus,
    ProofreadRequest,
    PullRequestRequest,
    RemoteDraftRequest,
    SubmissionOutcome,
    SubmitFilesRequest,
)
from tenkai.remote.engine import RemoteEngine
from tenkai.responses import envelope

router = APIRouter(prefix="/api/git", tags=["git"])

SUBMIT_FAILED_MESSAGE = "ファイルのコミットに失敗しました"


def _engine(request: Request, token: str) -> RemoteEngine:
    settings = request.app.state.settings
    client = GitHubClient(request.app.state.http, token, settings.github)
    return RemoteEngine(client, default_branch=settings.github.default_branch)


def _require_repository(repository: str) -> None:
    if not repository:
        raise ValidationError(
            "repository is required", message="認証トークンとリポジトリ名が必要です"
        )


@router.post("/souan-teishutsu")
async def submit_files(request: Request, body: SubmitFilesRequest) -> JSONResponse:
    """Write the given files to a branch, one commit per file.

    A submit that stops part way is still a success for the files already
    written; the failed and skipped paths come back as warnings.
    """
    token = require_access_token(request, fallback=body.access_token)
    with describe_failure(SUBMIT_FAILED_MESSAGE):
        result = await _engine(request, token).submit_files(
            body.repository, body.branch or None, body.message, body.files
        )

    failure = result.first_failure
    if result.outcome == SubmissionOutcome.ALL_SUCCEEDED:
        return envelope(message="草案を提出しました", data=result)
    if result.outcome == SubmissionOutcome.PARTIAL_SUCCESS:
        warnings = [f"{path}: {SUBMIT_FAILED_MESSAGE}" for path in result.failed]
        warnings += [f"{path}: 未処理" for path in result.skipped]
        return envelope(message="草案を一部提出しました", data=result, warnings=warnings)

    status_code = 409 if failure and failure.status == FileWriteStatus.CONFLICT else 500
    return envelope(
        success=False,
        message=SUBMIT_FAILED_MESSAGE,
        data=result,
        error=failure.error if failure else None,
        status_code=status_code,
    )


@router.get("/souan-list")
async def list_drafts(request: Request, repository: str = Query("")) -> JSONResponse:
    token = require_access_token(request)
    _require_repository(repository)
    with describe_failure("草案一覧の取得に失敗しました"):
        drafts = await _engine(request, token).list_drafts(repository)
    return envelope(data=drafts)


@router.post("/souan-create")
async def create_draft(request: Request, body: RemoteDraftRequest) -> JSONResponse:
    token = require_access_token(request, fallback=body.access_token)
    with describe_failure("草案の作成に失敗しました"):
        created = await _engine(request, token).create_draft(
            body.repository, body.name, body.base_branch or None
        )
    return envelope(message=f"草案「{body.name}」を作成しました", data=created)


@router.post("/souan-switch")
async def switch_draft(request: Request, body: RemoteDraftRequest) -> JSONResponse:
    token = require_access_token(request, fallback=body.access_token)
    switched = await _engine(request, token).switch_draft(body.repository, body.name)
    return envelope(message=f"草案「{body.name}」に切り替えました", data=switched)


@router.post("/shusei-irai")
async def request_revision(request: Request, body: PullRequestRequest) -> JSONResponse:
    """Open a pull request from the draft branch."""
    token = require_access_token(request, fallback=body.access_token)
    with describe_failure("修正依頼の作成に失敗しました"):
        result = await _engine(request, token).submit_for_review(
            body.repository,
            body.branch,
            title=body.title,
            description=body.description,
            target_branch=body.base_branch or None,
        )
    return envelope(
        message="修正依頼を作成しました",
        data={
            "repository": result.repository,
            "pullRequestNumber": result.number,
            "pullRequestURL": result.url,
        },
    )


@router.post("/kousei-irai")
async def request_proofreading(request: Request, body: ProofreadRequest) -> JSONResponse:
    """Open a proofreading pull request and ask the given reviewers to look at it."""
    token = require_access_token(request, fallback=body.access_token)
    with describe_failure("校正依頼の作成に失敗しました"):
        result = await _engine(request, token).submit_for_review(
            body.repository,
            body.branch,
            title=body.title,
            description=body.description,
            target_branch=body.base_branch or None,
            reviewers=body.reviewers,
            proofreading=True,
        )
    return envelope(
        message="校正依頼を作成しました",
        data={
            "repository": result.repository,
            "pullRequestNumber": result.number,
            "pullRequestURL": result.url,
            "reviewers": result.reviewers,
            "warnings": result.warnings,
        },
        warnings=result.warnings,
    )


@router.get("/repository-info")
async def repository_info(request: Request, repository: str = Query("")) -> JSONResponse:
    token = require_access_token(request)
    _require_repository(repository)
    with describe_failure("リポジトリ情報の取得に失敗しました"):
        info = await _engine(request, token).repository_info(repository)
    return envelope(data=info)
