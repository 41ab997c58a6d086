"""Draft and review workflow against a GitHub repository.

The hosting API has no multi-file transaction: a submit is a sequence of
independent read-hash-then-write operations, each of which may be applied,
rejected as a conflict, or fail outright. The engine reports exactly what
happened and never retries.
"""

from __future__ import annotations

import base64
import logging
from typing import TYPE_CHECKING, Any

from tenkai.errors import ConflictError, DraftNotFoundError, TenkaiError, UpstreamError
from tenkai.models.remote import (
    FileChange,
    FileWriteResult,
    FileWriteStatus,
    RemoteDraft,
    RemoteFile,
    ReviewRequestResult,
    SubmissionResult,
)

if TYPE_CHECKING:
    from tenkai.github.client import GitHubClient

logger = logging.getLogger(__name__)

_HTTP_NOT_FOUND = 404

PROOFREAD_FOOTER = "\n\n📝 校正をお願いします"


class RemoteEngine:
    """Stateless workflow over one caller's GitHub client."""

    def __init__(self, client: GitHubClient, *, default_branch: str = "main") -> None:
        self._client = client
        self._default_branch = default_branch

    async def read_hash(self, repository: str, path: str, ref: str | None = None) -> str | None:
        """Return the current blob hash of ``path``, or None if it does not exist."""
        entry = await self._client.get_content(repository, path, ref)
        return entry.sha if entry else None

    async def write_file(
        self,
        repository: str,
        branch: str,
        message: str,
        change: FileChange,
        sha: str | None,
    ) -> FileWriteResult:
        """Write one file against ``sha``. Stale hashes come back as a conflict result."""
        try:
            written = await self._client.put_content(
                repository,
                change.path,
                message=message,
                content=change.content.encode("utf-8"),
                branch=branch,
                sha=sha,
            )
        except ConflictError as exc:
            logger.warning(
                "Remote write conflict: repository=%s branch=%s path=%s",
                repository,
                branch,
                change.path,
            )
            return FileWriteResult(
                path=change.path, status=FileWriteStatus.CONFLICT, sha=sha, error=exc.detail
            )
        new_sha = (written.get("content") or {}).get("sha")
        return FileWriteResult(path=change.path, status=FileWriteStatus.APPLIED, sha=new_sha)

    async def submit_files(
        self,
        repository: str,
        branch: str | None,
        message: str,
        files: list[FileChange],
    ) -> SubmissionResult:
        """Write ``files`` one at a time, stopping at the first failure.

        Files written before the failure stay committed; files after it are
        reported as skipped. A file with ``sha`` set is written against that
        hash instead of a freshly read one.
        """
        branch = branch or self._default_branch
        result = SubmissionResult(repository=repository, branch=branch, message=message)
        stopped = False
        for change in files:
            if stopped:
                result.results.append(
                    FileWriteResult(path=change.path, status=FileWriteStatus.SKIPPED)
                )
                continue
            try:
                sha = change.sha or await self.read_hash(repository, change.path, branch)
                outcome = await self.write_file(repository, branch, message, change, sha)
            except TenkaiError as exc:
                outcome = FileWriteResult(
                    path=change.path, status=FileWriteStatus.FAILED, error=exc.detail
                )
            result.results.append(outcome)
            if outcome.status != FileWriteStatus.APPLIED:
                stopped = True

        logger.info(
            "Files submitted: repository=%s branch=%s outcome=%s applied=%d failed=%d skipped=%d",
            repository,
            branch,
            result.outcome,
            len(result.succeeded),
            len(result.failed),
            len(result.skipped),
        )
        return result

    async def list_drafts(self, repository: str) -> list[RemoteDraft]:
        branches = await self._client.list_branches(repository)
        return [
            RemoteDraft(
                name=b["name"],
                protected=bool(b.get("protected", False)),
                commit=b.get("commit") or {},
            )
            for b in branches
        ]

    async def create_draft(
        self, repository: str, name: str, base_branch: str | None = None
    ) -> dict[str, Any]:
        """Create branch ``name`` at the tip of ``base_branch`` as read right now.

        The tip is read and the ref created in two separate calls; a push to
        the base in between is not detected.
        """
        base_branch = base_branch or self._default_branch
        try:
            base_sha = await self._client.get_branch_sha(repository, base_branch)
        except UpstreamError as exc:
            if exc.status == _HTTP_NOT_FOUND:
                raise DraftNotFoundError(base_branch) from exc
            raise
        await self._client.create_ref(repository, name, base_sha)
        logger.info(
            "Remote draft created: repository=%s name=%s base=%s sha=%s",
            repository,
            name,
            base_branch,
            base_sha[:7],
        )
        return {"repository": repository, "name": name, "baseBranch": base_branch, "sha": base_sha}

    async def switch_draft(self, repository: str, name: str) -> dict[str, Any]:
        """Acknowledge a draft switch. The working branch is tracked by the client."""
        return {"repository": repository, "name": name}

    async def submit_for_review(
        self,
        repository: str,
        source_branch: str,
        *,
        title: str,
        description: str = "",
        target_branch: str | None = None,
        reviewers: list[str] | None = None,
        proofreading: bool = False,
    ) -> ReviewRequestResult:
        """Open a pull request, then attach reviewers in a separate call.

        A reviewer-attachment failure leaves the pull request in place and is
        returned as a warning.
        """
        target_branch = target_branch or self._default_branch
        reviewers = reviewers or []
        body = description + PROOFREAD_FOOTER if proofreading else description
        pull = await self._client.create_pull(
            repository, title=title, body=body, head=source_branch, base=target_branch
        )
        result = ReviewRequestResult(
            repository=repository,
            number=pull["number"],
            url=pull.get("html_url", ""),
            reviewers=reviewers,
        )
        logger.info(
            "Review request created: repository=%s number=%d head=%s base=%s",
            repository,
            result.number,
            source_branch,
            target_branch,
        )

        if reviewers:
            try:
                await self._client.request_reviewers(repository, result.number, reviewers)
            except TenkaiError as exc:
                logger.warning(
                    "Reviewer attachment failed: repository=%s number=%d error=%s",
                    repository,
                    result.number,
                    exc.detail,
                )
                result.warnings.append(f"レビュワーの追加に失敗しました: {exc.detail}")
        return result

    async def repository_info(self, repository: str) -> dict[str, Any]:
        info = await self._client.get_repository(repository)
        if info is None:
            raise UpstreamError(f"repository not found: {repository}", status=404)
        return info

    async def get_file(self, repository: str, path: str, ref: str | None = None) -> RemoteFile:
        entry = await self._client.get_content(repository, path, ref)
        if entry is None:
            raise UpstreamError(f"file not found: {path}", status=404)
        content = base64.b64decode(entry.content.replace("\n", "")).decode("utf-8")
        return RemoteFile(path=entry.path, sha=entry.sha, content=content, ref=ref)
