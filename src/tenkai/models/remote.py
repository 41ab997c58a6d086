"""Models for the GitHub-backed draft and review workflow."""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field, computed_field


class FileChange(BaseModel):
    """One file to write. ``sha`` pins the write to a hash the caller already read."""

    path: str = Field(min_length=1)
    content: str = ""
    sha: str | None = None


class FileWriteStatus(StrEnum):
    APPLIED = "applied"
    CONFLICT = "conflict"
    FAILED = "failed"
    SKIPPED = "skipped"


class FileWriteResult(BaseModel):
    path: str
    status: FileWriteStatus
    sha: str | None = None
    error: str | None = None


class SubmissionOutcome(StrEnum):
    ALL_SUCCEEDED = "all_succeeded"
    PARTIAL_SUCCESS = "partial_success"
    NONE_SUCCEEDED = "none_succeeded"


class SubmissionResult(BaseModel):
    """Per-file results of a multi-file submit, in submission order.

    Files are written one by one and the submit stops at the first failure,
    so the results are always: applied files, then one failed or conflicting
    file, then skipped files.
    """

    repository: str
    branch: str
    message: str
    results: list[FileWriteResult] = Field(default_factory=list)

    @computed_field
    @property
    def outcome(self) -> SubmissionOutcome:
        failed = [r for r in self.results if r.status != FileWriteStatus.APPLIED]
        if not failed:
            return SubmissionOutcome.ALL_SUCCEEDED
        if any(r.status == FileWriteStatus.APPLIED for r in self.results):
            return SubmissionOutcome.PARTIAL_SUCCESS
        return SubmissionOutcome.NONE_SUCCEEDED

    @computed_field
    @property
    def succeeded(self) -> list[str]:
        return [r.path for r in self.results if r.status == FileWriteStatus.APPLIED]

    @computed_field
    @property
    def failed(self) -> list[str]:
        return [
            r.path
            for r in self.results
            if r.status in (FileWriteStatus.CONFLICT, FileWriteStatus.FAILED)
        ]

    @computed_field
    @property
    def skipped(self) -> list[str]:
        return [r.path for r in self.results if r.status == FileWriteStatus.SKIPPED]

    @property
    def first_failure(self) -> FileWriteResult | None:
        failures = (FileWriteStatus.CONFLICT, FileWriteStatus.FAILED)
        return next((r for r in self.results if r.status in failures), None)


class RemoteDraft(BaseModel):
    name: str
    protected: bool = False
    commit: dict[str, Any] = Field(default_factory=dict)


class ReviewRequestResult(BaseModel):
    repository: str
    number: int
    url: str
    reviewers: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)


class RemoteFile(BaseModel):
    path: str
    sha: str
    content: str
    ref: str | None = None


class SubmitFilesRequest(BaseModel):
    access_token: str = ""
    repository: str = Field(min_length=1)
    message: str = Field(min_length=1)
    branch: str = ""
    files: list[FileChange] = Field(default_factory=list)


class RemoteDraftRequest(BaseModel):
    access_token: str = ""
    repository: str = Field(min_length=1)
    name: str = Field(min_length=1)
    base_branch: str = ""


class PullRequestRequest(BaseModel):
    access_token: str = ""
    repository: str = Field(min_length=1)
    branch: str = Field(min_length=1)
    title: str = Field(min_length=1)
    description: str = ""
    base_branch: str = ""


class ProofreadRequest(PullRequestRequest):
    reviewers: list[str] = Field(default_factory=list)
