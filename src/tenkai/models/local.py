"""Request and response models for the local repository endpoints."""

from __future__ import annotations

from pydantic import Field

from tenkai.models.base import ApiModel


class InitRequest(ApiModel):
    work_dir: str = Field(alias="workDir", min_length=1)


class SaveRequest(ApiModel):
    message: str = ""
    use_ai: bool = Field(default=False, alias="useAI")


class DraftRequest(ApiModel):
    name: str = Field(min_length=1)


class SaveResult(ApiModel):
    commit: str
    message: str


class HistoryEntry(ApiModel):
    id: str
    date: str
    message: str
    author: str


class DraftInfo(ApiModel):
    name: str
    current: bool


class StatusSummary(ApiModel):
    current: str | None
    modified: int
    has_changes: bool = Field(alias="hasChanges")
