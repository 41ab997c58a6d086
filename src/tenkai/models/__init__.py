"""Request, response and document models."""

from tenkai.models.analysis import AnalysisResult, AnalysisType, AnalyzeRequest
from tenkai.models.github import GitHubContent, GitHubRepository, GitHubUser
from tenkai.models.local import (
    DraftInfo,
    DraftRequest,
    HistoryEntry,
    InitRequest,
    SaveRequest,
    SaveResult,
    StatusSummary,
)
from tenkai.models.remote import (
    FileChange,
    FileWriteResult,
    FileWriteStatus,
    RemoteDraft,
    RemoteFile,
    ReviewRequestResult,
    SubmissionOutcome,
    SubmissionResult,
)
from tenkai.models.settings import TenkaiSettings, Theme, WritingMode

__all__ = [
    "AnalysisResult",
    "AnalysisType",
    "AnalyzeRequest",
    "DraftInfo",
    "DraftRequest",
    "FileChange",
    "FileWriteResult",
    "FileWriteStatus",
    "GitHubContent",
    "GitHubRepository",
    "GitHubUser",
    "HistoryEntry",
    "InitRequest",
    "RemoteDraft",
    "RemoteFile",
    "ReviewRequestResult",
    "SaveRequest",
    "SaveResult",
    "StatusSummary",
    "SubmissionOutcome",
    "SubmissionResult",
    "TenkaiSettings",
    "Theme",
    "WritingMode",
]
