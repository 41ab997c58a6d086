"""Models for the text analysis endpoint."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, Field


class AnalysisType(StrEnum):
    SUMMARY = "summary"
    REVIEW = "review"
    COMMIT = "commit"
    OTHER = "other"


class AnalyzeRequest(BaseModel):
    text: str = Field(min_length=1)
    type: str = ""
    prompt: str = ""


class AnalysisResult(BaseModel):
    result: str
    type: str
