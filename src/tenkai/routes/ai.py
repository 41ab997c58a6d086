"""Text analysis route."""

from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from tenkai.errors import describe_failure
from tenkai.models.analysis import AnalyzeRequest
from tenkai.responses import envelope

router = APIRouter(prefix="/api/ai", tags=["ai"])


@router.post("/analyze")
async def analyze(request: Request, body: AnalyzeRequest) -> JSONResponse:
    """Summarise, proofread, or draft a commit message for the given text."""
    generator = request.app.state.generator
    with describe_failure("AI分析に失敗しました"):
        result = await generator.analyze(body.text, body.type, body.prompt)
    return envelope(data=result)
