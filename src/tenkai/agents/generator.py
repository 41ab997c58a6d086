"""Text generation: free-form analysis and best-effort commit messages."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

from tenkai.agents.prompts import render_prompt
from tenkai.errors import AIUnavailableError, UpstreamError
from tenkai.models.analysis import AnalysisResult, AnalysisType

if TYPE_CHECKING:
    from tenkai.config import GeminiConfig

logger = logging.getLogger(__name__)

_TEMPLATED_TYPES = frozenset({AnalysisType.SUMMARY, AnalysisType.REVIEW, AnalysisType.COMMIT})


class TextGenerator:
    """Wraps the optional chat client with a per-call timeout."""

    def __init__(self, client: Any | None, *, timeout_seconds: float = 15.0) -> None:
        self._client = client
        self._timeout = timeout_seconds

    @classmethod
    def from_config(cls, client: Any | None, config: GeminiConfig) -> TextGenerator:
        return cls(client, timeout_seconds=config.timeout_seconds)

    @property
    def enabled(self) -> bool:
        return self._client is not None

    async def generate(self, prompt: str) -> str:
        """Send one prompt and return the response text.

        Raises ``AIUnavailableError`` when no client is configured and
        ``UpstreamError`` when the call fails or exceeds the timeout.
        """
        if self._client is None:
            raise AIUnavailableError("text generation is not configured")
        try:
            response = await asyncio.wait_for(
                self._client.get_response(prompt), timeout=self._timeout
            )
        except TimeoutError as exc:
            raise UpstreamError(
                f"text generation timed out after {self._timeout:.0f}s"
            ) from exc
        except Exception as exc:
            raise UpstreamError(f"text generation failed: {exc}") from exc
        return (response.text or "").strip()

    async def analyze(self, text: str, analysis_type: str = "", prompt: str = "") -> AnalysisResult:
        """Run ``text`` through a fixed template, or send the raw prompt for other types."""
        if analysis_type in _TEMPLATED_TYPES:
            full_prompt = render_prompt(analysis_type, text)
        else:
            full_prompt = prompt or text
        result = await self.generate(full_prompt)
        logger.info("Text analyzed: type=%s chars=%d", analysis_type or "-", len(result))
        return AnalysisResult(result=result, type=analysis_type)

    async def commit_message(self, changes: str, fallback: str) -> str:
        """Return a one-line message for ``changes``, or ``fallback`` on any failure."""
        if self._client is None or not changes:
            return fallback
        try:
            generated = await self.generate(render_prompt("commit_message", changes))
        except Exception:  # noqa: BLE001
            logger.warning("Commit message generation failed, using default", exc_info=True)
            return fallback
        line = generated.splitlines()[0].strip() if generated else ""
        return line or fallback
