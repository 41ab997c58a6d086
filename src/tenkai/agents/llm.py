"""Chat client factory for the Gemini OpenAI-compatible endpoint."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from agent_framework.openai import OpenAIChatClient

if TYPE_CHECKING:
    from tenkai.config import GeminiConfig

logger = logging.getLogger(__name__)


def create_chat_client(config: GeminiConfig) -> OpenAIChatClient | None:
    """Create a chat client, or return None when no API key is configured."""
    if not config.enabled:
        logger.warning("GEMINI_API_KEY is not set: text generation is disabled")
        return None
    logger.info(
        "Chat client created: base_url=%s model=%s",
        config.base_url,
        config.model,
    )
    return OpenAIChatClient(
        model_id=config.model,
        api_key=config.api_key,
        base_url=config.base_url,
    )
