"""Construction of the long-lived collaborators held on ``app.state``."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import httpx

from tenkai.agents.generator import TextGenerator
from tenkai.agents.llm import create_chat_client
from tenkai.local.workspace import LocalWorkspace

if TYPE_CHECKING:
    from tenkai.config import Settings

logger = logging.getLogger(__name__)


def init_http_client(settings: Settings) -> httpx.AsyncClient:
    """Shared client for GitHub API and OAuth calls; one per process."""
    return httpx.AsyncClient(timeout=settings.github.timeout_seconds)


def init_generator(settings: Settings) -> TextGenerator:
    try:
        client = create_chat_client(settings.gemini)
    except Exception:  # noqa: BLE001
        logger.warning("Chat client could not be created: text generation disabled", exc_info=True)
        client = None
    return TextGenerator.from_config(client, settings.gemini)


def init_workspace(settings: Settings, generator: TextGenerator) -> LocalWorkspace:
    return LocalWorkspace(
        generator=generator,
        author_name=settings.app.author_name,
        author_email=settings.app.author_email,
    )
