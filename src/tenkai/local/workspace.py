"""Process-wide registry of local repositories."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import TYPE_CHECKING

from tenkai.errors import NotInitializedError
from tenkai.local.engine import LocalEngine

if TYPE_CHECKING:
    from tenkai.agents.generator import TextGenerator

logger = logging.getLogger(__name__)


class LocalWorkspace:
    """Caches one engine per resolved repository path and tracks the active one.

    Requests always act on the engine that was active when they started;
    re-initialising with another path only changes which engine later
    requests see.
    """

    def __init__(
        self,
        *,
        generator: TextGenerator | None = None,
        author_name: str = "tenkai",
        author_email: str = "tenkai@example.com",
    ) -> None:
        self._generator = generator
        self._author_name = author_name
        self._author_email = author_email
        self._engines: dict[Path, LocalEngine] = {}
        self._active: LocalEngine | None = None
        self._lock = asyncio.Lock()

    async def open(self, path: str | Path) -> LocalEngine:
        """Open (or initialise) the repository at ``path`` and make it active."""
        resolved = Path(path).expanduser().resolve()
        async with self._lock:
            engine = self._engines.get(resolved)
            if engine is None:
                engine = await asyncio.to_thread(
                    LocalEngine.open_or_init,
                    resolved,
                    generator=self._generator,
                    author_name=self._author_name,
                    author_email=self._author_email,
                )
                self._engines[resolved] = engine
            self._active = engine
        logger.info("Active repository set: path=%s", resolved)
        return engine

    @property
    def active(self) -> LocalEngine | None:
        return self._active

    def require_active(self) -> LocalEngine:
        if self._active is None:
            raise NotInitializedError("no repository has been initialised")
        return self._active
