"""Settings store: one JSON document per user in ``<login>/.tenkai-settings``."""

from __future__ import annotations

import base64
import json
import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from pydantic import ValidationError

from tenkai.errors import AuthenticationError, UpstreamError
from tenkai.models.settings import TenkaiSettings

if TYPE_CHECKING:
    from tenkai.github.client import GitHubClient
    from tenkai.models.github import GitHubRepository, GitHubUser

logger = logging.getLogger(__name__)

SETTINGS_REPOSITORY = ".tenkai-settings"
SETTINGS_FILE = "settings.json"
SETTINGS_COMMIT_MESSAGE = "tenkai設定を更新"


def _now() -> str:
    return datetime.now(UTC).isoformat(timespec="seconds")


def default_settings() -> TenkaiSettings:
    """The document returned to users who have never saved settings."""
    return TenkaiSettings(last_updated=_now())


class SettingsStore:
    """Read and write the caller's settings document through the GitHub API."""

    def __init__(self, client: GitHubClient) -> None:
        self._client = client

    async def _identity(self) -> GitHubUser:
        try:
            return await self._client.get_user()
        except UpstreamError as exc:
            raise AuthenticationError(
                exc.detail, message="GitHubユーザー情報の取得に失敗しました"
            ) from exc

    async def get(self) -> tuple[TenkaiSettings, bool]:
        """Return ``(settings, stored)``; ``stored`` is False when the default was used."""
        user = await self._identity()
        entry = await self._client.get_content(
            f"{user.login}/{SETTINGS_REPOSITORY}", SETTINGS_FILE
        )
        if entry is None:
            logger.info("Settings not found, returning default: user=%s", user.login)
            return default_settings(), False
        try:
            raw = base64.b64decode(entry.content.replace("\n", ""))
            return TenkaiSettings.model_validate_json(raw), True
        except (ValueError, ValidationError):
            logger.warning(
                "Stored settings unreadable, returning default: user=%s", user.login, exc_info=True
            )
            return default_settings(), False

    async def save(self, settings: TenkaiSettings) -> TenkaiSettings:
        """Replace the stored document with ``settings``, creating the repository if needed."""
        user = await self._identity()
        repository = f"{user.login}/{SETTINGS_REPOSITORY}"
        document = settings.model_copy(update={"last_updated": _now()})

        if await self._client.get_repository(repository) is None:
            await self._client.create_repository(
                SETTINGS_REPOSITORY,
                description="tenkai editor settings",
                private=True,
                auto_init=True,
            )
            logger.info("Settings repository created: repository=%s", repository)

        current = await self._client.get_content(repository, SETTINGS_FILE)
        payload = json.dumps(document.model_dump(mode="json"), ensure_ascii=False, indent=2)
        await self._client.put_content(
            repository,
            SETTINGS_FILE,
            message=SETTINGS_COMMIT_MESSAGE,
            content=payload.encode("utf-8"),
            sha=current.sha if current else None,
        )
        logger.info("Settings saved: user=%s", user.login)
        return document

    async def list_repositories(self) -> list[GitHubRepository]:
        return await self._client.list_repositories()
