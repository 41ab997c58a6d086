"""Per-user editor settings stored in the ``.tenkai-settings`` repository."""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field

SETTINGS_VERSION = "1.0"


class WritingMode(StrEnum):
    VERTICAL = "vertical"
    HORIZONTAL = "horizontal"


class Theme(StrEnum):
    LIGHT = "light"
    DARK = "dark"


class TenkaiSettings(BaseModel):
    """The whole settings document. It is always read and written as one unit."""

    version: str = SETTINGS_VERSION
    chars_per_line: int = 17
    lines_per_page: int = 42
    writing_mode: WritingMode = WritingMode.VERTICAL
    theme: Theme = Theme.LIGHT
    repositories: list[str] = Field(default_factory=list)
    active_repo: str = ""
    custom_settings: dict[str, Any] = Field(default_factory=dict)
    last_updated: str = ""


class SettingsRequest(BaseModel):
    access_token: str | None = None
    settings: TenkaiSettings = Field(default_factory=TenkaiSettings)
