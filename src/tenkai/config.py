"""Application configuration loaded from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from dotenv import load_dotenv


def _env(key: str, default: str = "") -> str:
    return os.environ.get(key, default)


@dataclass(frozen=True)
class AppConfig:
    env: str = field(default_factory=lambda: _env("TENKAI_ENV", "development"))
    host: str = field(default_factory=lambda: _env("HOST", "0.0.0.0"))  # noqa: S104
    port: int = field(default_factory=lambda: int(_env("PORT", "3001")))
    log_level: str = field(default_factory=lambda: _env("LOG_LEVEL", "INFO"))
    frontend_url: str = field(
        default_factory=lambda: _env("FRONTEND_URL", "http://localhost:3000")
    )
    author_name: str = field(default_factory=lambda: _env("TENKAI_AUTHOR_NAME", "tenkai"))
    author_email: str = field(
        default_factory=lambda: _env("TENKAI_AUTHOR_EMAIL", "tenkai@example.com")
    )

    @property
    def is_development(self) -> bool:
        return self.env == "development"


@dataclass(frozen=True)
class GeminiConfig:
    """Text-generation settings. Gemini is reached through its OpenAI-compatible API."""

    api_key: str = field(default_factory=lambda: _env("GEMINI_API_KEY"))
    model: str = field(default_factory=lambda: _env("GEMINI_MODEL", "gemini-2.0-flash"))
    base_url: str = field(
        default_factory=lambda: _env(
            "GEMINI_BASE_URL",
            "https://generativelanguage.googleapis.com/v1beta/openai/",
        )
    )
    timeout_seconds: float = field(
        default_factory=lambda: float(_env("GEMINI_TIMEOUT_SECONDS", "15"))
    )

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)


@dataclass(frozen=True)
class GitHubConfig:
    client_id: str = field(default_factory=lambda: _env("GITHUB_CLIENT_ID"))
    client_secret: str = field(default_factory=lambda: _env("GITHUB_CLIENT_SECRET"))
    redirect_uri: str = field(
        default_factory=lambda: _env(
            "GITHUB_REDIRECT_URI",
            "http://localhost:3001/api/auth/github/callback",
        )
    )
    api_url: str = field(default_factory=lambda: _env("GITHUB_API_URL", "https://api.github.com"))
    oauth_url: str = field(
        default_factory=lambda: _env(
            "GITHUB_OAUTH_URL", "https://github.com/login/oauth/access_token"
        )
    )
    timeout_seconds: float = field(
        default_factory=lambda: float(_env("GITHUB_TIMEOUT_SECONDS", "30"))
    )
    default_branch: str = field(default_factory=lambda: _env("GITHUB_DEFAULT_BRANCH", "main"))
    user_agent: str = "tenkai-app"

    @property
    def oauth_configured(self) -> bool:
        return bool(self.client_id and self.client_secret)


@dataclass(frozen=True)
class Settings:
    app: AppConfig = field(default_factory=AppConfig)
    gemini: GeminiConfig = field(default_factory=GeminiConfig)
    github: GitHubConfig = field(default_factory=GitHubConfig)


def load_settings() -> Settings:
    """Load ``.env`` (if present) into the environment and build settings."""
    load_dotenv()
    return Settings()
