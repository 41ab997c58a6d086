"""Service-layer workflows that sit between routes and the GitHub client."""

from tenkai.services.settings_store import SettingsStore, default_settings

__all__ = ["SettingsStore", "default_settings"]
