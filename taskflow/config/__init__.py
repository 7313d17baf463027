"""Configuration module."""

from .settings import (
    AppSettings,
    ApiSettings,
    StorageSettings,
    StubServerSettings,
    get_settings,
    clear_settings_cache,
)

__all__ = [
    "AppSettings",
    "ApiSettings",
    "StorageSettings",
    "StubServerSettings",
    "get_settings",
    "clear_settings_cache",
]
