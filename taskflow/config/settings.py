"""Application settings using Pydantic."""

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ApiSettings(BaseSettings):
    """Remote TaskFlow service configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="TASKFLOW_API_",
        extra="ignore",
    )

    base_url: str = Field(default="http://localhost:8080")
    # The service may need a cold start on first login
    timeout: float = Field(default=30.0)


class StorageSettings(BaseSettings):
    """Session persistence configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="TASKFLOW_STORAGE_",
        extra="ignore",
    )

    # "file" or "memory"
    backend: str = Field(default="file")
    path: Path = Field(default=Path("~/.taskflow/session.json"))

    @property
    def resolved_path(self) -> Path:
        """Session file path with the user directory expanded."""
        return self.path.expanduser()


class StubServerSettings(BaseSettings):
    """Local stub server configuration."""

    model_config = SettingsConfigDict(env_prefix="TASKFLOW_STUB_", extra="ignore")

    host: str = Field(default="127.0.0.1")
    port: int = Field(default=8080)


class AppSettings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="TASKFLOW_",
        extra="ignore",
    )

    debug: bool = Field(default=False)
    log_level: str = Field(default="WARNING")

    # Nested settings - manually create to avoid env prefix issues
    @property
    def api(self) -> ApiSettings:
        return ApiSettings()

    @property
    def storage(self) -> StorageSettings:
        return StorageSettings()

    @property
    def stub_server(self) -> StubServerSettings:
        return StubServerSettings()


@lru_cache
def get_settings() -> AppSettings:
    """Get cached application settings."""
    return AppSettings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing)."""
    get_settings.cache_clear()
