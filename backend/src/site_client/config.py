"""Client configuration using pydantic-settings."""
from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ClientSettings(BaseSettings):
    """Site client settings loaded from SITE_CLIENT_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="SITE_CLIENT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    api_url: str = "http://localhost:8000/api"
    request_timeout: float = 30.0

    # Minimum interval between two version checks of the same resource
    version_check_interval_minutes: float = Field(default=30, ge=0)

    # None keeps the cache in memory only
    storage_path: Path | None = None

    # How long a failed user action keeps its error message
    error_display_seconds: float = Field(default=3.0, ge=0)
    # Window in which a resource counts as "just fetched"
    refresh_interval_seconds: float = Field(default=5.0, ge=0)

    github_api_url: str = "https://api.github.com"
    projects_refresh_interval_minutes: float = Field(default=60, ge=0)

    @property
    def version_check_interval_ms(self) -> int:
        """Debounce window of the reconciliation routine in milliseconds."""
        return int(self.version_check_interval_minutes * 60 * 1000)

    @property
    def refresh_interval_ms(self) -> int:
        """Recently-fetched window in milliseconds."""
        return int(self.refresh_interval_seconds * 1000)

    @property
    def projects_refresh_interval_ms(self) -> int:
        """Maximum age of the cached project list in milliseconds."""
        return int(self.projects_refresh_interval_minutes * 60 * 1000)


@lru_cache
def get_client_settings() -> ClientSettings:
    """Get cached client settings instance."""
    return ClientSettings()
