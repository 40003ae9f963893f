"""
Configuration settings using Pydantic Settings.

All sensitive configuration must be loaded from environment variables.
Never hardcode API keys or credentials in the code.
"""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # FACEIT Data API Configuration
    # Optional here: the HTTP shell rejects requests while the key is missing.
    faceit_api_key: str | None = Field(
        None, validation_alias=AliasChoices("FACEIT_API_KEY", "FACEIT_TOKEN")
    )
    faceit_api_base_url: str = Field(
        "https://open.faceit.com/data/v4", alias="FACEIT_API_BASE_URL"
    )
    faceit_http_timeout_seconds: float = Field(15.0, alias="FACEIT_HTTP_TIMEOUT_SECONDS")

    # Pipeline
    history_window_days: int = Field(90, ge=1, alias="HISTORY_WINDOW_DAYS")
    history_page_size: int = Field(100, ge=1, le=100, alias="HISTORY_PAGE_SIZE")
    history_page_interval_ms: int = Field(100, ge=0, alias="HISTORY_PAGE_INTERVAL_MS")
    detail_lookup_interval_ms: int = Field(50, ge=0, alias="DETAIL_LOOKUP_INTERVAL_MS")
    min_roster_players: int = Field(5, ge=1, alias="MIN_ROSTER_PLAYERS")
    recent_series_limit: int = Field(10, ge=0, alias="RECENT_SERIES_LIMIT")

    # Application Configuration
    app_name: str = Field("faceit-team-stats", alias="APP_NAME")
    app_env: str = Field("development", alias="APP_ENV")
    app_log_level: str = Field("INFO", alias="APP_LOG_LEVEL")

    # HTTP shell
    server_host: str = Field("0.0.0.0", alias="SERVER_HOST")
    server_port: int = Field(3000, alias="SERVER_PORT")
    cors_allow_origin: str = Field("*", alias="CORS_ALLOW_ORIGIN")

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.app_env == "production"

    def pipeline_options(self) -> PipelineOptions:
        return PipelineOptions(
            base_url=self.faceit_api_base_url,
            timeout_seconds=self.faceit_http_timeout_seconds,
            window_days=self.history_window_days,
            page_size=self.history_page_size,
            page_interval=self.history_page_interval_ms / 1000,
            detail_interval=self.detail_lookup_interval_ms / 1000,
            min_roster_players=self.min_roster_players,
            recent_series_limit=self.recent_series_limit,
        )


@dataclass(frozen=True)
class PipelineOptions:
    """Knobs of one statistics run, independent of the environment."""

    base_url: str = "https://open.faceit.com/data/v4"
    timeout_seconds: float = 15.0
    window_days: int = 90
    page_size: int = 100
    page_interval: float = 0.1
    detail_interval: float = 0.05
    min_roster_players: int = 5
    recent_series_limit: int = 10


# Singleton instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create settings singleton."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
