"""Unified configuration settings for the CSV splitting service.

Values are read from environment variables or a ``.env`` file. Every field
has a default so the service and the CLI start without any configuration.

All configuration should be accessed through this module:
    from csvninja.settings import get_settings
    settings = get_settings()
"""

import tempfile
from functools import lru_cache
from pathlib import Path
from typing import List, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _split_csv(value: str) -> List[str]:
    """Split a comma-separated string into a list."""
    return [item.strip() for item in value.split(",") if item.strip()]


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ==================== Runtime ====================
    environment: Literal["development", "production", "test"] = Field(
        default="development",
        description="Deployment environment; stack traces are only exposed in development",
    )
    locale: Literal["fr", "en"] = Field(
        default="fr",
        description="Language of user-visible messages",
    )
    log_level: str = Field(
        default="INFO",
        description="Loguru log level",
    )

    # ==================== Server Configuration ====================
    allowed_origins: str = Field(
        default="http://localhost:3000",
        description="Comma-separated list of allowed CORS origins",
    )
    uvicorn_host: str = Field(
        default="0.0.0.0",
        description="Uvicorn server host",
    )
    uvicorn_port: int = Field(
        default=5002,
        description="Uvicorn server port",
    )

    # ==================== Split Limits ====================
    max_upload_bytes: int = Field(
        default=4 * 1024 * 1024,
        description="Largest accepted upload in bytes",
        ge=1,
    )
    max_rows_per_file_limit: int = Field(
        default=10_000,
        description="Upper bound accepted for maxRowsPerFile",
        ge=1,
    )
    request_timeout_seconds: float = Field(
        default=8.0,
        description="Wall-clock budget for one split request",
        gt=0,
    )

    # ==================== Artifact Storage ====================
    storage_mode: Literal["memory", "disk"] = Field(
        default="memory",
        description="Return artifacts inline (memory) or stage them for download (disk)",
    )
    output_dir: Path = Field(
        default=None,
        validate_default=True,
        description="Directory where staged runs are written in disk mode",
    )
    artifact_retention_seconds: int = Field(
        default=300,
        description="Age after which staged runs are deleted",
        ge=1,
    )
    cleanup_interval_seconds: int = Field(
        default=60,
        description="Period of the background cleanup sweeper",
        ge=1,
    )

    # ==================== Rate Limiting ====================
    rate_limit_requests: int = Field(
        default=100,
        description="Requests allowed per client per window on /api/",
        ge=1,
    )
    rate_limit_window_seconds: int = Field(
        default=15 * 60,
        description="Length of the rate limiting window",
        ge=1,
    )

    @field_validator("output_dir", mode="before")
    @classmethod
    def set_default_output_dir(cls, v):
        """Default staged output to a folder under the system temp directory."""
        if v is None or v == "":
            return Path(tempfile.gettempdir()) / "csvninja"
        return Path(v)

    # ==================== Computed Properties ====================

    @property
    def allowed_origins_list(self) -> List[str]:
        """Get allowed origins as a list."""
        return _split_csv(self.allowed_origins)

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def ensure_output_dir(self) -> None:
        """Ensure the staged output directory exists."""
        self.output_dir.mkdir(parents=True, exist_ok=True)


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance (singleton pattern)."""
    return Settings()
