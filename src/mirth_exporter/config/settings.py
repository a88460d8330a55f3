"""Settings and configuration management."""

import logging
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseSettings):
    """Application settings.

    Read from the environment, optionally seeded from a ``.env`` file in the
    working directory.
    """

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )

    # Mirth Connect server
    mirth_endpoint: str = Field(
        ..., description="Base URL of the Mirth API, e.g. https://mirth:8443"
    )
    mirth_username: str = Field("", description="Mirth API username")
    mirth_password: str = Field("", description="Mirth API password")
    request_timeout: float = Field(
        10.0, gt=0, description="Timeout in seconds for each Mirth API request"
    )
    verify_tls: bool = Field(
        False, description="Verify the Mirth server TLS certificate"
    )

    # Exporter HTTP surface
    listen_address: str = Field(
        ":9141", description="Address to listen on for telemetry"
    )
    metrics_path: str = Field(
        "/metrics", description="Path under which to expose metrics"
    )

    # Logging
    log_level: str = Field("INFO", description="Logging level")
    log_format: str = Field("text", description="Log format: 'text' or 'json'")
    sanitize_logs: bool = Field(True, description="Sanitize credentials from logs")

    @field_validator("mirth_endpoint")
    @classmethod
    def _strip_endpoint(cls, value: str) -> str:
        value = value.strip().rstrip("/")
        if not value:
            raise ValueError("MIRTH_ENDPOINT must not be empty")
        return value

    @field_validator("metrics_path")
    @classmethod
    def _check_metrics_path(cls, value: str) -> str:
        if not value.startswith("/"):
            raise ValueError("metrics path must start with '/'")
        if value == "/":
            raise ValueError("metrics path must not be '/', the landing page lives there")
        return value

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        value = value.strip().upper()
        if value not in LOG_LEVELS:
            raise ValueError(f"log level must be one of {', '.join(LOG_LEVELS)}")
        return value

    @field_validator("log_format")
    @classmethod
    def _check_log_format(cls, value: str) -> str:
        value = value.lower()
        if value not in ("text", "json"):
            raise ValueError("log format must be 'text' or 'json'")
        return value

    @property
    def has_credentials(self) -> bool:
        return bool(self.mirth_username and self.mirth_password)

    def model_post_init(self, __context) -> None:
        if not self.has_credentials:
            logger.warning(
                "MIRTH_USERNAME/MIRTH_PASSWORD not set, requests will be rejected by Mirth"
            )


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
