"""Configuration settings for the error relay service."""

import os
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

ENDPOINT_ENV_VAR = "RUNTIME_ERROR_ENDPOINT_URL"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Service identification
    service_name: str = "error-relay"
    debug: bool = False

    # Server configuration
    host: str = "0.0.0.0"
    port: int = 8002

    # Logging
    log_level: str = "INFO"
    log_format: str = "json"

    # Diagnostic collector; blank or unset disables reporting
    runtime_error_endpoint_url: str | None = Field(
        default=None,
        validation_alias=ENDPOINT_ENV_VAR,
    )
    error_report_timeout: float = 5.0  # seconds

    # CORS configuration
    cors_origins: list[str] = ["*"]

    model_config = SettingsConfigDict(
        env_prefix="ERROR_RELAY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def configured_endpoint_url() -> str | None:
    """Return the collector URL as currently configured, or None when blank.

    The process environment is consulted on every call, so operators can
    point the relay at a different collector without a restart. When the
    variable is unset, the value loaded at startup (including ``.env``) is
    used. No file is read after the first call.
    """
    url = os.environ.get(ENDPOINT_ENV_VAR, get_settings().runtime_error_endpoint_url)
    if url is None or not url.strip():
        return None
    return url.strip()
