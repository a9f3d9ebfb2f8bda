"""Configuration management for Hypermail.

This module handles runtime settings using Pydantic settings. Settings can be
loaded from environment variables or .env files. The user's own state (API
key, signature, drafts, ...) lives in the local store, not here.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _default_config_dir() -> Path:
    return Path.home() / ".config" / "hypermail"


class Settings(BaseSettings):
    """Application settings with environment variable support.

    All settings can be overridden via environment variables with
    the HYPERMAIL_ prefix (e.g., HYPERMAIL_RESEND_TIMEOUT).
    """

    model_config = SettingsConfigDict(
        env_prefix="HYPERMAIL_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Local store
    config_path: Path = Field(
        default_factory=lambda: _default_config_dir() / "config.json",
        description="Path to the JSON document holding API key, drafts and contacts",
    )

    # Resend Configuration
    resend_api_url: str = Field(
        default="https://api.resend.com",
        description="Base URL of the Resend REST API",
    )
    resend_timeout: float = Field(
        default=30.0,
        description="Timeout for Resend API requests in seconds",
    )

    # Terminal UI
    poll_interval: float = Field(
        default=0.03,
        gt=0,
        description="Seconds to wait between key polls while no key is pressed",
    )

    # Application Configuration
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    log_file: Path = Field(
        default_factory=lambda: _default_config_dir() / "hypermail.log",
        description="File receiving log output (the terminal belongs to the UI)",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Returns:
        Settings: Application settings instance.
    """
    return Settings()
