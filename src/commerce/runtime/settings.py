"""Environment-based settings.

This module handles only simple environment variables (strings, numbers, booleans).
Complex application configuration lives in config/config_data.py and config.yaml.
"""

from __future__ import annotations

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class EnvironmentVariables(BaseSettings):
    """Simple primitive values loaded from environment variables and .env files."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        extra="ignore",
    )

    # Environment selection, also used as the prefix for overrides
    app_environment: Literal["development", "production", "test"] = Field(
        default="development", validation_alias="APP_ENVIRONMENT"
    )
    config_path: str = Field(default="config.yaml", validation_alias="CONFIG_PATH")
    log_level: str | None = Field(default=None, validation_alias="LOG_LEVEL")
