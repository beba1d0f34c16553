"""
Application settings using Pydantic.

Provides environment-based configuration loading with AMNOTIFIER_ prefix.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="AMNOTIFIER_",
    )

    # Provider configuration file
    config_path: str | None = None

    # Logging
    log_level: str = "INFO"
    log_format: str = "json"  # json, console


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
