"""
Configuration settings for coursescore.

Uses Pydantic Settings for environment variable management with .env file support.
"""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables (COURSESCORE_*)."""

    model_config = SettingsConfigDict(
        env_prefix="COURSESCORE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Content
    # ========================================
    content_file: Path | None = Field(
        default=None,
        description="Course content JSON file used when --content is not given",
    )

    # ========================================
    # Set lookups
    # ========================================
    strict_paths: bool = Field(
        default=False,
        description="Fail on unknown set ids in path lookups instead of skipping them",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="WARNING",
        description="Logging verbosity level",
    )
    log_file: str | None = Field(
        default=None,
        description="Log file path (None for stderr only)",
    )

    # ========================================
    # Display
    # ========================================
    score_decimals: int = Field(
        default=1,
        description="Decimal places for scaled scores in reports",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
