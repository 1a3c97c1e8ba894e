"""Table engine configuration loaded from environment variables."""

from __future__ import annotations

import logging

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Rendering defaults loaded from environment variables with TABLE_ENGINE_ prefix."""

    model_config = SettingsConfigDict(
        env_prefix="TABLE_ENGINE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    debug: bool = False

    # Rendering
    default_indent: int = Field(default=2, ge=0)
    color: bool = False


def load_settings(**overrides: object) -> Settings:
    """Load settings from environment, with optional overrides for testing."""
    settings = Settings(**overrides)  # type: ignore[arg-type]

    if settings.debug:
        logger.info(
            "Loaded table engine settings: indent=%d color=%s",
            settings.default_indent,
            settings.color,
        )

    return settings
