"""
Runtime configuration.

Settings come from the environment the same way the test DSN does:
plain ``os.getenv`` lookups, validated by a pydantic model.
"""

import logging
import os
from functools import lru_cache
from typing import Literal

from pydantic import BaseModel, ConfigDict, field_validator


class Settings(BaseModel):
    """Process-wide settings for the reactor and diagnostics."""

    model_config = ConfigDict(frozen=True)

    scheduler: Literal["asyncio", "queue"] = "asyncio"
    track_rejections: bool = False
    log_level: str = "WARNING"

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {value}")
        return level

    @classmethod
    def from_env(cls) -> "Settings":
        """
        Build settings from ``PROMISSORY_*`` environment variables.

        Raises:
            pydantic.ValidationError if a variable holds an invalid value
        """
        values = {}
        scheduler = os.getenv("PROMISSORY_SCHEDULER")
        if scheduler:
            values["scheduler"] = scheduler
        track = os.getenv("PROMISSORY_TRACK_REJECTIONS")
        if track:
            values["track_rejections"] = track
        log_level = os.getenv("PROMISSORY_LOG_LEVEL")
        if log_level:
            values["log_level"] = log_level
        return cls(**values)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Settings read once from the environment."""
    return Settings.from_env()


def configure_logging(settings: Settings) -> None:
    """Apply the configured level to the package logger."""
    logging.getLogger("promissory").setLevel(settings.log_level)
