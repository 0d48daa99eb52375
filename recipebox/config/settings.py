"""Runtime settings for recipebox.

Settings are read from ``RECIPEBOX_*`` environment variables and an optional
``.env`` file; CLI options take precedence over both.
"""

import logging
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class RecipeboxSettings(BaseSettings):
    """Invocation settings with automatic environment variable support."""

    model_config = SettingsConfigDict(
        env_prefix="RECIPEBOX_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = "WARNING"
    platform: str | None = Field(
        default=None, description="Explicit platform instead of detection"
    )
    revision: str | None = Field(
        default=None, description="Revision identifier recorded in the build"
    )
    project_file: str = Field(
        default="recipebox.yaml", description="Project file name at the source root"
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is recognized."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        upper_v = v.strip().upper()
        if upper_v not in valid_levels:
            raise ValueError(f"Log level must be one of {valid_levels}")
        return upper_v

    @field_validator("platform", "revision", mode="before")
    @classmethod
    def empty_as_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    def get_log_level_int(self) -> int:
        """Log level as a stdlib logging constant."""
        return int(getattr(logging, self.log_level, logging.WARNING))


def create_settings(**overrides: Any) -> RecipeboxSettings:
    """Create settings, ignoring overrides that are None."""
    return RecipeboxSettings(**{k: v for k, v in overrides.items() if v is not None})
