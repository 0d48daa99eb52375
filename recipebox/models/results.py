"""Outcome models returned by the snapshot and build services."""

from datetime import datetime
from pathlib import Path
from typing import Any

from pydantic import Field, model_validator

from recipebox.core.structlog_logger import get_struct_logger
from recipebox.models.base import RecipeboxBaseModel


logger = get_struct_logger(__name__)


class BaseResult(RecipeboxBaseModel):
    """Success flag plus the messages and errors collected along the way."""

    success: bool
    timestamp: datetime = Field(default_factory=datetime.now)
    messages: list[str] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def _errors_mean_failure(self) -> "BaseResult":
        if self.success and self.errors:
            logger.warning("result_marked_failed", errors=len(self.errors))
            self.success = False
        return self

    def add_message(self, message: str) -> None:
        self.messages.append(message)

    def is_success(self) -> bool:
        return self.success and not self.errors

    def get_summary(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "timestamp": self.timestamp.isoformat(),
            "message_count": len(self.messages),
            "errors": self.errors or None,
        }


class ArtifactManifest(RecipeboxBaseModel):
    """Man page and shell completions written into the install prefix."""

    man_page: Path | None = None
    completions: dict[str, Path] = Field(default_factory=dict)

    @property
    def files(self) -> list[Path]:
        """All generated files, man page first."""
        head = [self.man_page] if self.man_page else []
        return head + list(self.completions.values())


class SnapshotResult(BaseResult):
    """A filtered copy of the source tree."""

    destination: Path
    included: list[str] = Field(default_factory=list)


class BuildResult(BaseResult):
    """A recipe run through cargo, with optional post-install artifacts."""

    intent: str
    executed_phases: list[str] = Field(default_factory=list)
    skipped_phases: list[str] = Field(default_factory=list)
    prefix: Path | None = None
    artifacts: ArtifactManifest | None = None


__all__ = ["BaseResult", "ArtifactManifest", "SnapshotResult", "BuildResult"]
