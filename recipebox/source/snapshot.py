"""Materialize a filtered source snapshot on disk."""

import os
import shutil
from collections.abc import Iterable
from pathlib import Path

from recipebox.core.errors import SnapshotError
from recipebox.core.structlog_logger import StructlogMixin
from recipebox.models.results import SnapshotResult
from recipebox.source.filter import SourceFilter


class SnapshotService(StructlogMixin):
    """Copy the included part of a source tree into a fresh directory."""

    def create(
        self, root: Path, destination: Path, rules: Iterable[str]
    ) -> SnapshotResult:
        """Create a snapshot of ``root`` at ``destination``.

        Args:
            root: Source tree root
            destination: Directory to populate; must be absent or empty
            rules: Exclusion rules (regular expressions)

        Returns:
            SnapshotResult: Relative paths of every copied file

        Raises:
            ConfigurationError: If a rule is malformed (before any copy)
            SnapshotError: If the destination is unusable or copying fails
        """
        source_filter = SourceFilter(root, rules)
        destination = Path(os.path.abspath(destination))
        self._validate_destination(source_filter, destination)

        self.logger.info(
            "snapshot_started",
            root=str(source_filter.root),
            destination=str(destination),
        )
        included: list[str] = []
        try:
            destination.mkdir(parents=True, exist_ok=True)
            for rel in source_filter.iter_included(include_dirs=True):
                src = source_filter.root / rel
                dst = destination / rel
                if src.is_dir() and not src.is_symlink():
                    dst.mkdir(parents=True, exist_ok=True)
                    continue
                dst.parent.mkdir(parents=True, exist_ok=True)
                if src.is_symlink():
                    os.symlink(os.readlink(src), dst)
                else:
                    shutil.copy2(src, dst)
                included.append(rel)
        except OSError as e:
            self.log_error_with_context(
                "snapshot_failed", e, destination=str(destination)
            )
            raise SnapshotError(
                f"Failed to create snapshot at {destination}: {e}"
            ) from e

        self.logger.info("snapshot_created", file_count=len(included))
        return SnapshotResult(
            success=True,
            destination=destination,
            included=included,
            messages=[f"Copied {len(included)} files to {destination}"],
        )

    def _validate_destination(
        self, source_filter: SourceFilter, destination: Path
    ) -> None:
        if destination.exists() and (
            not destination.is_dir() or any(destination.iterdir())
        ):
            raise SnapshotError(
                f"Snapshot destination must be an empty directory: {destination}"
            )
        try:
            destination.relative_to(source_filter.root)
        except ValueError:
            return
        if source_filter.include(destination, is_dir=True):
            raise SnapshotError(
                f"Snapshot destination {destination} is inside the included source tree"
            )


def create_snapshot_service() -> SnapshotService:
    """Create snapshot service instance."""
    return SnapshotService()
