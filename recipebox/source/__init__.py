"""Source filtering and snapshot creation."""

from .filter import SourceFilter, compile_rules, create_source_filter
from .snapshot import SnapshotService, create_snapshot_service


__all__ = [
    "SourceFilter",
    "compile_rules",
    "create_source_filter",
    "SnapshotService",
    "create_snapshot_service",
]
