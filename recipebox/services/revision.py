"""Revision identifier detection for the source tree."""

from pathlib import Path

from recipebox.core.errors import ExternalToolchainError
from recipebox.core.structlog_logger import get_struct_logger
from recipebox.protocols import ProcessAdapterProtocol


logger = get_struct_logger(__name__)


def detect_revision(root: Path, process_adapter: ProcessAdapterProtocol) -> str | None:
    """Return the commit id of a clean git working copy.

    A dirty working copy, a tree outside of git, or a missing git executable
    all yield None, which recipes record as the ``dirty`` sentinel.

    Args:
        root: Source tree root
        process_adapter: Adapter used to invoke git

    Returns:
        str | None: Full revision identifier, or None when unavailable
    """
    try:
        code, status, _ = process_adapter.capture(
            ["git", "status", "--porcelain"], cwd=root
        )
        if code != 0:
            logger.debug("revision_unavailable", reason="not a git working copy")
            return None
        if status.strip():
            logger.info("revision_dirty", root=str(root))
            return None

        code, rev, _ = process_adapter.capture(["git", "rev-parse", "HEAD"], cwd=root)
    except ExternalToolchainError as e:
        logger.debug("revision_unavailable", reason=e.message)
        return None

    revision = rev.decode("ascii", errors="replace").strip()
    if code != 0 or not revision:
        logger.debug("revision_unavailable", reason="no HEAD commit")
        return None
    logger.debug("revision_detected", revision=revision)
    return revision
