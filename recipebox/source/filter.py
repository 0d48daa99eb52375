"""Source filter deciding which paths belong in a build snapshot."""

import os
import re
from collections.abc import Iterable, Iterator
from pathlib import Path, PurePosixPath

from recipebox.core.errors import ConfigurationError
from recipebox.core.structlog_logger import get_struct_logger


logger = get_struct_logger(__name__)


def compile_rules(rules: Iterable[str]) -> list[re.Pattern[str]]:
    """Compile exclusion rules, failing on the first malformed pattern.

    Raises:
        ConfigurationError: If any rule is not a valid regular expression
    """
    compiled = []
    for rule in rules:
        try:
            compiled.append(re.compile(rule))
        except re.error as e:
            raise ConfigurationError(
                f"Invalid exclusion rule {rule!r}: {e}", {"rule": rule}
            ) from e
    return compiled


class SourceFilter:
    """Predicate over paths relative to a source root.

    A path is included iff no exclusion rule fully matches its root-relative
    form, nor the form of any of its ancestor directories. Directories are
    tried both bare (``target``) and with a trailing ``/`` (``target/``), so
    ``^target$`` and ``^target/`` each exclude the directory and everything
    below it.
    """

    def __init__(self, root: Path, rules: Iterable[str]) -> None:
        self.root = Path(os.path.abspath(root))
        self.rules = list(rules)
        self._patterns = compile_rules(self.rules)
        logger.debug("source_filter_created", root=str(self.root), rules=self.rules)

    def relative_form(self, path: str | Path) -> str:
        """Root-relative posix form of ``path`` without a trailing slash.

        Raises:
            ConfigurationError: If the path lies outside the root
        """
        candidate = Path(path)
        if ".." in candidate.parts:
            candidate = self.root / candidate
        if candidate.is_absolute():
            absolute = Path(os.path.abspath(candidate))
            try:
                candidate = absolute.relative_to(self.root)
            except ValueError as e:
                raise ConfigurationError(
                    f"Path {path} is outside of source root {self.root}"
                ) from e
        rel = PurePosixPath(*candidate.parts).as_posix()
        return "" if rel == "." else rel

    def matches(self, rel_form: str) -> bool:
        """Whether any rule fully matches the given relative form."""
        return any(pattern.fullmatch(rel_form) for pattern in self._patterns)

    def matches_dir(self, rel: str) -> bool:
        """Whether any rule matches a directory, bare or slash-terminated."""
        return self.matches(rel) or self.matches(rel + "/")

    def include(self, path: str | Path, is_dir: bool | None = None) -> bool:
        """Decide whether ``path`` belongs in the snapshot.

        Args:
            path: Absolute path under the root, or a root-relative path
            is_dir: Whether the path is a directory; looked up on disk if None

        Returns:
            bool: True if the path is kept
        """
        rel = self.relative_form(path)
        if not rel:
            return True

        parts = rel.split("/")
        for depth in range(1, len(parts)):
            if self.matches_dir("/".join(parts[:depth])):
                return False

        if is_dir is None:
            is_dir = (self.root / rel).is_dir()
        return not (self.matches_dir(rel) if is_dir else self.matches(rel))

    def __call__(self, path: str | Path, is_dir: bool | None = None) -> bool:
        return self.include(path, is_dir)

    def iter_included(self, include_dirs: bool = False) -> Iterator[str]:
        """Walk the root and yield included relative paths in sorted order.

        Excluded directories are pruned; since exclusion is inherited by
        descendants this is equivalent to testing every path individually.
        Symlinks to directories are reported as plain entries.
        """
        for dirpath, dirnames, filenames in os.walk(self.root):
            current = Path(dirpath)
            entries = list(filenames)
            kept_dirs = []
            for name in sorted(dirnames):
                if (current / name).is_symlink():
                    entries.append(name)
                    continue
                rel = self.relative_form(current / name)
                if self.include(rel, is_dir=True):
                    kept_dirs.append(name)
                    if include_dirs:
                        yield rel
            dirnames[:] = kept_dirs

            for name in sorted(entries):
                rel = self.relative_form(current / name)
                if self.include(rel, is_dir=False):
                    yield rel


def create_source_filter(root: Path, rules: Iterable[str]) -> SourceFilter:
    """Create a source filter for ``root``.

    Raises:
        ConfigurationError: If any rule is malformed
    """
    return SourceFilter(root, rules)
