"""Core test fixtures for the recipebox project."""

import logging
import os
import stat
from collections.abc import Callable, Generator
from pathlib import Path
from unittest.mock import Mock, patch

import pytest
from typer.testing import CliRunner

from recipebox.config.project import ProjectConfig
from recipebox.models.platform import Platform, PlatformProfile
from recipebox.protocols import ProcessAdapterProtocol
from recipebox.resolution.platform_resolver import PLATFORM_PROFILES


# ---- Base Fixtures ----


@pytest.fixture
def cli_runner() -> CliRunner:
    """Return a Typer CLI test runner."""
    return CliRunner()


@pytest.fixture
def mock_process_adapter() -> Mock:
    """Create a mock process adapter where every command succeeds."""
    adapter = Mock(spec=ProcessAdapterProtocol)
    adapter.run.return_value = (0, [], [])
    adapter.capture.return_value = (0, b"", "")
    return adapter


@pytest.fixture
def project_config() -> ProjectConfig:
    """Default project configuration (the jujutsu package)."""
    return ProjectConfig()


@pytest.fixture
def linux_profile() -> PlatformProfile:
    return PLATFORM_PROFILES[Platform.LINUX]


@pytest.fixture
def darwin_profile() -> PlatformProfile:
    return PLATFORM_PROFILES[Platform.DARWIN]


@pytest.fixture
def unknown_profile() -> PlatformProfile:
    return PLATFORM_PROFILES[Platform.UNKNOWN]


# ---- Test Isolation Fixtures ----


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path: Path) -> Generator[None, None, None]:
    """Keep RECIPEBOX_* variables and a stray .env file out of every test."""
    clean = {k: v for k, v in os.environ.items() if not k.startswith("RECIPEBOX_")}
    root_logger = logging.getLogger()
    handlers = list(root_logger.handlers)
    level = root_logger.level
    with patch.dict(os.environ, clean, clear=True):
        cwd = Path.cwd()
        os.chdir(tmp_path)
        try:
            yield
        finally:
            os.chdir(cwd)
            # CLI invocations install handlers bound to the runner's streams
            root_logger.handlers = handlers
            root_logger.setLevel(level)


# ---- Source Tree Fixtures ----


@pytest.fixture
def source_tree(tmp_path: Path) -> Path:
    """Create a small workspace tree with files every exclusion rule targets.

    Layout::

        src/main.rs
        src/lib.rs
        Cargo.toml
        flake.nix
        flake.lock
        nix/overlay.nix
        .jj/repo/store
        target/release/jj
        docs/target/notes.md
    """
    root = tmp_path / "workspace"
    files = {
        "src/main.rs": "fn main() {}\n",
        "src/lib.rs": "pub fn lib() {}\n",
        "Cargo.toml": '[package]\nname = "jj-cli"\n',
        "flake.nix": "{ }\n",
        "flake.lock": "{}\n",
        "nix/overlay.nix": "{ }\n",
        ".jj/repo/store": "store\n",
        "target/release/jj": "binary\n",
        "docs/target/notes.md": "# notes\n",
    }
    for rel, content in files.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
    return root


def create_fake_binary(path: Path, script: str) -> Path:
    """Write an executable shell script standing in for a built binary."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(f"#!/bin/sh\n{script}\n")
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


@pytest.fixture
def fake_binary_factory() -> Callable[[Path, str], Path]:
    """Factory fixture for executable fake binaries."""
    return create_fake_binary
