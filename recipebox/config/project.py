"""Project configuration describing the package being built.

The defaults describe the jujutsu package (``jj`` binary); a project can
override any of them with a ``recipebox.yaml`` file at its root.
"""

import logging
import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field, ValidationError, field_validator, model_validator

from recipebox.core.errors import ConfigurationError
from recipebox.models.base import RecipeboxBaseModel


logger = logging.getLogger(__name__)

PROJECT_FILE_NAME = "recipebox.yaml"

DEFAULT_EXCLUSION_RULES = [
    r".*\.nix$",
    r"^\.jj/",
    r"^flake\.lock$",
    r"^target/",
]

# Install locations of completion scripts, relative to the install prefix
COMPLETION_DESTINATIONS = {
    "bash": "share/bash-completion/completions/{cmd}",
    "fish": "share/fish/vendor_completions.d/{cmd}.fish",
    "zsh": "share/zsh/site-functions/_{cmd}",
}

MIN_COMPLETION_SHELLS = 3


class ProjectConfig(RecipeboxBaseModel):
    """Package-level settings consumed by the recipe builder."""

    pname: str = Field(default="jujutsu", description="Package name")
    binary: str = Field(
        default="jj", description="The single distributed binary target"
    )
    command_name: str | None = Field(
        default=None,
        description="Command name for completions and man page (defaults to binary)",
    )
    packaging_features: list[str] = Field(
        default_factory=lambda: ["packaging"],
        description="Optional cargo feature group enabled for release packages",
    )
    auxiliary_binaries: list[str] = Field(
        default_factory=lambda: ["fake-editor", "fake-diff-editor", "fake-formatter"],
        description="Test-only helper binaries never shipped in a package",
    )
    exclusion_rules: list[str] = Field(
        default_factory=lambda: list(DEFAULT_EXCLUSION_RULES)
    )
    shells: list[str] = Field(default_factory=lambda: ["bash", "fish", "zsh"])
    mangen_arguments: list[str] = Field(default_factory=lambda: ["util", "mangen"])
    completion_arguments: list[str] = Field(
        default_factory=lambda: ["util", "completion"]
    )
    man_section: int = 1
    revision_env_var: str = "NIX_JJ_GIT_HASH"
    pkg_config_libraries: list[str] = Field(
        default_factory=lambda: ["zstd", "libssh2"],
        description="Native-binding crates forced to use system pkg-config metadata",
    )
    native_build_inputs: list[str] = Field(
        default_factory=lambda: [
            "gzip",
            "installShellFiles",
            "makeWrapper",
            "pkg-config",
            # for signing tests
            "gnupg",
            "openssh",
        ]
    )
    build_inputs: list[str] = Field(
        default_factory=lambda: ["openssl", "zstd", "libgit2", "libssh2"]
    )
    toolchain: str = "rust-nightly-complete"
    developer_tools: list[str] = Field(
        default_factory=lambda: [
            "cargo-deny",
            "cargo-insta",
            "cargo-nextest",
            "cargo-watch",
            "watchman",
            "protobuf",
            "gnupg",
            "openssh",
            "poetry",
            "clang",
            "rust-bindgen",
        ]
    )
    dev_rustflags: list[str] = Field(default_factory=lambda: ["-Zthreads=0"])
    use_nextest: bool = True

    @field_validator("exclusion_rules")
    @classmethod
    def validate_exclusion_rules(cls, v: list[str]) -> list[str]:
        """Reject malformed regular expressions up front."""
        for rule in v:
            try:
                re.compile(rule)
            except re.error as e:
                raise ValueError(f"Invalid exclusion rule {rule!r}: {e}") from e
        return v

    @field_validator("shells")
    @classmethod
    def validate_shells(cls, v: list[str]) -> list[str]:
        """Shells must be known, unique and at least three."""
        unknown = [shell for shell in v if shell not in COMPLETION_DESTINATIONS]
        if unknown:
            raise ValueError(
                f"Unsupported completion shells {unknown}; "
                f"supported: {sorted(COMPLETION_DESTINATIONS)}"
            )
        if len(set(v)) != len(v):
            raise ValueError("Completion shells must be unique")
        if len(v) < MIN_COMPLETION_SHELLS:
            raise ValueError(
                f"At least {MIN_COMPLETION_SHELLS} completion shells are required"
            )
        return v

    @field_validator("pname", "binary", "revision_env_var", "toolchain")
    @classmethod
    def validate_not_empty(cls, v: str) -> str:
        if not v:
            raise ValueError("Value cannot be empty")
        return v

    @model_validator(mode="after")
    def validate_binary_not_auxiliary(self) -> "ProjectConfig":
        """The distributed binary can never be one of the helper binaries."""
        if self.binary in self.auxiliary_binaries:
            raise ValueError(
                f"Binary '{self.binary}' is listed as an auxiliary binary"
            )
        return self

    @property
    def command(self) -> str:
        """Command name used for man page and completion files."""
        return self.command_name or self.binary

    @property
    def pkg_config_env_vars(self) -> list[str]:
        """``<LIB>_SYS_USE_PKG_CONFIG`` variable names, in declaration order."""
        return [
            f"{lib.upper().replace('-', '_')}_SYS_USE_PKG_CONFIG"
            for lib in self.pkg_config_libraries
        ]


def load_project_config(path: Path | None, required: bool = False) -> ProjectConfig:
    """Load project configuration from a YAML file.

    Args:
        path: Path to the YAML file, or None for defaults
        required: Fail if the file does not exist instead of using defaults

    Returns:
        ProjectConfig: Validated project configuration

    Raises:
        ConfigurationError: If the file is required and missing, is not valid
            YAML, or does not validate
    """
    if path is None or not path.exists():
        if required:
            raise ConfigurationError(f"Project file not found: {path}")
        logger.debug("No project file at %s, using defaults", path)
        return ProjectConfig()

    try:
        with path.open(encoding="utf-8") as f:
            data: Any = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Failed to read project file {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Invalid project file format in {path}: expected a mapping"
        )

    try:
        config = ProjectConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid project file {path}: {e}") from e

    logger.info("Loaded project configuration from %s", path)
    return config


__all__ = [
    "ProjectConfig",
    "load_project_config",
    "PROJECT_FILE_NAME",
    "DEFAULT_EXCLUSION_RULES",
    "COMPLETION_DESTINATIONS",
]
