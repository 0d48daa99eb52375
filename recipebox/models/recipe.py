"""Build intent and resolved build recipe models."""

import shlex
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import Field, field_serializer

from recipebox.core.errors import ConfigurationError
from recipebox.models.base import EnvironmentMap, FrozenModel, empty_environment
from recipebox.models.platform import NativeDependency, Platform, sort_dependencies


class BuildIntent(str, Enum):
    """Purpose of a given invocation."""

    RELEASE_PACKAGE = "release-package"
    CI_CHECK = "ci-check"
    DEV_SHELL = "dev-shell"

    @classmethod
    def parse(cls, value: "str | BuildIntent") -> "BuildIntent":
        """Parse a requested intent.

        Raises:
            ConfigurationError: If the value is not a recognized intent
        """
        if isinstance(value, BuildIntent):
            return value
        try:
            return cls(value.strip().lower().replace("_", "-"))
        except ValueError as e:
            valid = ", ".join(i.value for i in cls)
            raise ConfigurationError(
                f"Unrecognized build intent '{value}' (expected one of: {valid})"
            ) from e


class PhaseName(str, Enum):
    """Phases of the external build, in execution order."""

    BUILD = "build"
    CHECK = "check"
    INSTALL = "install"


class BuildPhase(FrozenModel):
    """One external toolchain invocation.

    An empty command marks the phase as an explicit no-op.
    """

    name: PhaseName
    command: tuple[str, ...] = ()
    profile: str | None = None
    environment: EnvironmentMap = Field(default_factory=empty_environment)

    @property
    def is_noop(self) -> bool:
        return not self.command


class ArtifactKind(str, Enum):
    """Kinds of post-install artifacts generated from the built binary."""

    MAN_PAGE = "man-page"
    COMPLETION = "completion"


class PostInstallStep(FrozenModel):
    """A (command, expected side effect) pair run against the built binary.

    ``arguments`` are passed to the binary; its standard output is captured
    verbatim and installed at ``destination`` (relative to the install prefix).
    """

    kind: ArtifactKind
    arguments: tuple[str, ...]
    destination: str
    shell: str | None = None

    def argv(self, binary: Path) -> list[str]:
        """Full command line for the given binary."""
        return [str(binary), *self.arguments]

    def describe(self, binary: str = "$out/bin") -> str:
        """Shell-like rendering of the step, for display."""
        cmd = " ".join(shlex.quote(a) for a in [binary, *self.arguments])
        return f"{cmd} > {self.destination}"


class DevEnvironment(FrozenModel):
    """Provisioned environment for an interactive development session."""

    platform: Platform
    toolchain: str
    native_dependencies: frozenset[NativeDependency] = frozenset()
    foreign_dependencies: tuple[str, ...] = ()
    developer_tools: tuple[str, ...] = ()
    environment: EnvironmentMap = Field(default_factory=empty_environment)

    @field_serializer("native_dependencies")
    def serialize_native_dependencies(
        self, dependencies: frozenset[NativeDependency]
    ) -> list[dict[str, Any]]:
        return sort_dependencies(dependencies)

    @property
    def packages(self) -> list[str]:
        """Every package the session requires, in a stable order."""
        names = [self.toolchain, *self.foreign_dependencies, *self.developer_tools]
        names.extend(sorted(dep.name for dep in self.native_dependencies))
        return names

    def merged_with(self, base: dict[str, str]) -> dict[str, str]:
        """Environment for a child process: ``base`` overlaid with our exports."""
        merged = dict(base)
        merged.update(self.environment)
        return merged

    def export_lines(self) -> list[str]:
        """Render the exports as POSIX shell statements."""
        return [
            f"export {key}={shlex.quote(value)}"
            for key, value in self.environment.items()
        ]


class BuildRecipe(FrozenModel):
    """Fully resolved build invocation handed to the external toolchain."""

    intent: BuildIntent
    platform: Platform
    pname: str
    version: str
    binary: str
    build_args: tuple[str, ...] = ()
    environment: EnvironmentMap = Field(default_factory=empty_environment)
    native_dependencies: frozenset[NativeDependency] = frozenset()
    native_build_inputs: tuple[str, ...] = ()
    build_inputs: tuple[str, ...] = ()
    phases: tuple[BuildPhase, ...] = ()
    post_install_steps: tuple[PostInstallStep, ...] = ()
    excluded_binaries: tuple[str, ...] = ()
    developer_tools: tuple[str, ...] = ()

    @field_serializer("native_dependencies")
    def serialize_native_dependencies(
        self, dependencies: frozenset[NativeDependency]
    ) -> list[dict[str, Any]]:
        return sort_dependencies(dependencies)

    def phase(self, name: PhaseName) -> BuildPhase | None:
        """Look up a phase by name."""
        for phase in self.phases:
            if phase.name == name:
                return phase
        return None

    @property
    def invokes_build(self) -> bool:
        """Whether any phase runs an external command."""
        return any(not phase.is_noop for phase in self.phases)

    @property
    def hooks(self) -> list[str]:
        """Pre-check exports and post-install commands as shell statements."""
        lines: list[str] = []
        check = self.phase(PhaseName.CHECK)
        if check is not None:
            lines.extend(
                f"export {key}={shlex.quote(value)}"
                for key, value in check.environment.items()
            )
        lines.extend(
            step.describe(f"$out/bin/{self.binary}")
            for step in self.post_install_steps
        )
        return lines


__all__ = [
    "BuildIntent",
    "PhaseName",
    "BuildPhase",
    "ArtifactKind",
    "PostInstallStep",
    "DevEnvironment",
    "BuildRecipe",
]
