"""Platform and native dependency models."""

from enum import Enum
from typing import Any

from pydantic import Field, field_serializer, field_validator

from recipebox.core.errors import ConfigurationError
from recipebox.models.base import FrozenModel


class Platform(str, Enum):
    """Closed set of host platforms a recipe can be resolved for."""

    LINUX = "linux"
    DARWIN = "darwin"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: "str | Platform") -> "Platform":
        """Parse an explicitly requested platform.

        ``macos`` is accepted as an alias of ``darwin``. An explicit value that
        names no known platform is a configuration error; only detection may
        produce ``unknown`` on its own.

        Raises:
            ConfigurationError: If the value is not a recognized platform
        """
        if isinstance(value, Platform):
            return value
        normalized = value.strip().lower()
        if normalized == "macos":
            normalized = cls.DARWIN.value
        try:
            return cls(normalized)
        except ValueError as e:
            valid = ", ".join(p.value for p in cls)
            raise ConfigurationError(
                f"Unrecognized platform '{value}' (expected one of: {valid})"
            ) from e


class DependencyKind(str, Enum):
    """What a native dependency provides."""

    LIBRARY = "library"
    FRAMEWORK = "framework"
    TOOL = "tool"


class NativeDependency(FrozenModel):
    """External library or tool required outside the cargo ecosystem."""

    name: str
    kind: DependencyKind = DependencyKind.LIBRARY
    platforms: tuple[Platform, ...] = Field(
        default=(), description="Platforms the dependency applies to; empty means all"
    )

    def applies_to(self, platform: Platform) -> bool:
        """Check whether this dependency is needed on the given platform."""
        return not self.platforms or platform in self.platforms


def sort_dependencies(
    dependencies: "frozenset[NativeDependency]",
) -> list[dict[str, Any]]:
    """Serialize a dependency set in a stable, name-sorted order."""
    return [
        dep.model_dump(mode="json")
        for dep in sorted(dependencies, key=lambda d: (d.name, d.kind.value))
    ]


class LinkerFlag(FrozenModel):
    """A single token handed to the linker."""

    value: str

    @field_validator("value")
    @classmethod
    def validate_value(cls, v: str) -> str:
        """Reject empty or whitespace-bearing flags."""
        if not v or any(c.isspace() for c in v):
            raise ValueError(f"Invalid linker flag: {v!r}")
        return v

    def as_link_args(self) -> tuple[str, str]:
        """Wrap the flag into the ``-C link-arg=`` token pair."""
        return ("-C", f"link-arg={self.value}")


class PlatformProfile(FrozenModel):
    """Native dependencies and ordered linker flags for one platform."""

    platform: Platform
    dependencies: frozenset[NativeDependency] = frozenset()
    linker_flags: tuple[LinkerFlag, ...] = ()

    @field_serializer("dependencies")
    def serialize_dependencies(
        self, dependencies: frozenset[NativeDependency]
    ) -> list[dict[str, Any]]:
        return sort_dependencies(dependencies)

    @property
    def link_args(self) -> list[str]:
        """All linker flags as a flat, ordered token list."""
        tokens: list[str] = []
        for flag in self.linker_flags:
            tokens.extend(flag.as_link_args())
        return tokens

    @property
    def link_args_string(self) -> str:
        """Linker flags rendered into the single string consumed by cargo."""
        return " ".join(self.link_args)

    def dependency_names(self, kind: DependencyKind | None = None) -> list[str]:
        """Sorted dependency names, optionally restricted to one kind."""
        return sorted(
            dep.name for dep in self.dependencies if kind is None or dep.kind == kind
        )


__all__ = [
    "Platform",
    "DependencyKind",
    "NativeDependency",
    "LinkerFlag",
    "PlatformProfile",
]
