"""Core models for recipebox."""

from .base import FrozenModel, RecipeboxBaseModel
from .platform import (
    DependencyKind,
    LinkerFlag,
    NativeDependency,
    Platform,
    PlatformProfile,
)
from .recipe import (
    ArtifactKind,
    BuildIntent,
    BuildPhase,
    BuildRecipe,
    DevEnvironment,
    PhaseName,
    PostInstallStep,
)
from .results import ArtifactManifest, BaseResult, BuildResult, SnapshotResult


__all__ = [
    "RecipeboxBaseModel",
    "FrozenModel",
    "Platform",
    "DependencyKind",
    "NativeDependency",
    "LinkerFlag",
    "PlatformProfile",
    "BuildIntent",
    "PhaseName",
    "BuildPhase",
    "ArtifactKind",
    "PostInstallStep",
    "DevEnvironment",
    "BuildRecipe",
    "BaseResult",
    "ArtifactManifest",
    "BuildResult",
    "SnapshotResult",
]
