"""Resolution of platform profiles, build recipes and dev environments."""

from .environment_constructor import (
    EnvironmentConstructor,
    create_environment_constructor,
)
from .platform_resolver import (
    PLATFORM_PROFILES,
    PlatformProfileResolver,
    create_platform_profile_resolver,
    detect_platform,
)
from .recipe_builder import BuildRecipeBuilder, create_recipe_builder


__all__ = [
    "PLATFORM_PROFILES",
    "PlatformProfileResolver",
    "create_platform_profile_resolver",
    "detect_platform",
    "BuildRecipeBuilder",
    "create_recipe_builder",
    "EnvironmentConstructor",
    "create_environment_constructor",
]
