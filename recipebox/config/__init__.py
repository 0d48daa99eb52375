"""Configuration for recipebox."""

from .project import (
    COMPLETION_DESTINATIONS,
    DEFAULT_EXCLUSION_RULES,
    PROJECT_FILE_NAME,
    ProjectConfig,
    load_project_config,
)
from .settings import RecipeboxSettings, create_settings


__all__ = [
    "ProjectConfig",
    "load_project_config",
    "PROJECT_FILE_NAME",
    "DEFAULT_EXCLUSION_RULES",
    "COMPLETION_DESTINATIONS",
    "RecipeboxSettings",
    "create_settings",
]
