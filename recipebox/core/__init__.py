from .errors import (
    ConfigurationError,
    ExternalToolchainError,
    RecipeboxError,
    SnapshotError,
)
from .logging import setup_logging


__all__ = [
    "setup_logging",
    "RecipeboxError",
    "ConfigurationError",
    "ExternalToolchainError",
    "SnapshotError",
]
