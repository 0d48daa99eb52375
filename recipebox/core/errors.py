"""Exception hierarchy for recipebox."""

from typing import Any


class RecipeboxError(Exception):
    """Base exception for all recipebox errors."""

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or {}


class ConfigurationError(RecipeboxError):
    """Invalid configuration detected before any external invocation.

    Raised for malformed exclusion rules, unrecognized build intents,
    unrecognized explicit platforms and invalid project files.
    """


class ExternalToolchainError(RecipeboxError):
    """An external command (compiler, linker, built binary) failed.

    The exit code of the failing command is kept verbatim so it can be
    propagated unchanged to the caller.
    """

    def __init__(
        self,
        message: str,
        command: list[str] | tuple[str, ...],
        returncode: int,
        stderr: str = "",
    ) -> None:
        super().__init__(
            message, {"command": list(command), "returncode": returncode}
        )
        self.command = list(command)
        self.returncode = returncode
        self.stderr = stderr


class SnapshotError(RecipeboxError):
    """Error while materializing a filtered source snapshot."""


__all__ = [
    "RecipeboxError",
    "ConfigurationError",
    "ExternalToolchainError",
    "SnapshotError",
]
