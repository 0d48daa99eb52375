"""Turn recipebox exceptions into CLI exit codes."""

import sys
import traceback
from collections.abc import Callable
from functools import wraps
from typing import Any

import typer

from recipebox.core.errors import (
    ConfigurationError,
    ExternalToolchainError,
    RecipeboxError,
    SnapshotError,
)
from recipebox.core.structlog_logger import debug_tracebacks_enabled, get_struct_logger


__all__ = ["handle_errors", "print_stack_trace_if_verbose"]

logger = get_struct_logger(__name__)

# Checked in order; the first matching class names the logged event
_ERROR_EVENTS: tuple[tuple[type[Exception], str], ...] = (
    (ConfigurationError, "configuration_error"),
    (SnapshotError, "snapshot_error"),
    (RecipeboxError, "recipebox_error"),
    (FileNotFoundError, "file_not_found"),
)


def _exit_code_for(error: Exception) -> int:
    if isinstance(error, ExternalToolchainError):
        return error.returncode
    return 1


def _log_failure(error: Exception) -> None:
    if isinstance(error, ExternalToolchainError):
        logger.error(
            "external_toolchain_error",
            error=error.message,
            command=error.command,
            returncode=error.returncode,
        )
        return

    for error_class, event in _ERROR_EVENTS:
        if isinstance(error, error_class):
            context = error.context if isinstance(error, RecipeboxError) else {}
            logger.error(event, error=str(error), **context)
            return

    logger.error(
        "unexpected_error",
        error=str(error),
        error_type=type(error).__name__,
        exc_info=debug_tracebacks_enabled(),
    )


def handle_errors(func: Callable[..., Any]) -> Callable[..., Any]:
    """Log a command's failure and exit with the matching status.

    A failed external command keeps its own exit code; anything else
    exits with 1. ``typer.Exit`` passes through untouched.
    """

    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except typer.Exit:
            raise
        except Exception as e:
            _log_failure(e)
            print_stack_trace_if_verbose()
            raise typer.Exit(_exit_code_for(e)) from e

    return wrapper


def print_stack_trace_if_verbose() -> None:
    """Dump the active traceback to stderr when -v or --debug was given."""
    if {"-v", "-vv", "--verbose", "--debug"} & set(sys.argv):
        print("\nStack trace:", file=sys.stderr)
        traceback.print_exc(file=sys.stderr)
