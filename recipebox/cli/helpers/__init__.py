"""Helper functions for CLI commands."""

from recipebox.cli.helpers.context import (
    get_settings_from_context,
    load_project,
    resolve_platform,
    resolve_revision,
)
from recipebox.cli.helpers.output import (
    print_error_message,
    print_json,
    print_result,
    print_success_message,
)


__all__ = [
    "get_settings_from_context",
    "load_project",
    "resolve_platform",
    "resolve_revision",
    "print_error_message",
    "print_json",
    "print_result",
    "print_success_message",
]
