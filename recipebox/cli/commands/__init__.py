"""CLI command modules."""

import typer

from recipebox.cli.commands.build import register_commands as register_build_commands
from recipebox.cli.commands.profile import (
    register_commands as register_profile_commands,
)
from recipebox.cli.commands.recipe import register_commands as register_recipe_commands
from recipebox.cli.commands.shell import register_commands as register_shell_commands
from recipebox.cli.commands.snapshot import (
    register_commands as register_snapshot_commands,
)


def register_all_commands(app: typer.Typer) -> None:
    """Register all CLI commands with the main app.

    Args:
        app: The main Typer app
    """
    if app.registered_commands:
        return
    register_profile_commands(app)
    register_recipe_commands(app)
    register_snapshot_commands(app)
    register_build_commands(app)
    register_shell_commands(app)
