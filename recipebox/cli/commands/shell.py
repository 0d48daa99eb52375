"""Development shell environment command."""

import logging
from pathlib import Path
from typing import Annotated

import typer

from recipebox.cli.decorators import handle_errors
from recipebox.cli.helpers.context import load_project, resolve_platform
from recipebox.cli.helpers.output import print_json
from recipebox.cli.helpers.parameters import PlatformOption, RootOption, ShellFormat
from recipebox.resolution import (
    create_environment_constructor,
    create_platform_profile_resolver,
)


logger = logging.getLogger(__name__)


@handle_errors
def shell_command(
    ctx: typer.Context,
    root: RootOption = Path("."),
    platform: PlatformOption = None,
    output_format: Annotated[
        ShellFormat,
        typer.Option("--format", "-f", help="Output format", case_sensitive=False),
    ] = ShellFormat.ENV,
) -> None:
    """Print the development environment.

    The default format is a list of ``export`` statements suitable for
    ``eval "$(recipebox shell)"``; the required packages are listed as a
    comment.
    """
    project = load_project(ctx, root)
    target = resolve_platform(ctx, platform)
    profile = create_platform_profile_resolver().resolve(target)
    environment = create_environment_constructor(project).construct(profile)

    if output_format == ShellFormat.JSON:
        data = environment.model_dump(mode="json")
        data["packages"] = environment.packages
        print_json(data)
        return

    print(f"# packages: {' '.join(environment.packages)}")
    for line in environment.export_lines():
        print(line)


def register_commands(app: typer.Typer) -> None:
    """Register shell command with the main app."""
    app.command(name="shell")(shell_command)
