"""Platform profile command."""

import logging

import typer

from recipebox.cli.decorators import handle_errors
from recipebox.cli.helpers.context import resolve_platform
from recipebox.cli.helpers.output import print_json, print_profile_table
from recipebox.cli.helpers.parameters import (
    OutputFormat,
    OutputFormatOption,
    PlatformOption,
)
from recipebox.resolution.platform_resolver import create_platform_profile_resolver


logger = logging.getLogger(__name__)


@handle_errors
def profile_command(
    ctx: typer.Context,
    platform: PlatformOption = None,
    output_format: OutputFormatOption = OutputFormat.TABLE,
) -> None:
    """Show native dependencies and linker flags for a platform."""
    target = resolve_platform(ctx, platform)
    profile = create_platform_profile_resolver().resolve(target)

    if output_format == OutputFormat.JSON:
        data = profile.model_dump(mode="json")
        data["link_args"] = profile.link_args
        print_json(data)
    else:
        print_profile_table(profile)


def register_commands(app: typer.Typer) -> None:
    """Register profile command with the main app.

    Args:
        app: The main Typer app
    """
    app.command(name="profile")(profile_command)
