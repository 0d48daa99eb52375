"""Build recipe inspection command."""

import logging
from pathlib import Path
from typing import Annotated

import typer

from recipebox.adapters import create_process_adapter
from recipebox.cli.decorators import handle_errors
from recipebox.cli.helpers.context import (
    load_project,
    resolve_platform,
    resolve_revision,
)
from recipebox.cli.helpers.output import print_json, print_recipe_table
from recipebox.cli.helpers.parameters import (
    OutputFormat,
    OutputFormatOption,
    PlatformOption,
    RevisionOption,
    RootOption,
)
from recipebox.models.recipe import BuildIntent
from recipebox.resolution import (
    create_platform_profile_resolver,
    create_recipe_builder,
)


logger = logging.getLogger(__name__)


@handle_errors
def recipe_command(
    ctx: typer.Context,
    intent: Annotated[
        str, typer.Argument(help="Build intent: release-package|ci-check|dev-shell")
    ],
    root: RootOption = Path("."),
    platform: PlatformOption = None,
    revision: RevisionOption = None,
    output_format: OutputFormatOption = OutputFormat.TABLE,
) -> None:
    """Resolve and show the build recipe for an intent."""
    build_intent = BuildIntent.parse(intent)
    project = load_project(ctx, root)
    target = resolve_platform(ctx, platform)
    rev = resolve_revision(ctx, root, create_process_adapter(), revision)

    profile = create_platform_profile_resolver().resolve(target)
    recipe = create_recipe_builder(project).build(build_intent, profile, rev)

    if output_format == OutputFormat.JSON:
        print_json(recipe)
    else:
        print_recipe_table(recipe)


def register_commands(app: typer.Typer) -> None:
    """Register recipe command with the main app."""
    app.command(name="recipe")(recipe_command)
