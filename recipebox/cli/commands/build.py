"""Build command running a resolved recipe."""

import logging
import tempfile
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
from recipebox.cli.helpers.output import print_json, print_result
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
from recipebox.services import create_build_service
from recipebox.source import create_snapshot_service


logger = logging.getLogger(__name__)


@handle_errors
def build_command(
    ctx: typer.Context,
    intent: Annotated[
        str, typer.Argument(help="Build intent: release-package|ci-check")
    ],
    root: RootOption = Path("."),
    prefix: Annotated[
        Path, typer.Option("--prefix", "-o", help="Install prefix")
    ] = Path("result"),
    platform: PlatformOption = None,
    revision: RevisionOption = None,
    in_place: Annotated[
        bool,
        typer.Option(
            "--in-place", help="Build in the source tree instead of a snapshot"
        ),
    ] = False,
    output_format: OutputFormatOption = OutputFormat.TABLE,
) -> None:
    """Build INTENT from a filtered snapshot of the source tree."""
    build_intent = BuildIntent.parse(intent)
    project = load_project(ctx, root)
    process_adapter = create_process_adapter()
    target = resolve_platform(ctx, platform)
    rev = resolve_revision(ctx, root, process_adapter, revision)

    profile = create_platform_profile_resolver().resolve(target)
    recipe = create_recipe_builder(project).build(build_intent, profile, rev)
    service = create_build_service(process_adapter)

    if in_place:
        result = service.run(recipe, root, prefix)
    else:
        with tempfile.TemporaryDirectory(prefix="recipebox-") as work_dir:
            snapshot = create_snapshot_service().create(
                root, Path(work_dir), project.exclusion_rules
            )
            logger.info(
                "Building from snapshot with %d files", len(snapshot.included)
            )
            result = service.run(recipe, snapshot.destination, prefix)

    if output_format == OutputFormat.JSON:
        print_json(result)
    else:
        print_result(result)


def register_commands(app: typer.Typer) -> None:
    """Register build command with the main app."""
    app.command(name="build")(build_command)
