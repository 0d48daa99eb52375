"""Source snapshot command."""

import logging
from pathlib import Path
from typing import Annotated

import typer

from recipebox.cli.decorators import handle_errors
from recipebox.cli.helpers.context import load_project
from recipebox.cli.helpers.output import print_result
from recipebox.source import create_snapshot_service


logger = logging.getLogger(__name__)


@handle_errors
def snapshot_command(
    ctx: typer.Context,
    root: Annotated[Path, typer.Argument(help="Source tree root")],
    destination: Annotated[
        Path, typer.Argument(help="Empty directory receiving the snapshot")
    ],
    list_files: Annotated[
        bool, typer.Option("--list", "-l", help="Print every included file")
    ] = False,
) -> None:
    """Copy the source tree minus excluded paths into DESTINATION."""
    if not root.is_dir():
        raise FileNotFoundError(f"Source root not found: {root}")

    project = load_project(ctx, root)
    result = create_snapshot_service().create(
        root, destination, project.exclusion_rules
    )

    if list_files:
        for rel in result.included:
            print(rel)
    print_result(result)


def register_commands(app: typer.Typer) -> None:
    """Register snapshot command with the main app."""
    app.command(name="snapshot")(snapshot_command)
