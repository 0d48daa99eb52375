"""Shared parameter definitions for CLI commands."""

from enum import Enum
from pathlib import Path
from typing import Annotated

import typer


class OutputFormat(str, Enum):
    TABLE = "table"
    JSON = "json"


class ShellFormat(str, Enum):
    ENV = "env"
    JSON = "json"


PlatformOption = Annotated[
    str | None,
    typer.Option(
        "--platform",
        "-p",
        help="Target platform (linux|darwin|unknown); detected from the host",
    ),
]

RevisionOption = Annotated[
    str | None,
    typer.Option(
        "--revision",
        help="Revision identifier; read from a clean git working copy by default",
    ),
]

RootOption = Annotated[
    Path,
    typer.Option("--root", "-r", help="Source tree root", show_default=True),
]

OutputFormatOption = Annotated[
    OutputFormat,
    typer.Option("--format", "-f", help="Output format", case_sensitive=False),
]
