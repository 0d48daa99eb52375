"""CLI interface for recipebox."""

from recipebox.cli.app import app, main
from recipebox.cli.commands import register_all_commands


register_all_commands(app)

__all__ = ["app", "main"]
