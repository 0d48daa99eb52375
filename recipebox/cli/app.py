"""Main CLI application for recipebox."""

import logging
import sys
from typing import Annotated

import typer

from recipebox import __version__
from recipebox.cli.decorators.error_handling import print_stack_trace_if_verbose
from recipebox.config.settings import RecipeboxSettings, create_settings
from recipebox.core.logging import setup_logging


__all__ = ["app", "main", "__version__", "AppContext"]


logger = logging.getLogger(__name__)


class AppContext:
    """Application context for storing shared state."""

    def __init__(
        self,
        verbose: int = 0,
        log_file: str | None = None,
        project_file: str | None = None,
        settings: RecipeboxSettings | None = None,
    ):
        """Initialize AppContext.

        Args:
            verbose: Verbosity level
            log_file: Path to log file
            project_file: Explicit project file (must exist when given)
            settings: Invocation settings, read from the environment if None
        """
        self.verbose = verbose
        self.log_file = log_file
        self.project_file = project_file
        self.settings = settings or create_settings()


app = typer.Typer(
    name="recipebox",
    help=f"""recipebox build recipe resolver v{__version__}

Resolves a source tree, a host platform and a build intent into a filtered
source snapshot, a fully resolved cargo invocation and the post-install
steps that generate man pages and shell completions.

Build intents: release-package, ci-check, dev-shell

Common workflows:
  • Show the platform profile:  recipebox profile
  • Inspect a recipe:           recipebox recipe release-package --format json
  • Build a package:            recipebox build release-package --prefix ./out
  • Enter a dev shell:          eval "$(recipebox shell)\"""",
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    verbose: Annotated[
        int,
        typer.Option(
            "-v",
            "--verbose",
            count=True,
            help="Increase verbosity (-v=INFO, -vv=DEBUG)",
        ),
    ] = 0,
    debug: Annotated[
        bool,
        typer.Option("--debug", help="Enable debug logging (equivalent to -vv)"),
    ] = False,
    log_file: Annotated[
        str | None, typer.Option("--log-file", help="Log to file")
    ] = None,
    project_file: Annotated[
        str | None,
        typer.Option("-c", "--config", help="Path to the project file"),
    ] = None,
    show_version: Annotated[
        bool, typer.Option("--version", help="Show version and exit")
    ] = False,
) -> None:
    """recipebox build recipe resolver."""
    if show_version:
        print(f"recipebox v{__version__}")
        raise typer.Exit()

    if ctx.invoked_subcommand is None:
        print(ctx.get_help())
        raise typer.Exit()

    app_context = AppContext(
        verbose=verbose, log_file=log_file, project_file=project_file
    )
    ctx.obj = app_context

    log_level = logging.WARNING
    if debug:
        log_level = logging.DEBUG
    elif verbose == 1:
        log_level = logging.INFO
    elif verbose >= 2:
        log_level = logging.DEBUG
    else:
        log_level = app_context.settings.get_log_level_int()

    setup_logging(level=log_level, log_file=log_file)


def main() -> int:
    """Main CLI entry point."""
    from recipebox.cli.commands import register_all_commands

    register_all_commands(app)

    try:
        # click returns the exit code instead of raising when not standalone
        rv = app(standalone_mode=False)
        return rv if isinstance(rv, int) else 0
    except typer.Exit as e:
        return e.exit_code
    except SystemExit as e:
        return e.code if isinstance(e.code, int) else 0
    except Exception as e:
        # click usage errors carry their own exit code
        exit_code = getattr(e, "exit_code", None)
        if isinstance(exit_code, int):
            show = getattr(e, "show", None)
            if callable(show):
                show()
            return exit_code
        logger.exception("Unexpected error: %s", e)
        print_stack_trace_if_verbose()
        return 1


if __name__ == "__main__":
    sys.exit(main())
