"""Helpers resolving project, platform and revision for CLI commands."""

import logging
from pathlib import Path

import typer
from click.core import Context as ClickContext

from recipebox.config.project import ProjectConfig, load_project_config
from recipebox.config.settings import RecipeboxSettings, create_settings
from recipebox.models.platform import Platform
from recipebox.protocols import ProcessAdapterProtocol
from recipebox.resolution.platform_resolver import detect_platform
from recipebox.services.revision import detect_revision


logger = logging.getLogger(__name__)


def get_settings_from_context(ctx: typer.Context | ClickContext) -> RecipeboxSettings:
    """Get settings from the Typer context, reading the environment if unset."""
    app_ctx = ctx.obj
    settings = getattr(app_ctx, "settings", None)
    if settings is None:
        logger.debug("No application context, reading settings from environment")
        return create_settings()
    return settings  # type: ignore[no-any-return]


def load_project(ctx: typer.Context | ClickContext, root: Path) -> ProjectConfig:
    """Load the project configuration for ``root``.

    An explicit ``--config`` file must exist; otherwise the project file
    named in the settings is looked up at the source root and defaults
    apply when it is absent.
    """
    explicit = getattr(ctx.obj, "project_file", None)
    if explicit:
        return load_project_config(Path(explicit), required=True)
    settings = get_settings_from_context(ctx)
    return load_project_config(root / settings.project_file)


def resolve_platform(
    ctx: typer.Context | ClickContext, option: str | None = None
) -> Platform:
    """Platform from the CLI option, then settings, then host detection."""
    requested = option or get_settings_from_context(ctx).platform
    if requested:
        return Platform.parse(requested)
    return detect_platform()


def resolve_revision(
    ctx: typer.Context | ClickContext,
    root: Path,
    process_adapter: ProcessAdapterProtocol,
    option: str | None = None,
) -> str | None:
    """Revision from the CLI option, then settings, then the git working copy."""
    requested = option or get_settings_from_context(ctx).revision
    if requested:
        return requested
    return detect_revision(root, process_adapter)
