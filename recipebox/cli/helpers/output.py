"""Helper functions for CLI output formatting with Rich integration."""

import json
from typing import Any

from pydantic import BaseModel
from rich.console import Console
from rich.table import Table

from recipebox.models.platform import PlatformProfile
from recipebox.models.recipe import BuildRecipe
from recipebox.models.results import BaseResult


console = Console()


def print_json(model: BaseModel | dict[str, Any]) -> None:
    """Print a model or mapping as indented JSON on stdout."""
    data = model.model_dump(mode="json") if isinstance(model, BaseModel) else model
    print(json.dumps(data, indent=2))


def print_success_message(message: str) -> None:
    console.print(f"[green]✓[/green] {message}")


def print_error_message(message: str) -> None:
    console.print(f"[red]✗[/red] {message}")


def print_result(result: BaseResult) -> None:
    """Print operation result with appropriate formatting."""
    if result.success:
        for message in result.messages:
            print_success_message(message)
    else:
        for error in result.errors:
            print_error_message(error)


def print_profile_table(profile: PlatformProfile) -> None:
    """Print a platform profile as a Rich table."""
    table = Table(
        title=f"Platform profile: {profile.platform.value}",
        show_header=True,
        header_style="bold cyan",
    )
    table.add_column("Dependency", style="cyan", no_wrap=True)
    table.add_column("Kind", style="bold")

    if not profile.dependencies:
        table.add_row("(none)", "")
    for dep in sorted(profile.dependencies, key=lambda d: d.name):
        table.add_row(dep.name, dep.kind.value)

    console.print(table)
    flags = " ".join(flag.value for flag in profile.linker_flags) or "(none)"
    console.print(f"[bold]Linker flags:[/bold] {flags}")


def print_recipe_table(recipe: BuildRecipe) -> None:
    """Print a resolved recipe: phases, environment and post-install steps."""
    console.print(
        f"[bold magenta]{recipe.pname}[/bold magenta] {recipe.version} "
        f"({recipe.intent.value}, {recipe.platform.value})"
    )

    if recipe.phases:
        phases = Table(title="Phases", show_header=True, header_style="bold cyan")
        phases.add_column("Phase", style="cyan", no_wrap=True)
        phases.add_column("Profile")
        phases.add_column("Command", style="dim")
        for phase in recipe.phases:
            command = " ".join(phase.command) if phase.command else "(no-op)"
            phases.add_row(phase.name.value, phase.profile or "", command)
        console.print(phases)

    if recipe.environment:
        env = Table(title="Environment", show_header=True, header_style="bold cyan")
        env.add_column("Variable", style="cyan", no_wrap=True)
        env.add_column("Value")
        for key, value in recipe.environment.items():
            env.add_row(key, value)
        console.print(env)

    for line in recipe.hooks:
        console.print(f"  [dim]{line}[/dim]")

    if recipe.excluded_binaries:
        console.print(
            f"[bold]Excluded binaries:[/bold] {', '.join(recipe.excluded_binaries)}"
        )
