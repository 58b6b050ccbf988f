"""
coursescore CLI - Completion and score reports for course content.

Usage:
    coursescore report -c course.json             # All root sets and the course totals
    coursescore path bucket1.a-05 -c course.json  # Intersection set from a set path
    coursescore sets-for c-10 -c course.json      # Root sets containing an item
    coursescore complete c-05 c-10 -c course.json # Complete items and show fired events

The content file defaults to COURSESCORE_CONTENT_FILE.
"""

from __future__ import annotations

import math
import sys
from pathlib import Path
from typing import Annotated

import typer
from loguru import logger
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from coursescore.config import Settings, get_settings
from coursescore.core.composer import UnresolvedPathError
from coursescore.core.registry import DuplicateRegistrationError, ScoringRegistry
from coursescore.loader import ContentLoadError, build_registry, load_course
from coursescore.sets.base import ScoringSet

# =============================================================================
# CLI Setup
# =============================================================================

app = typer.Typer(
    name="coursescore",
    help="Completion and scoring sets for hierarchical course content",
    add_completion=False,
    rich_markup_mode="rich",
)

console = Console()

ContentOption = Annotated[
    Path | None, typer.Option("--content", "-c", help="Course content JSON file")
]

EVENTS = ["assessments:complete", "assessments:passed", "bucket:complete"]


def configure_logging(settings: Settings) -> None:
    """Route loguru output to stderr (and the optional log file)."""
    logger.remove()
    logger.add(
        sys.stderr,
        level=settings.log_level,
        format="<level>{level: <8}</level> | {message}",
    )
    if settings.log_file:
        logger.add(settings.log_file, level=settings.log_level, rotation="10 MB")


def _load_registry(content: Path | None) -> ScoringRegistry:
    settings = get_settings()
    content = content or settings.content_file
    if content is None:
        console.print("[red]No content file given. Use --content or set COURSESCORE_CONTENT_FILE.[/]")
        raise typer.Exit(1)
    try:
        return build_registry(load_course(content), strict_paths=settings.strict_paths)
    except (ContentLoadError, DuplicateRegistrationError) as e:
        console.print(f"[red]{escape(str(e))}[/]")
        raise typer.Exit(1)


def _format_scaled(value: float) -> str:
    if math.isnan(value):
        return "-"
    return f"{value:.{get_settings().score_decimals}f}%"


def _format_flag(value: bool) -> str:
    return "[green]✓[/]" if value else "[dim]✗[/]"


def _sets_table(title: str, sets: list[ScoringSet]) -> Table:
    table = Table(title=title)
    table.add_column("Set", style="cyan")
    table.add_column("Type")
    table.add_column("Title")
    table.add_column("Items", justify="right")
    table.add_column("Score", justify="right")
    table.add_column("Scaled", justify="right")
    table.add_column("Complete", justify="center")
    table.add_column("Passed", justify="center")
    for set_ in sets:
        models = set_.models
        table.add_row(
            str(set_.id),
            str(set_.type),
            set_.title,
            "-" if models is None else str(len(models)),
            f"{set_.score:g} ({set_.min_score:g}-{set_.max_score:g})",
            _format_scaled(set_.scaled_score),
            _format_flag(set_.is_complete),
            _format_flag(set_.is_passed),
        )
    return table


def _print_report(registry: ScoringRegistry) -> None:
    console.print(_sets_table("Scoring Sets", registry.subsets))
    summary = Panel(
        f"Completion sets: {len(registry.completion_sets)}  "
        f"Complete: {_format_flag(registry.is_complete)}\n"
        f"Scoring sets: {len(registry.scoring_sets)}  "
        f"Score: {registry.score:g} ({registry.min_score:g}-{registry.max_score:g})  "
        f"Scaled: {_format_scaled(registry.scaled_score)}",
        title="Course",
        border_style="cyan",
    )
    console.print(summary)


# =============================================================================
# Commands
# =============================================================================


@app.command()
def report(content: ContentOption = None) -> None:
    """Show every root set and the course-wide completion and score."""
    registry = _load_registry(content)
    _print_report(registry)


@app.command()
def path(
    set_path: Annotated[str, typer.Argument(help="Dot separated set ids, e.g. bucket1.a-05")],
    content: ContentOption = None,
) -> None:
    """
    Resolve a set path into an intersection set.

    Examples:
        coursescore path b1.a-05   # items of assessment a-05 inside bucket b1
    """
    registry = _load_registry(content)
    try:
        set_ = registry.get_subset_by_path(set_path)
    except UnresolvedPathError as e:
        console.print(f"[red]{escape(str(e))}[/]")
        raise typer.Exit(1)
    if set_ is None:
        console.print(f"[yellow]No sets found for path '{set_path}'[/]")
        raise typer.Exit(1)

    console.print(_sets_table(f"Path {set_path}", [set_]))
    for model in set_.models or []:
        console.print(f"  {model.id} [dim]{model.get('_type') or ''}[/]")


@app.command("sets-for")
def sets_for(
    item_id: Annotated[str, typer.Argument(help="Content item id")],
    content: ContentOption = None,
) -> None:
    """List the root sets whose items contain, sit inside, or equal an item."""
    registry = _load_registry(content)
    sets = registry.get_subsets_by_model_id(item_id)
    if not sets:
        console.print(f"[yellow]No sets contain '{item_id}'[/]")
        return
    console.print(_sets_table(f"Sets for {item_id}", sets))


@app.command()
def complete(
    item_ids: Annotated[list[str], typer.Argument(help="Content item ids to mark complete")],
    content: ContentOption = None,
) -> None:
    """Mark items complete and show the completion and pass events that fire."""
    registry = _load_registry(content)

    fired: list[tuple[str, ScoringSet]] = []
    for event in EVENTS:
        registry.on(event, lambda set_, event=event: fired.append((event, set_)))

    for item_id in item_ids:
        try:
            registry.store.set_complete(item_id)
        except KeyError:
            console.print(f"[red]Item not found: {escape(item_id)}[/]")
            raise typer.Exit(1)

    for event, set_ in fired:
        console.print(f"[green]⚡ {event}[/] {set_.id}")
    if not fired:
        console.print("[dim]No events fired[/]")
    _print_report(registry)


# =============================================================================
# Entry Point
# =============================================================================


def main() -> None:
    """CLI entry point."""
    configure_logging(get_settings())
    app()


if __name__ == "__main__":
    main()
