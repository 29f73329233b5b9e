"""
Entry Commands.

Record, edit, delete and review sleep entries from the command line.
Every command goes through the same TrackerController as the TUI.
"""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from sleeplog.core.exceptions import StorageError
from sleeplog.core.logging import get_logger, log_with_source
from sleeplog.schemas.entry import SleepEntry, SleepQuality
from sleeplog.services.projections import format_hours, history_items, trend_points
from sleeplog.services.tracker import DELETE_PROMPT, TrackerController
from sleeplog.tui.render import chart_capacity, render_history_table, render_trend_chart

app = typer.Typer(help="Sleep entry commands")
console = Console()
logger = get_logger(__name__)


def _get_controller(ctx: typer.Context) -> TrackerController:
    """Build and mount a controller on the data directory chosen at the top level."""
    from sleeplog.core.dependencies import get_tracker_controller

    data_dir: Path | None = (ctx.obj or {}).get("data_dir")
    controller = get_tracker_controller(data_dir)
    controller.mount()
    return controller


def _resolve_entry_id(controller: TrackerController, entry_id: str) -> str:
    """Accept a full id or an unambiguous prefix (as shown by `history`)."""
    entry_id = entry_id.strip()
    if not entry_id:
        console.print("[red]Entry id must not be empty[/red]")
        raise typer.Exit(1)
    ids = [entry.id for entry in controller.repository.entries]
    if entry_id in ids:
        return entry_id
    matches = [candidate for candidate in ids if candidate.startswith(entry_id)]
    if len(matches) == 1:
        return matches[0]
    if not matches:
        console.print(f"[red]No entry matches {entry_id!r}[/red]")
    else:
        console.print(f"[red]{entry_id!r} matches {len(matches)} entries, use more characters[/red]")
    raise typer.Exit(1)


def _save(controller: TrackerController) -> SleepEntry:
    try:
        entry = controller.save()
    except StorageError as e:
        console.print(f"[red]{e.message}[/red]")
        raise typer.Exit(1)
    if entry is None:
        console.print(f"[red]{controller.form.error}[/red]")
        raise typer.Exit(1)
    return entry


def _describe(entry: SleepEntry) -> str:
    return f"{entry.quality.label}, {format_hours(entry.hours)} hrs ({entry.id[:8]})"


@app.command()
def add(
    ctx: typer.Context,
    quality: Optional[SleepQuality] = typer.Option(None, "--quality", "-q", help="great, okay or poor"),
    hours: Optional[float] = typer.Option(None, "--hours", help="Hours slept, 0 to 24"),
    note: Optional[str] = typer.Option(None, "--note", "-n", help="Dream notes"),
) -> None:
    """
    Record last night's sleep.

    Omitted options fall back to the form defaults (tracker.yaml).
    """
    controller = _get_controller(ctx)
    form = controller.form
    if quality is not None:
        form.quality = quality
    if hours is not None:
        form.hours = hours
    form.note = note

    entry = _save(controller)
    log_with_source(logger, "cli", "info", "Entry added", entry_id=entry.id)
    console.print(f"[green]Saved[/green] {_describe(entry)}")


@app.command()
def edit(
    ctx: typer.Context,
    entry_id: str = typer.Argument(..., help="Entry id or unique prefix"),
    quality: Optional[SleepQuality] = typer.Option(None, "--quality", "-q", help="great, okay or poor"),
    hours: Optional[float] = typer.Option(None, "--hours", help="Hours slept, 0 to 24"),
    note: Optional[str] = typer.Option(None, "--note", "-n", help="Dream notes ('' clears)"),
) -> None:
    """
    Change an existing entry.

    Only the given options change; the id and date never do.
    """
    controller = _get_controller(ctx)
    controller.select_for_edit(_resolve_entry_id(controller, entry_id))
    form = controller.form
    if quality is not None:
        form.quality = quality
    if hours is not None:
        form.hours = hours
    if note is not None:
        form.note = note

    entry = _save(controller)
    log_with_source(logger, "cli", "info", "Entry edited", entry_id=entry.id)
    console.print(f"[green]Updated[/green] {_describe(entry)}")


@app.command()
def delete(
    ctx: typer.Context,
    entry_id: str = typer.Argument(..., help="Entry id or unique prefix"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation prompt"),
) -> None:
    """
    Delete an entry after confirmation.
    """
    controller = _get_controller(ctx)
    resolved = _resolve_entry_id(controller, entry_id)

    try:
        removed = controller.request_delete(
            resolved,
            confirm=lambda: yes or typer.confirm(DELETE_PROMPT, default=False),
        )
    except StorageError as e:
        console.print(f"[red]{e.message}[/red]")
        raise typer.Exit(1)

    if removed:
        log_with_source(logger, "cli", "info", "Entry deleted", entry_id=resolved)
        console.print(f"[green]Deleted[/green] {resolved[:8]}")
    else:
        console.print("Nothing deleted.")


@app.command()
def history(ctx: typer.Context) -> None:
    """
    Show all entries, most recently recorded first.
    """
    controller = _get_controller(ctx)
    console.print(render_history_table(history_items(controller.repository.entries)))


@app.command()
def chart(ctx: typer.Context) -> None:
    """
    Show hours slept per night, oldest first.
    """
    controller = _get_controller(ctx)
    points = trend_points(controller.repository.entries)
    console.print(render_trend_chart(points, max_points=chart_capacity(console.width)))
