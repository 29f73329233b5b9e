"""
SleepLog CLI.

Built with Typer for type-safe commands and Rich for formatted output.

Usage:
    sleeplog --help                                  # Show help
    sleeplog tui                                     # Open the tracker

    # Entries
    sleeplog entries add --quality poor --hours 5.5 --note "Noisy street"
    sleeplog entries edit 3f2a9c1b --hours 6
    sleeplog entries delete 3f2a9c1b                 # Asks for confirmation
    sleeplog entries history                         # Newest first
    sleeplog entries chart                           # Oldest first

    # System info
    sleeplog system info                             # App info and data file
    sleeplog system config                           # Show configuration

Options:
    --verbose, -v     Enable verbose output
    --debug, -d       Enable debug mode (detailed logging)
    --data-dir PATH   Use another data directory
    --help            Show help message
"""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from sleeplog.cli.commands import entries_app, system_app

app = typer.Typer(
    name="sleeplog",
    help="SleepLog CLI - Record, review and chart nightly sleep.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

console = Console()

# Register command groups
app.add_typer(entries_app, name="entries")
app.add_typer(system_app, name="system")


@app.command()
def tui(ctx: typer.Context) -> None:
    """
    Open the interactive tracker.

    Form, trend chart and history on one screen.
    """
    from sleeplog.core.dependencies import get_tracker_controller
    from sleeplog.core.logging import setup_logging
    from sleeplog.tui.app import SleepTrackerApp

    obj = ctx.obj or {}
    # Console output would draw over the screen.
    setup_logging(level=obj.get("log_level"), enable_console=False)
    SleepTrackerApp(get_tracker_controller(obj.get("data_dir"))).run()


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose output (INFO level logging)",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        "-d",
        help="Enable debug mode (DEBUG level logging)",
    ),
    data_dir: Optional[Path] = typer.Option(
        None,
        "--data-dir",
        help="Directory holding the entry file (overrides storage.yaml)",
    ),
) -> None:
    """
    SleepLog CLI.

    Record, review and chart nightly sleep.
    Built with Typer for type-safe commands and Rich for formatted output.
    """
    from sleeplog.core.config import validate_project_root
    from sleeplog.core.logging import setup_logging

    validate_project_root()

    log_level = "DEBUG" if debug else "INFO" if verbose else None
    ctx.obj = {"data_dir": data_dir, "log_level": log_level}

    setup_logging(level=log_level)
    if debug:
        console.print("[dim]Debug mode enabled[/dim]")


if __name__ == "__main__":
    app()
