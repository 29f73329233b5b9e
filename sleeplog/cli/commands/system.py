"""
System Commands.

Commands for application information and configuration.
"""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.tree import Tree

app = typer.Typer(help="System information commands")
console = Console()


@app.command()
def info(ctx: typer.Context) -> None:
    """
    Display application information.

    Shows app name, version, and where entries are stored.
    """
    try:
        from sleeplog.core.config import get_app_config, get_data_dir

        app_config = get_app_config()
        data_dir: Path = (ctx.obj or {}).get("data_dir") or get_data_dir()
    except (FileNotFoundError, RuntimeError, ValueError) as e:
        console.print(f"[red]Error loading configuration: {e}[/red]")
        raise typer.Exit(1)

    console.print(Panel(
        f"[bold]{app_config.application.name}[/bold]\n"
        f"Version: {app_config.application.version}\n"
        f"Description: {app_config.application.description}\n"
        f"Data: {data_dir / (app_config.storage.entries_key + '.json')}",
        title="Application Info",
    ))


@app.command()
def config(
    section: Optional[str] = typer.Argument(None, help="Config section to show (application, storage, logging, tracker)"),
) -> None:
    """
    Display configuration settings.

    Shows all configuration or a specific section.
    """
    try:
        from sleeplog.core.config import get_app_config

        app_config = get_app_config()
    except (FileNotFoundError, RuntimeError, ValueError) as e:
        console.print(f"[red]Error loading configuration: {e}[/red]")
        raise typer.Exit(1)

    sections = {
        "application": app_config.application.model_dump(),
        "storage": app_config.storage.model_dump(),
        "logging": app_config.logging.model_dump(),
        "tracker": app_config.tracker.model_dump(),
    }

    if section:
        if section not in sections:
            console.print(f"[red]Unknown section: {section}[/red]")
            console.print(f"Available sections: {', '.join(sections.keys())}")
            raise typer.Exit(1)

        _display_config_section(section, sections[section])
    else:
        for name, data in sections.items():
            _display_config_section(name, data)
            console.print()


def _display_config_section(name: str, data: dict) -> None:
    """Display a configuration section as a tree."""
    tree = Tree(f"[bold cyan]{name}[/bold cyan]")

    def add_items(parent: Tree, items: dict) -> None:
        for key, value in items.items():
            if isinstance(value, dict):
                branch = parent.add(f"[cyan]{key}[/cyan]")
                add_items(branch, value)
            else:
                parent.add(f"[cyan]{key}[/cyan]: {value}")

    add_items(tree, data)
    console.print(tree)


@app.command()
def version() -> None:
    """
    Display application version.
    """
    try:
        from sleeplog.core.config import get_app_config

        console.print(get_app_config().application.version)
    except (FileNotFoundError, RuntimeError, ValueError):
        console.print("unknown")
