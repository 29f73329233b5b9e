"""
CLI Commands.

Organized by domain/feature area.
"""

from sleeplog.cli.commands.entries import app as entries_app
from sleeplog.cli.commands.system import app as system_app

__all__ = [
    "entries_app",
    "system_app",
]
