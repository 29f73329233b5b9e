"""
SleepLog Application.

- core/: Configuration, logging, exceptions, dependency wiring
- schemas/: Sleep entry models (pydantic)
- repositories/: Key-value storage, entry store, entry repository
- services/: Entry form, projections, tracker controller
- tui/: Terminal interface (Textual)
- cli/: Command line (Typer + Rich)
"""

__version__ = "0.1.0"
