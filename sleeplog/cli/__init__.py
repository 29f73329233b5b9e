"""
Command line interface.

Typer app wrapping the tracker for scripted use and launching the TUI.
"""
