"""
Sleep Tracker TUI.

Entry form, trend chart and history list on one screen. All state lives in
a TrackerController; the app subscribes to it and redraws every widget from
each new TrackerState snapshot.

Usage:
    python tui.py
    python tui.py --debug
"""

from __future__ import annotations

import sys
from collections.abc import Callable

from textual import on
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Vertical, VerticalScroll
from textual.widgets import Button, Footer, Header, Input, Label, RadioSet, TextArea

from sleeplog.core.exceptions import StorageError
from sleeplog.core.logging import get_logger, log_with_source
from sleeplog.services.projections import history_items, trend_points
from sleeplog.services.tracker import TrackerController, TrackerState
from sleeplog.tui.widgets import (
    ConfirmDeleteScreen,
    EntryFormPanel,
    HistoryList,
    TrendChart,
)

logger = get_logger(__name__)


class SleepTrackerApp(App):
    """Personal sleep log: record, review, and chart nightly sleep."""

    TITLE = "Sleep Tracker"
    SUB_TITLE = "Nightly sleep log"

    CSS = """
    #main {
        height: 1fr;
        padding: 0 2;
    }

    .section-title {
        text-style: bold;
        margin: 1 0 0 0;
    }

    .field-label {
        margin: 1 0 0 0;
    }

    EntryFormPanel, #trend, #history {
        height: auto;
        border: round $primary;
        padding: 0 1;
        margin: 0 0 1 0;
    }

    #quality {
        layout: horizontal;
        width: auto;
    }

    #note {
        height: 5;
    }

    #form-error {
        color: $error;
    }

    #form-actions, .history-actions, #confirm-actions {
        height: auto;
        align-horizontal: center;
    }

    TrendChart {
        height: 13;
    }

    HistoryList {
        height: auto;
    }

    .history-entry {
        height: auto;
        border-bottom: solid $panel;
        padding: 0 1;
    }

    .history-header {
        height: 1;
    }

    .history-header .quality {
        width: 1fr;
    }

    .history-header .date, .placeholder {
        color: $text-muted;
    }

    ConfirmDeleteScreen {
        align: center middle;
    }

    #confirm-dialog {
        width: 60;
        height: auto;
        border: thick $error;
        background: $surface;
        padding: 1 2;
    }
    """

    BINDINGS = [
        Binding("ctrl+s", "save", "Save"),
        Binding("escape", "cancel_edit", "Cancel edit"),
        Binding("ctrl+q", "quit", "Quit"),
    ]

    def __init__(self, controller: TrackerController | None = None) -> None:
        super().__init__()
        self._controller = controller
        self._unsubscribe: Callable[[], None] | None = None

    @property
    def controller(self) -> TrackerController:
        if self._controller is None:
            from sleeplog.core.dependencies import get_tracker_controller

            self._controller = get_tracker_controller()
        return self._controller

    def compose(self) -> ComposeResult:
        yield Header()
        with VerticalScroll(id="main"):
            yield EntryFormPanel(id="entry-form")
            with Vertical(id="trend"):
                yield Label("Sleep Trend", classes="section-title")
                yield TrendChart(id="trend-chart")
            with Vertical(id="history"):
                yield Label("Sleep History", classes="section-title")
                yield HistoryList(id="history-list")
        yield Footer()

    def on_mount(self) -> None:
        self._unsubscribe = self.controller.subscribe(self._show_state)
        state = self.controller.mount()
        log_with_source(logger, "tui", "info", "Tracker mounted", count=len(state.entries))
        self._show_state(state)

    def on_unmount(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def _show_state(self, state: TrackerState) -> None:
        self.query_one(EntryFormPanel).show(self.controller.form)
        self.query_one(TrendChart).points = tuple(trend_points(state.entries))
        self.query_one(HistoryList).items = tuple(history_items(state.entries))

    # ------------------------------------------------------------------ #
    # Form input                                                          #
    # ------------------------------------------------------------------ #

    @on(RadioSet.Changed, "#quality")
    def quality_changed(self, event: RadioSet.Changed) -> None:
        if event.pressed.id:
            self.controller.form.quality = event.pressed.id.removeprefix("quality-")

    @on(Input.Changed, "#hours")
    def hours_changed(self, event: Input.Changed) -> None:
        self.controller.form.hours = event.value

    @on(TextArea.Changed, "#note")
    def note_changed(self, event: TextArea.Changed) -> None:
        self.controller.form.note = event.text_area.text

    @on(Button.Pressed, "#save")
    @on(Input.Submitted, "#hours")
    def save_pressed(self) -> None:
        self.action_save()

    @on(Button.Pressed, "#cancel")
    def cancel_pressed(self) -> None:
        self.action_cancel_edit()

    def action_save(self) -> None:
        try:
            entry = self.controller.save()
        except StorageError as e:
            log_with_source(logger, "tui", "error", "Save failed", error=e.message)
            self.notify(e.message, title="Not saved", severity="error")
            return
        if entry is not None:
            log_with_source(logger, "tui", "info", "Entry saved", entry_id=entry.id)

    def action_cancel_edit(self) -> None:
        if self.controller.editing is not None:
            self.controller.cancel_edit()

    # ------------------------------------------------------------------ #
    # History actions                                                     #
    # ------------------------------------------------------------------ #

    @on(HistoryList.EditRequested)
    def edit_requested(self, event: HistoryList.EditRequested) -> None:
        if self.controller.select_for_edit(event.entry_id) is not None:
            self.query_one("#hours", Input).focus()

    @on(HistoryList.DeleteRequested)
    def delete_requested(self, event: HistoryList.DeleteRequested) -> None:
        entry_id = event.entry_id

        def delete_if_confirmed(confirmed: bool | None) -> None:
            if not confirmed:
                return
            try:
                self.controller.delete(entry_id)
            except StorageError as e:
                log_with_source(logger, "tui", "error", "Delete failed", error=e.message)
                self.notify(e.message, title="Not deleted", severity="error")
                return
            log_with_source(logger, "tui", "info", "Entry deleted", entry_id=entry_id)

        self.push_screen(ConfirmDeleteScreen(), delete_if_confirmed)


def main() -> None:
    from sleeplog.core.config import validate_project_root
    from sleeplog.core.logging import setup_logging

    debug = "--debug" in sys.argv
    validate_project_root()
    setup_logging(level="DEBUG" if debug else None, enable_console=False)
    SleepTrackerApp().run()


if __name__ == "__main__":
    main()
