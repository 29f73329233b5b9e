"""
Tracker widgets.

EntryFormPanel mirrors an EntryForm, TrendChart and HistoryList display
projections of the entry collection, ConfirmDeleteScreen asks yes/no before
a delete. Widgets never touch the repository; they post messages or expose
values and the app forwards them to the controller.
"""

from __future__ import annotations

from rich.text import Text
from textual import on
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.message import Message
from textual.reactive import reactive
from textual.screen import ModalScreen
from textual.widgets import Button, Input, Label, RadioButton, RadioSet, Static, TextArea

from sleeplog.schemas.entry import SleepQuality
from sleeplog.services.form import EntryForm
from sleeplog.services.projections import HistoryItem, TrendPoint, format_hours
from sleeplog.services.tracker import DELETE_PROMPT
from sleeplog.tui.render import HISTORY_EMPTY_MESSAGE, chart_capacity, render_trend_chart


def quality_button_id(quality: SleepQuality) -> str:
    return f"quality-{quality.value}"


class EntryFormPanel(Vertical):
    """Inputs for one entry. Call show() to copy an EntryForm's state in."""

    def compose(self) -> ComposeResult:
        yield Label("New Sleep Entry", id="form-title", classes="section-title")
        yield Label("Sleep Quality?", classes="field-label")
        with RadioSet(id="quality"):
            for quality in SleepQuality:
                yield RadioButton(
                    quality.label,
                    value=quality is SleepQuality.GREAT,
                    id=quality_button_id(quality),
                )
        yield Label("Hours Slept", classes="field-label")
        yield Input(value="8", type="number", id="hours")
        yield Static("", id="form-error")
        yield Label("Dream Notes (optional)", classes="field-label")
        yield TextArea(id="note")
        with Horizontal(id="form-actions"):
            yield Button("Save", id="save", variant="success")
            yield Button("Cancel", id="cancel")

    def show(self, form: EntryForm) -> None:
        self.query_one("#form-title", Label).update(form.title)

        button = self.query_one(f"#{quality_button_id(form.quality)}", RadioButton)
        if not button.value:
            button.value = True

        hours = self.query_one("#hours", Input)
        if hours.value != form.hours_text:
            hours.value = form.hours_text

        note = self.query_one("#note", TextArea)
        if note.text != form.note:
            note.load_text(form.note)

        error = self.query_one("#form-error", Static)
        error.update(form.error or "")
        error.display = form.error is not None

        self.query_one("#save", Button).label = form.submit_label
        self.query_one("#cancel", Button).display = form.can_cancel


class TrendChart(Static):
    """Hours per night, oldest first."""

    points: reactive[tuple[TrendPoint, ...]] = reactive(tuple)

    def render(self) -> Text:
        max_points = chart_capacity(self.size.width) if self.size.width else None
        return render_trend_chart(self.points, max_points=max_points)


class HistoryEntry(Vertical):
    """One history row with its Edit and Delete buttons."""

    def __init__(self, item: HistoryItem) -> None:
        super().__init__(classes="history-entry")
        self.item = item

    def compose(self) -> ComposeResult:
        with Horizontal(classes="history-header"):
            yield Label(self.item.quality_label, classes="quality")
            yield Label(self.item.date_label, classes="date")
        yield Label(Text.assemble("Slept ", (format_hours(self.item.hours), "bold"), " hrs"))
        if self.item.note:
            yield Label(Text(f"💭 {self.item.note}"), classes="note")
        with Horizontal(classes="history-actions"):
            yield Button("Edit", classes="edit", variant="primary")
            yield Button("Delete", classes="delete", variant="error")

    @on(Button.Pressed, ".edit")
    def request_edit(self, event: Button.Pressed) -> None:
        event.stop()
        self.post_message(HistoryList.EditRequested(self.item.entry_id))

    @on(Button.Pressed, ".delete")
    def request_delete(self, event: Button.Pressed) -> None:
        event.stop()
        self.post_message(HistoryList.DeleteRequested(self.item.entry_id))


class HistoryList(Vertical):
    """Entries newest first, or a placeholder when there are none."""

    class EditRequested(Message):
        def __init__(self, entry_id: str) -> None:
            self.entry_id = entry_id
            super().__init__()

    class DeleteRequested(Message):
        def __init__(self, entry_id: str) -> None:
            self.entry_id = entry_id
            super().__init__()

    items: reactive[tuple[HistoryItem, ...]] = reactive(tuple, recompose=True)

    def compose(self) -> ComposeResult:
        if not self.items:
            yield Static(HISTORY_EMPTY_MESSAGE, classes="placeholder")
            return
        for item in self.items:
            yield HistoryEntry(item)


class ConfirmDeleteScreen(ModalScreen[bool]):
    """Blocking yes/no prompt. Dismisses with True only on Yes."""

    BINDINGS = [
        Binding("y", "confirm", "Yes"),
        Binding("n,escape", "decline", "No"),
    ]

    def __init__(self, message: str = DELETE_PROMPT) -> None:
        super().__init__()
        self._message = message

    def compose(self) -> ComposeResult:
        with Vertical(id="confirm-dialog"):
            yield Label(self._message)
            with Horizontal(id="confirm-actions"):
                yield Button("Yes", id="confirm-yes", variant="error")
                yield Button("No", id="confirm-no")

    @on(Button.Pressed, "#confirm-yes")
    def yes_pressed(self, event: Button.Pressed) -> None:
        event.stop()
        self.dismiss(True)

    @on(Button.Pressed, "#confirm-no")
    def no_pressed(self, event: Button.Pressed) -> None:
        event.stop()
        self.dismiss(False)

    def action_confirm(self) -> None:
        self.dismiss(True)

    def action_decline(self) -> None:
        self.dismiss(False)
