"""
Tracker Controller.

Composes the entry form, the history list and the trend chart around the
EntryRepository and holds the "selected for editing" entry.

All views read a TrackerState snapshot. Listeners registered with
subscribe() receive a new snapshot after every repository change and every
selection change, before the next user action is handled.
"""

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass

from sleeplog.core.logging import get_logger
from sleeplog.repositories.entry import EntryRepository
from sleeplog.schemas.entry import SleepEntry
from sleeplog.services.form import EntryForm

logger = get_logger(__name__)

DELETE_PROMPT = "Are you sure you want to delete this sleep entry?"


@dataclass(frozen=True)
class TrackerState:
    entries: tuple[SleepEntry, ...]
    editing: SleepEntry | None


StateListener = Callable[[TrackerState], None]


class TrackerController:
    """
    Wires form submissions and history actions to the repository.

    Args:
        repository: Owner of the entry collection
        form: Form state; a default EntryForm is created when omitted
    """

    def __init__(self, repository: EntryRepository, form: EntryForm | None = None) -> None:
        self.repository = repository
        self.form = form or EntryForm()
        self._editing: SleepEntry | None = None
        self._listeners: list[StateListener] = []
        self._deferred = False
        self.repository.subscribe(self._on_entries_changed)

    @property
    def editing(self) -> SleepEntry | None:
        return self._editing

    @property
    def state(self) -> TrackerState:
        return TrackerState(entries=self.repository.entries, editing=self._editing)

    def mount(self) -> TrackerState:
        """Load persisted entries. Must run before views show data."""
        self.repository.initialize()
        return self.state

    # ------------------------------------------------------------------ #
    # Form actions                                                        #
    # ------------------------------------------------------------------ #

    def save(self) -> SleepEntry | None:
        """
        Submit the form.

        Returns:
            The stored entry, or None if validation failed (the form keeps
            its mode, fields and error message)
        """
        entry = self.form.submit()
        if entry is None:
            self._emit()
            return None
        with self._single_update():
            self.repository.upsert(entry)
            self._set_editing(None)
        return entry

    def cancel_edit(self) -> None:
        """Drop the selection; the form returns to its defaults."""
        self._set_editing(None)

    # ------------------------------------------------------------------ #
    # History actions                                                     #
    # ------------------------------------------------------------------ #

    def select_for_edit(self, entry_id: str) -> SleepEntry | None:
        """
        Select an entry and load it into the form.

        Returns:
            The selected entry, or None if the id is unknown
        """
        entry = self.repository.get(entry_id)
        if entry is None:
            logger.debug("Edit ignored, no such entry", entry_id=entry_id)
            return None
        self._set_editing(entry)
        return entry

    def delete(self, entry_id: str) -> bool:
        """
        Delete an entry the user has confirmed.

        Clears the selection if the deleted entry was being edited.

        Returns:
            True if an entry was removed
        """
        was_editing = self._editing is not None and self._editing.id == entry_id
        with self._single_update():
            removed = self.repository.remove(entry_id)
            if was_editing:
                self._set_editing(None)
        return removed

    def request_delete(self, entry_id: str, confirm: Callable[[], bool]) -> bool:
        """
        Ask for confirmation, then delete.

        Args:
            entry_id: Entry to delete
            confirm: Blocking yes/no prompt

        Returns:
            True if an entry was removed
        """
        if not confirm():
            logger.debug("Delete declined", entry_id=entry_id)
            return False
        return self.delete(entry_id)

    # ------------------------------------------------------------------ #
    # Observers                                                           #
    # ------------------------------------------------------------------ #

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """
        Register a listener for state snapshots.

        Returns:
            Function that unregisters the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _set_editing(self, entry: SleepEntry | None) -> None:
        self._editing = entry
        self.form.bind(entry)
        self._emit()

    def _on_entries_changed(self, entries: tuple[SleepEntry, ...]) -> None:
        self._emit()

    @contextmanager
    def _single_update(self) -> Iterator[None]:
        """Publish one snapshot for a mutation and the selection change it causes."""
        self._deferred = True
        try:
            yield
        finally:
            self._deferred = False
        self._emit()

    def _emit(self) -> None:
        if self._deferred:
            return
        state = self.state
        for listener in list(self._listeners):
            listener(state)
