"""
Unit Tests for the Tracker Controller.

Walks the same flows a user takes through the screen: record, edit, cancel,
delete, with the views reading TrackerState snapshots.
"""

from datetime import datetime, timezone

import pytest

from sleeplog.core.exceptions import StorageError
from sleeplog.repositories.entry import EntryRepository
from sleeplog.repositories.store import EntryStore
from sleeplog.schemas.entry import SleepQuality
from sleeplog.services.form import EntryForm, FormMode
from sleeplog.services.projections import history_items, trend_points
from sleeplog.services.tracker import TrackerController


class TestRecording:
    """Tests for saving from the form."""

    def test_add_entry(self, controller):
        """Should store a new entry and reset the form."""
        controller.form.quality = "poor"
        controller.form.hours = "5.5"
        controller.form.note = "Noisy street"

        entry = controller.save()

        assert controller.state.entries == (entry,)
        (item,) = history_items(controller.state.entries)
        assert item.quality_label == "😵 Poor"
        assert item.hours_label == "Slept 5.5 hrs"
        assert item.note == "Noisy street"
        assert controller.form.mode is FormMode.CREATE
        assert controller.form.quality is SleepQuality.GREAT
        assert controller.form.note == ""

    def test_newest_first_in_history_oldest_first_in_chart(self, controller):
        """Should order history and chart oppositely."""
        for hours in (8, 6, 7):
            controller.form.hours = hours
            controller.save()

        entries = controller.state.entries
        assert [item.hours for item in history_items(entries)] == [7, 6, 8]
        assert [point.hours for point in trend_points(entries)] == [8, 6, 7]

    def test_rejected_save_changes_nothing(self, controller):
        """Should keep entries and form state when validation fails."""
        controller.form.hours = "30"
        states = []
        controller.subscribe(states.append)

        assert controller.save() is None

        assert controller.state.entries == ()
        assert controller.form.error == "Hours must be between 0 and 24."
        assert controller.form.hours == "30"
        assert len(states) == 1

    def test_storage_failure_propagates(self, flaky_storage):
        """Should raise StorageError and keep the form as entered."""
        tracker = TrackerController(EntryRepository(EntryStore(flaky_storage)), EntryForm())
        tracker.mount()
        tracker.form.hours = 6
        flaky_storage.fail_writes = True

        with pytest.raises(StorageError):
            tracker.save()

        assert tracker.state.entries == ()
        assert tracker.form.hours == 6


class TestEditing:
    """Tests for the edit selection."""

    @pytest.fixture
    def recorded(self, controller):
        for hours in (8, 6, 7):
            controller.form.hours = hours
            controller.save()
        return controller

    def test_select_loads_form(self, recorded):
        """Should bind the chosen entry to the form."""
        target = recorded.state.entries[1]

        assert recorded.select_for_edit(target.id) == target
        assert recorded.editing == target
        assert recorded.form.mode is FormMode.EDIT
        assert recorded.form.hours_text == "6"

    def test_update_in_place(self, recorded):
        """Should replace the entry without moving it or changing its date."""
        before = recorded.state.entries
        target = before[1]
        recorded.select_for_edit(target.id)
        recorded.form.hours = 9
        recorded.form.quality = "okay"

        updated = recorded.save()

        after = recorded.state.entries
        assert [e.id for e in after] == [e.id for e in before]
        assert updated.id == target.id
        assert updated.date == target.date
        assert after[1].hours == 9
        assert after[1].quality is SleepQuality.OKAY
        assert recorded.editing is None
        assert recorded.form.mode is FormMode.CREATE

    def test_rejected_update_stays_in_edit_mode(self, recorded):
        """Should keep the selection and the stored entry on a bad value."""
        target = recorded.state.entries[0]
        recorded.select_for_edit(target.id)
        recorded.form.hours = 30

        assert recorded.save() is None

        assert recorded.editing == target
        assert recorded.form.mode is FormMode.EDIT
        assert recorded.form.error == "Hours must be between 0 and 24."
        assert recorded.repository.get(target.id).hours == 7

    def test_cancel_discards_changes(self, recorded):
        """Should return to CREATE mode and leave entries as they were."""
        before = recorded.state.entries
        recorded.select_for_edit(before[2].id)
        recorded.form.hours = 1

        recorded.cancel_edit()

        assert recorded.editing is None
        assert recorded.form.mode is FormMode.CREATE
        assert recorded.form.hours == 8.0
        assert recorded.state.entries == before

    def test_unknown_id_ignored(self, recorded):
        """Should keep the current selection when the id is not found."""
        assert recorded.select_for_edit("nope") is None
        assert recorded.editing is None


class TestDeleting:
    """Tests for confirmed deletion."""

    def test_declined_delete_keeps_entry(self, controller):
        """Should do nothing when the prompt is declined."""
        entry = controller.save()

        assert controller.request_delete(entry.id, confirm=lambda: False) is False
        assert controller.state.entries == (entry,)

    def test_confirmed_delete_removes_entry(self, controller):
        """Should remove the entry once confirmed."""
        keep = controller.save()
        drop = controller.save()
        asked = []

        removed = controller.request_delete(drop.id, confirm=lambda: asked.append(drop.id) or True)

        assert removed is True
        assert asked == [drop.id]
        assert controller.state.entries == (keep,)

    def test_deleting_edited_entry_clears_selection(self, controller):
        """Should reset the form when the entry being edited is deleted."""
        entry = controller.save()
        controller.select_for_edit(entry.id)

        controller.delete(entry.id)

        assert controller.editing is None
        assert controller.form.mode is FormMode.CREATE

    def test_deleting_other_entry_keeps_selection(self, controller):
        """Should stay in EDIT mode when another entry is deleted."""
        edited = controller.save()
        other = controller.save()
        controller.select_for_edit(edited.id)

        controller.delete(other.id)

        assert controller.editing == edited
        assert controller.form.mode is FormMode.EDIT


class TestStateSnapshots:
    """Tests for the observer contract."""

    def test_every_change_emits_state(self, controller):
        """Should publish after saves, selections and deletes."""
        states = []
        controller.subscribe(states.append)

        entry = controller.save()
        controller.select_for_edit(entry.id)
        controller.cancel_edit()
        controller.delete(entry.id)

        assert states[-1].entries == ()
        assert states[-1].editing is None
        assert any(state.editing == entry for state in states)

    def test_saving_an_edit_emits_one_state(self, controller):
        """Should publish a single snapshot with the selection already cleared."""
        entry = controller.save()
        controller.select_for_edit(entry.id)
        controller.form.hours = 6
        states = []
        controller.subscribe(states.append)

        controller.save()

        assert len(states) == 1
        assert states[0].editing is None
        assert states[0].entries[0].hours == 6

    def test_deleting_edited_entry_emits_one_state(self, controller):
        """Should never publish a selection pointing at a removed entry."""
        entry = controller.save()
        controller.select_for_edit(entry.id)
        states = []
        controller.subscribe(states.append)

        controller.delete(entry.id)

        assert len(states) == 1
        assert states[0].entries == ()
        assert states[0].editing is None

    def test_failed_save_emits_nothing(self, flaky_storage):
        """Should leave listeners untouched when the write fails."""
        tracker = TrackerController(EntryRepository(EntryStore(flaky_storage)), EntryForm())
        tracker.mount()
        states = []
        tracker.subscribe(states.append)
        flaky_storage.fail_writes = True

        with pytest.raises(StorageError):
            tracker.save()

        assert states == []
        tracker.form.hours = 5
        flaky_storage.fail_writes = False
        tracker.save()
        assert len(states) == 1

    def test_unsubscribe(self, controller):
        """Should stop sending snapshots to a removed listener."""
        states = []
        unsubscribe = controller.subscribe(states.append)
        unsubscribe()

        controller.save()

        assert states == []

    def test_mount_returns_loaded_state(self, store, entry_factory):
        """Should load persisted entries on mount."""
        store.save([entry_factory("a")])
        tracker = TrackerController(EntryRepository(store))

        state = tracker.mount()

        assert [e.id for e in state.entries] == ["a"]
        assert state.editing is None


class TestScenarios:
    """Whole-flow checks against the projections the views render."""

    def test_blank_note_renders_no_note(self, controller):
        """Should show one Poor 3-hour entry without a note and one chart point."""
        controller.form.quality = "poor"
        controller.form.hours = 3
        controller.form.note = "  "

        controller.save()

        (item,) = history_items(controller.state.entries)
        assert item.quality_label == "😵 Poor"
        assert item.hours == 3
        assert item.note is None
        assert len(trend_points(controller.state.entries)) == 1

    def test_chart_by_date_history_by_creation(self, store):
        """Should order the chart by date and history by creation."""
        dates = iter([
            datetime(2024, 1, 3, tzinfo=timezone.utc),
            datetime(2024, 1, 1, tzinfo=timezone.utc),
        ])
        tracker = TrackerController(
            EntryRepository(store),
            EntryForm(clock=lambda: next(dates)),
        )
        tracker.mount()
        tracker.form.hours = 5
        tracker.save()
        tracker.form.hours = 9
        tracker.save()

        points = trend_points(tracker.state.entries)
        assert [p.date.day for p in points] == [1, 3]
        assert [p.hours for p in points] == [9, 5]
        assert [item.hours for item in history_items(tracker.state.entries)] == [9, 5]
