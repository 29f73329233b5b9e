"""
Unit Tests for the Entry Repository.
"""

import json

import pytest

from sleeplog.core.exceptions import StateError, StorageError
from sleeplog.repositories.entry import EntryRepository
from sleeplog.repositories.store import EntryStore


class TestInitialize:
    """Tests for EntryRepository.initialize()."""

    def test_loads_persisted_entries(self, store, entry_factory):
        """Should expose the stored collection after initialize."""
        saved = [entry_factory("b", days=1), entry_factory("a")]
        store.save(saved)

        repo = EntryRepository(store)
        assert repo.loaded is False
        assert repo.initialize() == tuple(saved)
        assert repo.loaded is True

    def test_is_idempotent(self, store, entry_factory):
        """Should not reload once initialized."""
        repo = EntryRepository(store)
        repo.initialize()
        store.save([entry_factory()])

        assert repo.initialize() == ()

    def test_notifies_listeners(self, store):
        """Should publish the loaded snapshot."""
        repo = EntryRepository(store)
        seen = []
        repo.subscribe(seen.append)

        repo.initialize()

        assert seen == [()]

    @pytest.mark.parametrize("operation", ["upsert", "remove"])
    def test_mutation_before_initialize_raises(self, store, entry_factory, operation):
        """Should refuse mutations before the collection is loaded."""
        store.save([entry_factory("kept")])
        repo = EntryRepository(store)

        with pytest.raises(StateError):
            if operation == "upsert":
                repo.upsert(entry_factory("new"))
            else:
                repo.remove("kept")

        assert [e.id for e in store.load()] == ["kept"]


class TestUpsert:
    """Tests for EntryRepository.upsert()."""

    def test_new_entry_is_prepended(self, repository, entry_factory):
        """Should put newly created entries first."""
        repository.upsert(entry_factory("a"))
        repository.upsert(entry_factory("b", days=1))

        assert [e.id for e in repository.entries] == ["b", "a"]

    def test_existing_entry_replaced_in_place(self, repository, entry_factory):
        """Should keep position and count when the id already exists."""
        for entry_id in ("a", "b", "c"):
            repository.upsert(entry_factory(entry_id))

        repository.upsert(entry_factory("b", hours=5, note="Restless"))

        assert [e.id for e in repository.entries] == ["c", "b", "a"]
        assert repository.get("b").hours == 5
        assert repository.get("b").note == "Restless"

    def test_persists_after_each_change(self, repository, store, entry_factory):
        """Should mirror the collection to the store."""
        repository.upsert(entry_factory("a"))
        assert store.load() == list(repository.entries)

    def test_failed_save_leaves_memory_unchanged(self, flaky_storage, entry_factory):
        """Should not apply a change that could not be persisted."""
        repo = EntryRepository(EntryStore(flaky_storage))
        repo.initialize()
        repo.upsert(entry_factory("a"))
        seen = []
        repo.subscribe(seen.append)
        flaky_storage.fail_writes = True

        with pytest.raises(StorageError):
            repo.upsert(entry_factory("b"))

        assert [e.id for e in repo.entries] == ["a"]
        assert seen == []


class TestRemove:
    """Tests for EntryRepository.remove()."""

    def test_removes_matching_entry(self, repository, entry_factory):
        """Should drop the entry and report it."""
        repository.upsert(entry_factory("a"))
        repository.upsert(entry_factory("b"))

        assert repository.remove("a") is True
        assert [e.id for e in repository.entries] == ["b"]

    def test_unknown_id_is_not_an_error(self, repository, entry_factory):
        """Should leave the collection as it was."""
        repository.upsert(entry_factory("a"))

        assert repository.remove("zzz") is False
        assert [e.id for e in repository.entries] == ["a"]

    def test_removing_twice(self, repository, store, entry_factory):
        """Should behave like a single delete."""
        repository.upsert(entry_factory("a"))
        repository.remove("a")
        repository.remove("a")

        assert repository.entries == ()
        assert store.load() == []

    def test_store_rewritten_even_when_nothing_removed(self, flaky_storage, entry_factory):
        """Should write the collection so the store matches memory."""
        repo = EntryRepository(EntryStore(flaky_storage))
        repo.initialize()
        repo.upsert(entry_factory("a"))
        writes = flaky_storage.writes

        repo.remove("missing")

        assert flaky_storage.writes == writes + 1
        assert [r["id"] for r in json.loads(flaky_storage.get_item("sleep_entries"))] == ["a"]


class TestSubscribe:
    """Tests for change listeners."""

    def test_listener_receives_snapshots(self, repository, entry_factory):
        """Should call listeners with the new collection after each change."""
        seen = []
        repository.subscribe(seen.append)

        repository.upsert(entry_factory("a"))
        repository.remove("a")

        assert [[e.id for e in snapshot] for snapshot in seen] == [["a"], []]

    def test_unsubscribe_stops_notifications(self, repository, entry_factory):
        """Should not call a listener after it unsubscribed."""
        seen = []
        unsubscribe = repository.subscribe(seen.append)
        unsubscribe()
        unsubscribe()

        repository.upsert(entry_factory("a"))

        assert seen == []
