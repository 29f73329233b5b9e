"""
Entry Repository.

Owns the in-memory entry collection and mirrors it to the EntryStore after
every mutation. Listeners are notified with an immutable snapshot once the
store write has succeeded.
"""

from collections.abc import Callable

from sleeplog.core.exceptions import StateError
from sleeplog.core.logging import get_logger
from sleeplog.repositories.store import EntryStore
from sleeplog.schemas.entry import SleepEntry

logger = get_logger(__name__)

EntriesListener = Callable[[tuple[SleepEntry, ...]], None]


class EntryRepository:
    """
    In-memory collection of sleep entries, newest-created first.

    Usage:
        repo = EntryRepository(EntryStore(FileStorage(data_dir)))
        repo.initialize()
        repo.upsert(entry)
        repo.remove(entry.id)

    Mutations before initialize() raise StateError: saving an empty
    collection over data that was never loaded would destroy it.
    """

    def __init__(self, store: EntryStore) -> None:
        self._store = store
        self._entries: tuple[SleepEntry, ...] = ()
        self._loaded = False
        self._listeners: list[EntriesListener] = []

    @property
    def loaded(self) -> bool:
        return self._loaded

    @property
    def entries(self) -> tuple[SleepEntry, ...]:
        """Snapshot of the collection in display order."""
        return self._entries

    def initialize(self) -> tuple[SleepEntry, ...]:
        """
        Load the persisted collection once.

        Later calls return the current snapshot without touching the store.

        Returns:
            The loaded collection
        """
        if self._loaded:
            return self._entries
        self._entries = tuple(self._store.load())
        self._loaded = True
        logger.info("Entries initialized", count=len(self._entries))
        self._notify()
        return self._entries

    def get(self, entry_id: str) -> SleepEntry | None:
        """Get an entry by id, or None."""
        for entry in self._entries:
            if entry.id == entry_id:
                return entry
        return None

    def upsert(self, entry: SleepEntry) -> SleepEntry:
        """
        Replace the entry with the same id in place, or prepend a new one.

        Args:
            entry: Entry to store

        Returns:
            The stored entry

        Raises:
            StateError: If called before initialize()
            StorageError: If the store write fails (collection unchanged)
        """
        self._require_loaded("upsert")
        index = self._index_of(entry.id)
        if index is None:
            updated = (entry, *self._entries)
            action = "Entry created"
        else:
            updated = self._entries[:index] + (entry,) + self._entries[index + 1:]
            action = "Entry updated"

        self._commit(updated)
        logger.info(action, entry_id=entry.id, count=len(updated))
        return entry

    def remove(self, entry_id: str) -> bool:
        """
        Remove the entry with the given id.

        A missing id is not an error; the store is still rewritten so it
        matches memory.

        Returns:
            True if an entry was removed

        Raises:
            StateError: If called before initialize()
            StorageError: If the store write fails (collection unchanged)
        """
        self._require_loaded("remove")
        updated = tuple(entry for entry in self._entries if entry.id != entry_id)
        removed = len(updated) != len(self._entries)

        self._commit(updated)
        if removed:
            logger.info("Entry removed", entry_id=entry_id, count=len(updated))
        else:
            logger.debug("Remove ignored, no such entry", entry_id=entry_id)
        return removed

    def subscribe(self, listener: EntriesListener) -> Callable[[], None]:
        """
        Register a listener called with each new snapshot.

        Returns:
            Function that unregisters the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _index_of(self, entry_id: str) -> int | None:
        for index, entry in enumerate(self._entries):
            if entry.id == entry_id:
                return index
        return None

    def _require_loaded(self, operation: str) -> None:
        if not self._loaded:
            raise StateError(f"Cannot {operation} before entries are initialized")

    def _commit(self, updated: tuple[SleepEntry, ...]) -> None:
        self._store.save(updated)
        self._entries = updated
        self._notify()

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self._entries)
