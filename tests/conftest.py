"""
Root Pytest Fixtures.

Shared fixtures available to all test types: deterministic clocks and id
factories, in-memory storage, and a ready-to-use repository/controller.
"""

from collections.abc import Callable, Iterator
from datetime import datetime, timedelta, timezone

import pytest

from sleeplog.repositories.entry import EntryRepository
from sleeplog.repositories.storage import MemoryStorage
from sleeplog.repositories.store import EntryStore
from sleeplog.schemas.entry import SleepEntry, SleepQuality
from sleeplog.services.form import EntryForm
from sleeplog.services.tracker import TrackerController

BASE_TIME = datetime(2024, 3, 1, 7, 30, tzinfo=timezone.utc)


# =============================================================================
# Deterministic Identity
# =============================================================================


@pytest.fixture
def id_factory() -> Callable[[], str]:
    """Ids 'entry-1', 'entry-2', ... in call order."""
    counter = iter(range(1, 10_000))
    return lambda: f"entry-{next(counter)}"


@pytest.fixture
def clock() -> Callable[[], datetime]:
    """Timestamps one day apart starting at BASE_TIME, in call order."""
    days = iter(range(10_000))
    return lambda: BASE_TIME + timedelta(days=next(days))


def make_entry(
    entry_id: str = "entry-1",
    days: int = 0,
    quality: SleepQuality = SleepQuality.GREAT,
    hours: float = 8.0,
    note: str | None = None,
) -> SleepEntry:
    """Build an entry `days` after BASE_TIME."""
    return SleepEntry(
        id=entry_id,
        date=BASE_TIME + timedelta(days=days),
        quality=quality,
        hours=hours,
        note=note,
    )


@pytest.fixture
def entry_factory() -> Callable[..., SleepEntry]:
    return make_entry


# =============================================================================
# Storage and Wiring
# =============================================================================


@pytest.fixture
def memory_storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def store(memory_storage: MemoryStorage) -> EntryStore:
    return EntryStore(memory_storage)


@pytest.fixture
def repository(store: EntryStore) -> Iterator[EntryRepository]:
    """Initialized repository over empty in-memory storage."""
    repo = EntryRepository(store)
    repo.initialize()
    yield repo


@pytest.fixture
def form(id_factory: Callable[[], str], clock: Callable[[], datetime]) -> EntryForm:
    return EntryForm(id_factory=id_factory, clock=clock)


@pytest.fixture
def controller(store: EntryStore, form: EntryForm) -> TrackerController:
    """Mounted controller over empty in-memory storage."""
    tracker = TrackerController(EntryRepository(store), form)
    tracker.mount()
    return tracker
