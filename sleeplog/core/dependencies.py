"""
Dependency Wiring.

Builds the storage, repository, form and controller from configuration.
Front ends (TUI, CLI) call get_tracker_controller() instead of constructing
the pieces themselves; tests construct them directly.
"""

from pathlib import Path

from sleeplog.core.config import get_app_config, get_data_dir
from sleeplog.core.logging import get_logger
from sleeplog.repositories.entry import EntryRepository
from sleeplog.repositories.storage import FileStorage
from sleeplog.repositories.store import EntryStore
from sleeplog.schemas.entry import SleepQuality
from sleeplog.services.form import EntryForm
from sleeplog.services.tracker import TrackerController

logger = get_logger(__name__)


def get_entry_store(data_dir: Path | None = None) -> EntryStore:
    """Entry store on the configured data directory (or `data_dir`)."""
    storage = FileStorage(data_dir or get_data_dir())
    return EntryStore(storage, key=get_app_config().storage.entries_key)


def get_entry_form() -> EntryForm:
    """Entry form with defaults from tracker.yaml."""
    tracker = get_app_config().tracker
    return EntryForm(
        default_quality=SleepQuality(tracker.default_quality),
        default_hours=tracker.default_hours,
    )


def get_tracker_controller(data_dir: Path | None = None) -> TrackerController:
    """Controller over a fresh repository. Call mount() before use."""
    store = get_entry_store(data_dir)
    logger.debug("Tracker wired", key=store.key, data_dir=str(data_dir or get_data_dir()))
    return TrackerController(EntryRepository(store), get_entry_form())
