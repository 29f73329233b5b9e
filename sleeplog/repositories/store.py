"""
Entry Store.

Persistence adapter for the entry collection. The whole collection lives in
a single storage slot as a JSON array and every save replaces it.

Malformed content never stops the application:
    - unreadable slot                 -> logged, treated as no prior data
    - not UTF-8, invalid JSON, nested
      too deeply or not an array      -> copied to '<key>.corrupt',
                                         treated as no prior data
    - invalid or duplicate-id record  -> skipped, the rest is kept
"""

import json
from collections.abc import Iterable

from pydantic import ValidationError as PydanticValidationError

from sleeplog.core.exceptions import StorageError
from sleeplog.core.logging import get_logger
from sleeplog.repositories.storage import KeyValueStorage
from sleeplog.schemas.entry import SleepEntry

logger = get_logger(__name__)

DEFAULT_ENTRIES_KEY = "sleep_entries"


class EntryStore:
    """Reads and writes the full entry collection to one storage slot."""

    def __init__(self, storage: KeyValueStorage, key: str = DEFAULT_ENTRIES_KEY) -> None:
        self._storage = storage
        self._key = key

    @property
    def key(self) -> str:
        return self._key

    @property
    def backup_key(self) -> str:
        """Slot receiving unparseable content before it is overwritten."""
        return f"{self._key}.corrupt"

    def load(self) -> list[SleepEntry]:
        """
        Load the persisted collection.

        Returns:
            Entries in stored order; empty when nothing usable is stored
        """
        try:
            raw = self._storage.get_item(self._key)
        except OSError as e:
            logger.warning("Entry slot unreadable, starting empty", key=self._key, error=str(e))
            return []
        except UnicodeDecodeError as e:
            # Keep what can be decoded; undecodable bytes become U+FFFD.
            self._quarantine(
                e.object.decode("utf-8", errors="replace"),
                reason=f"not UTF-8 at byte {e.start}",
            )
            return []

        if raw is None or not raw.strip():
            return []

        try:
            records = json.loads(raw)
        except json.JSONDecodeError as e:
            self._quarantine(raw, reason=f"invalid JSON: {e.msg}")
            return []
        except RecursionError:
            self._quarantine(raw, reason="nested too deeply")
            return []

        if not isinstance(records, list):
            self._quarantine(raw, reason=f"expected array, got {type(records).__name__}")
            return []

        entries = list(self._parse_records(records))
        logger.debug("Entries loaded", key=self._key, count=len(entries))
        return entries

    def save(self, entries: Iterable[SleepEntry]) -> None:
        """
        Replace the persisted collection.

        Raises:
            StorageError: If the slot cannot be written
        """
        payload = json.dumps([entry.to_record() for entry in entries], ensure_ascii=False)
        try:
            self._storage.set_item(self._key, payload)
        except OSError as e:
            logger.error("Entry slot write failed", key=self._key, error=str(e))
            raise StorageError(f"Could not write entries: {e}") from e

    def _parse_records(self, records: list) -> Iterable[SleepEntry]:
        seen: set[str] = set()
        for index, record in enumerate(records):
            try:
                entry = SleepEntry.model_validate(record)
            except PydanticValidationError as e:
                logger.warning(
                    "Skipping invalid stored entry",
                    key=self._key,
                    index=index,
                    errors=e.error_count(),
                )
                continue
            if entry.id in seen:
                logger.warning("Skipping duplicate stored entry", key=self._key, entry_id=entry.id)
                continue
            seen.add(entry.id)
            yield entry

    def _quarantine(self, raw: str, reason: str) -> None:
        logger.warning(
            "Stored entries malformed, starting empty",
            key=self._key,
            backup_key=self.backup_key,
            reason=reason,
        )
        try:
            self._storage.set_item(self.backup_key, raw)
        except OSError as e:
            logger.error("Could not back up malformed entries", key=self.backup_key, error=str(e))
