"""
Key-Value Storage.

The persistent store primitive: named slots holding whole string values,
read and replaced as a unit. No partial access.

FileStorage keeps one file per slot (<data_dir>/<key>.json) and replaces it
atomically. MemoryStorage keeps slots in a dict and is used by tests.
"""

import os
import re
import tempfile
from pathlib import Path
from typing import Protocol, runtime_checkable

_KEY_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")


@runtime_checkable
class KeyValueStorage(Protocol):
    """Protocol for whole-value slot storage."""

    def get_item(self, key: str) -> str | None:
        ...

    def set_item(self, key: str, value: str) -> None:
        ...

    def remove_item(self, key: str) -> None:
        ...


def _check_key(key: str) -> str:
    if not _KEY_PATTERN.match(key):
        raise ValueError(f"Invalid storage key: {key!r}")
    return key


class MemoryStorage:
    """In-memory slots."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._items: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> str | None:
        return self._items.get(_check_key(key))

    def set_item(self, key: str, value: str) -> None:
        self._items[_check_key(key)] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(_check_key(key), None)


class FileStorage:
    """
    Slots stored as files in a directory.

    The directory is created on first write. Writes go to a temporary file
    in the same directory which is then renamed over the slot, so a reader
    never sees a half-written value.

    Raises:
        OSError: From the filesystem on read or write failure
        UnicodeDecodeError: If a slot file is not UTF-8
    """

    def __init__(self, data_dir: str | Path) -> None:
        self._data_dir = Path(data_dir)

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    def path_for(self, key: str) -> Path:
        """Return the file backing a slot."""
        return self._data_dir / f"{_check_key(key)}.json"

    def get_item(self, key: str) -> str | None:
        path = self.path_for(key)
        if not path.exists():
            return None
        return path.read_bytes().decode("utf-8")

    def set_item(self, key: str, value: str) -> None:
        path = self.path_for(key)
        self._data_dir.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{key}.", suffix=".tmp", dir=self._data_dir)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(value)
            os.replace(tmp_name, path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

    def remove_item(self, key: str) -> None:
        self.path_for(key).unlink(missing_ok=True)
