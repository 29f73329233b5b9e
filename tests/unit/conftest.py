"""
Unit Test Fixtures.

Fixtures for unit tests. Nothing here touches the real data directory or
the log file.
"""

from collections.abc import Iterator

import pytest

from sleeplog.repositories.storage import MemoryStorage


class FlakyStorage(MemoryStorage):
    """MemoryStorage whose reads and writes can be made to fail."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        super().__init__(initial)
        self.fail_reads = False
        self.fail_writes = False
        self.writes = 0

    def get_item(self, key: str) -> str | None:
        if self.fail_reads:
            raise OSError("disk unreadable")
        return super().get_item(key)

    def set_item(self, key: str, value: str) -> None:
        if self.fail_writes:
            raise OSError("disk full")
        self.writes += 1
        super().set_item(key, value)


@pytest.fixture
def flaky_storage() -> FlakyStorage:
    return FlakyStorage()


@pytest.fixture
def clear_config_caches() -> Iterator[None]:
    """Clear cached settings before and after a test that patches config."""
    from sleeplog.core import logging as logging_module
    from sleeplog.core.config import get_app_config, get_settings

    get_settings.cache_clear()
    get_app_config.cache_clear()
    logging_module._logging_config = None
    yield
    get_settings.cache_clear()
    get_app_config.cache_clear()
    logging_module._logging_config = None
