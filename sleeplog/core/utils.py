"""
Core Utilities.

Shared utility functions used across the package.
All modules should import utilities from this module.
"""

import uuid
from datetime import datetime, timezone


def utc_now() -> datetime:
    """
    Return current UTC time as a timezone-aware datetime.

    Entry timestamps are serialized as ISO-8601 with an explicit UTC
    offset, so the tzinfo is kept.

    Returns:
        Current UTC time
    """
    return datetime.now(timezone.utc)


def new_id() -> str:
    """Return a fresh opaque identifier."""
    return str(uuid.uuid4())
