"""
Pydantic schemas.
"""

from sleeplog.schemas.entry import SleepEntry, SleepEntryInput, SleepQuality

__all__ = [
    "SleepEntry",
    "SleepEntryInput",
    "SleepQuality",
]
