"""
Entry Projections.

Pure functions turning the entry collection into what the history list and
the trend chart display. Inputs are never mutated.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime

from sleeplog.schemas.entry import SleepEntry


@dataclass(frozen=True)
class HistoryItem:
    entry_id: str
    quality_label: str
    date_label: str
    hours: float
    hours_label: str
    note: str | None


@dataclass(frozen=True)
class TrendPoint:
    date: datetime
    hours: float
    label: str


def format_hours(hours: float) -> str:
    """8.0 -> '8', 7.5 -> '7.5'."""
    if float(hours).is_integer():
        return str(int(hours))
    return f"{hours:g}"


def format_date(value: datetime) -> str:
    """Calendar date of a timestamp in local time."""
    return value.astimezone().strftime("%Y-%m-%d")


def history_items(entries: Iterable[SleepEntry]) -> list[HistoryItem]:
    """Project entries to history rows, keeping collection order (newest first)."""
    return [
        HistoryItem(
            entry_id=entry.id,
            quality_label=entry.quality.label,
            date_label=format_date(entry.date),
            hours=entry.hours,
            hours_label=f"Slept {format_hours(entry.hours)} hrs",
            note=entry.note,
        )
        for entry in entries
    ]


def trend_points(entries: Iterable[SleepEntry]) -> list[TrendPoint]:
    """
    Project entries to chart points ordered by date, oldest first.

    The sort is stable, so entries sharing a timestamp keep their collection
    order.
    """
    ordered = sorted(entries, key=lambda entry: entry.date)
    return [
        TrendPoint(
            date=entry.date,
            hours=entry.hours,
            label=entry.date.astimezone().strftime("%m-%d"),
        )
        for entry in ordered
    ]
