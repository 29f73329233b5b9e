"""
Sleep Entry Schemas.

Pydantic schemas for the sleep entry entity and for the user-editable
fields captured by the entry form.

Wire format (one record of the persisted array):
    {"id": str, "date": ISO-8601 str, "quality": "great"|"okay"|"poor",
     "hours": number, "note"?: str}
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

MIN_HOURS = 0.0
MAX_HOURS = 24.0

Hours = Annotated[float, Field(ge=MIN_HOURS, le=MAX_HOURS, allow_inf_nan=False)]


class SleepQuality(str, Enum):
    """How a night's sleep felt."""

    GREAT = "great"
    OKAY = "okay"
    POOR = "poor"

    @property
    def label(self) -> str:
        """Display label with its emoji, e.g. '😵 Poor'."""
        return QUALITY_LABELS[self]


QUALITY_LABELS: dict[SleepQuality, str] = {
    SleepQuality.GREAT: "😴 Great",
    SleepQuality.OKAY: "😐 Okay",
    SleepQuality.POOR: "😵 Poor",
}


def normalize_note(value: Any) -> str | None:
    """Trim a note; empty or whitespace-only text becomes None."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


class SleepEntryInput(BaseModel):
    """User-editable fields of an entry, validated before an entry is emitted."""

    quality: SleepQuality = Field(description="Sleep quality")
    hours: Hours = Field(description="Hours slept", examples=[7.5])
    note: str | None = Field(
        default=None,
        description="Dream notes",
        examples=["Woke up once around 3am."],
    )

    @field_validator("note", mode="before")
    @classmethod
    def normalize_note_text(cls, value: Any) -> str | None:
        return normalize_note(value)


class SleepEntry(BaseModel):
    """
    One recorded night's sleep.

    Frozen: an edit produces a new instance carrying the same id and date.
    """

    id: str = Field(min_length=1, description="Opaque unique identifier")
    date: datetime = Field(description="Creation timestamp, UTC")
    quality: SleepQuality = Field(description="Sleep quality")
    hours: Hours = Field(description="Hours slept")
    note: str | None = Field(default=None, description="Dream notes")

    model_config = ConfigDict(frozen=True)

    @field_validator("date")
    @classmethod
    def assume_utc(cls, value: datetime) -> datetime:
        """Naive timestamps are read as UTC so entries always compare."""
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    @field_validator("note", mode="before")
    @classmethod
    def normalize_note_text(cls, value: Any) -> str | None:
        return normalize_note(value)

    @classmethod
    def from_input(cls, data: SleepEntryInput, *, id: str, date: datetime) -> "SleepEntry":
        """Build an entry from validated form fields and its identity."""
        return cls(id=id, date=date, **data.model_dump())

    def to_record(self) -> dict[str, Any]:
        """Serialize to a JSON-ready record; an absent note is omitted."""
        return self.model_dump(mode="json", exclude_none=True)
