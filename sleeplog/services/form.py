"""
Entry Form.

UI-independent state of the entry form. Two modes:

    CREATE  no entry bound; fields hold the defaults
    EDIT    bound to an existing entry; fields start from its values

submit() validates the fields and emits a candidate SleepEntry, reusing the
bound id/date in EDIT mode and minting new ones in CREATE mode. On a
validation failure nothing is emitted and the message is kept in `error`.
"""

import math
from collections.abc import Callable
from datetime import datetime
from enum import Enum

from pydantic import ValidationError as PydanticValidationError

from sleeplog.core.exceptions import ValidationError
from sleeplog.core.logging import get_logger
from sleeplog.core.utils import new_id, utc_now
from sleeplog.schemas.entry import (
    MAX_HOURS,
    MIN_HOURS,
    SleepEntry,
    SleepEntryInput,
    SleepQuality,
)
from sleeplog.services.projections import format_hours

logger = get_logger(__name__)

HOURS_RANGE_MESSAGE = f"Hours must be between {format_hours(MIN_HOURS)} and {format_hours(MAX_HOURS)}."
HOURS_NUMBER_MESSAGE = "Hours must be a number."


class FormMode(str, Enum):
    CREATE = "create"
    EDIT = "edit"


class EntryForm:
    """
    Form state for creating or editing one entry.

    Args:
        id_factory: Returns a fresh unique id for new entries
        clock: Returns the creation timestamp for new entries
        default_quality: Quality shown in CREATE mode
        default_hours: Hours shown in CREATE mode
    """

    def __init__(
        self,
        id_factory: Callable[[], str] = new_id,
        clock: Callable[[], datetime] = utc_now,
        default_quality: SleepQuality = SleepQuality.GREAT,
        default_hours: float = 8.0,
    ) -> None:
        self._id_factory = id_factory
        self._clock = clock
        self._default_quality = SleepQuality(default_quality)
        self._default_hours = default_hours
        self._bound: SleepEntry | None = None
        self._quality = self._default_quality
        self._hours: float | str = default_hours
        self._note = ""
        self.error: str | None = None

    # ------------------------------------------------------------------ #
    # Mode                                                                #
    # ------------------------------------------------------------------ #

    @property
    def mode(self) -> FormMode:
        return FormMode.CREATE if self._bound is None else FormMode.EDIT

    @property
    def bound_entry(self) -> SleepEntry | None:
        return self._bound

    @property
    def title(self) -> str:
        return "New Sleep Entry" if self._bound is None else "Edit Sleep Entry"

    @property
    def submit_label(self) -> str:
        return "Save" if self._bound is None else "Update"

    @property
    def can_cancel(self) -> bool:
        return self._bound is not None

    def bind(self, entry: SleepEntry | None) -> None:
        """Enter EDIT mode for `entry`, or CREATE mode when it is None."""
        if entry is None:
            self.reset()
            return
        self._bound = entry
        self._quality = entry.quality
        self._hours = entry.hours
        self._note = entry.note or ""
        self.error = None

    def reset(self) -> None:
        """Return to CREATE mode with default field values."""
        self._bound = None
        self._quality = self._default_quality
        self._hours = self._default_hours
        self._note = ""
        self.error = None

    # ------------------------------------------------------------------ #
    # Fields                                                              #
    # ------------------------------------------------------------------ #

    @property
    def quality(self) -> SleepQuality:
        return self._quality

    @quality.setter
    def quality(self, value: SleepQuality | str) -> None:
        self._quality = SleepQuality(value)

    @property
    def hours(self) -> float | str:
        """Hours as last entered: a number, or the raw text of the input."""
        return self._hours

    @hours.setter
    def hours(self, value: float | str) -> None:
        self._hours = value

    @property
    def hours_text(self) -> str:
        if isinstance(self._hours, str):
            return self._hours
        return format_hours(self._hours)

    @property
    def note(self) -> str:
        return self._note

    @note.setter
    def note(self, value: str | None) -> None:
        self._note = value or ""

    # ------------------------------------------------------------------ #
    # Submission                                                          #
    # ------------------------------------------------------------------ #

    def validate(self) -> SleepEntryInput:
        """
        Validate the current fields.

        Returns:
            Validated fields with the note normalized

        Raises:
            ValidationError: If hours is not a number or outside [0, 24]
        """
        hours = _parse_hours(self._hours)
        try:
            return SleepEntryInput(quality=self._quality, hours=hours, note=self._note)
        except PydanticValidationError as e:
            raise ValidationError(
                HOURS_RANGE_MESSAGE,
                details={"hours": hours, "errors": e.error_count()},
            ) from e

    def submit(self) -> SleepEntry | None:
        """
        Validate and emit a candidate entry.

        Returns:
            The candidate entry, or None when validation failed (see `error`)
        """
        try:
            data = self.validate()
        except ValidationError as e:
            self.error = e.message
            logger.debug("Form submission rejected", mode=self.mode.value, details=e.details)
            return None

        self.error = None
        if self._bound is not None:
            return SleepEntry.from_input(data, id=self._bound.id, date=self._bound.date)
        return SleepEntry.from_input(data, id=self._id_factory(), date=self._clock())


def _parse_hours(value: float | str) -> float:
    if isinstance(value, str):
        try:
            hours = float(value.strip())
        except ValueError:
            raise ValidationError(HOURS_NUMBER_MESSAGE, details={"hours": value}) from None
    else:
        hours = float(value)
    if math.isnan(hours):
        raise ValidationError(HOURS_NUMBER_MESSAGE, details={"hours": str(value)})
    if not MIN_HOURS <= hours <= MAX_HOURS:
        raise ValidationError(HOURS_RANGE_MESSAGE, details={"hours": hours})
    return hours
