# backend/tutorslot/services/time_slots.py
"""
Slot grid and time arithmetic for reservations.

Everything here is pure: no database, no clock. Times are same-day
wall-clock values, given either as ``"HH:mm"`` strings or ``datetime.time``,
and are compared as minutes since midnight on a common base.

Grid policy: slots run back to back from opening time, each exactly
``duration`` minutes. A trailing slot that would end after closing time is
dropped, never truncated.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, time
import re
from typing import List, Optional, Union

from ..core.config import settings
from ..core.constants import MINUTES_PER_HOUR, TIME_FORMAT, WEEKEND_DAYS
from ..core.exceptions import ValidationException

TimeLike = Union[str, time]

HHMM_REGEX = re.compile(r"^([01]\d|2[0-4]):([0-5]\d)$")
MINUTES_PER_DAY = 24 * MINUTES_PER_HOUR

LESSON_DURATION_MINUTES = 60


@dataclass(frozen=True)
class TimeSlot:
    """A bookable interval on the grid; generated, never persisted."""

    start_time: str
    end_time: str
    label: str

    @property
    def start_minutes(self) -> int:
        return minutes_from_time_string(self.start_time)

    @property
    def end_minutes(self) -> int:
        return minutes_from_time_string(self.end_time)


@dataclass(frozen=True)
class BusinessHours:
    open: str
    close: str


def configured_business_hours() -> BusinessHours:
    """Business hours from settings (defaults to 09:00-18:00)."""
    return BusinessHours(open=settings.business_open, close=settings.business_close)


def configured_lesson_duration() -> int:
    return settings.lesson_duration_minutes


def minutes_from_time_string(value: TimeLike) -> int:
    """
    Convert ``"HH:mm"`` (or a ``time``) to minutes since midnight.

    ``"24:00"`` is accepted as end of day.

    Raises:
        ValidationException: If the value is not a valid HH:mm time
    """
    if isinstance(value, time):
        return value.hour * MINUTES_PER_HOUR + value.minute
    match = HHMM_REGEX.fullmatch(value.strip()) if isinstance(value, str) else None
    if not match:
        raise ValidationException(
            f"Invalid time format: {value!r}. Expected HH:mm format.",
            code="INVALID_TIME_FORMAT",
            details={"value": str(value)},
        )
    minutes = int(match.group(1)) * MINUTES_PER_HOUR + int(match.group(2))
    if minutes > MINUTES_PER_DAY:
        raise ValidationException(
            f"Time out of range: {value!r}",
            code="INVALID_TIME_FORMAT",
            details={"value": value},
        )
    return minutes


def time_string_from_minutes(minutes: int) -> str:
    """Inverse of :func:`minutes_from_time_string` (zero-padded ``HH:mm``)."""
    hours, mins = divmod(minutes, MINUTES_PER_HOUR)
    return f"{hours:02d}:{mins:02d}"


def parse_hhmm(value: TimeLike) -> time:
    """Parse ``"HH:mm"`` into a ``time``; ``"24:00"`` is not representable."""
    if isinstance(value, time):
        return value.replace(second=0, microsecond=0)
    minutes = minutes_from_time_string(value)
    if minutes == MINUTES_PER_DAY:
        raise ValidationException(
            "24:00 cannot be stored as a time of day",
            code="INVALID_TIME_FORMAT",
            details={"value": value},
        )
    return time(minutes // MINUTES_PER_HOUR, minutes % MINUTES_PER_HOUR)


def format_hhmm(value: time) -> str:
    return value.strftime(TIME_FORMAT)


def calculate_duration_minutes(start_time: TimeLike, end_time: TimeLike) -> int:
    return minutes_from_time_string(end_time) - minutes_from_time_string(start_time)


def generate_time_slots(
    business_hours: Optional[BusinessHours] = None,
    duration: Optional[int] = None,
) -> List[TimeSlot]:
    """
    Produce the ordered slot grid for one business day.

    Args:
        business_hours: Opening and closing times (defaults to settings)
        duration: Slot length in minutes (defaults to settings)

    Returns:
        Back-to-back slots covering [open, close); a final slot that would
        end after ``close`` is omitted. A fresh list on every call.

    Raises:
        ValidationException: If duration is not positive or close <= open
    """
    hours = business_hours or configured_business_hours()
    slot_minutes = duration if duration is not None else configured_lesson_duration()
    if slot_minutes <= 0:
        raise ValidationException(
            f"Slot duration must be positive, got {slot_minutes}",
            code="INVALID_DURATION",
            details={"duration": slot_minutes},
        )

    open_minutes = minutes_from_time_string(hours.open)
    close_minutes = minutes_from_time_string(hours.close)
    if close_minutes <= open_minutes:
        raise ValidationException(
            f"Closing time {hours.close} must be after opening time {hours.open}",
            code="INVALID_BUSINESS_HOURS",
            details={"open": hours.open, "close": hours.close},
        )

    slots: List[TimeSlot] = []
    current = open_minutes
    while current + slot_minutes <= close_minutes:
        start = time_string_from_minutes(current)
        end = time_string_from_minutes(current + slot_minutes)
        slots.append(TimeSlot(start_time=start, end_time=end, label=f"{start} - {end}"))
        current += slot_minutes
    return slots


def is_time_overlapping(
    a_start: TimeLike, a_end: TimeLike, b_start: TimeLike, b_end: TimeLike
) -> bool:
    """
    Whether two same-day intervals conflict.

    Half-open semantics: ``a_end > b_start and a_start < b_end``. Intervals
    that only touch (``a_end == b_start``) do not overlap, which allows
    back-to-back bookings.
    """
    return minutes_from_time_string(a_end) > minutes_from_time_string(
        b_start
    ) and minutes_from_time_string(a_start) < minutes_from_time_string(b_end)


def is_within_business_hours(
    start_time: TimeLike,
    end_time: TimeLike,
    business_hours: Optional[BusinessHours] = None,
) -> bool:
    """Inclusive on both ends: a slot may start at opening and end at closing."""
    hours = business_hours or configured_business_hours()
    return minutes_from_time_string(start_time) >= minutes_from_time_string(
        hours.open
    ) and minutes_from_time_string(end_time) <= minutes_from_time_string(hours.close)


def is_aligned_to_grid(
    start_time: TimeLike,
    end_time: TimeLike,
    business_hours: Optional[BusinessHours] = None,
    duration: Optional[int] = None,
) -> bool:
    """
    Whether [start, end) is a run of whole grid slots inside business hours.
    """
    hours = business_hours or configured_business_hours()
    slot_minutes = duration if duration is not None else configured_lesson_duration()
    start = minutes_from_time_string(start_time)
    end = minutes_from_time_string(end_time)
    if end <= start or not is_within_business_hours(start_time, end_time, hours):
        return False
    open_minutes = minutes_from_time_string(hours.open)
    return (start - open_minutes) % slot_minutes == 0 and (end - open_minutes) % slot_minutes == 0


def covered_slot_starts(
    start_time: TimeLike,
    end_time: TimeLike,
    duration: Optional[int] = None,
) -> List[time]:
    """Start times of every grid slot inside an aligned [start, end) interval."""
    slot_minutes = duration if duration is not None else configured_lesson_duration()
    start = minutes_from_time_string(start_time)
    end = minutes_from_time_string(end_time)
    return [
        time(minute // MINUTES_PER_HOUR, minute % MINUTES_PER_HOUR)
        for minute in range(start, end, slot_minutes)
    ]


def is_past_date(day: date, today: date) -> bool:
    return day < today


def is_reservable_date(day: date, today: date) -> bool:
    """Weekdays from today onward."""
    if is_past_date(day, today):
        return False
    return day.weekday() not in WEEKEND_DAYS
