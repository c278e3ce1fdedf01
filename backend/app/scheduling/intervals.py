"""Interval model: half-open ranges and the single overlap predicate.

Two intervals ``[a1, a2)`` and ``[b1, b2)`` overlap iff ``a1 < b2 and b1 < a2``.
Touching endpoints (``a2 == b1``) are not an overlap, so back-to-back stays
and activities are legal.
"""

import re
from dataclasses import dataclass
from datetime import date
from typing import Protocol, TypeVar

from backend.app.scheduling.errors import ValidationError

_HHMM = re.compile(r"^([01]?[0-9]|2[0-3]):([0-5][0-9])$")
# Stored placements may run past midnight after an unbounded move
_HHMM_LENIENT = re.compile(r"^([0-9]{1,2}):([0-5][0-9])$")


class _Comparable(Protocol):
    def __lt__(self, other: "_Comparable", /) -> bool: ...


T = TypeVar("T", bound=_Comparable)


def overlaps(a_start: T, a_end: T, b_start: T, b_end: T) -> bool:
    """Return True if half-open intervals [a_start, a_end) and [b_start, b_end) overlap."""
    return a_start < b_end and b_start < a_end


@dataclass(frozen=True)
class DateRange:
    """Half-open date range [start, end)."""

    start: date
    end: date

    def overlaps(self, other: "DateRange") -> bool:
        return overlaps(self.start, self.end, other.start, other.end)

    def within(self, outer_start: date, outer_end: date) -> bool:
        """Closed containment in [outer_start, outer_end]."""
        return outer_start <= self.start and self.end <= outer_end


@dataclass(frozen=True)
class TimeSlot:
    """Minute-of-day interval [start, end)."""

    start: int
    end: int

    @property
    def duration(self) -> int:
        return self.end - self.start

    def overlaps(self, other: "TimeSlot") -> bool:
        return overlaps(self.start, self.end, other.start, other.end)


def parse_hhmm(value: str, *, strict: bool = True) -> int:
    """Parse an ``H:MM``/``HH:MM`` wall-clock value into minutes after midnight.

    Args:
        value: Time string
        strict: Require hours 0-23. Non-strict parsing accepts stored
            placements such as "25:00" produced by an unbounded move.

    Raises:
        ValidationError: If the value is not a valid time.
    """
    pattern = _HHMM if strict else _HHMM_LENIENT
    match = pattern.match(value.strip()) if isinstance(value, str) else None
    if match is None:
        raise ValidationError(f"Invalid time {value!r} (expected HH:MM)", code="INVALID_TIME")
    return int(match.group(1)) * 60 + int(match.group(2))


def format_hhmm(minutes: int) -> str:
    """Format minutes after midnight as ``HH:MM``.

    Values past 23:59 are rendered as-is (e.g. 1500 -> "25:00"); first-fit
    placement has no end-of-day bound.
    """
    hours, mins = divmod(minutes, 60)
    return f"{hours:02d}:{mins:02d}"


def time_slot(start_time: str, end_time: str) -> TimeSlot:
    """Build a TimeSlot from two HH:MM values, requiring start < end."""
    start = parse_hhmm(start_time)
    end = parse_hhmm(end_time)
    if start >= end:
        raise ValidationError(
            f"End time {end_time} must be after start time {start_time}",
            code="INVALID_TIME_RANGE",
        )
    return TimeSlot(start=start, end=end)
