"""Wall-clock helpers shared by the availability engine and the conflict checker.

All ranges are half-open: a class running 09:00-10:00 occupies 09:00 but not
10:00, so back-to-back bookings never collide.
"""

from __future__ import annotations

import re
from datetime import date, datetime

from campus.core.errors import TimeParseError, ValidationError


# date.weekday() index -> name. Timetable entries only use Monday..Saturday.
DAYS: tuple[str, ...] = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")
TIMETABLE_DAYS: tuple[str, ...] = DAYS[:6]

MINUTES_PER_DAY = 24 * 60

_TIME_RE = re.compile(r"^([01]?[0-9]|2[0-3]):([0-5][0-9])$")
_DAY_LOOKUP: dict[str, str] = {**{d.lower(): d for d in DAYS}, **{d[:3].lower(): d for d in DAYS}}


def time_to_minutes(value: str) -> int:
    """Parse a 24-hour "HH:MM" string into minutes since midnight."""
    if not isinstance(value, str):
        raise TimeParseError(f"Expected an HH:MM string, got {value!r}")
    match = _TIME_RE.match(value.strip())
    if match is None:
        raise TimeParseError(f"Malformed time {value!r}; expected HH:MM (24-hour)")
    return int(match.group(1)) * 60 + int(match.group(2))


def minutes_to_time(minutes: int) -> str:
    if not 0 <= int(minutes) < MINUTES_PER_DAY:
        raise TimeParseError(f"Minute offset {minutes!r} is outside a single day")
    hours, mins = divmod(int(minutes), 60)
    return f"{hours:02d}:{mins:02d}"


def normalize_time(value: str) -> str:
    return minutes_to_time(time_to_minutes(value))


def format_time(value: str) -> str:
    """12-hour display form, e.g. "14:00" -> "2:00 PM"."""
    hours, mins = divmod(time_to_minutes(value), 60)
    suffix = "PM" if hours >= 12 else "AM"
    return f"{hours % 12 or 12}:{mins:02d} {suffix}"


def _as_minutes(value: int | str) -> int:
    if isinstance(value, str):
        return time_to_minutes(value)
    return int(value)


def is_within(instant: int | str, start: int | str, end: int | str) -> bool:
    return _as_minutes(start) <= _as_minutes(instant) < _as_minutes(end)


def intervals_overlap(start1: int | str, end1: int | str, start2: int | str, end2: int | str) -> bool:
    return _as_minutes(start1) < _as_minutes(end2) and _as_minutes(end1) > _as_minutes(start2)


def validate_range(start: str, end: str) -> tuple[str, str]:
    """Normalize both bounds and require start < end."""
    start_n, end_n = normalize_time(start), normalize_time(end)
    if time_to_minutes(start_n) >= time_to_minutes(end_n):
        raise ValidationError(
            f"End time {end_n} must be after start time {start_n}",
            code="INVALID_TIME_RANGE",
        )
    return start_n, end_n


def weekday_name(day: date) -> str:
    return DAYS[day.weekday()]


def parse_day(value: str) -> str:
    """Canonical day name from "monday", "Mon", "MONDAY", ..."""
    key = str(value or "").strip().lower()
    try:
        return _DAY_LOOKUP[key]
    except KeyError:
        raise ValidationError(f"Unknown day {value!r}", code="INVALID_DAY") from None


def clock_instant(at: datetime | None = None) -> tuple[str, int]:
    """(day name, minutes since midnight) for a naive local wall-clock time."""
    at = at or datetime.now()
    return weekday_name(at.date()), at.hour * 60 + at.minute
