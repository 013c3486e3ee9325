from __future__ import annotations

from campus.core.errors import CampusError
from campus.services.timeutils import TIMETABLE_DAYS, normalize_time, parse_day


# Pydantic only wraps ValueError, so core errors are re-raised as one here.

def clean_text(v: str | None) -> str | None:
    if v is None:
        return None
    return str(v).strip()


def required_text(v: str) -> str:
    v = str(v or "").strip()
    if not v:
        raise ValueError("must not be blank")
    return v


def time_field(v: str | None) -> str | None:
    if v is None:
        return None
    try:
        return normalize_time(str(v))
    except CampusError as exc:
        raise ValueError(exc.message) from exc


def timetable_day_field(v: str | None) -> str | None:
    if v is None:
        return None
    try:
        day = parse_day(v)
    except CampusError as exc:
        raise ValueError(exc.message) from exc
    if day not in TIMETABLE_DAYS:
        raise ValueError(f"timetable days run Monday to Saturday, got {day}")
    return day
