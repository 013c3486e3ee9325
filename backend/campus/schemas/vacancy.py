from __future__ import annotations

from pydantic import BaseModel

from campus.schemas.timetable import TimetableEntryOut


class VacancyCountsOut(BaseModel):
    day: str
    time: str
    vacant: int
    occupied: int
    total: int


class RoomStatusOut(BaseModel):
    room_number: str
    block: str
    floor: int
    room_type: str
    capacity: int
    has_projector: bool
    has_ac: bool
    occupied: bool
    current: TimetableEntryOut | None = None
    next: TimetableEntryOut | None = None
