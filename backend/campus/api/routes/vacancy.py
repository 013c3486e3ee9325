from __future__ import annotations

import datetime as dt

from fastapi import APIRouter, Depends, Query

from campus.api.deps import get_service
from campus.schemas.timetable import TimetableEntryOut
from campus.schemas.vacancy import RoomStatusOut, VacancyCountsOut
from campus.services.availability import RoomStatus
from campus.services.campus_service import CampusService
from campus.services.timeutils import minutes_to_time


router = APIRouter()


def _entry_out(entry) -> TimetableEntryOut | None:
    return TimetableEntryOut.model_validate(entry) if entry is not None else None


def _status_out(status: RoomStatus) -> RoomStatusOut:
    room = status.room
    return RoomStatusOut(
        room_number=room.room_number,
        block=room.block,
        floor=room.floor,
        room_type=room.room_type,
        capacity=room.capacity,
        has_projector=room.has_projector,
        has_ac=room.has_ac,
        occupied=status.occupied,
        current=_entry_out(status.current),
        next=_entry_out(status.next),
    )


@router.get("/counts", response_model=VacancyCountsOut)
def vacancy_counts(
    at: dt.datetime | None = Query(default=None),
    service: CampusService = Depends(get_service),
) -> VacancyCountsOut:
    day, instant, counts = service.vacancy_counts(at)
    return VacancyCountsOut(
        day=day,
        time=minutes_to_time(instant),
        vacant=counts.vacant,
        occupied=counts.occupied,
        total=counts.total,
    )


@router.get("/rooms", response_model=list[RoomStatusOut])
def room_vacancy(
    at: dt.datetime | None = Query(default=None),
    block: str | None = Query(default=None),
    service: CampusService = Depends(get_service),
) -> list[RoomStatusOut]:
    _day, _instant, statuses = service.room_vacancy(at, block=block)
    return [_status_out(s) for s in statuses]
