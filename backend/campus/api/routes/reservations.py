from __future__ import annotations

import datetime as dt

from fastapi import APIRouter, Depends, Query

from campus.api.deps import get_service
from campus.schemas.reservation import ConflictCheckOut, ReservationCreate, ReservationOut
from campus.schemas.room import RoomOut
from campus.services.campus_service import CampusService
from campus.services.reservations import describe_conflict
from campus.services.timeutils import validate_range


router = APIRouter()


@router.get("/", response_model=list[ReservationOut])
def list_reservations(service: CampusService = Depends(get_service)) -> list[ReservationOut]:
    """Admins see every reservation; teachers see their own."""
    return service.list_reservations()


@router.post("/", response_model=ReservationOut, status_code=201)
def create_reservation(payload: ReservationCreate, service: CampusService = Depends(get_service)) -> ReservationOut:
    return service.create_reservation(
        payload.room_number.strip(),
        payload.date,
        payload.start_time,
        payload.end_time,
        payload.purpose,
    )


@router.get("/availability", response_model=list[RoomOut])
def available_rooms(
    date: dt.date = Query(),
    start_time: str = Query(),
    end_time: str = Query(),
    block: str | None = Query(default=None),
    service: CampusService = Depends(get_service),
) -> list[RoomOut]:
    return service.available_rooms(date, start_time, end_time, block=block)


@router.get("/conflict", response_model=ConflictCheckOut)
def check_conflict(
    room_number: str = Query(min_length=1),
    date: dt.date = Query(),
    start_time: str = Query(),
    end_time: str = Query(),
    service: CampusService = Depends(get_service),
) -> ConflictCheckOut:
    conflicts = service.check_conflict(room_number.strip(), date, start_time, end_time)
    start, end = validate_range(start_time, end_time)
    return ConflictCheckOut(
        room_number=room_number.strip(),
        date=date,
        start_time=start,
        end_time=end,
        conflict=bool(conflicts),
        conflicts=[describe_conflict(c) for c in conflicts],
    )


@router.post("/{reservation_id}/cancel", response_model=ReservationOut)
def cancel_reservation(reservation_id: int, service: CampusService = Depends(get_service)) -> ReservationOut:
    return service.cancel_reservation(reservation_id)
