from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Response

from campus.api.deps import get_service
from campus.schemas.timetable import TimetableEntryCreate, TimetableEntryOut, TimetableEntryUpdate
from campus.services.campus_service import CampusService


router = APIRouter()


@router.get("/", response_model=list[TimetableEntryOut])
def get_timetable(
    department: str = Query(min_length=1),
    semester: int = Query(ge=1),
    section: str = Query(min_length=1),
    day: str | None = Query(default=None),
    service: CampusService = Depends(get_service),
) -> list[TimetableEntryOut]:
    """Weekly timetable for one class, ordered by day then start time."""
    return service.timetable_for(department.strip(), semester, section.strip(), day=day)


@router.post("/", response_model=TimetableEntryOut, status_code=201)
def create_entry(payload: TimetableEntryCreate, service: CampusService = Depends(get_service)) -> TimetableEntryOut:
    return service.add_timetable_entry(payload)


@router.patch("/{entry_id}", response_model=TimetableEntryOut)
def update_entry(
    entry_id: int,
    payload: TimetableEntryUpdate,
    service: CampusService = Depends(get_service),
) -> TimetableEntryOut:
    return service.update_timetable_entry(entry_id, payload)


@router.delete("/{entry_id}", status_code=204)
def delete_entry(entry_id: int, service: CampusService = Depends(get_service)) -> Response:
    service.delete_timetable_entry(entry_id)
    return Response(status_code=204)
