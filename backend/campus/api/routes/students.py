from __future__ import annotations

import datetime as dt

from fastapi import APIRouter, Depends, Query, Response

from campus.api.deps import get_service
from campus.schemas.student import (
    ImportResultOut,
    StudentCreate,
    StudentImportRequest,
    StudentLocationOut,
    StudentOut,
    StudentUpdate,
)
from campus.schemas.timetable import TimetableEntryOut
from campus.services.campus_service import CampusService
from campus.services.timeutils import minutes_to_time


router = APIRouter()


@router.get("/", response_model=list[StudentOut])
def list_students(
    search: str | None = Query(default=None),
    service: CampusService = Depends(get_service),
) -> list[StudentOut]:
    return service.list_students(search)


@router.post("/", response_model=StudentOut, status_code=201)
def create_student(payload: StudentCreate, service: CampusService = Depends(get_service)) -> StudentOut:
    return service.add_student(payload)


@router.post("/import", response_model=ImportResultOut)
def import_students(payload: StudentImportRequest, service: CampusService = Depends(get_service)) -> ImportResultOut:
    return ImportResultOut.model_validate(service.import_students(payload.rows))


@router.get("/usn/{usn}", response_model=StudentOut)
def get_student_by_usn(usn: str, service: CampusService = Depends(get_service)) -> StudentOut:
    return service.find_student_by_usn(usn)


@router.get("/usn/{usn}/locate", response_model=StudentLocationOut)
def locate_student(
    usn: str,
    at: dt.datetime | None = Query(default=None),
    service: CampusService = Depends(get_service),
) -> StudentLocationOut:
    day, instant, location = service.locate_student(usn, at)
    return StudentLocationOut(
        usn=location.student.usn,
        name=location.student.name,
        day=day,
        time=minutes_to_time(instant),
        current=TimetableEntryOut.model_validate(location.current) if location.current else None,
        next=TimetableEntryOut.model_validate(location.next) if location.next else None,
    )


@router.get("/{student_id}", response_model=StudentOut)
def get_student(student_id: int, service: CampusService = Depends(get_service)) -> StudentOut:
    return service.get_student(student_id)


@router.patch("/{student_id}", response_model=StudentOut)
def update_student(
    student_id: int,
    payload: StudentUpdate,
    service: CampusService = Depends(get_service),
) -> StudentOut:
    return service.update_student(student_id, payload)


@router.delete("/{student_id}", status_code=204)
def delete_student(student_id: int, service: CampusService = Depends(get_service)) -> Response:
    service.delete_student(student_id)
    return Response(status_code=204)
