from __future__ import annotations

import datetime as dt
from typing import Any, Iterable, Mapping

from pydantic import BaseModel

from campus.models import Block, Reservation, Room, Student, TimetableEntry
from campus.services.availability import AvailabilityEngine, RoomStatus, StudentLocation, VacancyCounts
from campus.services.policy import AccessPolicy, Actor, Permission
from campus.services.reservations import ConflictChecker
from campus.services.store import EntityStore, Kind
from campus.services.student_import import ImportResult, import_students
from campus.services.timeutils import DAYS, clock_instant, parse_day


Record = BaseModel | Mapping[str, Any]


class CampusService:
    """Role-gated entry point used by the API (or any other front end).

    Every method checks the access policy before touching the store, so a
    denied call has no side effect.
    """

    def __init__(self, store: EntityStore, actor: Actor, *, policy: AccessPolicy | None = None) -> None:
        self.store = store
        self.actor = actor
        self.policy = policy or AccessPolicy()
        self.availability = AvailabilityEngine(store)
        self.conflicts = ConflictChecker(store)

    def _require(self, permission: Permission) -> None:
        self.policy.require(self.actor, permission)

    # Students

    def list_students(self, search: str | None = None) -> list[Student]:
        self._require(Permission.STUDENTS_READ)
        if search and search.strip():
            return self.store.search_students(search)
        return self.store.list(Kind.STUDENT)

    def find_student_by_usn(self, usn: str) -> Student:
        self._require(Permission.STUDENTS_READ)
        return self.store.require(Kind.STUDENT, usn)

    def get_student(self, student_id: int) -> Student:
        self._require(Permission.STUDENTS_READ)
        return self.store.get(Kind.STUDENT, student_id)

    def add_student(self, record: Record) -> Student:
        self._require(Permission.STUDENTS_WRITE)
        return self.store.add(Kind.STUDENT, record)

    def update_student(self, student_id: int, patch: Record) -> Student:
        self._require(Permission.STUDENTS_WRITE)
        return self.store.update(Kind.STUDENT, student_id, patch)

    def delete_student(self, student_id: int) -> None:
        self._require(Permission.STUDENTS_WRITE)
        self.store.remove(Kind.STUDENT, student_id)

    def import_students(self, rows: Iterable[Mapping[str, Any]]) -> ImportResult:
        self._require(Permission.STUDENTS_WRITE)
        return import_students(self.store, rows)

    # Blocks and rooms

    def list_blocks(self) -> list[Block]:
        self._require(Permission.BLOCKS_READ)
        return self.store.list(Kind.BLOCK)

    def add_block(self, record: Record) -> Block:
        self._require(Permission.BLOCKS_WRITE)
        return self.store.add(Kind.BLOCK, record)

    def update_block(self, block_id: int, patch: Record) -> Block:
        self._require(Permission.BLOCKS_WRITE)
        return self.store.update(Kind.BLOCK, block_id, patch)

    def delete_block(self, block_id: int) -> None:
        self._require(Permission.BLOCKS_WRITE)
        self.store.remove(Kind.BLOCK, block_id)

    def list_rooms(self, block: str | None = None) -> list[Room]:
        self._require(Permission.ROOMS_READ)
        return self.store.list(Kind.ROOM, block=block)

    def add_room(self, record: Record) -> Room:
        self._require(Permission.ROOMS_WRITE)
        return self.store.add(Kind.ROOM, record)

    def update_room(self, room_id: int, patch: Record) -> Room:
        self._require(Permission.ROOMS_WRITE)
        return self.store.update(Kind.ROOM, room_id, patch)

    def delete_room(self, room_id: int) -> None:
        self._require(Permission.ROOMS_WRITE)
        self.store.remove(Kind.ROOM, room_id)

    # Timetable

    def timetable_for(self, department: str, semester: int, section: str, *, day: str | None = None) -> list[TimetableEntry]:
        self._require(Permission.TIMETABLE_READ)
        entries = self.store.list(
            Kind.TIMETABLE_ENTRY,
            department=department,
            semester=semester,
            section=section,
            day=parse_day(day) if day else None,
        )
        return sorted(entries, key=lambda e: (_day_index(e.day), e.start_time, e.id))

    def add_timetable_entry(self, record: Record) -> TimetableEntry:
        self._require(Permission.TIMETABLE_WRITE)
        return self.store.add(Kind.TIMETABLE_ENTRY, record)

    def update_timetable_entry(self, entry_id: int, patch: Record) -> TimetableEntry:
        self._require(Permission.TIMETABLE_WRITE)
        return self.store.update(Kind.TIMETABLE_ENTRY, entry_id, patch)

    def delete_timetable_entry(self, entry_id: int) -> None:
        self._require(Permission.TIMETABLE_WRITE)
        self.store.remove(Kind.TIMETABLE_ENTRY, entry_id)

    # Occupancy

    def vacancy_counts(self, at: dt.datetime | None = None) -> tuple[str, int, VacancyCounts]:
        self._require(Permission.VACANCY_READ)
        day, instant = clock_instant(at)
        return day, instant, self.availability.vacancy_counts(day, instant)

    def room_vacancy(self, at: dt.datetime | None = None, *, block: str | None = None) -> tuple[str, int, list[RoomStatus]]:
        self._require(Permission.VACANCY_READ)
        day, instant = clock_instant(at)
        return day, instant, self.availability.room_statuses(day, instant, block=block)

    def locate_student(self, usn: str, at: dt.datetime | None = None) -> tuple[str, int, StudentLocation]:
        self._require(Permission.STUDENTS_READ)
        student = self.store.require(Kind.STUDENT, usn)
        day, instant = clock_instant(at)
        return day, instant, self.availability.locate_student(student, day, instant)

    # Reservations

    def check_conflict(self, room_number: str, on: dt.date | str, start_time: str, end_time: str) -> list[TimetableEntry | Reservation]:
        self._require(Permission.RESERVATIONS_READ)
        self.store.require(Kind.ROOM, room_number)
        return self.conflicts.find_conflicts(room_number, on, start_time, end_time)

    def available_rooms(self, date: dt.date, start_time: str, end_time: str, *, block: str | None = None) -> list[Room]:
        self._require(Permission.RESERVATIONS_READ)
        return self.conflicts.available_rooms(date, start_time, end_time, block=block)

    def create_reservation(self, room_number: str, date: dt.date, start_time: str, end_time: str, purpose: str) -> Reservation:
        self._require(Permission.RESERVATIONS_CREATE)
        return self.conflicts.create_reservation(
            room_number,
            date,
            start_time,
            end_time,
            teacher_id=self.actor.user_id,
            teacher_name=self.actor.name,
            purpose=purpose,
        )

    def cancel_reservation(self, reservation_id: int) -> Reservation:
        self._require(Permission.RESERVATIONS_CANCEL)
        with self.store.unit_of_work():
            reservation = self.store.get(Kind.RESERVATION, reservation_id)
            self.policy.require_reservation_owner(self.actor, reservation)
            return self.conflicts.cancel_reservation(reservation_id)

    def list_reservations(self) -> list[Reservation]:
        self._require(Permission.RESERVATIONS_READ)
        if self.policy.can(self.actor, Permission.RESERVATIONS_MANAGE_ANY):
            return self.conflicts.reservations_for()
        return self.conflicts.reservations_for(self.actor.user_id)


def _day_index(day: str) -> int:
    return DAYS.index(day) if day in DAYS else len(DAYS)
