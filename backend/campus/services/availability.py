from __future__ import annotations

from dataclasses import dataclass

from campus.models import Room, Student, TimetableEntry
from campus.services.store import EntityStore, Kind
from campus.services.timeutils import is_within, time_to_minutes


@dataclass(frozen=True)
class VacancyCounts:
    vacant: int
    occupied: int
    total: int


@dataclass(frozen=True)
class RoomStatus:
    room: Room
    current: TimetableEntry | None
    next: TimetableEntry | None

    @property
    def occupied(self) -> bool:
        return self.current is not None


@dataclass(frozen=True)
class StudentLocation:
    student: Student
    current: TimetableEntry | None
    next: TimetableEntry | None


def _current_in(entries: list[TimetableEntry], instant: int) -> TimetableEntry | None:
    # With the no-overlap invariant at most one entry matches; otherwise the first stored one wins.
    for entry in entries:
        if is_within(instant, entry.start_time, entry.end_time):
            return entry
    return None


def _next_in(entries: list[TimetableEntry], instant: int) -> TimetableEntry | None:
    best: TimetableEntry | None = None
    best_start: int | None = None
    for entry in entries:
        start = time_to_minutes(entry.start_time)
        if start <= instant:
            continue
        if best_start is None or start < best_start:
            best, best_start = entry, start
    return best


class AvailabilityEngine:
    """Occupancy views over the weekly timetable.

    `day` is a canonical day name and `instant` is minutes since midnight;
    see `timeutils.clock_instant` for deriving both from a datetime.
    """

    def __init__(self, store: EntityStore) -> None:
        self.store = store

    def entries_for(self, room_number: str, day: str) -> list[TimetableEntry]:
        return self.store.list(Kind.TIMETABLE_ENTRY, room=room_number, day=day)

    def current_occupant(self, room_number: str, day: str, instant: int) -> TimetableEntry | None:
        return _current_in(self.entries_for(room_number, day), instant)

    def next_entry(self, room_number: str, day: str, instant: int) -> TimetableEntry | None:
        return _next_in(self.entries_for(room_number, day), instant)

    def is_room_occupied(self, room_number: str, day: str, instant: int) -> bool:
        return self.current_occupant(room_number, day, instant) is not None

    def room_statuses(self, day: str, instant: int, *, block: str | None = None) -> list[RoomStatus]:
        with self.store.unit_of_work():
            rooms = self.store.list(Kind.ROOM, block=block)
            by_room: dict[str, list[TimetableEntry]] = {}
            for entry in self.store.list(Kind.TIMETABLE_ENTRY, day=day):
                by_room.setdefault(entry.room, []).append(entry)

        statuses: list[RoomStatus] = []
        for room in rooms:
            entries = by_room.get(room.room_number, [])
            statuses.append(
                RoomStatus(
                    room=room,
                    current=_current_in(entries, instant),
                    next=_next_in(entries, instant),
                )
            )
        return statuses

    def vacancy_counts(self, day: str, instant: int) -> VacancyCounts:
        statuses = self.room_statuses(day, instant)
        occupied = sum(1 for s in statuses if s.occupied)
        return VacancyCounts(vacant=len(statuses) - occupied, occupied=occupied, total=len(statuses))

    def locate_student(self, student: Student, day: str, instant: int) -> StudentLocation:
        entries = self.store.list(
            Kind.TIMETABLE_ENTRY,
            department=student.department,
            semester=student.semester,
            section=student.section,
            day=day,
        )
        return StudentLocation(student=student, current=_current_in(entries, instant), next=_next_in(entries, instant))
