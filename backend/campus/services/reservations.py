from __future__ import annotations

import datetime as dt
import logging

from sqlalchemy import select

from campus.core.errors import ConflictError, ValidationError
from campus.models import Reservation, ReservationStatus, Room, TimetableEntry
from campus.services.store import EntityStore, Kind
from campus.services.timeutils import format_time, intervals_overlap, parse_day, validate_range, weekday_name


logger = logging.getLogger(__name__)


def describe_conflict(item: TimetableEntry | Reservation) -> str:
    if isinstance(item, TimetableEntry):
        return f"class {item.subject} ({item.day} {item.start_time}-{item.end_time})"
    return f"reservation #{item.id} by {item.teacher_name} ({item.date.isoformat()} {item.start_time}-{item.end_time})"


class ConflictChecker:
    """Decides whether a room window is free and commits reservations against that decision.

    A window conflicts with a timetable entry of the same room on the same
    weekday, or with a confirmed reservation of the same room on the same
    date, when the two overlap under the half-open rule.
    """

    def __init__(self, store: EntityStore) -> None:
        self.store = store

    def find_conflicts(
        self,
        room_number: str,
        on: dt.date | str,
        start_time: str,
        end_time: str,
    ) -> list[TimetableEntry | Reservation]:
        start_time, end_time = validate_range(start_time, end_time)
        if isinstance(on, dt.date):
            day, date = weekday_name(on), on
        else:
            day, date = parse_day(on), None

        with self.store.unit_of_work():
            found: list[TimetableEntry | Reservation] = [
                entry
                for entry in self.store.list(Kind.TIMETABLE_ENTRY, room=room_number, day=day)
                if intervals_overlap(start_time, end_time, entry.start_time, entry.end_time)
            ]
            if date is not None:
                found.extend(
                    r
                    for r in self.store.list(
                        Kind.RESERVATION,
                        room_number=room_number,
                        date=date,
                        status=ReservationStatus.CONFIRMED.value,
                    )
                    if intervals_overlap(start_time, end_time, r.start_time, r.end_time)
                )
        return found

    def check_conflict(self, room_number: str, on: dt.date | str, start_time: str, end_time: str) -> bool:
        return bool(self.find_conflicts(room_number, on, start_time, end_time))

    def available_rooms(
        self,
        date: dt.date,
        start_time: str,
        end_time: str,
        *,
        block: str | None = None,
    ) -> list[Room]:
        with self.store.unit_of_work():
            rooms = self.store.list(Kind.ROOM, block=block)
            return [r for r in rooms if not self.check_conflict(r.room_number, date, start_time, end_time)]

    def create_reservation(
        self,
        room_number: str,
        date: dt.date,
        start_time: str,
        end_time: str,
        *,
        teacher_id: str,
        teacher_name: str,
        purpose: str,
    ) -> Reservation:
        purpose = str(purpose or "").strip()
        if not purpose:
            raise ValidationError("Purpose is required for a reservation", code="PURPOSE_REQUIRED")
        start_time, end_time = validate_range(start_time, end_time)

        # Check and commit in one unit so two overlapping requests cannot both pass the check.
        with self.store.unit_of_work():
            room = self.store.require(Kind.ROOM, room_number)
            conflicts = self.find_conflicts(room.room_number, date, start_time, end_time)
            if conflicts:
                logger.info(
                    "Reservation rejected room=%s date=%s %s-%s teacher=%s conflicts=%d",
                    room.room_number,
                    date.isoformat(),
                    start_time,
                    end_time,
                    teacher_id,
                    len(conflicts),
                )
                raise ConflictError(
                    f"{room.room_number} is not free on {date.isoformat()} "
                    f"{format_time(start_time)} - {format_time(end_time)}",
                    code="ROOM_NOT_AVAILABLE",
                    errors=[describe_conflict(c) for c in conflicts],
                )
            reservation = self.store.add(
                Kind.RESERVATION,
                {
                    "room_number": room.room_number,
                    "block": room.block,
                    "teacher_name": teacher_name,
                    "teacher_id": teacher_id,
                    "date": date,
                    "start_time": start_time,
                    "end_time": end_time,
                    "purpose": purpose,
                    "status": ReservationStatus.CONFIRMED,
                },
            )

        logger.info(
            "Reservation %s confirmed room=%s date=%s %s-%s teacher=%s",
            reservation.id,
            reservation.room_number,
            reservation.date.isoformat(),
            reservation.start_time,
            reservation.end_time,
            teacher_id,
        )
        return reservation

    def cancel_reservation(self, reservation_id: int) -> Reservation:
        with self.store.unit_of_work():
            reservation = self.store.get(Kind.RESERVATION, reservation_id)
            if reservation.status == ReservationStatus.CANCELLED.value:
                raise ConflictError(
                    f"Reservation {reservation_id} is already cancelled",
                    code="RESERVATION_ALREADY_CANCELLED",
                )
            reservation.status = ReservationStatus.CANCELLED.value
            reservation.cancelled_at = dt.datetime.now(dt.timezone.utc)
            self.store.db.flush()
        logger.info("Reservation %s cancelled", reservation_id)
        return reservation

    def reservations_for(self, teacher_id: str | None = None) -> list[Reservation]:
        q = select(Reservation)
        if teacher_id is not None:
            q = q.where(Reservation.teacher_id == teacher_id)
        q = q.order_by(Reservation.date.desc(), Reservation.start_time.desc(), Reservation.id.desc())
        with self.store.unit_of_work() as db:
            return list(db.execute(q).scalars().all())
