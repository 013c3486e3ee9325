from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterator, Mapping

from pydantic import BaseModel
from pydantic import ValidationError as SchemaValidationError
from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from campus.core.database import STORE_LOCK
from campus.core.errors import ConflictError, DuplicateKeyError, NotFoundError, ValidationError
from campus.models import Block, Reservation, ReservationStatus, Room, Student, TimetableEntry
from campus.schemas.block import BlockCreate
from campus.schemas.reservation import ReservationRecord
from campus.schemas.room import RoomCreate
from campus.schemas.student import StudentCreate
from campus.schemas.timetable import TimetableEntryCreate
from campus.services.timeutils import intervals_overlap, weekday_name


logger = logging.getLogger(__name__)


class Kind(str, Enum):
    STUDENT = "student"
    BLOCK = "block"
    ROOM = "room"
    TIMETABLE_ENTRY = "timetable_entry"
    RESERVATION = "reservation"


@dataclass(frozen=True)
class _KindSpec:
    model: type
    label: str
    schema: type[BaseModel]
    key_attr: str | None = None


_KINDS: dict[Kind, _KindSpec] = {
    Kind.STUDENT: _KindSpec(Student, "STUDENT", StudentCreate, "usn"),
    Kind.BLOCK: _KindSpec(Block, "BLOCK", BlockCreate, "name"),
    Kind.ROOM: _KindSpec(Room, "ROOM", RoomCreate, "room_number"),
    Kind.TIMETABLE_ENTRY: _KindSpec(TimetableEntry, "TIMETABLE_ENTRY", TimetableEntryCreate),
    Kind.RESERVATION: _KindSpec(Reservation, "RESERVATION", ReservationRecord),
}


def _schema_errors(exc: SchemaValidationError) -> list[dict[str, str]]:
    out: list[dict[str, str]] = []
    for err in exc.errors():
        field = ".".join(str(p) for p in err.get("loc", ())) or "__root__"
        out.append({"field": field, "message": str(err.get("msg", ""))})
    return out


def _column_values(record: BaseModel) -> dict[str, Any]:
    values = record.model_dump()
    return {k: (v.value if isinstance(v, Enum) else v) for k, v in values.items()}


class EntityStore:
    """Canonical collections of students, blocks, rooms, timetable entries and reservations.

    One store wraps one SQLAlchemy session. All reads and writes go through
    `unit_of_work()`, which holds the process-wide STORE_LOCK for its whole
    duration and commits (or rolls back) before releasing it.
    """

    def __init__(self, db: Session, *, lock: threading.RLock | None = None) -> None:
        self.db = db
        self._lock = lock if lock is not None else STORE_LOCK
        self._depth = 0

    @contextmanager
    def unit_of_work(self) -> Iterator[Session]:
        with self._lock:
            self._depth += 1
            try:
                yield self.db
                if self._depth == 1:
                    self.db.commit()
            except BaseException:
                if self._depth == 1:
                    self.db.rollback()
                raise
            finally:
                self._depth -= 1

    # -- reads -----------------------------------------------------------

    def get(self, kind: Kind, obj_id: int):
        spec = _KINDS[Kind(kind)]
        with self.unit_of_work() as db:
            obj = db.get(spec.model, obj_id)
        if obj is None:
            raise NotFoundError(f"{spec.label.replace('_', ' ').title()} {obj_id} not found", code=f"{spec.label}_NOT_FOUND")
        return obj

    def find(self, kind: Kind, key: str):
        """Look up by natural key (usn, block name, room number); None if absent."""
        spec = _KINDS[Kind(kind)]
        if spec.key_attr is None:
            raise ValueError(f"{kind} has no natural key")
        column = getattr(spec.model, spec.key_attr)
        value = str(key or "").strip()
        if kind == Kind.STUDENT:
            value = value.upper()
        with self.unit_of_work() as db:
            return db.execute(select(spec.model).where(column == value)).scalars().first()

    def require(self, kind: Kind, key: str):
        obj = self.find(kind, key)
        if obj is None:
            spec = _KINDS[Kind(kind)]
            raise NotFoundError(f"No {kind.value.replace('_', ' ')} {key!r}", code=f"{spec.label}_NOT_FOUND")
        return obj

    def list(self, kind: Kind, **filters: Any) -> list:
        """Rows in stored (id) order, filtered by column equality; None filters are ignored."""
        spec = _KINDS[Kind(kind)]
        q = select(spec.model)
        for name, value in filters.items():
            if value is None:
                continue
            q = q.where(getattr(spec.model, name) == value)
        q = q.order_by(spec.model.id.asc())
        with self.unit_of_work() as db:
            return list(db.execute(q).scalars().all())

    def count(self, kind: Kind) -> int:
        spec = _KINDS[Kind(kind)]
        with self.unit_of_work() as db:
            return int(db.execute(select(func.count()).select_from(spec.model)).scalar_one())

    def search_students(self, term: str) -> list[Student]:
        needle = f"%{str(term or '').strip().lower()}%"
        q = (
            select(Student)
            .where(
                or_(
                    func.lower(Student.usn).like(needle),
                    func.lower(Student.name).like(needle),
                    func.lower(Student.department).like(needle),
                )
            )
            .order_by(Student.id.asc())
        )
        with self.unit_of_work() as db:
            return list(db.execute(q).scalars().all())

    # -- writes ----------------------------------------------------------

    def add(self, kind: Kind, record: BaseModel | Mapping[str, Any]):
        kind = Kind(kind)
        spec = _KINDS[kind]
        with self.unit_of_work() as db:
            values = self._validate(kind, record)
            self._check_invariants(kind, values, exclude_id=None)
            obj = spec.model(**values)
            db.add(obj)
            db.flush()
            db.refresh(obj)
        logger.debug("Added %s id=%s", kind.value, obj.id)
        return obj

    def update(self, kind: Kind, obj_id: int, patch: BaseModel | Mapping[str, Any]):
        """Merge `patch` into the stored row; the merged row must satisfy every add-time rule."""
        kind = Kind(kind)
        spec = _KINDS[kind]
        if kind == Kind.RESERVATION:
            raise ValidationError(
                "Reservations change only through create/cancel",
                code="RESERVATION_UPDATE_UNSUPPORTED",
            )
        if isinstance(patch, BaseModel):
            patch = patch.model_dump(exclude_unset=True)
        patch = {k: v for k, v in dict(patch).items() if k in spec.schema.model_fields}

        with self.unit_of_work():
            obj = self.get(kind, obj_id)
            current = {name: getattr(obj, name) for name in spec.schema.model_fields}
            if kind == Kind.TIMETABLE_ENTRY and "room" in patch and "block" not in patch:
                current["block"] = None
            values = self._validate(kind, {**current, **patch})
            self._check_invariants(kind, values, exclude_id=obj.id)
            self._check_rename(kind, obj, values)

            if kind == Kind.ROOM and values["block"] != obj.block:
                for entry in self.list(Kind.TIMETABLE_ENTRY, room=obj.room_number):
                    entry.block = values["block"]
                for reservation in self.list(Kind.RESERVATION, room_number=obj.room_number):
                    reservation.block = values["block"]

            for name, value in values.items():
                setattr(obj, name, value)
            self.db.flush()
        logger.debug("Updated %s id=%s fields=%s", kind.value, obj_id, sorted(patch))
        return obj

    def remove(self, kind: Kind, obj_id: int) -> None:
        kind = Kind(kind)
        if kind == Kind.RESERVATION:
            raise ConflictError(
                "Reservations are kept as history; cancel instead of deleting",
                code="RESERVATION_DELETE_FORBIDDEN",
            )
        with self.unit_of_work() as db:
            obj = self.get(kind, obj_id)
            usage = self._usage(kind, obj)
            if usage:
                label = _KINDS[kind].label
                raise ConflictError(
                    f"{kind.value.replace('_', ' ').title()} is still referenced and cannot be deleted",
                    code=f"{label}_IN_USE",
                    errors=usage,
                )
            db.delete(obj)
            db.flush()
        logger.info("Deleted %s id=%s", kind.value, obj_id)

    # -- invariants ------------------------------------------------------

    def _validate(self, kind: Kind, record: BaseModel | Mapping[str, Any]) -> dict[str, Any]:
        spec = _KINDS[kind]
        if isinstance(record, BaseModel):
            record = record.model_dump()
        try:
            validated = spec.schema.model_validate(dict(record))
        except SchemaValidationError as exc:
            raise ValidationError(
                f"Invalid {kind.value.replace('_', ' ')}",
                code=f"INVALID_{spec.label}",
                errors=_schema_errors(exc),
            ) from exc
        return _column_values(validated)

    def _check_invariants(self, kind: Kind, values: dict[str, Any], *, exclude_id: int | None) -> None:
        spec = _KINDS[kind]
        if spec.key_attr is not None:
            existing = self.find(kind, values[spec.key_attr])
            if existing is not None and existing.id != exclude_id:
                raise DuplicateKeyError(
                    f"{kind.value.replace('_', ' ').title()} {values[spec.key_attr]!r} already exists",
                    code=f"{spec.label}_ALREADY_EXISTS",
                )

        if kind == Kind.ROOM:
            if self.find(Kind.BLOCK, values["block"]) is None:
                raise ValidationError(f"Unknown block {values['block']!r}", code="UNKNOWN_BLOCK")

        elif kind == Kind.TIMETABLE_ENTRY:
            room = self._known_room(values["room"])
            if values.get("block") is None:
                values["block"] = room.block
            elif values["block"] != room.block:
                raise ValidationError(
                    f"Room {room.room_number} is in {room.block}, not {values['block']}",
                    code="ROOM_BLOCK_MISMATCH",
                )
            for other in self.list(Kind.TIMETABLE_ENTRY, room=values["room"], day=values["day"]):
                if other.id == exclude_id:
                    continue
                if intervals_overlap(values["start_time"], values["end_time"], other.start_time, other.end_time):
                    raise ConflictError(
                        f"{values['room']} already has {other.subject} on {other.day} "
                        f"{other.start_time}-{other.end_time}",
                        code="TIMETABLE_OVERLAP",
                        errors=[{"timetable_entry_id": other.id}],
                    )
            for reservation in self.list(
                Kind.RESERVATION,
                room_number=values["room"],
                status=ReservationStatus.CONFIRMED.value,
            ):
                if weekday_name(reservation.date) != values["day"]:
                    continue
                if intervals_overlap(values["start_time"], values["end_time"], reservation.start_time, reservation.end_time):
                    raise ConflictError(
                        f"{values['room']} is reserved on {reservation.date.isoformat()} "
                        f"{reservation.start_time}-{reservation.end_time}",
                        code="TIMETABLE_RESERVATION_OVERLAP",
                        errors=[{"reservation_id": reservation.id}],
                    )

        elif kind == Kind.RESERVATION:
            room = self._known_room(values["room_number"])
            values["block"] = room.block

    def _known_room(self, room_number: str) -> Room:
        room = self.find(Kind.ROOM, room_number)
        if room is None:
            raise ValidationError(f"Unknown room {room_number!r}", code="UNKNOWN_ROOM")
        return room

    def _check_rename(self, kind: Kind, obj, values: dict[str, Any]) -> None:
        spec = _KINDS[kind]
        if spec.key_attr is None or kind == Kind.STUDENT:
            return
        if values[spec.key_attr] == getattr(obj, spec.key_attr):
            return
        usage = self._usage(kind, obj)
        if usage:
            raise ConflictError(
                f"{kind.value.title()} {getattr(obj, spec.key_attr)!r} is referenced and cannot be renamed",
                code=f"{spec.label}_IN_USE",
                errors=usage,
            )

    def _usage(self, kind: Kind, obj) -> list[dict[str, Any]]:
        if kind == Kind.BLOCK:
            return [{"room": r.room_number} for r in self.list(Kind.ROOM, block=obj.name)]
        if kind == Kind.ROOM:
            usage: list[dict[str, Any]] = [
                {"timetable_entry_id": e.id} for e in self.list(Kind.TIMETABLE_ENTRY, room=obj.room_number)
            ]
            # Cancelled and pending reservations still reference the room.
            usage.extend({"reservation_id": r.id} for r in self.list(Kind.RESERVATION, room_number=obj.room_number))
            return usage
        return []
