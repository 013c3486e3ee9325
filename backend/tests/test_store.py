from __future__ import annotations

import pytest

from campus.core.errors import ConflictError, DuplicateKeyError, NotFoundError, ValidationError
from campus.models import ReservationStatus
from campus.services.store import Kind


def _student(**overrides):
    data = {
        "usn": "1ms21cs099",
        "name": "Test Student",
        "email": "test@student.edu",
        "department": "Computer Science",
        "semester": 5,
        "section": "A",
    }
    data.update(overrides)
    return data


def _entry(**overrides):
    data = {
        "day": "Wednesday",
        "start_time": "09:00",
        "end_time": "10:00",
        "subject": "Compilers",
        "teacher": "Dr. Rao",
        "room": "A101",
        "department": "Computer Science",
        "semester": 5,
        "section": "A",
    }
    data.update(overrides)
    return data


def test_seed_is_idempotent(seeded_store):
    from campus.core.bootstrap import seed_demo_data

    assert seed_demo_data(seeded_store) is False
    assert seeded_store.count(Kind.BLOCK) == 3
    assert seeded_store.count(Kind.ROOM) == 6
    assert seeded_store.count(Kind.STUDENT) == 3
    assert seeded_store.count(Kind.TIMETABLE_ENTRY) == 5
    assert seeded_store.count(Kind.RESERVATION) == 2


def test_seeded_reservations_take_block_from_room(seeded_store):
    blocks = {r.room_number: r.block for r in seeded_store.list(Kind.RESERVATION)}
    assert blocks == {"A101": "A Block", "B101": "B Block"}


def test_add_student_normalizes_usn(seeded_store):
    student = seeded_store.add(Kind.STUDENT, _student())
    assert student.id is not None
    assert student.usn == "1MS21CS099"
    assert seeded_store.find(Kind.STUDENT, "1ms21cs099").id == student.id


def test_duplicate_usn_is_rejected(seeded_store):
    before = seeded_store.count(Kind.STUDENT)
    with pytest.raises(DuplicateKeyError) as info:
        seeded_store.add(Kind.STUDENT, _student(usn="1ms21cs001"))
    assert info.value.code == "STUDENT_ALREADY_EXISTS"
    assert seeded_store.count(Kind.STUDENT) == before


def test_invalid_student_reports_fields(seeded_store):
    with pytest.raises(ValidationError) as info:
        seeded_store.add(Kind.STUDENT, _student(name="  ", semester=0))
    assert info.value.code == "INVALID_STUDENT"
    fields = {e["field"] for e in info.value.errors}
    assert {"name", "semester"} <= fields


def test_ids_are_not_reused(seeded_store):
    first = seeded_store.add(Kind.STUDENT, _student())
    seeded_store.remove(Kind.STUDENT, first.id)
    second = seeded_store.add(Kind.STUDENT, _student())
    assert second.id > first.id


def test_get_missing_raises_not_found(seeded_store):
    with pytest.raises(NotFoundError) as info:
        seeded_store.get(Kind.ROOM, 9999)
    assert info.value.code == "ROOM_NOT_FOUND"
    with pytest.raises(NotFoundError):
        seeded_store.require(Kind.STUDENT, "NOPE")


def test_search_students(seeded_store):
    assert [s.usn for s in seeded_store.search_students("jane")] == ["1MS21CS002"]
    assert len(seeded_store.search_students("computer")) == 3
    assert [s.name for s in seeded_store.search_students("cs003")] == ["Mike Johnson"]


def test_room_requires_known_block(seeded_store):
    with pytest.raises(ValidationError) as info:
        seeded_store.add(Kind.ROOM, {"room_number": "D101", "block": "D Block", "floor": 1})
    assert info.value.code == "UNKNOWN_BLOCK"


def test_room_type_is_normalized(seeded_store):
    room = seeded_store.add(Kind.ROOM, {"room_number": "C102", "block": "C Block", "room_type": "Seminar Hall"})
    assert room.room_type == "seminar_hall"


def test_timetable_entry_takes_block_from_room(seeded_store):
    entry = seeded_store.add(Kind.TIMETABLE_ENTRY, _entry(day="wed", start_time="9:00"))
    assert entry.day == "Wednesday"
    assert entry.start_time == "09:00"
    assert entry.block == "A Block"


def test_timetable_entry_rejects_block_mismatch(seeded_store):
    with pytest.raises(ValidationError) as info:
        seeded_store.add(Kind.TIMETABLE_ENTRY, _entry(block="B Block"))
    assert info.value.code == "ROOM_BLOCK_MISMATCH"


def test_timetable_entry_rejects_unknown_room(seeded_store):
    with pytest.raises(ValidationError) as info:
        seeded_store.add(Kind.TIMETABLE_ENTRY, _entry(room="Z999"))
    assert info.value.code == "UNKNOWN_ROOM"


def test_timetable_entry_rejects_sunday_and_bad_range(seeded_store):
    with pytest.raises(ValidationError):
        seeded_store.add(Kind.TIMETABLE_ENTRY, _entry(day="Sunday"))
    with pytest.raises(ValidationError):
        seeded_store.add(Kind.TIMETABLE_ENTRY, _entry(start_time="10:00", end_time="09:00"))


def test_timetable_overlap_in_same_room(seeded_store):
    # A201 already holds DBMS on Monday 09:00-10:00.
    with pytest.raises(ConflictError) as info:
        seeded_store.add(Kind.TIMETABLE_ENTRY, _entry(day="Monday", room="A201", start_time="09:30", end_time="10:30"))
    assert info.value.code == "TIMETABLE_OVERLAP"

    back_to_back = seeded_store.add(
        Kind.TIMETABLE_ENTRY, _entry(day="Monday", room="A201", start_time="10:00", end_time="11:00")
    )
    assert back_to_back.id is not None


def test_update_entry_may_keep_its_own_slot(seeded_store):
    entry = seeded_store.list(Kind.TIMETABLE_ENTRY, room="A201", day="Monday")[0]
    updated = seeded_store.update(Kind.TIMETABLE_ENTRY, entry.id, {"subject": "Advanced DBMS"})
    assert updated.subject == "Advanced DBMS"
    assert updated.start_time == "09:00"


def test_update_entry_room_rederives_block(seeded_store):
    entry = seeded_store.list(Kind.TIMETABLE_ENTRY, room="A201", day="Monday")[0]
    moved = seeded_store.update(Kind.TIMETABLE_ENTRY, entry.id, {"room": "C101"})
    assert moved.room == "C101"
    assert moved.block == "C Block"


def test_update_validates_merged_row(seeded_store):
    student = seeded_store.find(Kind.STUDENT, "1MS21CS001")
    with pytest.raises(DuplicateKeyError):
        seeded_store.update(Kind.STUDENT, student.id, {"usn": "1ms21cs002"})
    with pytest.raises(ValidationError):
        seeded_store.update(Kind.STUDENT, student.id, {"semester": 0})
    assert seeded_store.get(Kind.STUDENT, student.id).semester == 5


def test_block_with_rooms_cannot_be_deleted(seeded_store):
    block = seeded_store.find(Kind.BLOCK, "C Block")
    with pytest.raises(ConflictError) as info:
        seeded_store.remove(Kind.BLOCK, block.id)
    assert info.value.code == "BLOCK_IN_USE"
    assert {"room": "C101"} in info.value.errors


def test_empty_block_can_be_deleted(seeded_store):
    block = seeded_store.add(Kind.BLOCK, {"name": "D Block", "floors": 2})
    seeded_store.remove(Kind.BLOCK, block.id)
    assert seeded_store.find(Kind.BLOCK, "D Block") is None


def test_referenced_room_cannot_be_deleted_or_renamed(seeded_store):
    room = seeded_store.find(Kind.ROOM, "A201")
    with pytest.raises(ConflictError) as info:
        seeded_store.remove(Kind.ROOM, room.id)
    assert info.value.code == "ROOM_IN_USE"
    with pytest.raises(ConflictError):
        seeded_store.update(Kind.ROOM, room.id, {"room_number": "A299"})


def test_unreferenced_room_can_be_deleted(seeded_store):
    room = seeded_store.find(Kind.ROOM, "C101")
    seeded_store.remove(Kind.ROOM, room.id)
    assert seeded_store.find(Kind.ROOM, "C101") is None


def test_room_block_change_propagates_to_entries(seeded_store):
    room = seeded_store.find(Kind.ROOM, "A201")
    seeded_store.update(Kind.ROOM, room.id, {"block": "C Block"})
    blocks = {e.block for e in seeded_store.list(Kind.TIMETABLE_ENTRY, room="A201")}
    assert blocks == {"C Block"}

    reserved = seeded_store.find(Kind.ROOM, "A101")
    seeded_store.update(Kind.ROOM, reserved.id, {"block": "B Block"})
    assert seeded_store.find(Kind.ROOM, "A101").block == "B Block"
    assert {r.block for r in seeded_store.list(Kind.RESERVATION, room_number="A101")} == {"B Block"}


def test_reservations_cannot_be_deleted_or_updated(seeded_store):
    reservation = seeded_store.list(Kind.RESERVATION)[0]
    with pytest.raises(ConflictError) as info:
        seeded_store.remove(Kind.RESERVATION, reservation.id)
    assert info.value.code == "RESERVATION_DELETE_FORBIDDEN"
    with pytest.raises(ValidationError) as info:
        seeded_store.update(Kind.RESERVATION, reservation.id, {"purpose": "x"})
    assert info.value.code == "RESERVATION_UPDATE_UNSUPPORTED"
    assert seeded_store.get(Kind.RESERVATION, reservation.id).status == ReservationStatus.CONFIRMED.value


def test_failed_unit_of_work_rolls_back(seeded_store):
    before = seeded_store.count(Kind.BLOCK)
    with pytest.raises(DuplicateKeyError):
        with seeded_store.unit_of_work():
            seeded_store.add(Kind.BLOCK, {"name": "E Block"})
            seeded_store.add(Kind.BLOCK, {"name": "E Block"})
    assert seeded_store.count(Kind.BLOCK) == before
    assert seeded_store.find(Kind.BLOCK, "E Block") is None


def test_timetable_entry_cannot_cover_a_confirmed_reservation(seeded_store):
    # A101 is reserved on Monday 2024-01-15 14:00-16:00.
    before = seeded_store.count(Kind.TIMETABLE_ENTRY)
    with pytest.raises(ConflictError) as info:
        seeded_store.add(Kind.TIMETABLE_ENTRY, _entry(day="Monday", start_time="14:00", end_time="15:00"))
    assert info.value.code == "TIMETABLE_RESERVATION_OVERLAP"
    assert seeded_store.count(Kind.TIMETABLE_ENTRY) == before

    moved = seeded_store.list(Kind.TIMETABLE_ENTRY, room="A102", day="Monday")[0]
    with pytest.raises(ConflictError):
        seeded_store.update(
            Kind.TIMETABLE_ENTRY, moved.id, {"room": "A101", "start_time": "15:00", "end_time": "16:30"}
        )
    assert seeded_store.get(Kind.TIMETABLE_ENTRY, moved.id).room == "A102"

    # Same slot on another weekday, or right after the booking, is fine.
    assert seeded_store.add(Kind.TIMETABLE_ENTRY, _entry(day="Tuesday", start_time="14:00", end_time="15:00")).id
    assert seeded_store.add(Kind.TIMETABLE_ENTRY, _entry(day="Monday", start_time="16:00", end_time="17:00")).id


def test_cancelled_reservation_does_not_block_a_class(seeded_store):
    from campus.services.reservations import ConflictChecker

    reservation = seeded_store.list(Kind.RESERVATION, room_number="A101")[0]
    ConflictChecker(seeded_store).cancel_reservation(reservation.id)
    entry = seeded_store.add(Kind.TIMETABLE_ENTRY, _entry(day="Monday", start_time="14:00", end_time="15:00"))
    assert entry.id is not None


def test_room_with_only_cancelled_reservations_stays_in_use(seeded_store):
    from datetime import date

    from campus.services.reservations import ConflictChecker

    room = seeded_store.add(Kind.ROOM, {"room_number": "C105", "block": "C Block", "floor": 1})
    checker = ConflictChecker(seeded_store)
    reservation = checker.create_reservation(
        "C105", date(2024, 1, 17), "09:00", "10:00", teacher_id="T001", teacher_name="Dr. Smith", purpose="Viva"
    )
    checker.cancel_reservation(reservation.id)

    with pytest.raises(ConflictError) as info:
        seeded_store.remove(Kind.ROOM, room.id)
    assert info.value.code == "ROOM_IN_USE"
    assert {"reservation_id": reservation.id} in info.value.errors
    with pytest.raises(ConflictError):
        seeded_store.update(Kind.ROOM, room.id, {"room_number": "C106"})
    assert seeded_store.find(Kind.ROOM, "C105") is not None
