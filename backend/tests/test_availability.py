from __future__ import annotations

import pytest

from campus.services.availability import AvailabilityEngine
from campus.services.store import Kind


@pytest.fixture
def engine(seeded_store) -> AvailabilityEngine:
    return AvailabilityEngine(seeded_store)


def test_a201_monday_morning(engine):
    assert engine.is_room_occupied("A201", "Monday", 570)
    assert engine.is_room_occupied("A201", "Monday", 540)
    assert not engine.is_room_occupied("A201", "Monday", 600)
    assert engine.current_occupant("A201", "Monday", 570).subject == "Database Management Systems"


def test_next_entry_starts_strictly_after_instant(engine):
    assert engine.next_entry("A201", "Tuesday", 480).subject == "Operating Systems"
    # At 09:00 the OS class is current, not next.
    assert engine.next_entry("A201", "Tuesday", 540) is None


def test_vacancy_counts_add_up(engine, seeded_store):
    total_rooms = seeded_store.count(Kind.ROOM)
    for instant in (480, 540, 570, 630, 690, 900):
        counts = engine.vacancy_counts("Monday", instant)
        assert counts.vacant + counts.occupied == counts.total == total_rooms


def test_vacancy_counts_monday(engine):
    counts = engine.vacancy_counts("Monday", 570)
    assert (counts.occupied, counts.vacant) == (1, 5)
    assert engine.vacancy_counts("Sunday", 570).occupied == 0


def test_room_statuses_filter_by_block(engine):
    statuses = engine.room_statuses("Monday", 630, block="A Block")
    by_room = {s.room.room_number: s for s in statuses}
    assert set(by_room) == {"A101", "A102", "A201"}
    assert by_room["A102"].occupied
    assert by_room["A102"].current.subject == "Software Engineering"
    assert not by_room["A201"].occupied
    assert not by_room["A101"].occupied
    assert by_room["A101"].next is None


def test_reservations_do_not_count_as_occupancy(engine):
    # A101 holds a confirmed reservation on Monday 2024-01-15 14:00-16:00.
    assert not engine.is_room_occupied("A101", "Monday", 14 * 60 + 30)


def test_locate_student(engine, seeded_store):
    jane = seeded_store.require(Kind.STUDENT, "1MS21CS002")
    location = engine.locate_student(jane, "Monday", 630)
    assert location.current.room == "A102"
    assert location.next.room == "B101"

    mike = seeded_store.require(Kind.STUDENT, "1MS21CS003")
    idle = engine.locate_student(mike, "Monday", 630)
    assert idle.current is None and idle.next is None
