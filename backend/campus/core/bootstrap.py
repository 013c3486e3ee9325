from __future__ import annotations

import datetime as dt
import logging

from campus.core.config import settings
from campus.core.database import SessionLocal, init_db
from campus.models import ReservationStatus
from campus.services.store import EntityStore, Kind


logger = logging.getLogger(__name__)


DEMO_BLOCKS = [
    {"name": "A Block", "floors": 4, "description": "Main academic block"},
    {"name": "B Block", "floors": 3, "description": "Laboratory block"},
    {"name": "C Block", "floors": 2, "description": "Administrative block"},
]

DEMO_ROOMS = [
    {"room_number": "A101", "block": "A Block", "floor": 1, "room_type": "classroom", "capacity": 60, "has_projector": True, "has_ac": True},
    {"room_number": "A102", "block": "A Block", "floor": 1, "room_type": "classroom", "capacity": 60, "has_projector": True, "has_ac": False},
    {"room_number": "A201", "block": "A Block", "floor": 2, "room_type": "classroom", "capacity": 80, "has_projector": True, "has_ac": True},
    {"room_number": "B101", "block": "B Block", "floor": 1, "room_type": "lab", "capacity": 30, "has_projector": True, "has_ac": True},
    {"room_number": "B102", "block": "B Block", "floor": 1, "room_type": "lab", "capacity": 30, "has_projector": True, "has_ac": False},
    {"room_number": "C101", "block": "C Block", "floor": 1, "room_type": "seminar_hall", "capacity": 100, "has_projector": True, "has_ac": True},
]

DEMO_STUDENTS = [
    {"usn": "1MS21CS001", "name": "John Doe", "email": "john@student.edu", "phone": "9876543210", "department": "Computer Science", "semester": 5, "section": "A"},
    {"usn": "1MS21CS002", "name": "Jane Smith", "email": "jane@student.edu", "phone": "9876543211", "department": "Computer Science", "semester": 5, "section": "A"},
    {"usn": "1MS21CS003", "name": "Mike Johnson", "email": "mike@student.edu", "phone": "9876543212", "department": "Computer Science", "semester": 3, "section": "B"},
]

_CSE_5A = {"department": "Computer Science", "semester": 5, "section": "A"}

DEMO_TIMETABLE = [
    {"day": "Monday", "start_time": "09:00", "end_time": "10:00", "subject": "Database Management Systems", "teacher": "Dr. Smith", "room": "A201", **_CSE_5A},
    {"day": "Monday", "start_time": "10:00", "end_time": "11:00", "subject": "Software Engineering", "teacher": "Prof. Johnson", "room": "A102", **_CSE_5A},
    {"day": "Monday", "start_time": "11:00", "end_time": "12:00", "subject": "Computer Networks", "teacher": "Dr. Wilson", "room": "B101", **_CSE_5A},
    {"day": "Tuesday", "start_time": "09:00", "end_time": "10:00", "subject": "Operating Systems", "teacher": "Prof. Davis", "room": "A201", **_CSE_5A},
    {"day": "Tuesday", "start_time": "10:00", "end_time": "11:00", "subject": "Database Lab", "teacher": "Dr. Smith", "room": "B102", **_CSE_5A},
]

DEMO_RESERVATIONS = [
    {
        "room_number": "A101",
        "teacher_name": "Dr. Smith",
        "teacher_id": "T001",
        "date": dt.date(2024, 1, 15),
        "start_time": "14:00",
        "end_time": "16:00",
        "purpose": "Extra tutorial session for Database Management",
    },
    {
        "room_number": "B101",
        "teacher_name": "Prof. Johnson",
        "teacher_id": "T002",
        "date": dt.date(2024, 1, 16),
        "start_time": "10:00",
        "end_time": "12:00",
        "purpose": "Programming contest preparation",
    },
]


def seed_demo_data(store: EntityStore) -> bool:
    """Load the sample campus into an empty store. Returns False if data already exists."""

    with store.unit_of_work():
        if store.count(Kind.BLOCK) or store.count(Kind.STUDENT):
            return False
        for block in DEMO_BLOCKS:
            store.add(Kind.BLOCK, block)
        for room in DEMO_ROOMS:
            store.add(Kind.ROOM, room)
        for student in DEMO_STUDENTS:
            store.add(Kind.STUDENT, student)
        for entry in DEMO_TIMETABLE:
            store.add(Kind.TIMETABLE_ENTRY, entry)
        for reservation in DEMO_RESERVATIONS:
            store.add(Kind.RESERVATION, {**reservation, "status": ReservationStatus.CONFIRMED})
    return True


def bootstrap_store() -> None:
    """Create tables and, if enabled, seed demo data. Safe to run on every startup."""

    init_db()
    if not settings.seed_demo_data:
        return
    db = SessionLocal()
    try:
        if seed_demo_data(EntityStore(db)):
            logger.warning("Seeded demo campus data (SEED_DEMO_DATA=true). Disable it for real deployments.")
    finally:
        db.close()
