from __future__ import annotations

from sqlalchemy import CheckConstraint, Column, DateTime, Index, Integer, String, Text
from sqlalchemy.sql import func

from campus.models.base import Base


class TimetableEntry(Base):
    __tablename__ = "timetable_entries"

    id = Column(Integer, primary_key=True)
    day = Column(String(9), nullable=False)
    # Zero-padded "HH:MM", so string order is time order.
    start_time = Column(String(5), nullable=False)
    end_time = Column(String(5), nullable=False)
    subject = Column(Text, nullable=False)
    teacher = Column(Text, nullable=False)
    room = Column(Text, nullable=False)
    block = Column(Text, nullable=False)
    department = Column(Text, nullable=False)
    semester = Column(Integer, nullable=False)
    section = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    __table_args__ = (
        CheckConstraint("start_time < end_time", name="ck_timetable_entries_range"),
        CheckConstraint("semester > 0", name="ck_timetable_entries_semester"),
        Index("ix_timetable_entries_room_day", "room", "day"),
        Index("ix_timetable_entries_class", "department", "semester", "section"),
        {"sqlite_autoincrement": True},
    )
