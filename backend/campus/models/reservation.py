from __future__ import annotations

from enum import Enum

from sqlalchemy import CheckConstraint, Column, Date, DateTime, Index, Integer, String, Text
from sqlalchemy.sql import func

from campus.models.base import Base


class ReservationStatus(str, Enum):
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    # Representable but never produced; does not block a slot.
    PENDING = "pending"


class Reservation(Base):
    __tablename__ = "reservations"

    id = Column(Integer, primary_key=True)
    room_number = Column(Text, nullable=False)
    block = Column(Text, nullable=False)
    teacher_name = Column(Text, nullable=False)
    teacher_id = Column(Text, nullable=False)
    date = Column(Date, nullable=False)
    start_time = Column(String(5), nullable=False)
    end_time = Column(String(5), nullable=False)
    purpose = Column(Text, nullable=False)
    status = Column(String(16), nullable=False, default=ReservationStatus.CONFIRMED.value)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    cancelled_at = Column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        CheckConstraint("start_time < end_time", name="ck_reservations_range"),
        CheckConstraint("status in ('confirmed', 'cancelled', 'pending')", name="ck_reservations_status"),
        Index("ix_reservations_room_date", "room_number", "date"),
        Index("ix_reservations_teacher", "teacher_id"),
        {"sqlite_autoincrement": True},
    )
