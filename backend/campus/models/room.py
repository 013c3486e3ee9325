from __future__ import annotations

from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, Index, Integer, Text, UniqueConstraint
from sqlalchemy.sql import func

from campus.models.base import Base


class Room(Base):
    __tablename__ = "rooms"

    id = Column(Integer, primary_key=True)
    room_number = Column(Text, nullable=False)
    # Block.name; checked by the store rather than a FK so deletes can report ROOM/BLOCK_IN_USE.
    block = Column(Text, nullable=False)
    floor = Column(Integer, nullable=False, default=0)
    room_type = Column(Text, nullable=False, default="classroom")
    capacity = Column(Integer, nullable=False, default=0)
    has_projector = Column(Boolean, nullable=False, default=False)
    has_ac = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    __table_args__ = (
        CheckConstraint("capacity >= 0", name="ck_rooms_capacity"),
        UniqueConstraint("room_number", name="uq_rooms_room_number"),
        Index("ix_rooms_block", "block"),
        {"sqlite_autoincrement": True},
    )
