from __future__ import annotations

from sqlalchemy import CheckConstraint, Column, DateTime, Integer, Text, UniqueConstraint
from sqlalchemy.sql import func

from campus.models.base import Base


class Block(Base):
    __tablename__ = "blocks"

    id = Column(Integer, primary_key=True)
    name = Column(Text, nullable=False)
    floors = Column(Integer, nullable=False, default=1)
    description = Column(Text, nullable=False, default="")
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    __table_args__ = (
        CheckConstraint("floors >= 1", name="ck_blocks_floors"),
        UniqueConstraint("name", name="uq_blocks_name"),
        {"sqlite_autoincrement": True},
    )
