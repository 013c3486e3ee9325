from __future__ import annotations

from sqlalchemy import CheckConstraint, Column, DateTime, Integer, Text, UniqueConstraint
from sqlalchemy.sql import func

from campus.models.base import Base


class Student(Base):
    __tablename__ = "students"

    id = Column(Integer, primary_key=True)
    usn = Column(Text, nullable=False)
    name = Column(Text, nullable=False)
    email = Column(Text, nullable=False, default="")
    phone = Column(Text, nullable=False, default="")
    department = Column(Text, nullable=False)
    semester = Column(Integer, nullable=False)
    section = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    __table_args__ = (
        CheckConstraint("semester > 0", name="ck_students_semester"),
        UniqueConstraint("usn", name="uq_students_usn"),
        {"sqlite_autoincrement": True},
    )
