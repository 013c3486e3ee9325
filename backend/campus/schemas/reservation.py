from __future__ import annotations

import datetime as dt

from pydantic import BaseModel, Field, field_validator, model_validator

from campus.models.reservation import ReservationStatus
from campus.schemas._fields import required_text, time_field
from campus.services.timeutils import time_to_minutes


class ReservationRecord(BaseModel):
    """Full reservation row as the store persists it."""

    room_number: str = Field(min_length=1)
    # Filled in from the room by the store.
    block: str | None = None
    teacher_name: str = Field(min_length=1)
    teacher_id: str = Field(min_length=1)
    date: dt.date
    start_time: str
    end_time: str
    purpose: str = Field(min_length=1)
    status: ReservationStatus = ReservationStatus.CONFIRMED

    @field_validator("room_number", "teacher_name", "teacher_id", "purpose", mode="before")
    @classmethod
    def _required(cls, v: str) -> str:
        return required_text(v)

    @field_validator("start_time", "end_time", mode="before")
    @classmethod
    def _time(cls, v: str) -> str:
        return time_field(v)

    @model_validator(mode="after")
    def _range(self):
        if time_to_minutes(self.start_time) >= time_to_minutes(self.end_time):
            raise ValueError("end_time must be after start_time")
        return self


class ReservationCreate(BaseModel):
    # Left unvalidated here so the conflict checker reports bad input with its own error codes.
    room_number: str
    date: dt.date
    start_time: str
    end_time: str
    purpose: str = ""


class ReservationOut(BaseModel):
    id: int
    room_number: str
    block: str
    teacher_name: str
    teacher_id: str
    date: dt.date
    start_time: str
    end_time: str
    purpose: str
    status: str
    created_at: dt.datetime | None = None
    cancelled_at: dt.datetime | None = None

    class Config:
        from_attributes = True


class ConflictCheckOut(BaseModel):
    room_number: str
    date: dt.date
    start_time: str
    end_time: str
    conflict: bool
    conflicts: list[str] = Field(default_factory=list)
