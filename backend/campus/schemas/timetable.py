from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field, field_validator, model_validator

from campus.schemas._fields import clean_text, required_text, time_field, timetable_day_field
from campus.services.timeutils import time_to_minutes


class TimetableEntryBase(BaseModel):
    day: str
    start_time: str
    end_time: str
    subject: str = Field(min_length=1)
    teacher: str = Field(min_length=1)
    room: str = Field(min_length=1)
    # Derived from the room when omitted.
    block: str | None = None
    department: str = Field(min_length=1)
    semester: int = Field(ge=1)
    section: str = Field(min_length=1)

    @field_validator("day", mode="before")
    @classmethod
    def _day(cls, v: str) -> str:
        return timetable_day_field(v)

    @field_validator("start_time", "end_time", mode="before")
    @classmethod
    def _time(cls, v: str) -> str:
        return time_field(v)

    @field_validator("subject", "teacher", "room", "department", "section", mode="before")
    @classmethod
    def _required(cls, v: str) -> str:
        return required_text(v)

    @field_validator("block", mode="before")
    @classmethod
    def _optional(cls, v: str | None) -> str | None:
        return clean_text(v) or None

    @model_validator(mode="after")
    def _range(self):
        if time_to_minutes(self.start_time) >= time_to_minutes(self.end_time):
            raise ValueError("end_time must be after start_time")
        return self


class TimetableEntryCreate(TimetableEntryBase):
    pass


class TimetableEntryUpdate(BaseModel):
    day: str | None = None
    start_time: str | None = None
    end_time: str | None = None
    subject: str | None = None
    teacher: str | None = None
    room: str | None = None
    block: str | None = None
    department: str | None = None
    semester: int | None = Field(default=None, ge=1)
    section: str | None = None


class TimetableEntryOut(BaseModel):
    id: int
    day: str
    start_time: str
    end_time: str
    subject: str
    teacher: str
    room: str
    block: str
    department: str
    semester: int
    section: str
    created_at: datetime | None = None

    class Config:
        from_attributes = True
