from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, field_validator

from campus.schemas._fields import clean_text, required_text
from campus.schemas.timetable import TimetableEntryOut


class StudentBase(BaseModel):
    usn: str = Field(min_length=1)
    name: str = Field(min_length=1)
    email: str = ""
    phone: str = ""
    department: str = Field(min_length=1)
    semester: int = Field(ge=1)
    section: str = Field(min_length=1)

    @field_validator("usn", mode="before")
    @classmethod
    def _normalize_usn(cls, v: str) -> str:
        return required_text(v).upper()

    @field_validator("name", "department", "section", mode="before")
    @classmethod
    def _required(cls, v: str) -> str:
        return required_text(v)

    @field_validator("email", "phone", mode="before")
    @classmethod
    def _optional(cls, v: str | None) -> str:
        return clean_text(v) or ""


class StudentCreate(StudentBase):
    pass


class StudentUpdate(BaseModel):
    usn: str | None = None
    name: str | None = None
    email: str | None = None
    phone: str | None = None
    department: str | None = None
    semester: int | None = Field(default=None, ge=1)
    section: str | None = None


class StudentOut(StudentBase):
    id: int
    created_at: datetime | None = None

    class Config:
        from_attributes = True


class StudentImportRequest(BaseModel):
    rows: list[dict[str, Any]] = Field(default_factory=list)


class ImportRowErrorOut(BaseModel):
    row: int
    code: str
    message: str

    class Config:
        from_attributes = True


class ImportResultOut(BaseModel):
    inserted: int = 0
    skipped: int = 0
    errors: list[ImportRowErrorOut] = Field(default_factory=list)

    class Config:
        from_attributes = True


class StudentLocationOut(BaseModel):
    usn: str
    name: str
    day: str
    time: str
    current: TimetableEntryOut | None = None
    next: TimetableEntryOut | None = None
