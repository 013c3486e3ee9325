from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from campus.schemas._fields import required_text


class RoomBase(BaseModel):
    room_number: str = Field(min_length=1)
    block: str = Field(min_length=1)
    floor: int = Field(default=0, ge=0)
    # Open set: classroom, lab, seminar_hall, ...
    room_type: str = Field(default="classroom", min_length=1)
    capacity: int = Field(default=0, ge=0)
    has_projector: bool = False
    has_ac: bool = False

    @field_validator("room_number", "block", mode="before")
    @classmethod
    def _required(cls, v: str) -> str:
        return required_text(v)

    @field_validator("room_type", mode="before")
    @classmethod
    def _normalize_room_type(cls, v: str) -> str:
        return required_text(v).lower().replace(" ", "_")


class RoomCreate(RoomBase):
    pass


class RoomUpdate(BaseModel):
    room_number: str | None = None
    block: str | None = None
    floor: int | None = Field(default=None, ge=0)
    room_type: str | None = None
    capacity: int | None = Field(default=None, ge=0)
    has_projector: bool | None = None
    has_ac: bool | None = None


class RoomOut(RoomBase):
    id: int
    created_at: datetime | None = None

    class Config:
        from_attributes = True
