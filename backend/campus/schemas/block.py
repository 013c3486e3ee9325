from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from campus.schemas._fields import clean_text, required_text


class BlockBase(BaseModel):
    name: str = Field(min_length=1)
    floors: int = Field(default=1, ge=1)
    description: str = ""

    @field_validator("name", mode="before")
    @classmethod
    def _required(cls, v: str) -> str:
        return required_text(v)

    @field_validator("description", mode="before")
    @classmethod
    def _optional(cls, v: str | None) -> str:
        return clean_text(v) or ""


class BlockCreate(BlockBase):
    pass


class BlockUpdate(BaseModel):
    name: str | None = None
    floors: int | None = Field(default=None, ge=1)
    description: str | None = None


class BlockOut(BlockBase):
    id: int
    created_at: datetime | None = None

    class Config:
        from_attributes = True
