from __future__ import annotations

from pydantic import BaseModel, Field

from campus.services.policy import Role


class DevTokenRequest(BaseModel):
    role: Role
    user_id: str = Field(min_length=1, max_length=100)
    name: str = Field(min_length=1, max_length=200)


class TokenResponse(BaseModel):
    ok: bool = True
    access_token: str
    token_type: str = "bearer"


class MeResponse(BaseModel):
    user_id: str
    name: str
    role: Role
