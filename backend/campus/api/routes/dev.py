from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from campus.api.deps import get_current_actor
from campus.core.config import settings
from campus.core.security import create_access_token
from campus.schemas.auth import DevTokenRequest, MeResponse, TokenResponse
from campus.services.policy import Actor


router = APIRouter()


@router.post("/token", response_model=TokenResponse)
def dev_token(payload: DevTokenRequest) -> TokenResponse:
    """Dev-only token minting endpoint.

    Real deployments get tokens from the campus account system, which signs
    them with the same secret.
    """

    if settings.is_production:
        raise HTTPException(status_code=404, detail="NOT_FOUND")
    token = create_access_token(user_id=payload.user_id.strip(), name=payload.name.strip(), role=payload.role.value)
    return TokenResponse(access_token=token)


@router.get("/me", response_model=MeResponse)
def me(actor: Actor = Depends(get_current_actor)) -> MeResponse:
    return MeResponse(user_id=actor.user_id, name=actor.name, role=actor.role)
