from __future__ import annotations

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from campus.core.database import get_db
from campus.core.security import decode_token
from campus.services.campus_service import CampusService
from campus.services.policy import Actor, Role
from campus.services.store import EntityStore


bearer_scheme = HTTPBearer(auto_error=False)


def _extract_token(request: Request, creds: HTTPAuthorizationCredentials | None) -> str | None:
    if creds is not None and creds.credentials:
        return creds.credentials
    cookie_token = request.cookies.get("access_token")
    return cookie_token or None


def get_current_actor(
    request: Request,
    creds: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> Actor:
    """Resolve the caller from the bearer token; no token means a guest."""

    cached = getattr(request.state, "actor", None)
    if isinstance(cached, Actor):
        return cached

    token = _extract_token(request, creds)
    if not token:
        actor = Actor.guest()
        request.state.actor = actor
        return actor

    try:
        payload = decode_token(token)
    except Exception:
        raise HTTPException(status_code=401, detail="INVALID_TOKEN")

    user_id = payload.get("sub")
    try:
        role = Role(str(payload.get("role") or "").lower())
    except ValueError:
        raise HTTPException(status_code=401, detail="INVALID_TOKEN")
    if not user_id:
        raise HTTPException(status_code=401, detail="INVALID_TOKEN")

    actor = Actor(role=role, user_id=str(user_id), name=str(payload.get("name") or user_id))
    request.state.actor = actor
    return actor


def get_store(db: Session = Depends(get_db)) -> EntityStore:
    return EntityStore(db)


def get_service(
    actor: Actor = Depends(get_current_actor),
    store: EntityStore = Depends(get_store),
) -> CampusService:
    return CampusService(store, actor)
