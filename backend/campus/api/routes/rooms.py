from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Response

from campus.api.deps import get_service
from campus.schemas.room import RoomCreate, RoomOut, RoomUpdate
from campus.services.campus_service import CampusService


router = APIRouter()


@router.get("/", response_model=list[RoomOut])
def list_rooms(
    block: str | None = Query(default=None),
    service: CampusService = Depends(get_service),
) -> list[RoomOut]:
    return service.list_rooms(block)


@router.post("/", response_model=RoomOut, status_code=201)
def create_room(payload: RoomCreate, service: CampusService = Depends(get_service)) -> RoomOut:
    return service.add_room(payload)


@router.patch("/{room_id}", response_model=RoomOut)
def update_room(room_id: int, payload: RoomUpdate, service: CampusService = Depends(get_service)) -> RoomOut:
    return service.update_room(room_id, payload)


@router.delete("/{room_id}", status_code=204)
def delete_room(room_id: int, service: CampusService = Depends(get_service)) -> Response:
    service.delete_room(room_id)
    return Response(status_code=204)
