from __future__ import annotations

from fastapi import APIRouter, Depends, Response

from campus.api.deps import get_service
from campus.schemas.block import BlockCreate, BlockOut, BlockUpdate
from campus.services.campus_service import CampusService


router = APIRouter()


@router.get("/", response_model=list[BlockOut])
def list_blocks(service: CampusService = Depends(get_service)) -> list[BlockOut]:
    return service.list_blocks()


@router.post("/", response_model=BlockOut, status_code=201)
def create_block(payload: BlockCreate, service: CampusService = Depends(get_service)) -> BlockOut:
    return service.add_block(payload)


@router.patch("/{block_id}", response_model=BlockOut)
def update_block(block_id: int, payload: BlockUpdate, service: CampusService = Depends(get_service)) -> BlockOut:
    return service.update_block(block_id, payload)


@router.delete("/{block_id}", status_code=204)
def delete_block(block_id: int, service: CampusService = Depends(get_service)) -> Response:
    service.delete_block(block_id)
    return Response(status_code=204)
