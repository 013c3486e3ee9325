from __future__ import annotations

from fastapi import APIRouter

from campus.api.routes import blocks, dev, reservations, rooms, students, timetable, vacancy


api_router = APIRouter()
api_router.include_router(dev.router, prefix="/dev", tags=["dev"])

# Role checks happen inside CampusService, so these routers stay open to guests.
api_router.include_router(students.router, prefix="/students", tags=["students"])
api_router.include_router(blocks.router, prefix="/blocks", tags=["blocks"])
api_router.include_router(rooms.router, prefix="/rooms", tags=["rooms"])
api_router.include_router(timetable.router, prefix="/timetable", tags=["timetable"])
api_router.include_router(vacancy.router, prefix="/vacancy", tags=["vacancy"])
api_router.include_router(reservations.router, prefix="/reservations", tags=["reservations"])
