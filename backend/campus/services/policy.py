from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from campus.core.errors import PermissionDeniedError
from campus.models import Reservation


logger = logging.getLogger(__name__)


class Role(str, Enum):
    ADMIN = "admin"
    TEACHER = "teacher"
    GUEST = "guest"


class Permission(str, Enum):
    STUDENTS_READ = "students:read"
    STUDENTS_WRITE = "students:write"
    BLOCKS_READ = "blocks:read"
    BLOCKS_WRITE = "blocks:write"
    ROOMS_READ = "rooms:read"
    ROOMS_WRITE = "rooms:write"
    TIMETABLE_READ = "timetable:read"
    TIMETABLE_WRITE = "timetable:write"
    VACANCY_READ = "vacancy:read"
    RESERVATIONS_READ = "reservations:read"
    RESERVATIONS_CREATE = "reservations:create"
    RESERVATIONS_CANCEL = "reservations:cancel"
    RESERVATIONS_MANAGE_ANY = "reservations:manage_any"


_GUEST = frozenset(
    {
        Permission.STUDENTS_READ,
        Permission.TIMETABLE_READ,
        Permission.VACANCY_READ,
    }
)
_TEACHER = _GUEST | {
    Permission.BLOCKS_READ,
    Permission.ROOMS_READ,
    Permission.RESERVATIONS_READ,
    Permission.RESERVATIONS_CREATE,
    Permission.RESERVATIONS_CANCEL,
}

GRANTS: dict[Role, frozenset[Permission]] = {
    Role.GUEST: _GUEST,
    Role.TEACHER: frozenset(_TEACHER),
    Role.ADMIN: frozenset(Permission),
}


@dataclass(frozen=True)
class Actor:
    """Caller identity as asserted by the external account system."""

    role: Role
    user_id: str
    name: str

    @classmethod
    def guest(cls) -> "Actor":
        return cls(role=Role.GUEST, user_id="guest", name="Guest")


class AccessPolicy:
    def __init__(self, grants: dict[Role, frozenset[Permission]] | None = None) -> None:
        self.grants = grants or GRANTS

    def can(self, actor: Actor, permission: Permission) -> bool:
        return permission in self.grants.get(actor.role, frozenset())

    def require(self, actor: Actor, permission: Permission) -> None:
        if not self.can(actor, permission):
            logger.info("Denied %s for %s (%s)", permission.value, actor.user_id, actor.role.value)
            raise PermissionDeniedError(
                f"Role {actor.role.value!r} may not perform {permission.value}",
                code="NOT_AUTHORIZED",
            )

    def require_reservation_owner(self, actor: Actor, reservation: Reservation) -> None:
        if self.can(actor, Permission.RESERVATIONS_MANAGE_ANY):
            return
        self.require(actor, Permission.RESERVATIONS_CANCEL)
        if reservation.teacher_id != actor.user_id:
            logger.info("Denied cancel of reservation %s for %s (not owner)", reservation.id, actor.user_id)
            raise PermissionDeniedError(
                "Teachers may only cancel their own reservations",
                code="NOT_RESERVATION_OWNER",
            )
