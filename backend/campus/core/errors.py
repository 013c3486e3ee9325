from __future__ import annotations

from typing import Any


class CampusError(Exception):
    """Base for every error the core reports to its callers.

    `code` is a stable machine-readable token (e.g. ROOM_NOT_FOUND) and
    `status_code` is the HTTP status the API layer renders it with.
    """

    status_code = 400
    default_code = "CAMPUS_ERROR"

    def __init__(self, message: str, *, code: str | None = None, errors: list[Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.errors = list(errors or [])

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code, "message": self.message, "errors": self.errors}


class ValidationError(CampusError):
    status_code = 422
    default_code = "VALIDATION_ERROR"


class TimeParseError(ValidationError):
    default_code = "INVALID_TIME"


class DuplicateKeyError(CampusError):
    status_code = 409
    default_code = "DUPLICATE_KEY"


class NotFoundError(CampusError):
    status_code = 404
    default_code = "NOT_FOUND"


class ConflictError(CampusError):
    status_code = 409
    default_code = "CONFLICT"


class PermissionDeniedError(CampusError):
    status_code = 403
    default_code = "NOT_AUTHORIZED"
