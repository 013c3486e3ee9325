from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping

from campus.core.errors import DuplicateKeyError, ValidationError
from campus.services.store import EntityStore, Kind


logger = logging.getLogger(__name__)


STUDENT_FIELDS = ("usn", "name", "email", "phone", "department", "semester", "section")


@dataclass(frozen=True)
class ImportRowError:
    row: int
    code: str
    message: str


@dataclass
class ImportResult:
    inserted: int = 0
    skipped: int = 0
    errors: list[ImportRowError] = field(default_factory=list)


def normalize_row(row: Mapping[str, Any]) -> dict[str, Any]:
    """Match headers case-insensitively and drop columns that are not student fields."""
    out: dict[str, Any] = {}
    for key, value in row.items():
        name = str(key or "").strip().lower()
        if name in STUDENT_FIELDS:
            out[name] = value.strip() if isinstance(value, str) else value
    return out


def import_students(store: EntityStore, rows: Iterable[Mapping[str, Any]]) -> ImportResult:
    """Insert each row as a Student; a bad row is skipped, the rest still go in.

    Rows are numbered from 1 in the returned errors.
    """

    result = ImportResult()
    for index, row in enumerate(rows, start=1):
        if not isinstance(row, Mapping):
            result.skipped += 1
            result.errors.append(
                ImportRowError(row=index, code="INVALID_ROW", message=f"Expected a field map, got {type(row).__name__}")
            )
            logger.debug("Skipped student row %d: not a mapping", index)
            continue
        try:
            store.add(Kind.STUDENT, normalize_row(row))
        except (ValidationError, DuplicateKeyError) as exc:
            result.skipped += 1
            result.errors.append(ImportRowError(row=index, code=exc.code, message=exc.message))
            logger.debug("Skipped student row %d: %s", index, exc.code)
            continue
        result.inserted += 1

    logger.info("Student import finished inserted=%d skipped=%d", result.inserted, result.skipped)
    return result
