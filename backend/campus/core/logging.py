from __future__ import annotations

import logging
import logging.handlers
from pathlib import Path

from campus.core.config import BACKEND_DIR


# Reservation decisions and deletes are also kept in their own file in production.
AUDIT_LOGGERS = ("campus.services.reservations", "campus.services.store", "campus.services.policy")

_FORMAT = "%(asctime)s %(levelname)s [%(threadName)s] %(name)s %(message)s"


def _rotating(path: Path, level: int, formatter: logging.Formatter) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(path, maxBytes=5 * 1024 * 1024, backupCount=5, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def setup_logging(*, environment: str, level: str | None = None) -> None:
    """Configure the root logger once per process.

    Development logs to the console at DEBUG. Production logs at INFO to the
    console, to logs/campus.log, and (audit loggers only) to logs/audit.log.
    An explicit `level` (e.g. "WARNING") wins over the environment default.
    """

    root = logging.getLogger()
    if root.handlers:
        return

    is_production = (environment or "development").strip().lower() == "production"
    default = logging.INFO if is_production else logging.DEBUG
    resolved = logging.getLevelName((level or "").strip().upper()) if level else default
    if not isinstance(resolved, int):
        resolved = default

    formatter = logging.Formatter(fmt=_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S%z")

    console = logging.StreamHandler()
    console.setLevel(resolved)
    console.setFormatter(formatter)
    handlers: list[logging.Handler] = [console]

    if is_production:
        logs_dir = Path(BACKEND_DIR) / "logs"
        logs_dir.mkdir(parents=True, exist_ok=True)
        handlers.append(_rotating(logs_dir / "campus.log", resolved, formatter))

        audit = _rotating(logs_dir / "audit.log", logging.INFO, formatter)
        for name in AUDIT_LOGGERS:
            logging.getLogger(name).addHandler(audit)

    logging.basicConfig(level=resolved, handlers=handlers)

    # SQL echo at DEBUG drowns the reservation lines.
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        logging.getLogger(name).setLevel(resolved)
