from __future__ import annotations

import threading

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from campus.core.config import settings


# Every store unit of work (reads included) runs under this lock, so a
# check-then-commit sequence is atomic and readers never see a half-written row.
STORE_LOCK = threading.RLock()


def get_engine(url: str | None = None) -> Engine:
    url = (url or settings.database_url).strip()

    # Normalize common Postgres URLs to SQLAlchemy's psycopg2 dialect.
    if url.startswith("postgresql://"):
        url = "postgresql+psycopg2://" + url.removeprefix("postgresql://")
    elif url.startswith("postgres://"):
        url = "postgresql+psycopg2://" + url.removeprefix("postgres://")

    parsed = make_url(url)
    if parsed.get_backend_name() == "sqlite":
        database = parsed.database or ""
        if database in {"", ":memory:"}:
            # One shared connection keeps the in-memory database alive across sessions.
            return create_engine(
                url,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        return create_engine(url, connect_args={"check_same_thread": False})

    return create_engine(url, pool_pre_ping=True)


def make_session_factory(engine: Engine) -> sessionmaker:
    # Rows handed back to callers must stay readable after the unit of work commits.
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False)


ENGINE = get_engine()
SessionLocal = make_session_factory(ENGINE)


def init_db(engine: Engine | None = None) -> None:
    """Create all tables (idempotent)."""

    from campus.models import Base

    Base.metadata.create_all(bind=engine or ENGINE)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def ping(db: Session) -> bool:
    try:
        with STORE_LOCK:
            db.execute(text("SELECT 1"))
            db.rollback()
    except Exception:
        return False
    return True
