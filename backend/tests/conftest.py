from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from campus.core.bootstrap import seed_demo_data
from campus.core.database import get_db, get_engine, init_db, make_session_factory
from campus.core.security import create_access_token
from campus.main import create_app
from campus.services.campus_service import CampusService
from campus.services.policy import Actor, Role
from campus.services.store import EntityStore


ADMIN = Actor(role=Role.ADMIN, user_id="A001", name="Admin User")
TEACHER = Actor(role=Role.TEACHER, user_id="T001", name="Dr. Smith")
OTHER_TEACHER = Actor(role=Role.TEACHER, user_id="T002", name="Prof. Johnson")
GUEST = Actor.guest()


@pytest.fixture
def session_factory():
    engine = get_engine("sqlite://")
    init_db(engine)
    factory = make_session_factory(engine)
    yield factory
    engine.dispose()


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def store(db) -> EntityStore:
    return EntityStore(db)


@pytest.fixture
def seeded_store(store) -> EntityStore:
    assert seed_demo_data(store) is True
    return store


@pytest.fixture
def service_for(seeded_store):
    def _make(actor: Actor) -> CampusService:
        return CampusService(seeded_store, actor)

    return _make


@pytest.fixture
def client(session_factory, seeded_store):
    app = create_app()

    def _override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _override_get_db
    # Not used as a context manager: the startup seeding targets the default engine.
    return TestClient(app)


def auth_headers(actor: Actor) -> dict[str, str]:
    token = create_access_token(user_id=actor.user_id, name=actor.name, role=actor.role.value)
    return {"Authorization": f"Bearer {token}"}
