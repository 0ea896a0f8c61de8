"""Shared fixtures: in-memory SQLite store, sessions, and an API client bound to it."""

import os
import sys
import tempfile

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

# Must be set before badge_api.config is imported anywhere
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="badge-api-logs-"))

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from badge_api.config import Settings
from badge_api.database import build_engine, create_tables, get_db
from badge_api.main import app
from badge_api.services.movement_service import MovementLog


def make_session_factory(url="sqlite://"):
    engine = build_engine(Settings(DATABASE_URL=url))
    create_tables(bind=engine)
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def make_movement_log(session_factory, timeout=5.0):
    config = Settings(DATABASE_URL="sqlite://", STORE_TIMEOUT_SECONDS=timeout)
    return MovementLog(config, session_factory=session_factory)


@pytest.fixture
def session_factory():
    return make_session_factory()


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    original_log = app.state.movement_log
    app.dependency_overrides[get_db] = override_get_db
    app.state.movement_log = make_movement_log(session_factory)
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
    app.state.movement_log = original_log
