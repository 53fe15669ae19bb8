"""Shared test fixtures for the SectionVault test suite.

Tests run against a SQLite file in a temporary directory (set
TEST_DATABASE_URL to point at another database). Tables are created once
and emptied before each test.
"""

import os
import tempfile

# Configure the app before any sectionvault import reads settings.
_TMP_DIR = tempfile.mkdtemp(prefix="sectionvault-tests-")
os.environ["DATABASE_URL"] = os.environ.get(
    "TEST_DATABASE_URL",
    f"sqlite:///{os.path.join(_TMP_DIR, 'test.db')}",
)
os.environ["AUTH_ENABLED"] = "false"
os.environ["LOG_FORMAT"] = "text"

import pytest
from sqlalchemy import text
from fastapi.testclient import TestClient

from sectionvault.database import SessionLocal, engine, get_db, init_db
from sectionvault.main import app
from sectionvault.core.config import settings
from sectionvault.core.token_factory import create_token
from sectionvault.services.change_notifier import ChangeEvent

init_db(engine)

# Children before parents.
_CLEAN_TABLES = ["activity_log", "owner_grants", "section_versions", "sections"]


@pytest.fixture(autouse=True)
def _clean_tables():
    """Empty all tables before each test.

    Runs before the test (not after) so a failing test leaves its data
    behind for inspection.
    """
    db = SessionLocal()
    try:
        for table in _CLEAN_TABLES:
            db.execute(text(f"DELETE FROM {table}"))
        db.commit()
    finally:
        db.close()
    yield


@pytest.fixture()
def db():
    """Per-test database session."""
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture()
def client(db):
    """FastAPI TestClient with the DB dependency overridden to use the test session."""

    def _override_get_db():
        yield db

    app.dependency_overrides[get_db] = _override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


class RecordingNotifier:
    """Keeps every delivered event in memory."""

    def __init__(self):
        self.events: list[ChangeEvent] = []

    def notify(self, event: ChangeEvent) -> None:
        self.events.append(event)


class FailingNotifier:
    """Raises on every delivery, like a notification outage."""

    def __init__(self):
        self.calls = 0

    def notify(self, event: ChangeEvent) -> None:
        self.calls += 1
        raise RuntimeError("notification backend down")


@pytest.fixture()
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture()
def auth_enabled(monkeypatch):
    """Turn authentication on for the duration of a test."""
    monkeypatch.setattr(settings, "auth_enabled", True)


def auth_headers(user_id: str, role: str = "editor") -> dict:
    """Bearer headers for *user_id* signed with the configured secret."""
    token = create_token(subject=user_id, role=role, secret=settings.jwt_secret_key)
    return {"Authorization": f"Bearer {token}"}


def section_url(owner_id: str = "proj-1", kind: str = "SCOPE") -> str:
    return f"/api/projects/{owner_id}/sections/{kind}"
