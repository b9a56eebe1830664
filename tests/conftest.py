"""Pytest fixtures: test client, in-memory SQLite, fake event log."""
import os

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import delete
from sqlmodel import Session

# Must be set before the app is imported
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("ADMIN_SECRET", "test-admin-secret")
os.environ.setdefault("GEO_LOOKUP_ENABLED", "false")
os.environ.setdefault("RATE_LIMIT_TRACK_PER_MINUTE", "10000")

from giftx.core.database import engine
from giftx.main import app
from giftx.models import ErrorLog, Visitor, VisitorEvent
from giftx.realtime import get_hub

ADMIN_SECRET = os.environ["ADMIN_SECRET"]


def _clear_tables() -> None:
    with engine.begin() as conn:
        for model in (Visitor, VisitorEvent, ErrorLog):
            conn.execute(delete(model.__table__))


@pytest.fixture(scope="function")
def client():
    """TestClient; the lifespan creates the tables and the live observer."""
    get_hub().reset()
    with TestClient(app) as c:
        _clear_tables()
        yield c


@pytest.fixture
def db(client):
    with Session(engine) as session:
        yield session


@pytest.fixture
def admin_headers():
    return {"X-Admin-Secret": ADMIN_SECRET}


class RecordingLog:
    """EventLog double that keeps rows in memory, or fails every write."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.visits: list[dict] = []
        self.events: list[dict] = []

    async def insert_visit(self, row: dict) -> None:
        if self.fail:
            raise ConnectionError("backend unreachable")
        self.visits.append(row)

    async def insert_event(self, row: dict) -> None:
        if self.fail:
            raise ConnectionError("backend unreachable")
        self.events.append(row)


@pytest.fixture
def event_log():
    return RecordingLog()


@pytest.fixture
def failing_log():
    return RecordingLog(fail=True)
