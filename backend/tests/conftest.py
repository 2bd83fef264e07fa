"""Pytest fixtures — SQLite database for fast, isolated tests."""
import os

os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")
os.environ.setdefault("REMINDER_SWEEP_ENABLED", "false")

import uuid  # noqa: E402
from datetime import datetime, timedelta  # noqa: E402
from typing import Optional  # noqa: E402

import pytest  # noqa: E402
from sqlalchemy import create_engine, event  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from app.database import Base, enable_sqlite_foreign_keys, get_db, utcnow  # noqa: E402
from app.main import app  # noqa: E402
from app.routers.reminders import get_reminder_sweeper  # noqa: E402
from app.services.reminder_sweeper import ReminderSweeper  # noqa: E402

# Import all models so they register with Base.metadata
from app.models.event import Event, EventCategory  # noqa: E402
from app.models.rsvp import EventRSVP               # noqa: E402, F401
from app.models.notification import Notification    # noqa: E402, F401

SQLITE_URL = "sqlite:///./test.db"


@pytest.fixture(scope="function")
def db_engine():
    """Create a fresh SQLite engine for each test."""
    engine = create_engine(SQLITE_URL, connect_args={"check_same_thread": False, "timeout": 30})

    # Enable WAL mode for better concurrency
    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()

    enable_sqlite_foreign_keys(engine)

    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def session_factory(db_engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=db_engine)


@pytest.fixture(scope="function")
def db(session_factory):
    """Yield a database session, closed after the test."""
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


class RecordingDispatcher:
    """Fake reminder channel — records every dispatch, optionally failing for some events."""

    def __init__(self, fail_for: tuple = (), reject_for: tuple = ()):
        self.calls: list[tuple[str, set[str]]] = []
        self.fail_for = set(fail_for)
        self.reject_for = set(reject_for)

    def dispatch(self, user_ids, event):
        if event.event_id in self.fail_for:
            raise ConnectionError("push gateway unreachable")
        if event.event_id in self.reject_for:
            return False
        self.calls.append((event.event_id, set(user_ids)))
        return True


@pytest.fixture(scope="function")
def dispatcher():
    return RecordingDispatcher()


@pytest.fixture(scope="function")
def sweeper(session_factory, dispatcher):
    return ReminderSweeper(session_factory, dispatcher)


@pytest.fixture(scope="function")
def client(session_factory, sweeper):
    """FastAPI TestClient with the database and sweeper dependencies overridden."""

    def _override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _override_get_db
    app.dependency_overrides[get_reminder_sweeper] = lambda: sweeper
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------
def new_id() -> str:
    return str(uuid.uuid4())


def insert_event(
    db,
    artist_id: Optional[str] = None,
    start_time: Optional[datetime] = None,
    title: str = "Test Event",
    category: EventCategory = EventCategory.concert,
    attendee_count: int = 0,
) -> Event:
    """Insert an event row directly, bypassing the future-start check (for past/ongoing events)."""
    event_row = Event(
        artist_id=artist_id or new_id(),
        title=title,
        description="",
        category=category,
        start_time=start_time or utcnow() + timedelta(days=1),
        attendee_count=attendee_count,
    )
    db.add(event_row)
    db.commit()
    db.refresh(event_row)
    return event_row


def create_event_via_api(
    client: TestClient,
    artist_id: str,
    title: str = "Test Event",
    start_offset: timedelta = timedelta(days=1),
    duration: Optional[timedelta] = timedelta(hours=2),
    **extra,
):
    """Helper — POST /api/events and return the response."""
    start = utcnow() + start_offset
    payload = {
        "artist_id": artist_id,
        "title": title,
        "description": "An evening set",
        "category": "concert",
        "start_time": start.isoformat(),
        **extra,
    }
    if duration is not None:
        payload["end_time"] = (start + duration).isoformat()
    return client.post("/api/events/", json=payload)
