"""Shared pytest fixtures: SQLite in-memory database, recording bus, temp file storage."""

import logging
import os
import tempfile
from typing import Any, Dict, List, Tuple
from uuid import uuid4

# must be set before noted.config builds its settings
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("TELEGRAM_BOT_TOKEN", "123456:test-bot-token")
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="noted-logs-"))
os.environ["NOTED_SKIP_LIFESPAN_DB"] = "1"

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from noted.api.deps import get_file_storage, get_pubsub
from noted.config import get_settings
from noted.core.models import BaseModel
from noted.core.models.user import User
from noted.core.notifier import UpdateNotifier
from noted.core.pubsub import PubSub
from noted.core.services.note_service import NoteService
from noted.core.storage import FileStorage
from noted.database import get_db_session
from noted.main import app
from noted.security.jwt import create_access_token

# Silence extremely verbose DEBUG logs from aiosqlite to keep test output readable
logging.getLogger("aiosqlite").setLevel(logging.WARNING)


class RecordingPubSub(PubSub):
    """Bus that only remembers what was published."""

    def __init__(self):
        self.published: List[Tuple[str, Dict[str, Any]]] = []

    async def publish(self, topic, payload):
        self.published.append((topic, payload))

    def subscribe(self, topic):
        raise NotImplementedError

    def topics(self) -> List[str]:
        return [topic for topic, _ in self.published]


@pytest.fixture
async def test_engine():
    """Fresh SQLite in-memory engine (and schema) per test."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,  # keep the same memory DB across connections
        connect_args={"check_same_thread": False},
    )

    # SQLite only enforces ON DELETE CASCADE with foreign keys switched on
    @event.listens_for(engine.sync_engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):  # noqa: ANN001
        cursor = dbapi_connection.cursor()
        try:
            cursor.execute("PRAGMA foreign_keys=ON")
        finally:
            cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(BaseModel.metadata.create_all)

    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture
def session_maker(test_engine):
    return async_sessionmaker(test_engine, expire_on_commit=False)


@pytest.fixture
async def test_session(session_maker):
    async with session_maker() as session:
        yield session


@pytest.fixture
def test_settings():
    return get_settings()


@pytest.fixture
def bus():
    return RecordingPubSub()


@pytest.fixture
def notifier(bus):
    return UpdateNotifier(bus)


@pytest.fixture
def storage(tmp_path, test_settings):
    return FileStorage(root=str(tmp_path / "uploads"), settings=test_settings)


@pytest.fixture
def note_service(test_session, notifier, storage):
    return NoteService(test_session, notifier, storage)


async def make_user(session, telegram_id=None, **profile) -> User:
    telegram_id = telegram_id if telegram_id is not None else int(uuid4().int % 10**9)
    data = {"id": telegram_id, "first_name": "Test", **profile}
    user = User(telegram_id=telegram_id, telegram_data=data)
    session.add(user)
    await session.commit()
    return user


@pytest.fixture
async def test_user(test_session):
    """A committed user to own notes and tags."""
    return await make_user(test_session, first_name="Ada", username="ada")


@pytest.fixture
async def other_user(test_session):
    return await make_user(test_session, first_name="Bob")


@pytest.fixture
def auth_headers(test_user):
    token = create_access_token({"sub": str(test_user.id)})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def test_app(session_maker, bus, storage):
    """App wired to the test database, recording bus and temp storage."""

    async def _override_get_db():
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_db_session] = _override_get_db
    app.dependency_overrides[get_pubsub] = lambda: bus
    app.dependency_overrides[get_file_storage] = lambda: storage
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
async def async_client(test_app):
    async with AsyncClient(transport=ASGITransport(app=test_app), base_url="http://test") as ac:
        yield ac
