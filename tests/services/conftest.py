"""Service test fixtures — async DB, seeded users, fake push channel, FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - Seeded users are detached from any session (safe to read after a rollback)
    - get_db dependency overridden to use test DB sessions
    - db_manager patched for code paths that bypass get_db (WebSocket user lookup)
    - Presence registry and push channel are fresh per test

Design Decisions:
    - SQLite in-memory with StaticPool: every session sees the same database
    - FakeChannel records pushes instead of talking to sockets
"""

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from sqlalchemy.pool import StaticPool
from httpx import ASGITransport, AsyncClient

from mentorlink.api import dependencies
from mentorlink.core.domain_types import Role
from mentorlink.core.presence_registry import PresenceRegistry
from mentorlink.db.base import Base
from mentorlink.infrastructure.database import get_db, DatabaseSessionManager
from mentorlink.infrastructure.websocket_channel import WebSocketPushChannel
from mentorlink.models.user import User
import mentorlink.models  # noqa: F401
import mentorlink.infrastructure.database as db_module
from mentorlink.main import app


class FakeChannel:
    """PushChannel double: records pushes, broadcasts and closes."""

    def __init__(self):
        self.pushed: list[tuple[str, dict]] = []
        self.broadcasts: list[dict] = []
        self.closed: list[tuple[str, int]] = []
        self.dead: set[str] = set()

    async def push(self, session_token, payload):
        if session_token in self.dead:
            return False
        self.pushed.append((session_token, payload))
        return True

    async def broadcast(self, payload):
        self.broadcasts.append(payload)

    async def close(self, session_token, code, reason=""):
        self.closed.append((session_token, code))


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False, poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
def make_user(test_session_factory):
    """Factory: insert a user in its own session and return it detached."""
    counter = {"n": 0}

    async def _make(role: Role, name: str | None = None) -> User:
        counter["n"] += 1
        name = name or f"{role.value.title()} {counter['n']}"
        user = User(
            email=f"{role.value}{counter['n']}@example.com",
            full_name=name,
            role=role,
        )
        async with test_session_factory() as session:
            session.add(user)
            await session.commit()
        return user

    return _make


@pytest.fixture
async def mentor(make_user):
    return await make_user(Role.MENTOR, "Tara Mentor")


@pytest.fixture
async def mentee(make_user):
    return await make_user(Role.MENTEE, "Milo Mentee")


@pytest.fixture
def fake_channel():
    return FakeChannel()


@pytest.fixture
def registry():
    return PresenceRegistry()


@pytest.fixture
def push_channel():
    return WebSocketPushChannel()


@pytest.fixture
def use_test_db(test_engine, test_session_factory):
    """Point get_db and db_manager at the test database."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    yield

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


@pytest.fixture
def use_realtime(registry, push_channel):
    """Fresh presence registry and push channel for the app under test."""
    app.dependency_overrides[dependencies.get_presence_registry] = lambda: registry
    app.dependency_overrides[dependencies.get_push_channel] = lambda: push_channel
    yield
    app.dependency_overrides.pop(dependencies.get_presence_registry, None)
    app.dependency_overrides.pop(dependencies.get_push_channel, None)


@pytest.fixture
async def client(use_test_db, use_realtime):
    """FastAPI test client with DB and realtime dependencies overridden."""
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c


@pytest.fixture
def as_user():
    """Identity header for a user."""
    def _headers(user: User) -> dict:
        return {"X-User-Id": str(user.id)}
    return _headers
