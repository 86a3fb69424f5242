"""Health probes and storage error mapping.

Tests cover:
    - Liveness reports the online user count
    - Readiness is 200 with a reachable DB and 503 without one
    - DatabaseSessionManager maps SQLAlchemy errors to StorageFailureError
    - Domain errors pass through the session manager untouched
    - StorageFailureError renders as 503 through the global handler
"""

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy import text

import mentorlink.infrastructure.database as db_module
from mentorlink.core.domain_types import SessionToken
from mentorlink.core.errors import EmptyMessageError, StorageFailureError
from mentorlink.infrastructure.database import DatabaseSessionManager
from mentorlink.api.error_handlers import register_error_handlers


async def test_liveness_reports_online_count(client, registry):
    registry.register("someone", SessionToken("s1"))
    resp = await client.get("/api/v1/health/")
    assert resp.status_code == 200
    assert resp.json()["online_users"] == 1


async def test_readiness_with_database(client):
    resp = await client.get("/api/v1/health/ready")
    assert resp.status_code == 200
    assert resp.json()["checks"]["database"] == "healthy"


async def test_readiness_without_database(client, monkeypatch):
    monkeypatch.setattr(db_module, "db_manager", None)
    resp = await client.get("/api/v1/health/ready")
    assert resp.status_code == 503


async def test_session_maps_sqlalchemy_errors():
    manager = DatabaseSessionManager("sqlite+aiosqlite:///:memory:")
    with pytest.raises(StorageFailureError) as exc:
        async with manager.session() as db:
            await db.execute(text("SELECT * FROM no_such_table"))
    assert exc.value.http_status == 503
    await manager.dispose()


async def test_session_passes_domain_errors_through():
    manager = DatabaseSessionManager("sqlite+aiosqlite:///:memory:")
    with pytest.raises(EmptyMessageError):
        async with manager.session():
            raise EmptyMessageError()
    await manager.dispose()


async def test_health_check_true_for_reachable_db():
    manager = DatabaseSessionManager("sqlite+aiosqlite:///:memory:")
    assert await manager.health_check() is True
    await manager.dispose()


async def test_storage_failure_renders_503():
    failing_app = FastAPI()
    register_error_handlers(failing_app)

    @failing_app.get("/boom")
    async def boom():
        raise StorageFailureError("disk full", "commit")

    async with AsyncClient(
        transport=ASGITransport(app=failing_app), base_url="http://test",
    ) as c:
        resp = await c.get("/boom")
    assert resp.status_code == 503
    body = resp.json()["error"]
    assert body["code"] == "STORAGE_FAILURE"
    assert body["severity"] == "critical"
