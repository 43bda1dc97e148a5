"""Test fixtures — a fresh in-memory database per test.

Learn: Testing pattern for async SQLAlchemy + FastAPI:

1. Environment is pointed at SQLite/aiosqlite before taskguard is
   imported, so settings and the module-level engine never touch Postgres.
2. Each test gets its own in-memory database. StaticPool keeps the single
   connection alive so every session in the test sees the same tables.
3. The app's get_db is overridden to hand out that session.

Auth is NOT mocked: tests register, log in, and send real bearer tokens
through the real middleware.
"""

import os

os.environ["TASKGUARD_DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["TASKGUARD_JWT_SECRET"] = "test-secret-0123456789abcdef0123456789abcdef"
os.environ["TASKGUARD_BCRYPT_ROUNDS"] = "4"

import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from taskguard.config import settings  # noqa: E402
from taskguard.db.engine import get_db  # noqa: E402
from taskguard.db.models import Base  # noqa: E402
from taskguard.main import app  # noqa: E402


@pytest_asyncio.fixture()
async def db_session():
    """Per-test session on a brand-new in-memory schema."""
    engine = create_async_engine(settings.database_url, poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session = AsyncSession(engine, expire_on_commit=False)
    try:
        yield session
    finally:
        await session.close()
        await engine.dispose()


@pytest_asyncio.fixture()
async def client(db_session):
    """HTTP client with get_db overridden; authentication runs for real."""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture()
async def register(client):
    """Register a user through the API and return (auth headers, user dict).

    Usage:  headers, user = await register("alice@example.com")
    """

    async def _register(email: str, name: str = "Test User", password: str = "password_123"):
        r = await client.post(
            "/api/v1/auth/register",
            json={"email": email, "name": name, "password": password},
        )
        assert r.status_code == 201, r.text
        body = r.json()
        return {"Authorization": f"Bearer {body['access_token']}"}, body["user"]

    return _register
