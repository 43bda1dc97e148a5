"""Async SQLAlchemy engine and session factory.

Learn: SQLAlchemy 2.0 async mode — create_async_engine for connection pooling,
AsyncSession for per-request database access, dependency injection via FastAPI.
Each request gets its own session; nothing is shared between requests.
"""

from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool

from taskguard.config import settings


def _engine_options(url: str) -> dict:
    # SQLite (tests, local dev): open a connection per checkout rather than
    # pooling one across event loops.
    if url.startswith("sqlite"):
        return {"poolclass": NullPool}
    return {"pool_size": 5, "max_overflow": 15}


engine = create_async_engine(
    settings.database_url,
    echo=settings.debug,
    **_engine_options(settings.database_url),
)

# Session factory: each request gets its own session.
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_db() -> AsyncSession:
    """FastAPI dependency — yields a session per request, auto-closes."""
    async with async_session_factory() as session:
        try:
            yield session
        finally:
            await session.close()


async def create_schema() -> None:
    """Create all tables from the ORM metadata (dev convenience)."""
    from taskguard.db.models import Base

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
