"""Health check endpoint.

Learn: Simple GET endpoint that verifies the server is running and the
database is reachable. It returns no user data, so it needs no token.
Failure details go to the log, never into the response.
"""

import structlog
from fastapi import APIRouter
from sqlalchemy import text

from taskguard import __version__
from taskguard.db.engine import engine

router = APIRouter()

logger = structlog.get_logger()


@router.get("/health")
async def health_check():
    """Check server health and database connectivity."""
    checks = {"server": "ok", "version": __version__}

    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        checks["database"] = "ok"
    except Exception:
        logger.exception("taskguard.health.database_unreachable")
        checks["database"] = "error"

    status = "healthy" if checks["database"] == "ok" else "degraded"
    return {"status": status, **checks}
