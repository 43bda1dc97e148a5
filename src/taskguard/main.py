"""FastAPI application factory.

Learn: App factory pattern — create_app() returns a configured FastAPI
instance. Lifespan logs startup/shutdown and disposes the engine.
Middleware, error handlers, and routers are all registered here.
"""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from taskguard import __version__
from taskguard.api import api_router
from taskguard.config import settings
from taskguard.errors import NotAuthenticated, TaskGuardError, ValidationFailed
from taskguard.log import configure_logging

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle.

    Learn: Anything before `yield` runs at startup, after `yield` runs at
    shutdown. Settings were already validated at import time, so a bad
    signing configuration never gets this far.
    """
    logger.info(
        "taskguard.starting",
        version=__version__,
        environment=settings.environment,
        port=settings.port,
        jwt_algorithm=settings.jwt_algorithm,
        token_ttl_minutes=settings.jwt_expiration_minutes,
    )

    yield

    logger.info("taskguard.shutdown")
    from taskguard.db.engine import engine
    await engine.dispose()


async def handle_taskguard_error(request: Request, exc: TaskGuardError) -> JSONResponse:
    """Render any TaskGuardError as {"error": code, "message": ...}."""
    headers = None
    if isinstance(exc, NotAuthenticated):
        headers = {"WWW-Authenticate": "Bearer"}
    if exc.status_code >= 500:
        logger.error("taskguard.error", code=exc.code, path=request.url.path)
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict(),
        headers=headers,
    )


async def handle_request_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Render FastAPI's schema errors (wrong type, bad enum, bad JSON) as VALIDATION_ERROR.

    Learn: Missing fields never get here; request schemas make them Optional
    so taskguard.validation reports them. What's left are values of the
    wrong shape, e.g. status="DONE" or a non-numeric task id.
    """
    messages = []
    for err in exc.errors():
        field = ".".join(
            str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")
        )
        messages.append(f"{field}: {err['msg']}" if field else err["msg"])
    error = ValidationFailed(messages or ["Invalid request"])
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


def create_app() -> FastAPI:
    """Build and return the FastAPI application."""
    configure_logging()

    app = FastAPI(
        title="TaskGuard",
        description="Owner-scoped task API with stateless bearer-token auth",
        version=__version__,
        lifespan=lifespan,
    )

    # ── Middleware stack ──────────────────────────────────────
    # Starlette middleware executes in reverse order of registration.
    # Request flow: RequestId → Security → Authentication → CORS → handler
    # Authentication must stay inside RequestId (so its log lines carry
    # the request id) and outside every route.

    from taskguard.middleware.authentication import AuthenticationMiddleware
    from taskguard.middleware.request_id import RequestIdMiddleware
    from taskguard.middleware.security import SecurityHeadersMiddleware

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,  # tokens travel in headers, not cookies
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", "X-Request-ID"],
        expose_headers=["X-Request-ID"],
        max_age=3600,
    )
    app.add_middleware(AuthenticationMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestIdMiddleware)

    app.add_exception_handler(TaskGuardError, handle_taskguard_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)

    app.include_router(api_router)

    return app


# Default app instance (used by uvicorn: taskguard.main:app)
app = create_app()
