"""structlog setup.

Learn: Middleware binds request_id (and user_id once a token checks out)
into structlog's contextvars. merge_contextvars is what copies those into
every log line, so it has to come first in the processor chain.
Development gets colored console output, everything else gets JSON.
"""

import logging

import structlog

from taskguard.config import settings


def configure_logging() -> None:
    level = logging.getLevelName(settings.log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    if settings.environment == "development":
        renderer = structlog.dev.ConsoleRenderer()
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        cache_logger_on_first_use=False,
    )
