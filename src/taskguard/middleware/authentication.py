"""Bearer-token authentication middleware.

Learn: Runs once per request, before any route code. It turns the
Authorization header into an IdentityContext and stores it on
request.state.identity. It never rejects a request:

    no header / not "Bearer ..."   → anonymous
    Bearer <token that fails>      → anonymous (reason logged, not returned)
    Bearer <valid token>           → IdentityContext(subject=email)

Whether anonymous is acceptable is decided later, per route, by the
get_current_user dependency. The register and login paths skip token
handling entirely.
"""

from typing import Optional

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from taskguard.auth.context import ANONYMOUS, IdentityContext
from taskguard.auth.jwt import TokenError, verify_token

logger = structlog.get_logger()

BEARER_PREFIX = "Bearer "

PUBLIC_PATHS = frozenset({
    "/api/v1/auth/register",
    "/api/v1/auth/login",
})


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Return the token from an Authorization header value, or None.

    The prefix match is exact and case-sensitive: "bearer x" or
    "Bearer  x" with the token after a second space are not credentials.
    """
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        return None
    token = authorization[len(BEARER_PREFIX):]
    return token or None


def authenticate(path: str, authorization: Optional[str]) -> IdentityContext:
    """Build the identity context for one request."""
    if path in PUBLIC_PATHS:
        return ANONYMOUS

    token = extract_bearer_token(authorization)
    if token is None:
        return ANONYMOUS

    try:
        claims = verify_token(token)
    except TokenError:
        logger.info("taskguard.auth.token_rejected", path=path)
        return ANONYMOUS

    return IdentityContext(subject=claims.subject, user_id=claims.user_id)


class AuthenticationMiddleware(BaseHTTPMiddleware):
    """Attach an IdentityContext to every request."""

    async def dispatch(self, request: Request, call_next) -> Response:
        identity = authenticate(
            request.url.path, request.headers.get("Authorization")
        )
        request.state.identity = identity

        if identity.is_authenticated:
            structlog.contextvars.bind_contextvars(user_id=identity.user_id)

        return await call_next(request)
