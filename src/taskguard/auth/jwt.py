"""JWT token creation and verification.

Learn: JWT (JSON Web Token) provides stateless authentication.
The token carries everything needed to identify the caller:

    {"sub": email, "user_id": 42, "iat": 1700000000, "exp": 1700086400}

signed with HMAC (HS256 by default) using settings.jwt_secret.
verify_token is a pure function of (token, clock, secret): no DB,
no revocation list, so any replica can check any token.

Every verification failure (garbage, bad signature, expired, missing
claim) raises the same TokenError. Callers can't tell them apart, and
neither can whoever sent the token.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
import structlog

from taskguard.config import settings

logger = structlog.get_logger()

REQUIRED_CLAIMS = ["sub", "user_id", "iat", "exp"]


class TokenError(Exception):
    """Raised when a token fails verification, for any reason."""

    def __init__(self, message: str = "Invalid token"):
        super().__init__(message)


class SigningKeyError(RuntimeError):
    """Raised when tokens can't be signed with the configured key.

    This is a deployment problem, not a per-request one.
    """


@dataclass(frozen=True)
class TokenClaims:
    subject: str
    user_id: int
    issued_at: datetime
    expires_at: datetime


def create_access_token(
    subject: str,
    user_id: int,
    expires_minutes: Optional[int] = None,
    issued_at: Optional[datetime] = None,
) -> str:
    """Create a signed access token for a user.

    `issued_at` defaults to now; passing it explicitly lets tests mint
    tokens that are already past their expiry.
    """
    if not settings.jwt_secret:
        raise SigningKeyError("jwt_secret is not configured")

    iat = issued_at or datetime.now(timezone.utc)
    if expires_minutes is None:
        expires_minutes = settings.jwt_expiration_minutes
    ttl = timedelta(minutes=expires_minutes)
    payload = {
        "sub": subject,
        "user_id": user_id,
        "iat": iat,
        "exp": iat + ttl,
    }
    try:
        return jwt.encode(
            payload, settings.jwt_secret, algorithm=settings.jwt_algorithm
        )
    except (jwt.PyJWTError, TypeError, ValueError) as e:
        raise SigningKeyError(f"Could not sign token: {e}") from e


def verify_token(token: str) -> TokenClaims:
    """Verify a token's signature and expiry and return its claims.

    Raises TokenError on failure. The underlying reason is logged at
    debug level and otherwise discarded.
    """
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            options={"require": REQUIRED_CLAIMS},
        )
    except jwt.PyJWTError as e:
        logger.debug("taskguard.token.rejected", reason=type(e).__name__)
        raise TokenError() from None

    subject = payload["sub"]
    user_id = payload["user_id"]
    if not isinstance(subject, str) or not subject:
        logger.debug("taskguard.token.rejected", reason="bad_subject")
        raise TokenError()
    if isinstance(user_id, bool) or not isinstance(user_id, int):
        logger.debug("taskguard.token.rejected", reason="bad_user_id")
        raise TokenError()

    return TokenClaims(
        subject=subject,
        user_id=user_id,
        issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
        expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
    )
