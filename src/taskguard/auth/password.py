"""Password hashing utilities.

Learn: Uses bcrypt for secure password hashing. bcrypt automatically
handles salting and is resistant to rainbow table attacks.
The work factor comes from settings.bcrypt_rounds (12 by default,
~100ms per hash on modern hardware).
"""

from functools import lru_cache

import bcrypt

from taskguard.config import settings


def hash_password(password: str) -> str:
    """Hash a password with bcrypt.

    Learn: bcrypt includes a random salt automatically and produces
    hashes starting with "$2b$". Passwords are truncated to 72 bytes
    (bcrypt's limit).
    """
    pw_bytes = password.encode("utf-8")[:72]
    salt = bcrypt.gensalt(rounds=settings.bcrypt_rounds)
    return bcrypt.hashpw(pw_bytes, salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a password against its bcrypt hash."""
    try:
        pw_bytes = password.encode("utf-8")[:72]
        hash_bytes = password_hash.encode("utf-8")
        return bcrypt.checkpw(pw_bytes, hash_bytes)
    except (ValueError, TypeError):
        return False


@lru_cache(maxsize=1)
def _dummy_hash() -> str:
    return hash_password("taskguard-timing-equalizer")


def burn_password_check(password: str) -> None:
    """Spend the same bcrypt time as a real check, for unknown emails.

    Learn: Without this, "no such user" returns in microseconds and
    "wrong password" takes ~100ms, which tells an attacker which emails
    are registered even though both return the same error.
    """
    verify_password(password, _dummy_hash())
