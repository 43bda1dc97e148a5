"""Error taxonomy for the auth and task layers.

Learn: Every failure a caller can see maps to exactly one of these.
Two merges are deliberate:
- Wrong password and unknown email are both InvalidCredential.
- Missing task and someone else's task are both NotFound.

Each class carries its HTTP status so main.py can register one handler
for the whole family instead of translating in every route.
"""

from typing import Any, Optional


class TaskGuardError(Exception):
    """Base exception for all TaskGuard errors."""

    status_code = 500
    default_code = "INTERNAL_ERROR"

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a dictionary for API responses."""
        return {"error": self.code, "message": self.message}


class InvalidCredential(TaskGuardError):
    """Bad email/password at login. Never says which one was wrong."""

    status_code = 401
    default_code = "INVALID_CREDENTIALS"

    def __init__(self, message: str = "Invalid email or password"):
        super().__init__(message)


class EmailAlreadyRegistered(TaskGuardError):
    status_code = 409
    default_code = "EMAIL_ALREADY_REGISTERED"

    def __init__(self, message: str = "Email already registered"):
        super().__init__(message)


class NotAuthenticated(TaskGuardError):
    """No usable identity on a request that needs one."""

    status_code = 401
    default_code = "NOT_AUTHENTICATED"

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message)


class NotFound(TaskGuardError):
    """Resource absent or not owned by the caller."""

    status_code = 404
    default_code = "NOT_FOUND"


class TaskNotFound(NotFound):
    def __init__(self, message: str = "Task not found"):
        super().__init__(message)


class ValidationFailed(TaskGuardError):
    """Input rejected by one of the taskguard.validation checks."""

    status_code = 400
    default_code = "VALIDATION_ERROR"

    def __init__(self, errors: list[str]):
        super().__init__(", ".join(errors))
        self.errors = errors
