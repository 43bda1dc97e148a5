"""Input checks that run before any business logic.

Learn: Pydantic schemas make sure a body has the right shape (a string
where a string goes). Request fields are Optional there, so a missing
field arrives here as None and is reported as "X is required" like a
blank one. The functions here decide whether the values are
acceptable, and report every problem at once instead of stopping at the
first one. Routes call them explicitly and raise ValidationFailed on a
bad result.
"""

import re
from dataclasses import dataclass, field
from typing import Optional

from taskguard.errors import ValidationFailed

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

NAME_MIN, NAME_MAX = 2, 50
PASSWORD_MIN = 6
TITLE_MAX = 255
DESCRIPTION_MAX = 1000


@dataclass
class ValidationResult:
    errors: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    def require(self, condition: bool, message: str) -> None:
        if not condition:
            self.errors.append(message)

    def raise_for_errors(self) -> None:
        if self.errors:
            raise ValidationFailed(self.errors)


def _blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


def validate_registration(
    email: Optional[str],
    name: Optional[str],
    password: Optional[str],
) -> ValidationResult:
    """Missing (None) and blank values are both reported as required."""
    result = ValidationResult()
    if _blank(email):
        result.errors.append("Email is required")
    else:
        result.require(bool(EMAIL_RE.match(email)), "Email must be valid")
    if _blank(name):
        result.errors.append("Name is required")
    else:
        result.require(
            NAME_MIN <= len(name.strip()) <= NAME_MAX,
            f"Name must be between {NAME_MIN} and {NAME_MAX} characters",
        )
    if _blank(password):
        result.errors.append("Password is required")
    else:
        result.require(
            len(password) >= PASSWORD_MIN,
            f"Password must be at least {PASSWORD_MIN} characters",
        )
    return result


def validate_login(email: Optional[str], password: Optional[str]) -> ValidationResult:
    result = ValidationResult()
    result.require(not _blank(email), "Email is required")
    result.require(not _blank(password), "Password is required")
    return result


def validate_task_fields(
    title: Optional[str],
    description: Optional[str],
    require_title: bool = True,
) -> ValidationResult:
    """Check task title/description.

    On create the title is mandatory. On update a missing title means
    "leave it alone", but a present one still has to be non-blank.
    """
    result = ValidationResult()
    if title is None:
        result.require(not require_title, "Title is required")
    elif not title.strip():
        result.errors.append("Title must not be blank")
    else:
        result.require(
            len(title) <= TITLE_MAX,
            f"Title must be at most {TITLE_MAX} characters",
        )
    if description is not None:
        result.require(
            len(description) <= DESCRIPTION_MAX,
            f"Description must be at most {DESCRIPTION_MAX} characters",
        )
    return result
