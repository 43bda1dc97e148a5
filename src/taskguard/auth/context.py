"""Request-scoped identity context.

Learn: The authentication middleware builds exactly one IdentityContext
per request and parks it on request.state. From there it is handed
explicitly to whatever needs it (dependencies, the identity resolver).
There is no global "current user" holder to read from.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class IdentityContext:
    """Who the request claims to be, after token verification.

    subject is the email from a verified token, or None for anonymous
    requests. user_id is the claim copy. The durable identity comes from
    resolving subject, and user_id must match the resolved row.
    """

    subject: Optional[str] = None
    user_id: Optional[int] = None

    @property
    def is_authenticated(self) -> bool:
        return self.subject is not None


ANONYMOUS = IdentityContext()
