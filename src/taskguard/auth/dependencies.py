"""FastAPI auth dependencies.

Learn: These are used as Depends() in route handlers. They are the
hand-off point between the middleware (which only knows about tokens)
and the services (which only know about user ids):

    get_identity         → IdentityContext from request.state
    get_current_user     → User, or 401 via NotAuthenticated
    get_current_user_id  → int
"""

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from taskguard.auth.context import ANONYMOUS, IdentityContext
from taskguard.db.engine import get_db
from taskguard.db.models import User
from taskguard.services.identity import IdentityResolver


def get_identity(request: Request) -> IdentityContext:
    """Identity context set by AuthenticationMiddleware (anonymous if unset)."""
    return getattr(request.state, "identity", ANONYMOUS)


async def get_current_user(
    identity: IdentityContext = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Resolve the caller to a User (required — 401 if not possible)."""
    return await IdentityResolver(db).current_user(identity)


async def get_current_user_id(user: User = Depends(get_current_user)) -> int:
    return user.id
