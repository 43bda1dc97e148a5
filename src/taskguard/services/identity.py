"""Identity resolver — the single way to learn who the caller is.

Learn: A verified token only proves that someone once logged in as an
email. current_user() turns that into a durable User row, and fails with
NotAuthenticated when the request is anonymous, the account no longer
exists, or the email now belongs to a different account than the one the
token was issued for. Nothing downstream reads the token or the request
directly.
"""

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from taskguard.auth.context import IdentityContext
from taskguard.db.models import User
from taskguard.errors import NotAuthenticated

logger = structlog.get_logger()


class IdentityResolver:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def current_user(self, identity: IdentityContext) -> User:
        if not identity.is_authenticated:
            raise NotAuthenticated()

        result = await self.db.execute(
            select(User).where(User.email == identity.subject)
        )
        user = result.scalars().first()
        if not user:
            # Valid signature, but the account is gone.
            logger.info("taskguard.identity.unknown_subject", claim_user_id=identity.user_id)
            raise NotAuthenticated()
        if identity.user_id is not None and identity.user_id != user.id:
            # Email was re-registered after this token was issued.
            logger.info(
                "taskguard.identity.stale_subject",
                claim_user_id=identity.user_id,
                user_id=user.id,
            )
            raise NotAuthenticated()
        return user

    async def current_user_id(self, identity: IdentityContext) -> int:
        user = await self.current_user(identity)
        return user.id
