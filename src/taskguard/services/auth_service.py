"""Registration and login.

Learn: Both operations end the same way, with a freshly signed access
token for the user. They differ only in how they get the user:
- register: insert a new row (email must be unused)
- login: find by email and check the password

Login failures are deliberately vague. Unknown email and wrong password
raise the same InvalidCredential and take about the same time.
"""

from dataclasses import dataclass
from typing import Optional

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from taskguard.auth.jwt import create_access_token
from taskguard.auth.password import burn_password_check, hash_password, verify_password
from taskguard.db.models import User, utcnow
from taskguard.errors import EmailAlreadyRegistered, InvalidCredential

logger = structlog.get_logger()


@dataclass(frozen=True)
class AuthResult:
    access_token: str
    user: User


class AuthService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_by_email(self, email: str) -> Optional[User]:
        result = await self.db.execute(select(User).where(User.email == email))
        return result.scalars().first()

    # ─── Register ────────────────────────────────────────

    async def register(self, email: str, name: str, password: str) -> AuthResult:
        """Create an account and sign the user in."""
        if await self.find_by_email(email):
            logger.info("taskguard.auth.register_conflict")
            raise EmailAlreadyRegistered()

        user = User(
            email=email,
            name=name.strip(),
            password_hash=hash_password(password),
            created_at=utcnow(),
        )
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError:
            # Lost a race with a concurrent registration for the same email.
            await self.db.rollback()
            logger.info("taskguard.auth.register_conflict", concurrent=True)
            raise EmailAlreadyRegistered() from None
        await self.db.refresh(user)

        logger.info("taskguard.auth.registered", user_id=user.id)
        return AuthResult(
            access_token=create_access_token(user.email, user.id),
            user=user,
        )

    # ─── Login ───────────────────────────────────────────

    async def login(self, email: str, password: str) -> AuthResult:
        user = await self.find_by_email(email)
        if not user:
            burn_password_check(password)
            logger.info("taskguard.auth.login_failed")
            raise InvalidCredential()

        if not verify_password(password, user.password_hash):
            logger.info("taskguard.auth.login_failed")
            raise InvalidCredential()

        logger.info("taskguard.auth.logged_in", user_id=user.id)
        return AuthResult(
            access_token=create_access_token(user.email, user.id),
            user=user,
        )

    # ─── Delete account ──────────────────────────────────

    async def delete_account(self, user: User) -> None:
        """Remove a user and, through the cascade, every task they own."""
        user_id = user.id
        await self.db.delete(user)
        await self.db.commit()
        logger.info("taskguard.auth.account_deleted", user_id=user_id)
