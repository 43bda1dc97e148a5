"""Auth API — registration, login, current account.

Learn: Routes for the account lifecycle:
- POST /auth/register → create an account, returns an access token
- POST /auth/login → email/password → access token
- GET /auth/me → current user info
- DELETE /auth/me → delete the account and all of its tasks

register and login are the only routes reachable without a token.
There is no refresh endpoint: when a token expires, log in again.
"""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from taskguard.auth.dependencies import get_current_user
from taskguard.db.engine import get_db
from taskguard.db.models import User
from taskguard.services.auth_service import AuthResult, AuthService
from taskguard.validation import validate_login, validate_registration

router = APIRouter(prefix="/auth")


# ─── Schemas ─────────────────────────────────────────────


# Optional so a missing field is reported by validate_* as a 400, not a 422.
class RegisterRequest(BaseModel):
    email: Optional[str] = None
    name: Optional[str] = None
    password: Optional[str] = None


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class UserRead(BaseModel):
    id: int
    email: str
    name: str
    created_at: datetime

    model_config = {"from_attributes": True}


class AuthResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserRead


def _auth_svc(db: AsyncSession = Depends(get_db)) -> AuthService:
    return AuthService(db)


def _to_response(result: AuthResult) -> AuthResponse:
    return AuthResponse(
        access_token=result.access_token,
        user=UserRead.model_validate(result.user),
    )


# ─── Register ────────────────────────────────────────────


@router.post("/register", response_model=AuthResponse, status_code=201)
async def register(body: RegisterRequest, svc: AuthService = Depends(_auth_svc)):
    """Create a new user account and return a token for it."""
    validate_registration(body.email, body.name, body.password).raise_for_errors()
    result = await svc.register(body.email, body.name, body.password)
    return _to_response(result)


# ─── Login ───────────────────────────────────────────────


@router.post("/login", response_model=AuthResponse)
async def login(body: LoginRequest, svc: AuthService = Depends(_auth_svc)):
    """Login with email and password → access token."""
    validate_login(body.email, body.password).raise_for_errors()
    result = await svc.login(body.email, body.password)
    return _to_response(result)


# ─── Current user ───────────────────────────────────────


@router.get("/me", response_model=UserRead)
async def get_me(user: User = Depends(get_current_user)):
    """Get the current authenticated user's info."""
    return user


@router.delete("/me", status_code=204)
async def delete_me(
    user: User = Depends(get_current_user),
    svc: AuthService = Depends(_auth_svc),
):
    """Delete the current account. Owned tasks go with it."""
    await svc.delete_account(user)
    return Response(status_code=204)
