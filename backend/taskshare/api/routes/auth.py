"""Auth Routes — register (optionally via invite), login, current user."""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from taskshare.api.dependencies import get_current_user, get_password_hasher
from taskshare.config import Settings, get_settings
from taskshare.infrastructure.database import get_db
from taskshare.infrastructure.passwords import Argon2PasswordHasher
from taskshare.infrastructure.session_tokens import issue_session_token
from taskshare.models.user import User
from taskshare.schemas.auth import (
    LoginRequest, RegisterRequest, TokenResponse, UserResponse,
)
from taskshare.services.account_service import AccountService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


def _user_response(user: User) -> UserResponse:
    return UserResponse(
        id=user.id, email=user.email, name=user.name,
        plan=user.plan, created_at=user.created_at,
    )


@router.post(
    "/register", response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
)
async def register(
    body: RegisterRequest,
    db: AsyncSession = Depends(get_db),
    hasher: Argon2PasswordHasher = Depends(get_password_hasher),
):
    user = await AccountService(db, hasher).register(
        body.name, body.email, body.password, body.invite_token,
    )
    return _user_response(user)


@router.post("/login", response_model=TokenResponse)
async def login(
    body: LoginRequest,
    db: AsyncSession = Depends(get_db),
    hasher: Argon2PasswordHasher = Depends(get_password_hasher),
    settings: Settings = Depends(get_settings),
):
    user = await AccountService(db, hasher).authenticate(body.email, body.password)
    token, expires_at = issue_session_token(
        user.email, settings.session_secret, settings.session_ttl_minutes,
    )
    logger.info("Login succeeded", extra={"actor": user.email})
    return TokenResponse(access_token=token, expires_at=expires_at)


@router.get("/me", response_model=UserResponse)
async def me(user: User = Depends(get_current_user)):
    return _user_response(user)
