"""Request Dependencies — actor resolution and collaborator wiring.

Invariants:
    - No bearer token, a bad token, or a token for a vanished user is
      UnauthenticatedError (401); no route body runs without an actor
    - Collaborators (hasher, email sink, payment adapters) come from
      dependencies so tests swap them through app.dependency_overrides
"""

from functools import lru_cache

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from taskshare.config import Settings, get_settings
from taskshare.core.domain_types import Identity
from taskshare.core.errors import UnauthenticatedError
from taskshare.infrastructure.database import get_db
from taskshare.infrastructure.email_sender import build_notification_sink
from taskshare.infrastructure.passwords import Argon2PasswordHasher
from taskshare.infrastructure.payment_gateway import (
    RazorpayClient, RazorpaySignatureVerifier,
)
from taskshare.infrastructure.session_tokens import decode_session_token
from taskshare.models.user import User
from taskshare.services.identity_resolver import IdentityResolver

_bearer = HTTPBearer(auto_error=False)


async def get_current_identity(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
    settings: Settings = Depends(get_settings),
) -> Identity:
    if credentials is None or not credentials.credentials:
        raise UnauthenticatedError()
    return Identity(decode_session_token(credentials.credentials, settings.session_secret))


async def get_current_user(
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
) -> User:
    user = await IdentityResolver(db).find(identity)
    if user is None:
        raise UnauthenticatedError("Account no longer exists")
    return user


@lru_cache
def get_password_hasher() -> Argon2PasswordHasher:
    return Argon2PasswordHasher()


@lru_cache
def get_notification_sink():
    return build_notification_sink(get_settings())


def get_payment_verifier(
    settings: Settings = Depends(get_settings),
) -> RazorpaySignatureVerifier:
    return RazorpaySignatureVerifier(settings.razorpay_key_secret)


def get_razorpay_client(
    settings: Settings = Depends(get_settings),
) -> RazorpayClient:
    return RazorpayClient(
        settings.razorpay_key_id,
        settings.razorpay_key_secret,
        base_url=settings.razorpay_base_url,
        timeout=settings.razorpay_timeout_seconds,
    )
