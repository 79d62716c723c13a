"""Session Tokens — short-lived HS256 bearer tokens carrying the actor identity.

Invariants:
    - `sub` is always a normalized identity (issued from the stored user email)
    - Expired, tampered or malformed tokens all raise UnauthenticatedError
    - Tokens never carry plan tier: entitlements are re-read from storage per request
"""

import logging
from datetime import datetime, timedelta, timezone

import jwt
from jwt.exceptions import ExpiredSignatureError, InvalidTokenError

from taskshare.core.errors import UnauthenticatedError

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"
ISSUER = "taskshare"


def issue_session_token(
    identity: str, secret: str, ttl_minutes: int, now: datetime | None = None,
) -> tuple[str, datetime]:
    """Return (token, expires_at) for an authenticated identity."""
    issued_at = now or datetime.now(timezone.utc)
    expires_at = issued_at + timedelta(minutes=ttl_minutes)
    payload = {
        "sub": identity,
        "iss": ISSUER,
        "iat": int(issued_at.timestamp()),
        "exp": int(expires_at.timestamp()),
    }
    return jwt.encode(payload, secret, algorithm=ALGORITHM), expires_at


def decode_session_token(token: str, secret: str) -> str:
    """Return the identity inside a valid token."""
    try:
        payload = jwt.decode(
            token, secret, algorithms=[ALGORITHM], issuer=ISSUER,
            options={"require": ["sub", "exp", "iss"]},
        )
    except ExpiredSignatureError:
        raise UnauthenticatedError("Session expired")
    except InvalidTokenError as e:
        logger.warning(f"Rejected session token: {e}")
        raise UnauthenticatedError("Invalid session token")
    return payload["sub"]
