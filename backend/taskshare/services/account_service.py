"""Account Service — registration (optionally through an invite) and login.

Invariants:
    - Stored emails are normalized identities
    - An invite token and the new user row commit together or not at all:
      a duplicate email leaves the token redeemable
    - A token only registers the email it was issued to; a mismatch is the same
      InvalidTokenError as an unknown token and leaves the token untouched
    - authenticate() gives one InvalidCredentialsError for unknown email and
      wrong password
"""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from taskshare.core.domain_types import Plan
from taskshare.core.errors import (
    DuplicateIdentityError, InvalidCredentialsError, InvalidInputError,
    InvalidTokenError,
)
from taskshare.core.identity import normalize_identity, same_identity
from taskshare.core.repository_protocols import PasswordHasher
from taskshare.models.user import User
from taskshare.services.identity_resolver import IdentityResolver
from taskshare.services.invitation_ledger import InvitationLedger

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8


class AccountService:

    def __init__(self, db: AsyncSession, hasher: PasswordHasher):
        self.db = db
        self.hasher = hasher
        self.resolver = IdentityResolver(db)

    async def register(
        self,
        name: str,
        email: str,
        password: str,
        invite_token: str | None = None,
    ) -> User:
        identity = normalize_identity(email)
        if len(password) < MIN_PASSWORD_LENGTH:
            raise InvalidInputError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters", "password",
            )
        if await self.resolver.find(identity) is not None:
            raise DuplicateIdentityError(identity)

        if invite_token:
            ledger = InvitationLedger(self.db)
            invitee = await ledger.redeem_invite(invite_token)
            if not same_identity(invitee.email, identity):
                logger.warning(
                    "Invite token presented for a different email",
                    extra={"actor": identity, "target": invitee.email},
                )
                raise InvalidTokenError()
            await ledger.claim_invite(invite_token)

        user = User(
            name=name.strip(),
            email=identity,
            password_hash=self.hasher.hash(password),
            plan=Plan.FREE.value,
        )
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise DuplicateIdentityError(identity)

        logger.info(
            "User registered",
            extra={"actor": identity, "role": "invited" if invite_token else "direct"},
        )
        return user

    async def authenticate(self, email: str, password: str) -> User:
        try:
            identity = normalize_identity(email)
        except InvalidInputError:
            raise InvalidCredentialsError()
        user = await self.resolver.find(identity)
        if user is None or not self.hasher.verify(user.password_hash, password):
            raise InvalidCredentialsError()
        return user
