"""Invitation Ledger — issue, preview and single-use consumption of invite tokens.

Invariants:
    - One Person row per normalized email; a second invite is InviteeExistsError
    - redeem_invite and claim_invite raise the same InvalidTokenError for unknown
      and already-consumed tokens
    - claim_invite is a compare-and-set (UPDATE ... WHERE id = :id AND
      invite_token = :token): of N concurrent claimants exactly one sees
      rowcount == 1
    - claim_invite does not commit, so registration can consume the token and
      insert the user in one transaction

Design Decisions:
    - Malformed tokens are rejected before touching the database
"""

import logging
from datetime import datetime, timezone

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from taskshare.core.errors import InvalidTokenError, InviteeExistsError, InvalidInputError
from taskshare.core.identity import normalize_identity
from taskshare.core.invitations import generate_invite_token, is_well_formed_token
from taskshare.models.person import Person

logger = logging.getLogger(__name__)


class InvitationLedger:
    """Invite token lifecycle on the persons table."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def issue_invite(
        self, inviter: str, invitee_name: str, invitee_email: str,
    ) -> tuple[Person, str]:
        """Create a Person with a fresh token. Returns (person, token)."""
        email = normalize_identity(invitee_email)
        name = invitee_name.strip()
        if not name:
            raise InvalidInputError("Invitee name cannot be empty", "name")

        existing = await self.db.execute(
            select(Person.id).where(Person.email == email),
        )
        if existing.scalar_one_or_none() is not None:
            raise InviteeExistsError(email)

        token = generate_invite_token()
        person = Person(
            name=name, email=email, invite_token=token,
            invited_by=normalize_identity(inviter),
        )
        self.db.add(person)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise InviteeExistsError(email)

        logger.info("Invite issued", extra={"actor": person.invited_by, "target": email})
        return person, token

    async def redeem_invite(self, token: str) -> Person:
        """Look up the pending invitation for a token without consuming it."""
        if not is_well_formed_token(token):
            raise InvalidTokenError()
        result = await self.db.execute(
            select(Person).where(Person.invite_token == token),
        )
        person = result.scalar_one_or_none()
        if person is None:
            raise InvalidTokenError()
        return person

    async def claim_invite(self, token: str) -> Person:
        """Atomically clear the token inside the current transaction."""
        person = await self.redeem_invite(token)
        result = await self.db.execute(
            update(Person)
            .where(Person.id == person.id, Person.invite_token == token)
            .values(invite_token=None, redeemed_at=datetime.now(timezone.utc))
            .execution_options(synchronize_session=False),
        )
        if result.rowcount != 1:
            logger.warning("Invite token lost a concurrent redemption race")
            raise InvalidTokenError()
        await self.db.refresh(person)
        return person

    async def consume_invite(self, token: str) -> Person:
        """Claim and commit."""
        person = await self.claim_invite(token)
        await self.db.commit()
        logger.info("Invite consumed", extra={"target": person.email})
        return person
