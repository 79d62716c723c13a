"""Invitation Ledger — exactly-once token consumption across sessions.

Invariants:
    - consume_invite clears the token and stamps redeemed_at
    - A claimant that read the token before another session consumed it still
      loses: the compare-and-set UPDATE matches zero rows
    - Of N sessions racing on one token, exactly one consumes it
    - Separate connections (file-backed SQLite) so commits are really shared
"""

import asyncio

import pytest
from sqlalchemy import select

from taskshare.core.errors import InvalidTokenError, InviteeExistsError
from taskshare.db.session import create_schema, create_session_factory
from taskshare.models.person import Person
from taskshare.services.invitation_ledger import InvitationLedger


@pytest.fixture
async def file_sessions(tmp_path):
    factory = create_session_factory(f"sqlite+aiosqlite:///{tmp_path / 'ledger.db'}")
    engine = factory.kw["bind"]
    await create_schema(engine)
    yield factory
    await engine.dispose()


@pytest.fixture
async def issued(file_sessions):
    async with file_sessions() as db:
        _, token = await InvitationLedger(db).issue_invite(
            "alice@example.com", "Bob", "bob@example.com",
        )
    return token


async def test_consume_clears_token(file_sessions, issued):
    async with file_sessions() as db:
        person = await InvitationLedger(db).consume_invite(issued)
        assert person.invite_token is None
        assert person.redeemed_at is not None


async def test_second_consume_fails(file_sessions, issued):
    async with file_sessions() as db:
        await InvitationLedger(db).consume_invite(issued)
    async with file_sessions() as db:
        with pytest.raises(InvalidTokenError):
            await InvitationLedger(db).consume_invite(issued)


async def test_stale_reader_loses_the_race(file_sessions, issued, monkeypatch):
    async with file_sessions() as slow, file_sessions() as fast:
        slow_ledger = InvitationLedger(slow)
        stale = await slow_ledger.redeem_invite(issued)

        await InvitationLedger(fast).consume_invite(issued)

        async def _stale_lookup(token):
            return stale

        monkeypatch.setattr(slow_ledger, "redeem_invite", _stale_lookup)
        with pytest.raises(InvalidTokenError):
            await slow_ledger.claim_invite(issued)
        await slow.rollback()

    async with file_sessions() as db:
        person = (await db.execute(
            select(Person).where(Person.email == "bob@example.com"),
        )).scalar_one()
        assert person.invite_token is None


@pytest.mark.parametrize("claimants", [2, 8])
async def test_concurrent_redemptions_succeed_exactly_once(file_sessions, issued, claimants):
    async def _attempt():
        async with file_sessions() as db:
            return await InvitationLedger(db).consume_invite(issued)

    outcomes = await asyncio.gather(
        *(_attempt() for _ in range(claimants)), return_exceptions=True,
    )

    winners = [o for o in outcomes if isinstance(o, Person)]
    losers = [o for o in outcomes if isinstance(o, InvalidTokenError)]
    assert len(winners) == 1
    assert len(losers) == claimants - 1

    async with file_sessions() as db:
        person = (await db.execute(
            select(Person).where(Person.email == "bob@example.com"),
        )).scalar_one()
        assert person.invite_token is None
        assert person.redeemed_at is not None


async def test_reinvite_same_email_conflicts(file_sessions, issued):
    async with file_sessions() as db:
        with pytest.raises(InviteeExistsError):
            await InvitationLedger(db).issue_invite(
                "carol@example.com", "Bob Again", " BOB@example.com",
            )
