"""Infrastructure adapters — session tokens, payment signatures, password hashing,
email sinks and the database session manager.

Tests cover:
    - Session tokens round-trip; tampered, expired and foreign tokens are 401
    - Razorpay signature: HMAC-SHA256 over "order|payment", constant-time compare
    - Argon2 hasher verifies and rejects without raising
    - Email sinks report failure as False, never raise; the logging sink keeps no
      per-message state
    - DatabaseSessionManager maps raw SQLAlchemy errors to StorageUnavailableError
    - Settings refuse to load without the signing secrets
"""

import hashlib
import hmac
import logging
import smtplib
from datetime import datetime, timedelta, timezone

import jwt
import pytest
from pydantic import ValidationError
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from taskshare.core.errors import (
    ResourceNotFoundError, StorageUnavailableError, UnauthenticatedError,
)
from taskshare.infrastructure.database import DatabaseSessionManager
from taskshare.infrastructure.email_sender import (
    LoggingEmailSender, SMTPEmailSender, build_notification_sink, deliver_in_background,
)
from taskshare.infrastructure.payment_gateway import RazorpaySignatureVerifier
from taskshare.infrastructure.session_tokens import (
    ALGORITHM, decode_session_token, issue_session_token,
)
from taskshare.config import Settings

SECRET = "unit-test-secret-long-enough-for-hs256-keys"


# ─── Session tokens ──────────────────────────────────────────────

def test_session_token_round_trip():
    token, expires_at = issue_session_token("alice@example.com", SECRET, 30)
    assert decode_session_token(token, SECRET) == "alice@example.com"
    assert expires_at > datetime.now(timezone.utc)


def test_session_token_wrong_secret_rejected():
    token, _ = issue_session_token("alice@example.com", SECRET, 30)
    with pytest.raises(UnauthenticatedError):
        decode_session_token(token, "another-secret-that-is-also-long-enough")


def test_session_token_expired_rejected():
    token, _ = issue_session_token(
        "alice@example.com", SECRET, 1,
        now=datetime.now(timezone.utc) - timedelta(minutes=10),
    )
    with pytest.raises(UnauthenticatedError) as exc:
        decode_session_token(token, SECRET)
    assert exc.value.message == "Session expired"


def test_session_token_requires_issuer():
    foreign = jwt.encode(
        {"sub": "alice@example.com", "exp": datetime.now(timezone.utc) + timedelta(minutes=5)},
        SECRET, algorithm=ALGORITHM,
    )
    with pytest.raises(UnauthenticatedError):
        decode_session_token(foreign, SECRET)


# ─── Payment signature ───────────────────────────────────────────

def test_signature_matches_hmac_sha256():
    verifier = RazorpaySignatureVerifier("key-secret")
    expected = hmac.new(b"key-secret", b"order_1|pay_1", hashlib.sha256).hexdigest()
    assert verifier.expected_signature("order_1", "pay_1") == expected
    assert verifier.verify("order_1", "pay_1", expected)


def test_signature_rejects_tampering():
    verifier = RazorpaySignatureVerifier("key-secret")
    good = verifier.expected_signature("order_1", "pay_1")
    assert not verifier.verify("order_2", "pay_1", good)
    tampered = good[:-1] + ("1" if good[-1] == "0" else "0")
    assert not verifier.verify("order_1", "pay_1", tampered)


def test_signature_rejects_empty_fields():
    verifier = RazorpaySignatureVerifier("key-secret")
    assert not verifier.verify("", "pay_1", "abc")
    assert not verifier.verify("order_1", "pay_1", "")


# ─── Passwords ───────────────────────────────────────────────────

def test_password_hasher_verifies(hasher):
    hashed = hasher.hash("hunter22hunter")
    assert hashed != "hunter22hunter"
    assert hasher.verify(hashed, "hunter22hunter")
    assert not hasher.verify(hashed, "wrong-password")


def test_password_hasher_tolerates_garbage_hash(hasher):
    assert not hasher.verify("not-a-hash", "whatever")


# ─── Email sinks ─────────────────────────────────────────────────

async def test_logging_sink_logs_without_retaining_messages(caplog):
    sink = LoggingEmailSender()
    with caplog.at_level(logging.INFO, logger="taskshare.infrastructure.email_sender"):
        for i in range(1000):
            assert await sink.send(f"user{i}@example.com", "Invite", "<p>join</p>")
    assert vars(sink) == {}
    assert sum("Email (not delivered): Invite" in r.getMessage() for r in caplog.records) == 1000


async def test_smtp_failure_returns_false(monkeypatch):
    sender = SMTPEmailSender(host="smtp.invalid")

    def _boom(*args, **kwargs):
        raise smtplib.SMTPConnectError(421, "unavailable")

    monkeypatch.setattr(sender, "_send_blocking", _boom)
    assert await sender.send("bob@example.com", "Hi", "<p>Hi</p>") is False


async def test_background_delivery_swallows_failure(monkeypatch):
    sender = SMTPEmailSender(host="smtp.invalid")
    def _down(*args):
        raise OSError("network down")

    monkeypatch.setattr(sender, "_send_blocking", _down)
    await deliver_in_background(sender, "bob@example.com", "Hi", "<p>Hi</p>")


def test_sink_selection_follows_settings():
    assert isinstance(build_notification_sink(Settings(email_provider="log")), LoggingEmailSender)
    assert isinstance(
        build_notification_sink(Settings(email_provider="smtp", smtp_host="mail.example.com")),
        SMTPEmailSender,
    )


# ─── Database session manager ────────────────────────────────────

def _manager(test_engine, test_session_factory) -> DatabaseSessionManager:
    manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    manager.engine = test_engine
    manager._session_factory = test_session_factory
    return manager


async def test_raw_sqlalchemy_error_becomes_storage_unavailable(test_engine, test_session_factory):
    manager = _manager(test_engine, test_session_factory)
    with pytest.raises(StorageUnavailableError):
        async with manager.session() as db:
            await db.execute(text("SELECT * FROM no_such_table"))


async def test_domain_error_passes_through_unchanged(test_engine, test_session_factory):
    manager = _manager(test_engine, test_session_factory)
    with pytest.raises(ResourceNotFoundError):
        async with manager.session():
            raise ResourceNotFoundError("Task", "x")


async def test_health_check_true_on_live_engine(test_engine, test_session_factory):
    assert await _manager(test_engine, test_session_factory).health_check()


def test_database_url_is_converted_for_asyncpg():
    settings = Settings(database_url="postgresql://u:p@host:5432/db")
    assert settings.database_url.startswith("postgresql+asyncpg://")


# ─── Settings ────────────────────────────────────────────────────

@pytest.mark.parametrize("missing", ["SESSION_SECRET", "RAZORPAY_KEY_SECRET"])
def test_settings_refuse_to_start_without_secrets(monkeypatch, missing):
    monkeypatch.delenv(missing, raising=False)
    with pytest.raises(ValidationError, match=missing.lower()):
        Settings(_env_file=None)


def test_settings_reject_short_session_secret(monkeypatch):
    monkeypatch.setenv("SESSION_SECRET", "too-short")
    with pytest.raises(ValidationError, match="session_secret"):
        Settings(_env_file=None)
