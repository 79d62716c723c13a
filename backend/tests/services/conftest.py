"""Service test fixtures — async DB + FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db dependency overridden to use test DB session
    - db_manager initialized for code paths that bypass get_db (readiness probe)
    - Email, payment and hashing collaborators swapped via dependency_overrides

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for route tests
      (PostgreSQL-specific features not exercised here)
    - Cheap argon2 parameters: same code path, a fraction of the hashing cost
    - Razorpay HTTP calls answered by httpx.MockTransport
"""

import httpx
import pytest
from argon2 import PasswordHasher
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from httpx import ASGITransport, AsyncClient

from taskshare.api.dependencies import (
    get_notification_sink, get_password_hasher,
    get_payment_verifier, get_razorpay_client,
)
from taskshare.db.base import Base
from taskshare.infrastructure.database import get_db, DatabaseSessionManager
from taskshare.infrastructure.passwords import Argon2PasswordHasher
from taskshare.infrastructure.payment_gateway import (
    RazorpayClient, RazorpaySignatureVerifier,
)
import taskshare.infrastructure.database as db_module
import taskshare.models  # noqa: F401
from taskshare.main import app
from tests.services.api_helpers import (
    TEST_KEY_ID, TEST_KEY_SECRET, RecordingEmailSender,
)


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()

@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )

@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session

@pytest.fixture
def hasher():
    return Argon2PasswordHasher(
        PasswordHasher(time_cost=1, memory_cost=8, parallelism=1),
    )

@pytest.fixture
def outbox():
    return RecordingEmailSender()

@pytest.fixture
def verifier():
    return RazorpaySignatureVerifier(TEST_KEY_SECRET)

@pytest.fixture
def razorpay_requests():
    """Requests seen by the mocked Razorpay API; set ["status"] to force a failure."""
    return {"log": [], "status": 200}

@pytest.fixture
def razorpay_client(razorpay_requests):
    def handler(request: httpx.Request) -> httpx.Response:
        razorpay_requests["log"].append(request)
        status = razorpay_requests["status"]
        if status != 200:
            return httpx.Response(status, json={"error": {"description": "rejected"}})
        return httpx.Response(
            200,
            json={"id": "order_test123", "amount": 49900, "currency": "INR", "status": "created"},
        )

    return RazorpayClient(
        TEST_KEY_ID, TEST_KEY_SECRET,
        base_url="https://razorpay.test/v1",
        transport=httpx.MockTransport(handler),
    )

@pytest.fixture
async def client(
    test_engine, test_session_factory, hasher, outbox, verifier, razorpay_client,
):
    """FastAPI test client with DB and collaborator dependencies overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_password_hasher] = lambda: hasher
    app.dependency_overrides[get_notification_sink] = lambda: outbox
    app.dependency_overrides[get_payment_verifier] = lambda: verifier
    app.dependency_overrides[get_razorpay_client] = lambda: razorpay_client

    # Patch db_manager for code that uses it directly
    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager

