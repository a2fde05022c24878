"""Service test fixtures — async DB, fake identity/payment adapters, test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db, get_identity_verifier and get_payment_gateway are overridden;
      nothing reaches Firebase or Stripe
    - app.state.db_manager points at the test engine (readiness probe)
    - Bearer token "token-<email>" verifies as <email>; anything else is 401

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for route tests
      (PostgreSQL-specific features not exercised here)
    - Users seeded directly through the ORM so tests can start from any
      role/status without going through admin endpoints
"""

from unittest.mock import AsyncMock

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from httpx import ASGITransport, AsyncClient

from blood_center.api.dependencies import get_identity_verifier, get_payment_gateway
from blood_center.db.base import Base
from blood_center.infrastructure.database import get_db, DatabaseSessionManager
from blood_center.main import app
from blood_center.models.user import User
from tests.services.fakes import FakeIdentityVerifier, request_payload


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
def payment_gateway():
    gateway = AsyncMock()
    gateway.create_intent.return_value = "pi_123_secret_456"
    return gateway


@pytest.fixture
async def client(test_engine, test_session_factory, payment_gateway):
    """FastAPI test client with DB and external adapters overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    verifier = FakeIdentityVerifier()
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_identity_verifier] = lambda: verifier
    app.dependency_overrides[get_payment_gateway] = lambda: payment_gateway

    # Readiness probe reads the manager from app.state directly
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    app.state.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    del app.state.db_manager


@pytest.fixture
def make_user(test_db):
    """Insert a user with the given role/status; returns the ORM row."""
    async def _make(
        email: str, role: str = "donor", status: str = "active",
        name: str | None = None,
    ) -> User:
        user = User(
            name=name or email.split("@")[0].title(),
            email=email,
            photo="https://img.example.com/avatar.png",
            blood_group="O+",
            district="Dhaka",
            upazila="Savar",
            role=role,
            status=status,
        )
        test_db.add(user)
        await test_db.commit()
        return user

    return _make


@pytest.fixture
async def admin(make_user):
    return await make_user("admin@example.com", role="admin")


@pytest.fixture
async def volunteer(make_user):
    return await make_user("volunteer@example.com", role="volunteer")


@pytest.fixture
async def donor(make_user):
    return await make_user("donor@example.com")


@pytest.fixture
def create_request(client):
    """POST a donation request and return its id."""
    async def _create(**overrides) -> str:
        res = await client.post(
            "/donation-requests", json=request_payload(**overrides),
        )
        assert res.status_code == 201, res.text
        return res.json()["id"]

    return _create
