import os

# Settings are read at import time, so the environment goes first
os.environ["APP_ENV"] = "test"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["CRON_SECRET"] = "test-cron-secret"

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock

import jwt
import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from src.common.config import settings
from src.common.database import database
from src.models.models import Base, PointEntry, Profile


def make_token(user_id, secret=None, audience=None, expires_in=3600) -> str:
    payload = {
        "sub": str(user_id),
        "aud": audience or settings.JWT_AUDIENCE,
        "exp": datetime.now(timezone.utc) + timedelta(seconds=expires_in),
    }
    return jwt.encode(payload, secret or settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine, monkeypatch):
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    # The event dispatcher opens its sessions from here
    monkeypatch.setattr(database, "async_session", factory)
    return factory


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def events():
    """Stand-in dispatcher that records what the ledger emits."""
    return AsyncMock()


async def _create_profile(db, email, **fields) -> Profile:
    profile = Profile(email=email, **fields)
    db.add(profile)
    await db.commit()
    return profile


@pytest.fixture
async def profile(db):
    return await _create_profile(db, "ana@economiza.com.br", full_name="Ana Souza")


@pytest.fixture
async def other_profile(db):
    return await _create_profile(db, "bruno@economiza.com.br", full_name="Bruno Lima")


@pytest.fixture
async def admin_profile(db):
    return await _create_profile(db, "admin@economiza.com.br", full_name="Admin", is_admin=True)


@pytest.fixture
def grant_xp(db):
    """Seed the ledger directly with an arbitrary number of points."""
    async def _grant(user_id, points, action_type="seed"):
        db.add(PointEntry(user_id=user_id, action_type=action_type, points=points, description="seed"))
        await db.commit()
    return _grant


@pytest.fixture
def auth_headers(profile):
    return {"Authorization": f"Bearer {make_token(profile.id)}"}


@pytest.fixture
def admin_headers(admin_profile):
    return {"Authorization": f"Bearer {make_token(admin_profile.id)}"}


@pytest.fixture
async def client(session_factory):
    from src.main import app

    async def override_get_db_session():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[database.get_db_session] = override_get_db_session
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def token_for():
    return make_token
