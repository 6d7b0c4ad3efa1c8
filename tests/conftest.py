from __future__ import annotations

import os

# Must be set before src.core.config caches its settings
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("JWT_SECRET", "test-signing-secret")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

from collections.abc import AsyncIterator  # noqa: E402

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool  # noqa: E402
from src.api.deps import get_db_session  # noqa: E402
from src.api.main import app  # noqa: E402
from src.infrastructure.db.base import Base  # noqa: E402
from src.infrastructure.db.models import UserRole  # noqa: E402
from tests.utils import auth_headers, create_account  # noqa: E402


@pytest.fixture()
async def session_factory() -> AsyncIterator[async_sessionmaker[AsyncSession]]:
    """Fresh in-memory database per test."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, expire_on_commit=False)

    await engine.dispose()


@pytest.fixture()
async def db(session_factory: async_sessionmaker[AsyncSession]) -> AsyncIterator[AsyncSession]:
    """Provide a database session for tests that need direct DB access."""
    async with session_factory() as session:
        yield session


@pytest.fixture()
async def async_client(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncIterator[AsyncClient]:
    """Async HTTP client wired to the per-test database."""

    async def override_db_session() -> AsyncIterator[AsyncSession]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db_session] = override_db_session
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.pop(get_db_session, None)


@pytest.fixture()
async def admin_account(session_factory: async_sessionmaker[AsyncSession]) -> dict:
    return await create_account(
        session_factory,
        email="admin@example.com",
        first_name="Ada",
        last_name="Admin",
        role=UserRole.ADMIN,
    )


@pytest.fixture()
async def user_account(session_factory: async_sessionmaker[AsyncSession]) -> dict:
    return await create_account(
        session_factory,
        email="user@example.com",
        first_name="Uma",
        last_name="User",
    )


@pytest.fixture()
def admin_headers(admin_account: dict) -> dict[str, str]:
    return auth_headers(admin_account["token"])


@pytest.fixture()
def user_headers(user_account: dict) -> dict[str, str]:
    return auth_headers(user_account["token"])
