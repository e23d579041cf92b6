"""Integration test fixtures for database and HTTP client operations.

Each test gets its own SQLite database file, so the suite needs no external
services. Uses polyfactory for type-safe test data generation.
"""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.pool import NullPool

from src.authgate.core.config import get_settings
from src.authgate.core.db import create_tables
from src.authgate.core.db import engine as db_engine
from src.authgate.core.security import TokenCodec, get_password_hasher
from src.authgate.main import create_app
from src.authgate.models import User
from src.authgate.repositories import (
    ApiKeyRepository,
    PasswordResetTokenRepository,
    SessionRepository,
    UserRepository,
)
from src.authgate.services import ApiKeyService, AuthService, UserService
from src.authgate.services.api_key_service import drain_background_tasks
from tests.factories import UserFactory
from tests.helpers import sign_in_headers


@pytest.fixture
async def engine(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> AsyncGenerator[AsyncEngine]:
    """Create a fresh database and install it as the application engine."""
    test_engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'authgate.db'}",
        poolclass=NullPool,
    )
    await create_tables(test_engine)
    monkeypatch.setattr(db_engine, "_engine", test_engine)

    yield test_engine

    # Let fire-and-forget writes finish before the database goes away
    await drain_background_tasks()
    await test_engine.dispose()


@pytest.fixture
async def db_session(engine: AsyncEngine) -> AsyncGenerator[AsyncSession]:
    """Provide an async session for database operations.

    The session does NOT auto-commit. Tests must call `await session.commit()`
    to persist changes the services should see.
    """
    async with AsyncSession(engine, expire_on_commit=False) as session:
        yield session


@pytest.fixture
def auth_service(db_session: AsyncSession) -> AuthService:
    settings = get_settings()
    return AuthService(
        UserRepository(db_session),
        SessionRepository(db_session),
        PasswordResetTokenRepository(db_session),
        db_session,
        TokenCodec.from_settings(settings),
        get_password_hasher(),
        settings,
    )


@pytest.fixture
def api_key_service(db_session: AsyncSession) -> ApiKeyService:
    return ApiKeyService(
        ApiKeyRepository(db_session),
        UserRepository(db_session),
        db_session,
        get_settings(),
    )


@pytest.fixture
def user_service(db_session: AsyncSession) -> UserService:
    return UserService(UserRepository(db_session), db_session, get_password_hasher())


@pytest.fixture
async def test_user(db_session: AsyncSession) -> User:
    """A persisted USER whose password is DEFAULT_TEST_PASSWORD."""
    user = UserFactory.build()
    db_session.add(user)
    await db_session.commit()
    return user


@pytest.fixture
async def admin_user(db_session: AsyncSession) -> User:
    """A persisted ADMIN whose password is DEFAULT_TEST_PASSWORD."""
    user = UserFactory.admin()
    db_session.add(user)
    await db_session.commit()
    return user


@pytest.fixture
async def client(engine: AsyncEngine) -> AsyncGenerator[AsyncClient]:
    """HTTP client bound to a fresh app using the per-test database."""
    app = create_app()
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client


@pytest.fixture
async def user_headers(client: AsyncClient, test_user: User) -> dict[str, str]:
    return await sign_in_headers(client, test_user)


@pytest.fixture
async def admin_headers(client: AsyncClient, admin_user: User) -> dict[str, str]:
    return await sign_in_headers(client, admin_user)
