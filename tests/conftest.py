"""
Pytest configuration and shared fixtures.

Tests run against an in-memory SQLite database created from the SQLModel
metadata, one fresh database per test function.
"""

import os
from collections.abc import AsyncGenerator, Awaitable, Callable
from datetime import timedelta

# Set test environment variables before importing the app (settings load at import)
os.environ["SECRET_KEY"] = "test-secret-key-for-auth-api-tests-0123456789"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["ENVIRONMENT"] = "development"
os.environ["LOG_FORMAT"] = "json"
os.environ["DB_CREATE_TABLES"] = "false"

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel

import auth_api.core.security as security
import auth_api.models  # noqa: F401  (register tables)
from auth_api.config import Role
from auth_api.core.auth import get_token_codec
from auth_api.core.database import get_db
from auth_api.core.security import get_password_hash
from auth_api.core.tokens import TokenCodec
from auth_api.main import app as main_app
from auth_api.models.user import Users
from auth_api.services.auth import AuthService

TEST_PASSWORD = "Password123!"


@pytest.fixture(autouse=True)
def fast_bcrypt(monkeypatch: pytest.MonkeyPatch) -> None:
    """Minimum bcrypt cost keeps hashing-heavy tests fast."""
    monkeypatch.setattr(security, "BCRYPT_ROUNDS", 4)


@pytest.fixture(scope="function")
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """
    Create an in-memory database engine for each test function.

    StaticPool keeps a single connection so every session sees the same
    in-memory database.
    """
    test_engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield test_engine

    await test_engine.dispose()


@pytest.fixture(scope="function")
async def db_session(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """Create a new database session for each test."""
    async_session_maker = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session_maker() as session:
        yield session
        await session.rollback()


@pytest.fixture(scope="function")
def app(db_session: AsyncSession) -> FastAPI:
    """
    FastAPI app with the test database session.

    This overrides the database dependency to use the test session.
    """

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    main_app.dependency_overrides[get_db] = override_get_db

    yield main_app

    main_app.dependency_overrides.clear()


@pytest.fixture(scope="function")
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """
    Create async HTTP client for testing API endpoints.

    Usage:
        async def test_endpoint(client):
            response = await client.post("/api/auth/login", json={...})
            assert response.status_code == 200
    """
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest.fixture
def codec() -> TokenCodec:
    """The codec the app uses (built from test settings)."""
    return get_token_codec()


@pytest.fixture
def refresh_ttl() -> timedelta:
    return timedelta(days=7)


@pytest.fixture
def auth_service(db_session: AsyncSession, codec: TokenCodec, refresh_ttl: timedelta) -> AuthService:
    return AuthService(db_session, codec, refresh_ttl)


@pytest.fixture
def create_user(db_session: AsyncSession) -> Callable[..., Awaitable[Users]]:
    """
    Factory for users stored directly in the database.

    Usage:
        async def test_login(create_user):
            user = await create_user(email="bob@example.com", enabled=False)
    """

    async def _create_user(
        email: str = "alice@example.com",
        password: str = TEST_PASSWORD,
        first_name: str = "Alice",
        last_name: str = "Liddell",
        role: str = Role.USER,
        enabled: bool = True,
    ) -> Users:
        user = Users(
            email=email,
            password=get_password_hash(password),
            first_name=first_name,
            last_name=last_name,
            role=role,
            enabled=enabled,
        )
        db_session.add(user)
        await db_session.commit()
        await db_session.refresh(user)
        return user

    return _create_user


@pytest.fixture
def register_payload() -> dict[str, str]:
    """Sample registration body for API requests."""
    return {
        "email": "alice@example.com",
        "password": TEST_PASSWORD,
        "firstName": "Alice",
        "lastName": "Liddell",
    }
