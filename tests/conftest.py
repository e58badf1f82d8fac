"""Pytest configuration and shared fixtures."""

import os

# Must be set before app.config is imported: settings are cached on import
os.environ.setdefault("API_TITLE", "Study Planner Test")
os.environ.setdefault("API_VERSION", "0.1.0-test")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("RUN_MIGRATIONS", "False")
os.environ.setdefault("JWT_SECRET", "test-secret")

from typing import AsyncGenerator, Callable  # noqa: E402

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
)
from sqlalchemy.pool import StaticPool  # noqa: E402

from app.application import create_app  # noqa: E402
from app.config import Settings, get_settings  # noqa: E402
from app.models import User  # noqa: E402,F401  (registers all mappers)
from app.utils.db import Base, build_engine, get_db_session  # noqa: E402

TEST_DB_URL = "sqlite+aiosqlite:///:memory:"
DEFAULT_PASSWORD = "s3cret-pass"


@pytest.fixture
def settings() -> Settings:
    """Settings the application was built with."""
    return get_settings()


@pytest.fixture
async def db_engine() -> AsyncGenerator[AsyncEngine, None]:
    """In-memory SQLite engine with the full schema, one per test."""
    engine = build_engine(
        TEST_DB_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine: AsyncEngine) -> async_sessionmaker:
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db_session(
    session_factory: async_sessionmaker,
) -> AsyncGenerator[AsyncSession, None]:
    """Database session for service-level tests."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def app(session_factory: async_sessionmaker):
    """FastAPI application wired to the test database."""
    application = create_app()

    async def override_db_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    application.dependency_overrides[get_db_session] = override_db_session
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
async def api_client(app) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client talking to the app in-process."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def register_user(api_client: AsyncClient) -> Callable:
    """Register an account and return its auth headers and user payload."""

    async def _register(email: str, full_name: str = "Test User") -> dict:
        response = await api_client.post(
            "/auth/register",
            json={"email": email, "password": DEFAULT_PASSWORD, "fullName": full_name},
        )
        assert response.status_code == 201, response.text
        body = response.json()
        return {
            "headers": {"Authorization": f"Bearer {body['token']}"},
            "user": body["user"],
        }

    return _register


@pytest.fixture
async def auth_headers(register_user: Callable) -> dict:
    """Authorization headers for a freshly registered user."""
    account = await register_user("alice@example.com", "Alice")
    return account["headers"]


@pytest.fixture
async def user(db_session: AsyncSession) -> User:
    """A persisted user for service-level tests."""
    account = User(email="owner@example.com", password_hash="x", full_name="Owner")
    db_session.add(account)
    await db_session.commit()
    return account


@pytest.fixture
async def other_user(db_session: AsyncSession) -> User:
    """A second persisted user, for ownership checks."""
    account = User(email="intruder@example.com", password_hash="x", full_name="Other")
    db_session.add(account)
    await db_session.commit()
    return account
