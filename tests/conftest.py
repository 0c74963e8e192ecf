"""Pytest fixtures for testing."""
from collections.abc import AsyncGenerator, Generator

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncConnection,
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from testcontainers.postgres import PostgresContainer

from api.main import create_app
from core.auth import AuthService
from core.config import Settings
from db.session import get_async_session
from models.base import Base

DEMO_TOKEN = "demo-token"
DEMO_USER = "demo-user"


@pytest.fixture(scope="session")
def postgres_container() -> Generator[PostgresContainer]:
    """Start a PostgreSQL container for the test session."""
    with PostgresContainer("postgres:16", driver="asyncpg") as postgres:
        yield postgres


@pytest.fixture(scope="session")
def database_url(postgres_container: PostgresContainer) -> str:
    """Get the database URL from the container."""
    return postgres_container.get_connection_url()


@pytest.fixture
async def async_engine(database_url: str) -> AsyncGenerator[AsyncEngine]:
    """Create an async engine for testing."""
    engine = create_async_engine(database_url, echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
async def db_connection(async_engine: AsyncEngine) -> AsyncGenerator[AsyncConnection]:
    """
    Create a connection with a transaction that will be rolled back after the test.

    This provides test isolation - each test runs in its own transaction
    that is rolled back, so tests don't affect each other.
    """
    async with async_engine.connect() as connection:
        transaction = await connection.begin()
        try:
            yield connection
        finally:
            await transaction.rollback()


@pytest.fixture
async def db_session(db_connection: AsyncConnection) -> AsyncGenerator[AsyncSession]:
    """
    Create an async session bound to the test transaction.

    Uses savepoints, allowing the session's flush/commit to work within our
    outer test transaction.
    """
    session_factory = async_sessionmaker(
        bind=db_connection,
        class_=AsyncSession,
        expire_on_commit=False,
        join_transaction_mode="create_savepoint",
    )

    async with session_factory() as session:
        yield session


@pytest.fixture
def app_settings() -> Settings:
    """Settings isolated from any local .env file."""
    return Settings(
        _env_file=None,
        database_url="postgresql://test",
        AUTH_TOKEN=DEMO_TOKEN,
        AUTH_USERNAME=DEMO_USER,
    )


@pytest.fixture
def auth_service(app_settings: Settings) -> AuthService:
    """Auth service accepting the demo token."""
    return AuthService.from_settings(app_settings)


@pytest.fixture
def app(app_settings: Settings, auth_service: AuthService) -> FastAPI:
    """
    Application with startup state filled in directly.

    ASGITransport does not run the lifespan, so the auth service is placed
    on app.state here. Tests either override the session dependency or put
    a Database on app.state themselves.
    """
    application = create_app(app_settings)
    application.state.auth_service = auth_service
    return application


@pytest.fixture
async def client(
    app: FastAPI,
    db_session: AsyncSession,
) -> AsyncGenerator[AsyncClient]:
    """Create a test client authenticated with the demo token, backed by the test session."""
    async def override_get_async_session() -> AsyncGenerator[AsyncSession]:
        yield db_session

    app.dependency_overrides[get_async_session] = override_get_async_session

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        headers={"Authorization": f"Bearer {DEMO_TOKEN}"},
    ) as test_client:
        yield test_client

    app.dependency_overrides.clear()
