"""Pytest configuration and fixtures for backend tests.

Database-backed tests run against a fresh in-memory SQLite database per
test; everything else needs no database at all.
"""

import logging
import os
from collections.abc import AsyncGenerator, Generator

import pytest
import pytest_asyncio
from fastapi import FastAPI
from fastapi.testclient import TestClient
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

# Set test environment variables before importing app modules
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["JWT_SECRET_KEY"] = "0" * 64
os.environ.pop("USERS", None)

TEST_USERS = [
    {"username": "admin", "password": "adminpw"},
    {"username": "alice", "password": "pw1"},
]


class FakeClock:
    """Controllable replacement for time.time."""

    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def restore_root_logger():
    """Undo setup_logging, which replaces the root handlers."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    root.handlers = handlers
    root.setLevel(level)


@pytest.fixture
def settings_factory():
    """Build Settings with test defaults, overridable per test."""
    from kpopapi.core.config import Settings

    def _make(**overrides) -> Settings:
        values = {
            "jwt_secret_key": "0" * 64,
            "users": TEST_USERS,
            "token_ttl_seconds": 3600,
        }
        values.update(overrides)
        return Settings(**values)

    return _make


@pytest.fixture
def auth_service(settings_factory, clock):
    from kpopapi.services.auth import AuthService

    return AuthService.from_settings(settings_factory(), clock=clock)


@pytest.fixture
def app(settings_factory, auth_service) -> FastAPI:
    """Application with its own AuthService and a stub static page."""
    from kpopapi.main import create_app

    application = create_app(config=settings_factory(), auth_service=auth_service)

    @application.get("/docs/index.html")
    async def static_page() -> dict[str, str]:
        return {"page": "index"}

    return application


@pytest.fixture
def client(app: FastAPI) -> Generator[TestClient, None, None]:
    """Synchronous client; lifespan is not run so no database is touched."""
    yield TestClient(app)


@pytest.fixture
def login(client: TestClient):
    """Log in and return the token."""

    def _login(username: str = "alice", password: str = "pw1") -> str:
        response = client.post("/api/login", json={"username": username, "password": password})
        assert response.status_code == 200, response.text
        return response.json()["token"]

    return _login


# --- Database Fixtures ---


@pytest_asyncio.fixture
async def db_engine():
    from kpopapi.models import BaseModel

    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(BaseModel.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db_engine) -> AsyncGenerator[AsyncSession, None]:
    session_maker = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)
    async with session_maker() as session:
        yield session


@pytest_asyncio.fixture
async def async_client(app: FastAPI, db_engine) -> AsyncGenerator[AsyncClient, None]:
    """Async client with the database dependency pointed at the test engine."""
    from kpopapi.core.database import get_db

    session_maker = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_maker() as session:
            try:
                yield session
                await session.commit()
            except BaseException:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def auth_headers(async_client: AsyncClient) -> dict[str, str]:
    response = await async_client.post(
        "/api/login", json={"username": "alice", "password": "pw1"}
    )
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['token']}"}
