"""Shared test fixtures."""

from __future__ import annotations

import os
from collections.abc import AsyncGenerator, Awaitable, Callable

import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

# Every test gets a private in-memory database; Redis stays uninitialized so
# the rate limiter is a pass-through unless a test installs a fake.
os.environ["SQ_DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["SQ_JWT_SECRET"] = "test-access-secret"
os.environ["SQ_JWT_REFRESH_SECRET"] = "test-refresh-secret"
os.environ["SQ_LOG_FORMAT"] = "console"

from socialquest.config import get_settings  # noqa: E402
from socialquest.database import close_db, create_all, get_session, init_db  # noqa: E402
from socialquest.main import create_app  # noqa: E402

get_settings.cache_clear()

DEFAULT_PASSWORD = "password123"

LoginFn = Callable[..., Awaitable[dict]]


@pytest_asyncio.fixture
async def app() -> AsyncGenerator[FastAPI, None]:
    """Application wired to a fresh in-memory schema."""
    get_settings.cache_clear()
    settings = get_settings()
    await init_db(settings.database_url)
    await create_all()
    yield create_app()
    await close_db()


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Create an async HTTP test client against the app."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def db_session(app: FastAPI) -> AsyncGenerator[AsyncSession, None]:
    """Get a direct database session for test assertions."""
    async for session in get_session():
        yield session
        break


@pytest_asyncio.fixture
async def login(client: AsyncClient) -> LoginFn:
    """Register (if needed) and log in a user; returns the login response body."""

    async def _login(username: str = "alice", password: str = DEFAULT_PASSWORD) -> dict:
        await client.post("/auth/register", json={"username": username, "password": password})
        response = await client.post("/auth/login", json={"username": username, "password": password})
        assert response.status_code == 200, response.text
        return response.json()

    return _login


@pytest_asyncio.fixture
async def authed_client(client: AsyncClient, login: LoginFn) -> AsyncClient:
    """Client authenticated as 'alice'."""
    body = await login("alice")
    client.headers["Authorization"] = f"Bearer {body['accessToken']}"
    return client
