"""Middleware tests: request ID, rate limiting, CORS, security headers, body size, error handling."""

from __future__ import annotations

from collections.abc import AsyncGenerator
from typing import Any

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from socialquest.config import get_settings
from socialquest.main import create_app


class FakePipeline:
    def __init__(self, store: dict[str, int]) -> None:
        self.store = store
        self.ops: list[tuple[str, str]] = []

    def incr(self, key: str) -> None:
        self.ops.append(("incr", key))

    def expire(self, key: str, _seconds: int) -> None:
        self.ops.append(("expire", key))

    async def execute(self) -> list[Any]:
        results: list[Any] = []
        for op, key in self.ops:
            if op == "incr":
                self.store[key] = self.store.get(key, 0) + 1
                results.append(self.store[key])
            else:
                results.append(True)
        return results


class FakeRedis:
    def __init__(self) -> None:
        self.store: dict[str, int] = {}

    def pipeline(self) -> FakePipeline:
        return FakePipeline(self.store)


@pytest_asyncio.fixture
async def limited_client(app: FastAPI, monkeypatch: pytest.MonkeyPatch) -> AsyncGenerator[AsyncClient, None]:
    """Client for an app limited to 3 auth requests per window, backed by an in-memory fake Redis."""
    monkeypatch.setenv("SQ_RATE_LIMIT_REQUESTS", "3")
    get_settings.cache_clear()
    fake = FakeRedis()
    monkeypatch.setattr("socialquest.middleware.rate_limit.get_redis", lambda: fake)
    limited_app = create_app()
    async with AsyncClient(transport=ASGITransport(app=limited_app), base_url="http://test") as ac:
        yield ac
    get_settings.cache_clear()


@pytest.mark.asyncio
async def test_request_id_generated(client: AsyncClient) -> None:
    """Request ID is auto-generated when not provided."""
    response = await client.get("/health")
    assert "x-request-id" in response.headers
    assert len(response.headers["x-request-id"]) == 36  # UUID format


@pytest.mark.asyncio
async def test_request_id_preserved(client: AsyncClient) -> None:
    """Custom request ID is echoed back in response."""
    response = await client.get("/health", headers={"X-Request-Id": "test-abc-123"})
    assert response.headers["x-request-id"] == "test-abc-123"


@pytest.mark.asyncio
async def test_auth_rate_limit_headers(limited_client: AsyncClient) -> None:
    response = await limited_client.post("/auth/refresh", json={})
    assert response.headers["x-ratelimit-limit"] == "3"
    assert response.headers["x-ratelimit-remaining"] == "2"


@pytest.mark.asyncio
async def test_auth_rate_limit_blocks_excess(limited_client: AsyncClient) -> None:
    """4th auth request in the window returns 429 with Retry-After."""
    for _ in range(3):
        response = await limited_client.post("/auth/refresh", json={})
        assert response.status_code == 401
    response = await limited_client.post("/auth/refresh", json={})
    assert response.status_code == 429
    assert response.headers["retry-after"] == str(15 * 60)
    assert "detail" in response.json()


@pytest.mark.asyncio
async def test_non_auth_paths_not_limited(limited_client: AsyncClient) -> None:
    for _ in range(10):
        response = await limited_client.get("/health")
        assert response.status_code == 200
        assert "x-ratelimit-limit" not in response.headers


@pytest.mark.asyncio
async def test_rate_limit_disabled_without_redis(client: AsyncClient) -> None:
    for _ in range(5):
        response = await client.post("/auth/refresh", json={})
        assert response.status_code == 401


@pytest.mark.asyncio
async def test_cors_preflight(client: AsyncClient) -> None:
    """CORS preflight returns access-control-allow-origin for configured origin."""
    response = await client.options(
        "/health",
        headers={
            "Origin": "http://localhost:8081",
            "Access-Control-Request-Method": "GET",
        },
    )
    assert response.headers["access-control-allow-origin"] == "http://localhost:8081"


@pytest.mark.asyncio
async def test_404_returns_json(client: AsyncClient) -> None:
    """Unknown paths return 404 with JSON body."""
    response = await client.get("/nonexistent-path")
    assert response.status_code == 404
    assert response.json()["detail"] == "Not Found"


@pytest.mark.asyncio
async def test_validation_error_is_400(client: AsyncClient) -> None:
    response = await client.post("/auth/login", json={"username": 5})
    assert response.status_code == 400
    data = response.json()
    assert data["detail"] == "Validation error"
    assert isinstance(data["errors"], list)
    assert data["errors"]


@pytest.mark.asyncio
async def test_unhandled_exception_is_json_500(app: FastAPI) -> None:
    """Unexpected errors are logged and answered with a generic 500 body."""

    @app.get("/explode")
    async def explode() -> None:
        raise RuntimeError("database exploded")

    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        response = await ac.get("/explode")
    assert response.status_code == 500
    assert response.json() == {"detail": "Internal server error"}
    assert "database exploded" not in response.text


@pytest.mark.asyncio
async def test_security_headers_present(client: AsyncClient) -> None:
    for path in ["/health", "/nonexistent-path"]:
        response = await client.get(path)
        assert response.headers["x-content-type-options"] == "nosniff"
        assert response.headers["x-frame-options"] == "DENY"
        assert response.headers["referrer-policy"] == "no-referrer"


@pytest.mark.asyncio
async def test_oversized_body_rejected(client: AsyncClient) -> None:
    """Bodies above 10 KB get 413 before reaching the route."""
    response = await client.post(
        "/auth/register",
        json={"username": "alice", "password": "p" * (11 * 1024)},
    )
    assert response.status_code == 413
    assert "detail" in response.json()


@pytest.mark.asyncio
async def test_oversized_chunked_body_rejected(client: AsyncClient) -> None:
    async def chunks():
        for _ in range(12):
            yield b"x" * 1024

    response = await client.post("/auth/login", content=chunks(), headers={"Content-Type": "application/json"})
    assert response.status_code == 413


@pytest.mark.asyncio
async def test_body_limit_is_configurable(app: FastAPI, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SQ_MAX_BODY_BYTES", "64")
    get_settings.cache_clear()
    small_app = create_app()
    async with AsyncClient(transport=ASGITransport(app=small_app), base_url="http://test") as ac:
        response = await ac.post("/auth/login", json={"username": "alice", "password": "x" * 100})
    get_settings.cache_clear()
    assert response.status_code == 413


@pytest.mark.asyncio
async def test_body_under_limit_passes(client: AsyncClient) -> None:
    response = await client.post("/auth/register", json={"username": "alice", "password": "password123"})
    assert response.status_code == 201


@pytest.mark.asyncio
async def test_cors_wraps_rejected_body(client: AsyncClient) -> None:
    """A 413 from the body limit still carries the CORS allow-origin header."""
    response = await client.post(
        "/auth/register",
        content=b"x" * (11 * 1024),
        headers={"Origin": "http://localhost:8081", "Content-Type": "application/json"},
    )
    assert response.status_code == 413
    assert response.headers["access-control-allow-origin"] == "http://localhost:8081"
