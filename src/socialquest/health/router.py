"""Liveness, readiness and version endpoints.

Readiness answers 503 when a dependency the service actually uses is down,
so an orchestrator can stop routing traffic to the instance.
"""

from collections.abc import Awaitable, Callable

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from socialquest.config import get_settings
from socialquest.database import get_session
from socialquest.redis_client import ping_redis, redis_enabled

router = APIRouter()


async def _check_state(check: Callable[[], Awaitable[object]]) -> str:
    try:
        await check()
    except Exception as exc:  # noqa: BLE001
        return f"error: {type(exc).__name__}: {exc}"
    return "ok"


@router.get("/health")
async def health() -> dict[str, str]:
    return {"status": "healthy"}


@router.get("/ready")
async def readiness(db: AsyncSession = Depends(get_session)) -> JSONResponse:  # noqa: B008
    """Database always; Redis only when the auth rate limiter is backed by it."""
    checks = {"database": await _check_state(lambda: db.execute(text("SELECT 1")))}
    checks["redis"] = await _check_state(ping_redis) if redis_enabled() else "disabled"

    failed = [name for name, state in checks.items() if state.startswith("error")]
    return JSONResponse(
        status_code=503 if failed else 200,
        content={"status": "degraded" if failed else "ready", "checks": checks},
    )


@router.get("/version")
async def version() -> dict[str, str]:
    settings = get_settings()
    return {"version": settings.app_version, "environment": settings.environment}
