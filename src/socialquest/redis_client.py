"""Redis connection pool backing the auth rate limiter."""

import redis.asyncio as redis

_client: redis.Redis | None = None


async def init_redis(url: str, max_connections: int = 20) -> None:
    """Create the shared Redis client. No connection is opened until first use."""
    global _client  # noqa: PLW0603
    _client = redis.from_url(  # type: ignore[no-untyped-call]
        url,
        encoding="utf-8",
        decode_responses=True,
        max_connections=max_connections,
    )


async def close_redis() -> None:
    """Close the shared Redis client."""
    global _client  # noqa: PLW0603
    if _client:
        await _client.aclose()
        _client = None


def get_redis() -> redis.Redis:
    """Get the shared Redis client.

    Raises RuntimeError when Redis was never initialized, which the rate
    limiter treats as "limiting disabled".
    """
    if _client is None:
        msg = "Redis not initialized. Call init_redis() first."
        raise RuntimeError(msg)
    return _client


async def ping_redis() -> bool:
    """Return True if Redis answers PING."""
    return bool(await get_redis().ping())


def redis_enabled() -> bool:
    """True once init_redis() has run; rate limiting is off otherwise."""
    return _client is not None
