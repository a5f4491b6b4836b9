"""Shared Redis client.

Redis backs pub/sub fan-out, license caching and rate limiting. All three
degrade to no-ops when the client was never initialized, so callers on
those paths use ``get_redis_or_none``.
"""

import redis.asyncio as redis

_client: redis.Redis | None = None


async def init_redis(url: str, max_connections: int = 50) -> None:
    global _client  # noqa: PLW0603
    _client = redis.from_url(  # type: ignore[no-untyped-call]
        url,
        encoding="utf-8",
        decode_responses=True,
        max_connections=max_connections,
        health_check_interval=30,
    )


async def close_redis() -> None:
    global _client  # noqa: PLW0603
    if _client is not None:
        await _client.aclose()
        _client = None


def get_redis() -> redis.Redis:
    """The client, for code that cannot run without Redis (the pub/sub bridge)."""
    if _client is None:
        msg = "Redis not initialized. Call init_redis() first."
        raise RuntimeError(msg)
    return _client


def get_redis_or_none() -> redis.Redis | None:
    return _client


async def redis_status() -> str:
    """``ok``, ``not configured`` or ``error: ...`` for the readiness check."""
    if _client is None:
        return "not configured"
    try:
        await _client.ping()
    except (redis.RedisError, OSError) as exc:
        return f"error: {exc}"
    return "ok"
