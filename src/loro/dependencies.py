"""Shared FastAPI dependencies."""

from collections.abc import AsyncGenerator

from loro.redis_client import get_redis_or_none


async def get_redis_dep() -> AsyncGenerator[object | None, None]:
    """Yield the Redis client (or None when unavailable) as a FastAPI dependency."""
    yield get_redis_or_none()
