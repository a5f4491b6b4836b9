"""Sales tip arq worker: weekday morning broadcast of the tip of the day."""

from __future__ import annotations

import logging

import redis.asyncio as aioredis
from arq import cron
from arq.connections import RedisSettings

from loro.config import get_settings
from loro.database import close_db, init_db, session_scope
from loro.sales_tips.service import broadcast_tip_of_the_day

logger = logging.getLogger(__name__)


async def sales_tip_startup(ctx: dict) -> None:  # type: ignore[type-arg]
    """Initialize Redis + DB connections on worker startup."""
    settings = get_settings()
    await init_db(settings.database_url, pool_size=5, max_overflow=0)
    ctx["redis"] = aioredis.from_url(
        settings.redis_url,
        encoding="utf-8",
        decode_responses=True,
        max_connections=10,
    )
    logger.info("Sales tip worker started")


async def sales_tip_shutdown(ctx: dict) -> None:  # type: ignore[type-arg]
    redis_client: aioredis.Redis | None = ctx.get("redis")
    if redis_client:
        await redis_client.aclose()
    await close_db()
    logger.info("Sales tip worker shut down")


async def broadcast_sales_tip(ctx: dict) -> dict | None:  # type: ignore[type-arg]
    """Scheduled arq task: Monday to Friday at 08:00 UTC."""
    try:
        async with session_scope() as db:
            return await broadcast_tip_of_the_day(db, ctx.get("redis"))
    except Exception:
        logger.exception("Sales tip broadcast failed")
        return None


class SalesTipWorkerSettings:
    """arq worker settings for the sales tip scheduler."""

    functions = [broadcast_sales_tip]
    cron_jobs = [
        cron(broadcast_sales_tip, weekday={0, 1, 2, 3, 4}, hour=8, minute=0, run_at_startup=False),
    ]
    on_startup = sales_tip_startup
    on_shutdown = sales_tip_shutdown
    redis_settings = RedisSettings.from_dsn(get_settings().arq_redis_url)
    max_jobs = 2
    job_timeout = 1800
    allow_abort_jobs = True
