"""FastAPI application factory."""

import asyncio
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI

from loro.assets.router import router as assets_router
from loro.auth.router import router as auth_router
from loro.config import get_settings
from loro.database import close_db, init_db
from loro.health.router import router as health_router
from loro.leave.router import router as leave_router
from loro.licensing.router import router as licensing_router
from loro.middleware import setup_middleware
from loro.news.router import router as news_router
from loro.notifications.router import router as notifications_router
from loro.organisations.router import router as organisations_router
from loro.payslips.router import router as payslips_router
from loro.redis_client import close_redis, get_redis, init_redis
from loro.resellers.router import router as resellers_router
from loro.rewards.router import router as rewards_router
from loro.sales_tips.router import router as sales_tips_router
from loro.shop.router import router as shop_router
from loro.users.router import router as users_router
from loro.ws.bridge import PubSubBridge
from loro.ws.router import router as ws_router

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Open the DB and Redis pools and run the pub/sub bridge for the app's lifetime."""
    settings = get_settings()
    await init_db(
        settings.database_url,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        echo=settings.db_echo,
    )
    await init_redis(settings.redis_url, settings.redis_max_connections)

    bridge = PubSubBridge(get_redis())
    bridge_task = asyncio.create_task(bridge.start())
    logger.info("loro_started", version=settings.app_version, environment=settings.environment)

    yield

    await bridge.stop()
    bridge_task.cancel()
    try:
        await bridge_task
    except asyncio.CancelledError:
        pass

    await close_db()
    await close_redis()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=f"{settings.app_name} API",
        description="Multi-tenant enterprise platform: workforce, sales and rewards",
        version=settings.app_version,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    setup_middleware(app, settings)
    app.include_router(health_router, tags=["Health"])
    app.include_router(auth_router)
    app.include_router(users_router)
    app.include_router(organisations_router)
    app.include_router(licensing_router)
    app.include_router(notifications_router)
    app.include_router(rewards_router)
    app.include_router(assets_router)
    app.include_router(leave_router)
    app.include_router(news_router)
    app.include_router(payslips_router)
    app.include_router(resellers_router)
    app.include_router(shop_router)
    app.include_router(sales_tips_router)
    app.include_router(ws_router)

    return app


app = create_app()
