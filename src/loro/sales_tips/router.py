"""Sales tips API endpoints: /api/v1/sales-tips/*."""

from __future__ import annotations

from datetime import datetime, timezone

import structlog
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from loro.auth.context import RequestContext
from loro.auth.dependencies import get_licensed_context, require_roles
from loro.database import get_session
from loro.dependencies import get_redis_dep
from loro.sales_tips.catalogue import CATEGORIES, SALES_TIPS, get_tip, tip_for_date, tips_in_category
from loro.sales_tips.schemas import BroadcastResponse, SalesTipResponse
from loro.sales_tips.service import broadcast_tip_of_the_day

logger = structlog.get_logger()

router = APIRouter(prefix="/api/v1/sales-tips", tags=["Sales Tips"])


@router.get("/tip-of-the-day", response_model=SalesTipResponse)
async def tip_of_the_day(ctx: RequestContext = Depends(get_licensed_context)):
    """Same tip for everyone for the whole UTC day."""
    return SalesTipResponse.model_validate(tip_for_date(datetime.now(timezone.utc).date()))


@router.get("", response_model=list[SalesTipResponse])
async def all_tips(ctx: RequestContext = Depends(get_licensed_context)):
    return [SalesTipResponse.model_validate(t) for t in SALES_TIPS]


@router.get("/category/{category}", response_model=list[SalesTipResponse])
async def by_category(category: str, ctx: RequestContext = Depends(get_licensed_context)):
    if category not in CATEGORIES:
        raise HTTPException(status_code=404, detail=f"Unknown category: {category}")
    return [SalesTipResponse.model_validate(t) for t in tips_in_category(category)]


@router.post("/trigger-broadcast", response_model=BroadcastResponse)
async def trigger_broadcast(
    ctx: RequestContext = Depends(require_roles("admin", "owner", "developer")),
    db: AsyncSession = Depends(get_session),
    redis: object | None = Depends(get_redis_dep),
):
    """Run today's broadcast now instead of waiting for the scheduled job."""
    result = await broadcast_tip_of_the_day(db, redis)
    logger.info("sales_tip_broadcast_triggered", user_id=ctx.user_id, **result)
    return BroadcastResponse(message="Sales tip broadcast completed", **result)


@router.get("/{tip_id}", response_model=SalesTipResponse)
async def one_tip(tip_id: int, ctx: RequestContext = Depends(get_licensed_context)):
    tip = get_tip(tip_id)
    if tip is None:
        raise HTTPException(status_code=404, detail="Sales tip not found")
    return SalesTipResponse.model_validate(tip)
