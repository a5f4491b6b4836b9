"""Rewards API endpoints: XP awards, leaderboard, rankings, user stats."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from loro.auth.context import RequestContext
from loro.auth.dependencies import enterprise_only, get_licensed_context, require_roles
from loro.database import get_session
from loro.dependencies import get_redis_dep
from loro.rewards.levels import LEVELS, RANKS, calculate_rank
from loro.rewards.schemas import (
    AwardXPRequest,
    AwardXPResponse,
    LeaderboardResponse,
    LevelEntry,
    LevelTablesResponse,
    RankEntry,
    RankingsResponse,
    UserStatsResponse,
)
from loro.rewards.service import award_xp, get_leaderboard, get_rankings, get_user_stats

router = APIRouter(
    prefix="/api/v1/rewards",
    tags=["Rewards"],
    dependencies=[Depends(enterprise_only("rewards"))],
)

_AWARDERS = ("admin", "manager", "owner", "developer", "support")


@router.post("/award-xp", response_model=AwardXPResponse)
async def award_xp_endpoint(
    body: AwardXPRequest,
    ctx: RequestContext = Depends(require_roles(*_AWARDERS)),
    db: AsyncSession = Depends(get_session),
    redis: object | None = Depends(get_redis_dep),
):
    """Award XP to a user in the caller's organisation."""
    result = await award_xp(db, body, ctx.organisation_id, ctx.branch_id, redis=redis)
    if result is None:
        return AwardXPResponse(message="No owner specified, XP award skipped")
    return result


@router.get("/leaderboard", response_model=LeaderboardResponse)
async def leaderboard(
    branch_id: int | None = Query(None),
    ctx: RequestContext = Depends(get_licensed_context),
    db: AsyncSession = Depends(get_session),
):
    """Top users by total XP in the caller's organisation (optionally one branch)."""
    return await get_leaderboard(db, ctx.organisation_id, branch_id if branch_id is not None else ctx.branch_id)


@router.get("/rankings", response_model=RankingsResponse)
async def rankings(
    ctx: RequestContext = Depends(get_licensed_context),
    db: AsyncSession = Depends(get_session),
):
    """Top positions by XP plus the caller's own position."""
    return await get_rankings(db, ctx.organisation_id, ctx.user_id, ctx.branch_id)


@router.get("/user-stats/{user_id}", response_model=UserStatsResponse)
async def user_stats(
    user_id: int,
    ctx: RequestContext = Depends(get_licensed_context),
    db: AsyncSession = Depends(get_session),
):
    """A user's rewards, transactions, achievements and inventory."""
    return await get_user_stats(db, user_id, ctx.organisation_id)


@router.get("/levels", response_model=LevelTablesResponse)
async def levels():
    """Static level and rank tables."""
    return LevelTablesResponse(
        levels=[
            LevelEntry(level=level, min_xp=low, max_xp=high, rank=calculate_rank(level))
            for level, (low, high) in LEVELS.items()
        ],
        ranks=[RankEntry(rank=rank, min_level=low, max_level=high) for rank, (low, high) in RANKS.items()],
    )
