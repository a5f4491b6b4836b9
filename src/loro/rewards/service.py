"""XP awards, leaderboard and rankings.

``award_xp`` writes the transaction and bumps the aggregate in one commit, so
``UserRewards.total_xp`` always equals the sum of its transactions. Failures
are reported in-band as ``{"message": ..., "rewards": None}`` and never
retried.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta, timezone
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from loro.config import get_settings
from loro.db.base import as_utc
from loro.db.models import Achievement, Branch, User, UserRewards, XPTransaction
from loro.errors import NotFoundError, ServiceError, ValidationError
from loro.notifications.push import publish_event
from loro.notifications.service import create_notification
from loro.rewards.levels import (
    calculate_level,
    calculate_rank,
    level_progress,
    next_level_xp,
)
from loro.rewards.schemas import (
    XP_CATEGORIES,
    AwardXPRequest,
    LeaderboardAchievement,
    LeaderboardEntry,
    LeaderboardMetadata,
    LeaderboardResponse,
    LeaderboardStatistics,
    LeaderboardUser,
    LeaderboardXP,
    RankingPosition,
    RankingsResponse,
    UserRewardsDetail,
    UserRewardsResponse,
)

logger = logging.getLogger(__name__)

_CATEGORY_BY_SOURCE: dict[str, str] = {
    "task": "tasks",
    "subtask": "tasks",
    "lead": "leads",
    "sale": "sales",
    "quotation": "sales",
    "attendance": "attendance",
    "check-in-client": "attendance",
    "check-out-client": "attendance",
    "collaboration": "collaboration",
}


def category_for(source_type: str | None) -> str:
    """Map an XP source type to its breakdown bucket."""
    normalized = (source_type or "").strip().lower()
    if "login" in normalized:
        return "login"
    return _CATEGORY_BY_SOURCE.get(normalized, "other")


def consistency_streak(active_days: set[date], today: date, window_days: int = 30) -> int:
    """Consecutive days with XP, counting back from today. 0 if none today."""
    streak = 0
    day = today
    while day in active_days and streak < window_days:
        streak += 1
        day -= timedelta(days=1)
    return streak


def _month_bounds(now: datetime) -> tuple[datetime, datetime]:
    """Start of this month and start of last month (UTC)."""
    this_month = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    last_month = (this_month - timedelta(days=1)).replace(day=1)
    return this_month, last_month


async def get_or_create_rewards(db: AsyncSession, user_id: int) -> UserRewards:
    """Get or create the denormalized rewards row for a user."""
    result = await db.execute(
        select(UserRewards).where(UserRewards.user_id == user_id)
    )
    rewards = result.scalar_one_or_none()
    if rewards is None:
        rewards = UserRewards(
            user_id=user_id,
            xp_breakdown={category: 0 for category in XP_CATEGORIES},
        )
        db.add(rewards)
        await db.flush()
    return rewards


async def award_xp(
    db: AsyncSession,
    award: AwardXPRequest,
    organisation_id: int | None,
    branch_id: int | None = None,
    redis: object | None = None,
) -> dict[str, Any] | None:
    """Award XP to a user in the caller's organisation.

    Returns None when there is no owner to award. Otherwise returns
    ``{"message", "rewards"}``, with ``rewards`` None on failure.
    """
    if not award.owner:
        logger.debug("Skipping XP award %s: no owner", award.action)
        return None

    try:
        if organisation_id is None:
            msg = "Organization ID is required"
            raise ValidationError(msg)

        user_result = await db.execute(
            select(User).where(
                User.id == award.owner,
                User.organisation_id == organisation_id,
                User.is_deleted.is_(False),
            )
        )
        user = user_result.scalar_one_or_none()
        if user is None:
            msg = "User not found in your organization"
            raise NotFoundError(msg)

        rewards = await get_or_create_rewards(db, user.id)
        now = datetime.now(timezone.utc)

        db.add(XPTransaction(
            user_rewards_id=rewards.id,
            action=award.action,
            xp_amount=award.amount,
            meta={
                "source_id": award.source.id,
                "source_type": award.source.type,
                "details": award.source.details,
                "branch_id": branch_id,
            },
            created_at=now,
        ))

        category = category_for(award.source.type)
        breakdown = {c: 0 for c in XP_CATEGORIES}
        breakdown.update(rewards.xp_breakdown or {})
        breakdown[category] += award.amount
        # JSON columns only persist on reassignment.
        rewards.xp_breakdown = breakdown
        rewards.current_xp += award.amount
        rewards.total_xp += award.amount
        rewards.last_action = now

        old_level = rewards.level
        new_level = calculate_level(rewards.total_xp)
        if new_level > old_level:
            rewards.level = new_level
            rewards.rank = calculate_rank(new_level)

        await db.flush()
        if rewards.level > old_level:
            await _emit_level_up(db, redis, user.id, user.organisation_id, old_level, rewards.level, rewards.rank)

        await db.commit()
    except (ServiceError, SQLAlchemyError) as e:
        await db.rollback()
        message = e.message if isinstance(e, ServiceError) else str(e)
        logger.error("XP award %s for user %s failed: %s", award.action, award.owner, message)
        return {"message": message, "rewards": None}

    return {"message": "Success", "rewards": UserRewardsResponse.model_validate(rewards)}


async def _emit_level_up(
    db: AsyncSession,
    redis: object | None,
    user_id: int,
    organisation_id: int,
    old_level: int,
    new_level: int,
    rank: str,
) -> None:
    """Emit level-up notification via DB + WebSocket."""
    await create_notification(
        db,
        user_id,
        "rewards",
        "Level Up!",
        f"You reached level {new_level} ({rank})",
        data={"old_level": old_level, "new_level": new_level, "rank": rank},
        redis=redis,
    )
    await publish_event(redis, "level_up", {
        "user_id": user_id,
        "organisation_id": organisation_id,
        "old_level": old_level,
        "new_level": new_level,
        "rank": rank,
    })


# ---------------------------------------------------------------------------
# Leaderboard
# ---------------------------------------------------------------------------


def _scoped(stmt, organisation_id: int, branch_id: int | None):  # noqa: ANN001, ANN202
    stmt = stmt.where(User.organisation_id == organisation_id, User.is_deleted.is_(False))
    if branch_id is not None:
        stmt = stmt.where(User.branch_id == branch_id)
    return stmt


async def _sum_xp(db: AsyncSession, rewards_id: int, start: datetime, end: datetime | None = None) -> int:
    stmt = select(func.coalesce(func.sum(XPTransaction.xp_amount), 0)).where(
        XPTransaction.user_rewards_id == rewards_id,
        XPTransaction.created_at >= start,
    )
    if end is not None:
        stmt = stmt.where(XPTransaction.created_at < end)
    result = await db.execute(stmt)
    return int(result.scalar_one() or 0)


async def _streak_for(db: AsyncSession, rewards_id: int, now: datetime, window_days: int) -> int:
    result = await db.execute(
        select(XPTransaction.created_at).where(
            XPTransaction.user_rewards_id == rewards_id,
            XPTransaction.created_at >= now - timedelta(days=window_days),
        )
    )
    active_days = {as_utc(ts).date() for ts in result.scalars()}
    return consistency_streak(active_days, now.date(), window_days)


async def _recent_achievements(db: AsyncSession, rewards_id: int, limit: int) -> list[LeaderboardAchievement]:
    result = await db.execute(
        select(Achievement)
        .where(Achievement.user_rewards_id == rewards_id)
        .order_by(Achievement.created_at.desc())
        .limit(limit)
    )
    return [
        LeaderboardAchievement(
            name=a.name,
            description=a.description,
            xp_value=a.xp_value,
            icon=a.icon,
            category=a.category,
            earned_at=a.created_at,
        )
        for a in result.scalars()
    ]


async def get_leaderboard(
    db: AsyncSession,
    organisation_id: int | None,
    branch_id: int | None = None,
) -> LeaderboardResponse:
    """Top users by total XP, ties broken by most recent update.

    Per-row statistics are separate aggregate queries for each entry.
    """
    settings = get_settings()
    now = datetime.now(timezone.utc)
    empty_metadata = LeaderboardMetadata(
        total_participants=0,
        organisation_id=organisation_id,
        branch_id=branch_id,
        generated_at=now,
    )
    if organisation_id is None:
        return LeaderboardResponse(message="Organization ID is required", metadata=empty_metadata)

    try:
        base = select(UserRewards, User, Branch).join(User, UserRewards.user_id == User.id).outerjoin(
            Branch, User.branch_id == Branch.id
        )
        result = await db.execute(
            _scoped(base, organisation_id, branch_id)
            .order_by(UserRewards.total_xp.desc(), UserRewards.updated_at.desc())
            .limit(settings.leaderboard_size)
        )
        rows = result.all()

        count_result = await db.execute(
            _scoped(
                select(func.count()).select_from(UserRewards).join(User, UserRewards.user_id == User.id),
                organisation_id,
                branch_id,
            )
        )
        total_participants = count_result.scalar_one()

        this_month, last_month = _month_bounds(now)
        entries: list[LeaderboardEntry] = []
        for position, row in enumerate(rows, start=1):
            rewards, user, branch = row.UserRewards, row.User, row.Branch
            breakdown = {c: 0 for c in XP_CATEGORIES}
            breakdown.update(rewards.xp_breakdown or {})
            entries.append(LeaderboardEntry(
                rank=position,
                user=LeaderboardUser(
                    id=user.id,
                    username=user.username,
                    name=user.name,
                    surname=user.surname,
                    photo_url=user.photo_url,
                    branch_id=branch.id if branch else None,
                    branch_name=branch.name if branch else None,
                ),
                xp=LeaderboardXP(
                    total_xp=rewards.total_xp,
                    current_xp=rewards.current_xp,
                    level=rewards.level,
                    rank=rewards.rank,
                    next_level_xp=next_level_xp(rewards.level),
                    level_progress=level_progress(rewards.total_xp, rewards.level),
                    breakdown=breakdown,
                ),
                statistics=LeaderboardStatistics(
                    xp_this_month=await _sum_xp(db, rewards.id, this_month),
                    xp_last_month=await _sum_xp(db, rewards.id, last_month, this_month),
                    rank_change=0,
                    consistency_streak=await _streak_for(db, rewards.id, now, settings.streak_window_days),
                ),
                recent_achievements=await _recent_achievements(
                    db, rewards.id, settings.recent_achievements_limit
                ),
            ))
    except SQLAlchemyError as e:
        logger.error("Leaderboard for organisation %s failed: %s", organisation_id, e)
        return LeaderboardResponse(message=str(e), metadata=empty_metadata)

    return LeaderboardResponse(
        message="Success",
        leaderboard=entries,
        metadata=LeaderboardMetadata(
            total_participants=total_participants,
            organisation_id=organisation_id,
            branch_id=branch_id,
            generated_at=now,
        ),
    )


async def get_rankings(
    db: AsyncSession,
    organisation_id: int,
    user_id: int,
    branch_id: int | None = None,
) -> RankingsResponse:
    """Top positions by XP plus the requester's own position."""
    settings = get_settings()
    result = await db.execute(
        _scoped(
            select(UserRewards, User).join(User, UserRewards.user_id == User.id),
            organisation_id,
            branch_id,
        ).order_by(UserRewards.total_xp.desc(), UserRewards.updated_at.desc())
    )
    rows = result.all()

    top = [
        RankingPosition(
            position=i,
            user_id=row.User.id,
            name=row.User.name,
            surname=row.User.surname,
            total_xp=row.UserRewards.total_xp,
            level=row.UserRewards.level,
            rank=row.UserRewards.rank,
        )
        for i, row in enumerate(rows[: settings.rankings_size], start=1)
    ]
    current = next((i for i, row in enumerate(rows, start=1) if row.User.id == user_id), None)

    return RankingsResponse(
        message="Success",
        top_positions=top,
        current_user_position=current,
        total_participants=len(rows),
        generated_at=datetime.now(timezone.utc),
    )


async def get_user_stats(db: AsyncSession, user_id: int, organisation_id: int) -> dict[str, Any]:
    """A user's rewards with transactions, achievements and inventory."""
    result = await db.execute(
        select(UserRewards)
        .join(User, UserRewards.user_id == User.id)
        .where(UserRewards.user_id == user_id, User.organisation_id == organisation_id)
        .options(
            selectinload(UserRewards.transactions),
            selectinload(UserRewards.achievements),
            selectinload(UserRewards.inventory),
        )
    )
    rewards = result.scalar_one_or_none()
    if rewards is None:
        return {"message": "User rewards not found", "rewards": None}
    return {"message": "Success", "rewards": UserRewardsDetail.model_validate(rewards)}
