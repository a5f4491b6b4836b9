"""Pydantic models for rewards endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

XP_CATEGORIES = ("tasks", "leads", "sales", "attendance", "collaboration", "login", "other")


# --- Requests ---


class XPSource(BaseModel):
    id: str
    type: str
    details: Any = None


class AwardXPRequest(BaseModel):
    owner: int | None = None
    amount: int = Field(ge=0)
    action: str = Field(min_length=1, max_length=64)
    source: XPSource


# --- Responses ---


class UserRewardsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    current_xp: int
    total_xp: int
    level: int
    rank: str
    xp_breakdown: dict[str, int]
    last_action: datetime | None = None
    created_at: datetime
    updated_at: datetime

    @field_validator("xp_breakdown", mode="before")
    @classmethod
    def _backfill_categories(cls, value: dict[str, int] | None) -> dict[str, int]:
        breakdown = {category: 0 for category in XP_CATEGORIES}
        breakdown.update(value or {})
        return breakdown


class AwardXPResponse(BaseModel):
    message: str
    rewards: UserRewardsResponse | None = None


class XPTransactionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    action: str
    xp_amount: int
    meta: dict[str, Any] = {}
    created_at: datetime


class AchievementResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str
    xp_value: int
    icon: str | None = None
    category: str
    is_repeatable: bool
    created_at: datetime


class UnlockedItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str
    type: str
    rarity: str
    icon: str | None = None
    required_level: int
    required_xp: int
    unlocked_at: datetime


class UserRewardsDetail(UserRewardsResponse):
    transactions: list[XPTransactionResponse] = []
    achievements: list[AchievementResponse] = []
    inventory: list[UnlockedItemResponse] = []


class UserStatsResponse(BaseModel):
    message: str
    rewards: UserRewardsDetail | None = None


class LeaderboardUser(BaseModel):
    id: int
    username: str | None = None
    name: str
    surname: str
    photo_url: str | None = None
    branch_id: int | None = None
    branch_name: str | None = None


class LeaderboardXP(BaseModel):
    total_xp: int
    current_xp: int
    level: int
    rank: str
    next_level_xp: int
    level_progress: float
    breakdown: dict[str, int]


class LeaderboardStatistics(BaseModel):
    xp_this_month: int
    xp_last_month: int
    rank_change: int = 0
    consistency_streak: int


class LeaderboardAchievement(BaseModel):
    name: str
    description: str
    xp_value: int
    icon: str | None = None
    category: str
    earned_at: datetime


class LeaderboardEntry(BaseModel):
    rank: int
    user: LeaderboardUser
    xp: LeaderboardXP
    statistics: LeaderboardStatistics
    recent_achievements: list[LeaderboardAchievement] = []


class LeaderboardMetadata(BaseModel):
    total_participants: int
    organisation_id: int | None
    branch_id: int | None = None
    generated_at: datetime
    period: str = "all-time"


class LeaderboardResponse(BaseModel):
    message: str
    leaderboard: list[LeaderboardEntry] = []
    metadata: LeaderboardMetadata | None = None


class RankingPosition(BaseModel):
    position: int
    user_id: int
    name: str
    surname: str
    total_xp: int
    level: int
    rank: str


class RankingsResponse(BaseModel):
    message: str
    top_positions: list[RankingPosition] = []
    current_user_position: int | None = None
    criteria: str = "xp"
    total_participants: int = 0
    generated_at: datetime


class LevelEntry(BaseModel):
    level: int
    min_xp: int
    max_xp: int
    rank: str


class RankEntry(BaseModel):
    rank: str
    min_level: int
    max_level: int


class LevelTablesResponse(BaseModel):
    levels: list[LevelEntry]
    ranks: list[RankEntry]
