"""XP values and domain event handlers that translate events into XP awards."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from loro.config import get_settings
from loro.rewards.schemas import AwardXPRequest, XPSource
from loro.rewards.service import award_xp

logger = logging.getLogger(__name__)

XP_VALUES: dict[str, int] = {
    "DAILY_LOGIN": 10,
    "CREATE_TASK": 10,
    "COMPLETE_TASK": 20,
    "COMPLETE_TASK_EARLY": 30,
    "CREATE_LEAD": 15,
    "CHECK_IN": 5,
    "CHECK_OUT": 5,
    "CHECK_IN_CLIENT": 10,
    "CLAIM": 5,
    "JOURNAL": 5,
    "QUOTATION_APPROVED": 50,
}


def _task_created(payload: dict[str, Any]) -> AwardXPRequest:
    return AwardXPRequest(
        owner=payload.get("user_id"),
        action="CREATE_TASK",
        amount=XP_VALUES["CREATE_TASK"],
        source=XPSource(id=str(payload.get("task_id", "")), type="task"),
    )


def _task_completed(payload: dict[str, Any]) -> AwardXPRequest:
    early = bool(payload.get("completed_early"))
    action = "COMPLETE_TASK_EARLY" if early else "COMPLETE_TASK"
    return AwardXPRequest(
        owner=payload.get("user_id"),
        action=action,
        amount=XP_VALUES[action],
        source=XPSource(
            id=str(payload.get("task_id", "")),
            type="task",
            details={"completed_early": early},
        ),
    )


def _lead_created(payload: dict[str, Any]) -> AwardXPRequest:
    return AwardXPRequest(
        owner=payload.get("user_id"),
        action="CREATE_LEAD",
        amount=XP_VALUES["CREATE_LEAD"],
        source=XPSource(id=str(payload.get("lead_id", "")), type="lead"),
    )


def _user_login(payload: dict[str, Any]) -> AwardXPRequest:
    return AwardXPRequest(
        owner=payload.get("user_id"),
        action="DAILY_LOGIN",
        amount=get_settings().daily_login_xp,
        source=XPSource(id=str(payload.get("user_id", "")), type="login", details="Daily login reward"),
    )


def _quotation_approved(payload: dict[str, Any]) -> AwardXPRequest:
    return AwardXPRequest(
        owner=payload.get("user_id"),
        action="QUOTATION_APPROVED",
        amount=XP_VALUES["QUOTATION_APPROVED"],
        source=XPSource(id=str(payload.get("quotation_id", "")), type="quotation"),
    )


EVENT_HANDLERS: dict[str, Callable[[dict[str, Any]], AwardXPRequest]] = {
    "task.created": _task_created,
    "task.completed": _task_completed,
    "lead.created": _lead_created,
    "user.login": _user_login,
    "quotation.approved": _quotation_approved,
}


async def dispatch(
    db: AsyncSession,
    event: str,
    payload: dict[str, Any],
    redis: object | None = None,
) -> dict[str, Any] | None:
    """Award the XP an event is worth. Unknown events are ignored."""
    builder = EVENT_HANDLERS.get(event)
    if builder is None:
        logger.debug("No XP handler for event %s", event)
        return None
    return await award_xp(
        db,
        builder(payload),
        payload.get("organisation_id"),
        payload.get("branch_id"),
        redis=redis,
    )
