"""Pure leave rules: durations, overlaps and status transitions."""

from __future__ import annotations

from datetime import date, timedelta

LEAVE_TYPES = (
    "annual",
    "sick",
    "maternity",
    "paternity",
    "family_responsibility",
    "study",
    "unpaid",
    "compassionate",
    "other",
)

LEAVE_STATUSES = ("pending", "approved", "rejected", "cancelled_by_user", "cancelled_by_admin")

VALID_TRANSITIONS: dict[str, list[str]] = {
    "pending": ["approved", "rejected", "cancelled_by_user", "cancelled_by_admin"],
    "approved": ["cancelled_by_user", "cancelled_by_admin"],
    "rejected": [],
    "cancelled_by_user": [],
    "cancelled_by_admin": [],
}


def business_days(start: date, end: date) -> int:
    """Mon-Fri days in the inclusive range [start, end]. 0 if end < start."""
    if end < start:
        return 0
    days = 0
    current = start
    while current <= end:
        if current.weekday() < 5:
            days += 1
        current += timedelta(days=1)
    return days


def leave_duration(start: date, end: date, is_half_day: bool = False) -> float:
    duration = float(business_days(start, end))
    if is_half_day and duration > 0:
        duration -= 0.5
    return duration


def overlaps(start_a: date, end_a: date, start_b: date, end_b: date) -> bool:
    return start_a <= end_b and end_a >= start_b


def validate_transition(current_status: str, target_status: str, action: str) -> None:
    """Raise ValueError if ``current_status`` cannot move to ``target_status``."""
    if target_status not in VALID_TRANSITIONS.get(current_status, []):
        raise ValueError(
            f"Leave request cannot be {action} because it is already {current_status.replace('_', ' ')}"
        )


def cancellation_status(leave_owner_id: int, caller_id: int) -> str:
    return "cancelled_by_user" if leave_owner_id == caller_id else "cancelled_by_admin"
