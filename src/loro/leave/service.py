"""Leave requests: creation with conflict checks, approval workflow, soft delete."""

from __future__ import annotations

import logging
from datetime import date, datetime, timezone

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from loro.db.base import tenant_clause
from loro.db.models import Leave
from loro.email.service import send_notification_email
from loro.errors import NotFoundError, ValidationError
from loro.leave.rules import cancellation_status, leave_duration, overlaps, validate_transition
from loro.leave.schemas import LeaveCreate, LeaveUpdate
from loro.notifications.push import publish_event
from loro.users.service import get_org_user

logger = logging.getLogger(__name__)


async def _get_scoped(
    db: AsyncSession,
    leave_id: int,
    organisation_id: int | None,
    branch_id: int | None,
    *,
    include_deleted: bool = False,
) -> Leave:
    stmt = select(Leave).where(Leave.id == leave_id, *tenant_clause(Leave, organisation_id, branch_id))
    if not include_deleted:
        stmt = stmt.where(Leave.deleted_at.is_(None))
    leave = (await db.execute(stmt)).scalar_one_or_none()
    if leave is None:
        msg = "Leave request not found"
        raise NotFoundError(msg)
    return leave


async def find_conflicts(db: AsyncSession, owner_id: int, start: date, end: date, exclude_id: int | None = None) -> list[Leave]:
    """The owner's approved leaves whose date range overlaps [start, end]."""
    stmt = select(Leave).where(
        Leave.owner_id == owner_id,
        Leave.status == "approved",
        Leave.deleted_at.is_(None),
    )
    if exclude_id is not None:
        stmt = stmt.where(Leave.id != exclude_id)
    approved = (await db.execute(stmt)).scalars().all()
    return [lv for lv in approved if overlaps(start, end, lv.start_date, lv.end_date)]


async def create_leave(
    db: AsyncSession,
    body: LeaveCreate,
    owner_id: int,
    organisation_id: int,
    branch_id: int | None = None,
) -> tuple[Leave, bool]:
    """
    File a leave request for ``owner_id``.

    When ``duration`` is omitted it is the number of business days in the
    range, less half a day for half-day requests. A request overlapping one
    of the owner's approved leaves is stored as rejected.

    Returns:
        The leave and whether it was auto-rejected.
    """
    await get_org_user(db, owner_id, organisation_id)
    if body.delegated_to_id is not None:
        await get_org_user(db, body.delegated_to_id, organisation_id)

    data = body.model_dump()
    if data["duration"] is None:
        data["duration"] = leave_duration(body.start_date, body.end_date, body.is_half_day)

    leave = Leave(**data, owner_id=owner_id, organisation_id=organisation_id, branch_id=branch_id, status="pending")

    conflicts = await find_conflicts(db, owner_id, body.start_date, body.end_date)
    auto_rejected = bool(conflicts)
    if auto_rejected:
        refs = ", ".join(f"#{c.id}" for c in conflicts)
        leave.status = "rejected"
        leave.rejected_at = datetime.now(timezone.utc)
        leave.rejection_reason = (
            "Automatically rejected due to conflicting leave requests on the same dates. "
            f"Conflicting leaves: {refs}"
        )
        logger.warning("Auto-rejecting leave for user %s, conflicts with %s", owner_id, refs)

    db.add(leave)
    await db.flush()
    await db.refresh(leave)
    return leave, auto_rejected


async def list_leaves(
    db: AsyncSession,
    organisation_id: int | None,
    branch_id: int | None = None,
    *,
    status: str | None = None,
    leave_type: str | None = None,
    owner_id: int | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
    is_approved: bool | None = None,
    page: int = 1,
    limit: int = 20,
) -> tuple[list[Leave], int]:
    """Filtered, paginated leave list (newest first)."""
    conditions = [Leave.deleted_at.is_(None), *tenant_clause(Leave, organisation_id, branch_id)]
    if status:
        conditions.append(Leave.status == status)
    if leave_type:
        conditions.append(Leave.leave_type == leave_type)
    if owner_id is not None:
        conditions.append(Leave.owner_id == owner_id)
    if is_approved is not None:
        conditions.append(Leave.status == ("approved" if is_approved else "pending"))
    # Both bounds: anything overlapping the window.
    if start_date and end_date:
        conditions.extend([Leave.start_date <= end_date, Leave.end_date >= start_date])
    elif start_date:
        conditions.append(Leave.start_date >= start_date)
    elif end_date:
        conditions.append(Leave.end_date <= end_date)

    total = (await db.execute(select(func.count()).select_from(Leave).where(*conditions))).scalar_one()
    result = await db.execute(
        select(Leave)
        .where(*conditions)
        .order_by(Leave.created_at.desc(), Leave.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
    )
    return list(result.scalars().all()), total


async def get_leave(db: AsyncSession, leave_id: int, organisation_id: int | None, branch_id: int | None = None) -> Leave:
    return await _get_scoped(db, leave_id, organisation_id, branch_id)


async def leaves_for_user(
    db: AsyncSession,
    user_id: int,
    organisation_id: int | None,
    branch_id: int | None = None,
) -> list[Leave]:
    await get_org_user(db, user_id, organisation_id)
    result = await db.execute(
        select(Leave)
        .where(
            Leave.owner_id == user_id,
            Leave.deleted_at.is_(None),
            *tenant_clause(Leave, organisation_id, branch_id),
        )
        .order_by(Leave.start_date.desc(), Leave.id.desc())
    )
    return list(result.scalars().all())


async def update_leave(
    db: AsyncSession,
    leave_id: int,
    body: LeaveUpdate,
    organisation_id: int | None,
    branch_id: int | None = None,
) -> Leave:
    """Edit a pending request. Changing dates recomputes the duration unless one is given."""
    leave = await _get_scoped(db, leave_id, organisation_id, branch_id)
    if leave.status != "pending":
        msg = f"Leave request cannot be updated because it is already {leave.status.replace('_', ' ')}"
        raise ValidationError(msg)

    changes = body.model_dump(exclude_unset=True)
    start = changes.get("start_date") or leave.start_date
    end = changes.get("end_date") or leave.end_date
    if end < start:
        msg = "end_date must be on or after start_date"
        raise ValidationError(msg)

    if changes.get("delegated_to_id") is not None:
        await get_org_user(db, changes["delegated_to_id"], organisation_id)

    for key, value in changes.items():
        if value is None and key in ("leave_type", "start_date", "end_date", "duration", "is_half_day", "is_paid"):
            continue
        setattr(leave, key, value)

    dates_changed = "start_date" in changes or "end_date" in changes or "is_half_day" in changes
    if dates_changed and changes.get("duration") is None:
        leave.duration = leave_duration(start, end, leave.is_half_day)

    await db.flush()
    await db.refresh(leave)
    return leave


async def approve_leave(
    db: AsyncSession,
    leave_id: int,
    approver_id: int,
    organisation_id: int | None,
    branch_id: int | None = None,
    comments: str | None = None,
) -> Leave:
    leave = await _get_scoped(db, leave_id, organisation_id, branch_id)
    try:
        validate_transition(leave.status, "approved", "approved")
    except ValueError as e:
        raise ValidationError(str(e)) from e

    leave.status = "approved"
    leave.approved_by_id = approver_id
    leave.approved_at = datetime.now(timezone.utc)
    if comments:
        leave.comments = comments
    await db.flush()
    await db.refresh(leave)
    logger.info("Leave %s approved by user %s", leave_id, approver_id)
    return leave


async def reject_leave(
    db: AsyncSession,
    leave_id: int,
    reason: str | None,
    organisation_id: int | None,
    branch_id: int | None = None,
) -> Leave:
    leave = await _get_scoped(db, leave_id, organisation_id, branch_id)
    try:
        validate_transition(leave.status, "rejected", "rejected")
    except ValueError as e:
        raise ValidationError(str(e)) from e
    if not reason or not reason.strip():
        msg = "Rejection reason is required"
        raise ValidationError(msg)

    leave.status = "rejected"
    leave.rejected_at = datetime.now(timezone.utc)
    leave.rejection_reason = reason
    await db.flush()
    await db.refresh(leave)
    return leave


async def cancel_leave(
    db: AsyncSession,
    leave_id: int,
    reason: str | None,
    caller_id: int,
    organisation_id: int | None,
    branch_id: int | None = None,
) -> Leave:
    """Cancel a pending or approved leave. The status records who cancelled it."""
    leave = await _get_scoped(db, leave_id, organisation_id, branch_id)
    target = cancellation_status(leave.owner_id, caller_id)
    try:
        validate_transition(leave.status, target, "cancelled")
    except ValueError as e:
        raise ValidationError(str(e)) from e
    if not reason or not reason.strip():
        msg = "Cancellation reason is required"
        raise ValidationError(msg)

    leave.status = target
    leave.cancelled_at = datetime.now(timezone.utc)
    leave.cancellation_reason = reason
    await db.flush()
    await db.refresh(leave)
    return leave


async def delete_leave(db: AsyncSession, leave_id: int, organisation_id: int | None, branch_id: int | None = None) -> None:
    leave = await _get_scoped(db, leave_id, organisation_id, branch_id)
    leave.deleted_at = datetime.now(timezone.utc)
    await db.flush()


async def restore_leave(db: AsyncSession, leave_id: int, organisation_id: int | None, branch_id: int | None = None) -> Leave:
    leave = await _get_scoped(db, leave_id, organisation_id, branch_id, include_deleted=True)
    leave.deleted_at = None
    await db.flush()
    await db.refresh(leave)
    return leave


async def notify_status_change(leave: Leave, redis: object | None = None) -> None:
    """Email the applicant and broadcast ``approval:updated``. Best effort."""
    await publish_event(redis, "approval:updated", {
        "leave_id": leave.id,
        "status": leave.status,
        "owner_id": leave.owner_id,
        "organisation_id": leave.organisation_id,
        "branch_id": leave.branch_id,
    })

    owner = leave.owner
    if owner is None:
        return
    reason = leave.rejection_reason if leave.status == "rejected" else leave.cancellation_reason
    sent = await send_notification_email(owner.email, "leave_status_update", {
        "name": owner.name,
        "leave_type": leave.leave_type,
        "start_date": leave.start_date.isoformat(),
        "end_date": leave.end_date.isoformat(),
        "status": leave.status,
        "reason": reason,
    })
    if not sent:
        logger.warning("Leave status email for leave %s not delivered", leave.id)
