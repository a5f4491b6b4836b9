"""Leave API endpoints: /api/v1/leave/*."""

from __future__ import annotations

from datetime import date

import structlog
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from loro.auth.context import ELEVATED_ROLES, STAFF_ROLES, WORKFORCE_ROLES, RequestContext
from loro.auth.dependencies import enterprise_only, require_organisation, require_roles
from loro.database import get_session
from loro.dependencies import get_redis_dep
from loro.errors import ServiceError, raise_http
from loro.leave.schemas import (
    LeaveApprove,
    LeaveCancel,
    LeaveCreate,
    LeaveCreateResponse,
    LeaveListResponse,
    LeaveReject,
    LeaveResponse,
    LeaveStatus,
    LeaveType,
    LeaveUpdate,
)
from loro.leave.service import (
    approve_leave,
    cancel_leave,
    create_leave,
    delete_leave,
    get_leave,
    leaves_for_user,
    list_leaves,
    notify_status_change,
    reject_leave,
    restore_leave,
    update_leave,
)
from loro.pagination import page_meta

logger = structlog.get_logger()

router = APIRouter(
    prefix="/api/v1/leave",
    tags=["Leave"],
    dependencies=[Depends(enterprise_only("leave"))],
)


@router.post("", response_model=LeaveCreateResponse, status_code=201)
async def create(
    body: LeaveCreate,
    ctx: RequestContext = Depends(require_roles(*WORKFORCE_ROLES)),
    db: AsyncSession = Depends(get_session),
    redis: object | None = Depends(get_redis_dep),
):
    """File a leave request for the caller."""
    org_id = require_organisation(ctx)
    try:
        leave, auto_rejected = await create_leave(db, body, ctx.user_id, org_id, ctx.branch_id)
    except ServiceError as e:
        raise_http(e)
    await db.commit()
    response = LeaveResponse.model_validate(leave)
    if auto_rejected:
        await notify_status_change(leave, redis)
        message = "Leave request created but automatically rejected due to conflicting dates"
    else:
        message = "Leave request created successfully"
    logger.info("leave_created", leave_id=response.id, status=response.status)
    return LeaveCreateResponse(message=message, leave=response)


@router.get("", response_model=LeaveListResponse)
async def list_all(
    status: LeaveStatus | None = Query(None),
    leave_type: LeaveType | None = Query(None),
    owner_id: int | None = Query(None),
    start_date: date | None = Query(None),
    end_date: date | None = Query(None),
    is_approved: bool | None = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    ctx: RequestContext = Depends(require_roles(*WORKFORCE_ROLES)),
    db: AsyncSession = Depends(get_session),
):
    org_id = require_organisation(ctx)
    leaves, total = await list_leaves(
        db,
        org_id,
        ctx.branch_id,
        status=status,
        leave_type=leave_type,
        owner_id=owner_id,
        start_date=start_date,
        end_date=end_date,
        is_approved=is_approved,
        page=page,
        limit=limit,
    )
    return LeaveListResponse(
        data=[LeaveResponse.model_validate(lv) for lv in leaves],
        meta=page_meta(total, page, limit),
    )


@router.get("/user/{user_id}", response_model=list[LeaveResponse])
async def for_user(
    user_id: int,
    ctx: RequestContext = Depends(require_roles(*WORKFORCE_ROLES)),
    db: AsyncSession = Depends(get_session),
):
    org_id = require_organisation(ctx)
    try:
        leaves = await leaves_for_user(db, user_id, org_id, ctx.branch_id)
    except ServiceError as e:
        raise_http(e)
    return [LeaveResponse.model_validate(lv) for lv in leaves]


@router.get("/{leave_id}", response_model=LeaveResponse)
async def get_one(
    leave_id: int,
    ctx: RequestContext = Depends(require_roles(*WORKFORCE_ROLES)),
    db: AsyncSession = Depends(get_session),
):
    org_id = require_organisation(ctx)
    try:
        leave = await get_leave(db, leave_id, org_id, ctx.branch_id)
    except ServiceError as e:
        raise_http(e)
    return LeaveResponse.model_validate(leave)


@router.patch("/restore/{leave_id}", response_model=LeaveResponse)
async def restore(
    leave_id: int,
    ctx: RequestContext = Depends(require_roles(*STAFF_ROLES)),
    db: AsyncSession = Depends(get_session),
):
    org_id = require_organisation(ctx)
    try:
        leave = await restore_leave(db, leave_id, org_id, ctx.branch_id)
    except ServiceError as e:
        raise_http(e)
    await db.commit()
    return LeaveResponse.model_validate(leave)


@router.patch("/{leave_id}/approve", response_model=LeaveResponse)
async def approve(
    leave_id: int,
    body: LeaveApprove | None = None,
    ctx: RequestContext = Depends(require_roles(*ELEVATED_ROLES)),
    db: AsyncSession = Depends(get_session),
    redis: object | None = Depends(get_redis_dep),
):
    org_id = require_organisation(ctx)
    try:
        leave = await approve_leave(
            db, leave_id, ctx.user_id, org_id, ctx.branch_id, comments=body.comments if body else None
        )
    except ServiceError as e:
        raise_http(e)
    await db.commit()
    response = LeaveResponse.model_validate(leave)
    await notify_status_change(leave, redis)
    return response


@router.patch("/{leave_id}/reject", response_model=LeaveResponse)
async def reject(
    leave_id: int,
    body: LeaveReject,
    ctx: RequestContext = Depends(require_roles(*ELEVATED_ROLES)),
    db: AsyncSession = Depends(get_session),
    redis: object | None = Depends(get_redis_dep),
):
    org_id = require_organisation(ctx)
    try:
        leave = await reject_leave(db, leave_id, body.rejection_reason, org_id, ctx.branch_id)
    except ServiceError as e:
        raise_http(e)
    await db.commit()
    response = LeaveResponse.model_validate(leave)
    await notify_status_change(leave, redis)
    return response


@router.patch("/{leave_id}/cancel", response_model=LeaveResponse)
async def cancel(
    leave_id: int,
    body: LeaveCancel,
    ctx: RequestContext = Depends(require_roles(*WORKFORCE_ROLES)),
    db: AsyncSession = Depends(get_session),
    redis: object | None = Depends(get_redis_dep),
):
    """Cancel a pending or approved leave (by its owner or on their behalf)."""
    org_id = require_organisation(ctx)
    try:
        leave = await cancel_leave(db, leave_id, body.cancellation_reason, ctx.user_id, org_id, ctx.branch_id)
    except ServiceError as e:
        raise_http(e)
    await db.commit()
    response = LeaveResponse.model_validate(leave)
    await notify_status_change(leave, redis)
    return response


@router.patch("/{leave_id}", response_model=LeaveResponse)
async def update(
    leave_id: int,
    body: LeaveUpdate,
    ctx: RequestContext = Depends(require_roles(*WORKFORCE_ROLES)),
    db: AsyncSession = Depends(get_session),
):
    org_id = require_organisation(ctx)
    try:
        leave = await update_leave(db, leave_id, body, org_id, ctx.branch_id)
    except ServiceError as e:
        raise_http(e)
    await db.commit()
    return LeaveResponse.model_validate(leave)


@router.delete("/{leave_id}")
async def delete(
    leave_id: int,
    ctx: RequestContext = Depends(require_roles(*WORKFORCE_ROLES)),
    db: AsyncSession = Depends(get_session),
):
    org_id = require_organisation(ctx)
    try:
        await delete_leave(db, leave_id, org_id, ctx.branch_id)
    except ServiceError as e:
        raise_http(e)
    await db.commit()
    return {"message": "Leave request deleted successfully"}
