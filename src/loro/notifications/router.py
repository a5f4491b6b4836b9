"""Notification API endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from loro.auth.context import RequestContext
from loro.auth.dependencies import get_licensed_context
from loro.database import get_session
from loro.notifications.schemas import NotificationListResponse, NotificationResponse
from loro.notifications.service import get_notifications, mark_as_read

router = APIRouter(prefix="/api/v1/notifications", tags=["Notifications"])


@router.get("", response_model=NotificationListResponse)
async def list_notifications(
    page: int = Query(1, ge=1),
    per_page: int = Query(20, ge=1, le=100),
    ctx: RequestContext = Depends(get_licensed_context),
    db: AsyncSession = Depends(get_session),
):
    """List the caller's notifications (paginated)."""
    notifications, total = await get_notifications(db, ctx.user_id, page, per_page)
    return NotificationListResponse(
        notifications=[
            NotificationResponse(
                id=str(n.id),
                type=n.type,
                title=n.title,
                message=n.message,
                data=n.data or {},
                timestamp=n.created_at,
                read=n.is_read,
            )
            for n in notifications
        ],
        total=total,
        page=page,
        per_page=per_page,
    )


@router.patch("/{notification_id}/read", status_code=200)
async def mark_notification_read(
    notification_id: int,
    ctx: RequestContext = Depends(get_licensed_context),
    db: AsyncSession = Depends(get_session),
):
    """Mark a notification as read."""
    found = await mark_as_read(db, ctx.user_id, notification_id)
    if not found:
        raise HTTPException(status_code=404, detail="Notification not found")
    await db.commit()
    return {"detail": "Notification marked as read"}
