"""Daily sales tip broadcast to every active user."""

from __future__ import annotations

import asyncio
import logging
from datetime import date, datetime, timezone
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from loro.config import get_settings
from loro.notifications.push import push_notification_to_user
from loro.notifications.service import create_notification
from loro.sales_tips.catalogue import tip_for_date
from loro.users.service import list_active_users

logger = logging.getLogger(__name__)


async def broadcast_tip_of_the_day(
    db: AsyncSession,
    redis: object | None = None,
    *,
    day: date | None = None,
    batch_size: int | None = None,
    batch_delay: float | None = None,
) -> dict[str, Any]:
    """
    Notify every active user of today's tip.

    Users are processed in batches, committing after each batch and pausing
    between batches. There is no retry: a failed batch is logged and
    skipped.

    Returns:
        Counts of users seen and notifications sent, plus the tip id.
    """
    settings = get_settings()
    size = batch_size or settings.sales_tip_batch_size
    delay = settings.sales_tip_batch_delay_seconds if batch_delay is None else batch_delay
    tip = tip_for_date(day or datetime.now(timezone.utc).date())

    total_users = 0
    sent = 0
    last_id = 0
    while True:
        users = await list_active_users(db, after_id=last_id, limit=size)
        if not users:
            break
        last_id = users[-1].id
        total_users += len(users)
        user_ids = [u.id for u in users]

        try:
            created = []
            for user_id in user_ids:
                created.append(await create_notification(
                    db,
                    user_id,
                    "sales_tip",
                    f"Sales tip: {tip.title}",
                    tip.content,
                    data={"tip_id": tip.id, "category": tip.category},
                ))
            await db.commit()
        except Exception:
            await db.rollback()
            logger.exception("Sales tip batch ending at user %s failed", last_id)
        else:
            sent += len(user_ids)
            # Push only what was persisted.
            for notification in created:
                await push_notification_to_user(redis, notification)

        if len(users) < size:
            break
        await asyncio.sleep(delay)

    logger.info("Sales tip %s broadcast: %d/%d users notified", tip.id, sent, total_users)
    return {"tip_id": tip.id, "total_users": total_users, "notifications_sent": sent}
