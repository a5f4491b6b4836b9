"""Push formatted notifications and domain events over Redis pub/sub."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from loro.db.models import Notification

logger = logging.getLogger(__name__)


async def push_notification_to_user(redis: object | None, notification: Notification) -> None:
    """Publish a formatted notification dict to ws:user:{user_id}.

    The notification must already be flushed (have an ``id``).
    The bridge pattern-subscribes to ``ws:user:*`` and routes the
    message to all of the user's active WebSocket connections.
    """
    if redis is None:
        return

    ws_payload = {
        "event": "notification",
        "data": {
            "id": str(notification.id),
            "type": notification.type,
            "title": notification.title,
            "message": notification.message,
            "data": notification.data or {},
            "timestamp": (
                notification.created_at.isoformat()
                if notification.created_at
                else None
            ),
            "read": False,
        },
    }
    try:
        await redis.publish(  # type: ignore[union-attr]
            f"ws:user:{notification.user_id}",
            json.dumps(ws_payload),
        )
    except Exception:
        logger.warning(
            "Failed to push notification via ws:user:%s",
            notification.user_id,
            exc_info=True,
        )


async def publish_event(redis: object | None, event: str, payload: dict[str, Any]) -> None:
    """Broadcast a domain event on ``pubsub:<event>`` for WebSocket fan-out.

    Best-effort: a missing or failing Redis never fails the caller.
    """
    if redis is None:
        return
    try:
        await redis.publish(f"pubsub:{event}", json.dumps(payload, default=str))  # type: ignore[union-attr]
    except Exception:
        logger.warning("Failed to publish %s", event, exc_info=True)
