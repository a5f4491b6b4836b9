"""Bridges Redis pub/sub to WebSocket clients.

Services publish domain events on ``pubsub:<event>``; this task fans them
out to subscribed WebSocket clients of the same organisation. Per-user
notifications arrive on ``ws:user:<id>``.
"""

from __future__ import annotations

import asyncio
import json

import redis.asyncio as aioredis
import structlog

from loro.ws.manager import manager

logger = structlog.get_logger()

# Map Redis pub/sub channels to WebSocket channels
CHANNEL_MAP: dict[str, str] = {
    "pubsub:quotation:new": "quotations",
    "pubsub:quotation:status-changed": "quotations",
    "pubsub:approval:updated": "approvals",
    "pubsub:analytics:update": "analytics",
    "pubsub:level_up": "notifications",
}


def event_name(redis_channel: str) -> str:
    """``pubsub:quotation:new`` -> ``quotation:new``."""
    return redis_channel.split(":", 1)[1] if ":" in redis_channel else redis_channel


class PubSubBridge:
    """Subscribes to Redis pub/sub and pushes messages to WebSocket clients."""

    def __init__(self, redis_client: aioredis.Redis) -> None:
        self.redis = redis_client
        self._running = False

    async def handle_message(self, message: dict) -> int:
        """Route one pub/sub message. Returns the number of recipients."""
        msg_type = message.get("type", "")
        redis_channel = message.get("channel", "")
        if isinstance(redis_channel, bytes):
            redis_channel = redis_channel.decode()

        try:
            data = message.get("data", b"")
            if isinstance(data, bytes):
                data = data.decode()
            payload = json.loads(data)
        except (json.JSONDecodeError, UnicodeDecodeError, TypeError):
            logger.warning("pubsub_invalid_message", channel=redis_channel)
            return 0

        # Per-user messages (pattern match on ws:user:*)
        if msg_type == "pmessage" and redis_channel.startswith("ws:user:"):
            try:
                user_id = int(redis_channel.rsplit(":", 1)[-1])
            except ValueError:
                logger.warning("pubsub_invalid_user_id", channel=redis_channel)
                return 0
            return await manager.send_to_user_direct(user_id, {
                "type": payload.get("event", "notification"),
                "payload": payload.get("data", payload),
            })

        # Broadcast messages (exact channel match)
        ws_channel = CHANNEL_MAP.get(redis_channel)
        if ws_channel is None:
            return 0
        return await manager.broadcast_to_channel(
            ws_channel,
            {"type": event_name(redis_channel), **payload},
            organisation_id=payload.get("organisation_id"),
        )

    async def start(self) -> None:
        """Start listening to Redis pub/sub channels."""
        self._running = True
        pubsub = self.redis.pubsub()

        await pubsub.subscribe(*CHANNEL_MAP.keys())
        await pubsub.psubscribe("ws:user:*")

        logger.info("pubsub_bridge_started", channels=list(CHANNEL_MAP.keys()), patterns=["ws:user:*"])

        try:
            while self._running:
                message = await pubsub.get_message(ignore_subscribe_messages=True, timeout=1.0)
                if message is None:
                    continue
                sent = await self.handle_message(message)
                if sent > 0:
                    logger.debug("pubsub_delivered", channel=message.get("channel"), recipients=sent)
        except asyncio.CancelledError:
            pass
        finally:
            await pubsub.unsubscribe()
            await pubsub.punsubscribe()
            await pubsub.close()
            logger.info("pubsub_bridge_stopped")

    async def stop(self) -> None:
        """Signal the bridge to stop."""
        self._running = False
