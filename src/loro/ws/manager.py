"""WebSocket connection manager.

Tracks all active WebSocket connections and their channel subscriptions.
Handles fan-out of messages to subscribed clients.
"""

from __future__ import annotations

import json
import time
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any

import structlog
from fastapi import WebSocket

from loro.config import get_settings

logger = structlog.get_logger()

VALID_CHANNELS = {"quotations", "approvals", "analytics", "notifications"}


@dataclass
class ClientConnection:
    """Represents a single WebSocket client."""

    websocket: WebSocket
    user_id: int
    organisation_id: int | None = None
    subscriptions: set[str] = field(default_factory=set)
    connected_at: float = field(default_factory=time.time)
    messages_sent: int = 0


class ConnectionManager:
    """Manages all active WebSocket connections.

    Safe under asyncio: every mutation happens on the event loop thread.
    """

    def __init__(self, max_connections_per_user: int = 5) -> None:
        self.max_connections_per_user = max_connections_per_user
        self._connections: dict[str, ClientConnection] = {}  # conn_id -> client
        self._channels: dict[str, set[str]] = defaultdict(set)  # channel -> {conn_ids}
        self._user_connections: dict[int, set[str]] = defaultdict(set)  # user_id -> {conn_ids}

    @property
    def connection_count(self) -> int:
        return len(self._connections)

    def can_accept(self, user_id: int) -> bool:
        return len(self._user_connections.get(user_id, ())) < self.max_connections_per_user

    async def connect(
        self,
        websocket: WebSocket,
        conn_id: str,
        user_id: int,
        organisation_id: int | None = None,
    ) -> None:
        """Accept a new WebSocket connection."""
        await websocket.accept()
        self._connections[conn_id] = ClientConnection(
            websocket=websocket,
            user_id=user_id,
            organisation_id=organisation_id,
        )
        self._user_connections[user_id].add(conn_id)
        logger.info("ws_connected", conn_id=conn_id, user_id=user_id)

    async def disconnect(self, conn_id: str) -> None:
        """Remove a WebSocket connection and its subscriptions."""
        client = self._connections.pop(conn_id, None)
        if client is None:
            return

        for channel in client.subscriptions:
            self._channels[channel].discard(conn_id)

        self._user_connections[client.user_id].discard(conn_id)
        if not self._user_connections[client.user_id]:
            del self._user_connections[client.user_id]

        logger.info("ws_disconnected", conn_id=conn_id, user_id=client.user_id)

    async def subscribe(self, conn_id: str, channel: str) -> bool:
        """Subscribe a connection to a channel. Returns False if invalid."""
        client = self._connections.get(conn_id)
        if client is None or channel not in VALID_CHANNELS:
            return False

        client.subscriptions.add(channel)
        self._channels[channel].add(conn_id)
        logger.debug("ws_subscribed", conn_id=conn_id, channel=channel)
        return True

    async def unsubscribe(self, conn_id: str, channel: str) -> bool:
        """Unsubscribe a connection from a channel."""
        client = self._connections.get(conn_id)
        if client is None:
            return False

        client.subscriptions.discard(channel)
        self._channels[channel].discard(conn_id)
        return True

    async def _send(self, conn_id: str, payload: str) -> bool:
        client = self._connections.get(conn_id)
        if client is None:
            return False
        try:
            await client.websocket.send_text(payload)
        except Exception:
            logger.debug("ws_send_failed", conn_id=conn_id)
            await self.disconnect(conn_id)
            return False
        client.messages_sent += 1
        return True

    async def broadcast_to_channel(
        self,
        channel: str,
        message: dict[str, Any],
        organisation_id: int | None = None,
    ) -> int:
        """Send a message to all clients subscribed to a channel.

        With ``organisation_id`` only that tenant's connections receive it.
        Returns the number of clients that received the message.
        """
        payload = json.dumps({"channel": channel, "data": message}, default=str)
        sent = 0
        for conn_id in list(self._channels.get(channel, set())):
            client = self._connections.get(conn_id)
            if client is None:
                self._channels[channel].discard(conn_id)
                continue
            if organisation_id is not None and client.organisation_id != organisation_id:
                continue
            if await self._send(conn_id, payload):
                sent += 1
        return sent

    async def send_to_user(self, user_id: int, channel: str, message: dict[str, Any]) -> int:
        """Send a message to a user's connections subscribed to ``channel``."""
        payload = json.dumps({"channel": channel, "data": message}, default=str)
        sent = 0
        for conn_id in list(self._user_connections.get(user_id, set())):
            client = self._connections.get(conn_id)
            if client and channel in client.subscriptions and await self._send(conn_id, payload):
                sent += 1
        return sent

    async def send_to_user_direct(self, user_id: int, message: dict[str, Any]) -> int:
        """Send to every connection of a user regardless of subscriptions."""
        payload = json.dumps(message, default=str)
        sent = 0
        for conn_id in list(self._user_connections.get(user_id, set())):
            if await self._send(conn_id, payload):
                sent += 1
        return sent

    def get_stats(self) -> dict[str, Any]:
        """Get connection statistics."""
        return {
            "total_connections": len(self._connections),
            "unique_users": len(self._user_connections),
            "channels": {ch: len(conns) for ch, conns in self._channels.items() if conns},
        }


# Global singleton
manager = ConnectionManager(get_settings().ws_max_connections_per_user)
