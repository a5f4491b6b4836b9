"""WebSocket endpoint with JWT authentication and channel multiplexing."""

from __future__ import annotations

import asyncio
import json
import uuid

import jwt
import structlog
from fastapi import APIRouter, Query, WebSocket, WebSocketDisconnect

from loro.auth.jwt import verify_token
from loro.config import get_settings
from loro.ws.manager import manager

logger = structlog.get_logger()

router = APIRouter()


@router.websocket("/ws")
async def websocket_endpoint(
    websocket: WebSocket,
    token: str = Query(...),
) -> None:
    """Single WebSocket endpoint with JWT authentication and channel multiplexing.

    Protocol:
        Client -> Server:
            {"action": "subscribe", "channel": "quotations"}
            {"action": "unsubscribe", "channel": "quotations"}
            {"action": "ping"}

        Server -> Client:
            {"channel": "quotations", "data": {...}}
            {"type": "notification", "payload": {...}}
            {"type": "pong"}
            {"type": "heartbeat"}  (after an idle interval)
            {"type": "error", "message": "..."}
            {"type": "subscribed", "channel": "quotations"}
            {"type": "unsubscribed", "channel": "quotations"}
    """
    try:
        payload = verify_token(token, expected_type="access")
        user_id = int(payload["sub"])
        org = payload.get("org")
        organisation_id = int(org) if org is not None else None
    except (jwt.InvalidTokenError, KeyError, TypeError, ValueError) as e:
        await websocket.close(code=4001, reason=f"Authentication failed: {e}")
        return

    if not manager.can_accept(user_id):
        await websocket.close(code=4008, reason="Too many connections")
        return

    conn_id = str(uuid.uuid4())
    await manager.connect(websocket, conn_id, user_id, organisation_id)
    heartbeat = get_settings().ws_heartbeat_interval_seconds

    try:
        while True:
            try:
                raw = await asyncio.wait_for(websocket.receive_text(), timeout=heartbeat)
            except asyncio.TimeoutError:
                await websocket.send_json({"type": "heartbeat"})
                continue
            try:
                msg = json.loads(raw)
            except json.JSONDecodeError:
                msg = None
            if not isinstance(msg, dict):
                await websocket.send_json({"type": "error", "message": "Invalid JSON"})
                continue

            action = msg.get("action")

            if action == "subscribe":
                channel = msg.get("channel", "")
                if await manager.subscribe(conn_id, channel):
                    await websocket.send_json({"type": "subscribed", "channel": channel})
                else:
                    await websocket.send_json({"type": "error", "message": f"Invalid channel: {channel}"})

            elif action == "unsubscribe":
                channel = msg.get("channel", "")
                await manager.unsubscribe(conn_id, channel)
                await websocket.send_json({"type": "unsubscribed", "channel": channel})

            elif action == "ping":
                await websocket.send_json({"type": "pong"})

            else:
                await websocket.send_json({"type": "error", "message": f"Unknown action: {action}"})

    except WebSocketDisconnect:
        await manager.disconnect(conn_id)
    except Exception:
        logger.exception("ws_error", conn_id=conn_id)
        await manager.disconnect(conn_id)
