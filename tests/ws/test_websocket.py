"""WebSocket endpoint tests: authentication and the subscribe protocol."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import jwt as pyjwt
import pytest
from starlette.testclient import TestClient
from starlette.websockets import WebSocketDisconnect

from loro.auth.jwt import _load_keys, create_access_token
from loro.config import get_settings
from loro.main import create_app


@pytest.fixture
def test_client() -> TestClient:
    return TestClient(create_app())


@pytest.fixture
def ws_token() -> str:
    return create_access_token(1, "user", 10)


def _expired_token() -> str:
    private_key, _ = _load_keys()
    settings = get_settings()
    now = datetime.now(timezone.utc)
    payload = {
        "sub": "1",
        "role": "user",
        "org": 10,
        "iat": now - timedelta(hours=2),
        "exp": now - timedelta(hours=1),
        "iss": settings.jwt_issuer,
        "type": "access",
    }
    return pyjwt.encode(payload, private_key, algorithm=settings.jwt_algorithm)


class TestWebSocketAuth:
    def test_invalid_token_closes_4001(self, test_client: TestClient) -> None:
        with pytest.raises(WebSocketDisconnect) as exc:
            with test_client.websocket_connect("/ws?token=invalid.jwt.token") as ws:
                ws.receive_json()
        assert exc.value.code == 4001

    def test_expired_token_closes_4001(self, test_client: TestClient) -> None:
        with pytest.raises(WebSocketDisconnect) as exc:
            with test_client.websocket_connect(f"/ws?token={_expired_token()}") as ws:
                ws.receive_json()
        assert exc.value.code == 4001


class TestProtocol:
    def test_ping_pong(self, test_client: TestClient, ws_token: str) -> None:
        with test_client.websocket_connect(f"/ws?token={ws_token}") as ws:
            ws.send_json({"action": "ping"})
            assert ws.receive_json() == {"type": "pong"}

    def test_subscribe_and_unsubscribe(self, test_client: TestClient, ws_token: str) -> None:
        with test_client.websocket_connect(f"/ws?token={ws_token}") as ws:
            ws.send_json({"action": "subscribe", "channel": "quotations"})
            assert ws.receive_json() == {"type": "subscribed", "channel": "quotations"}
            ws.send_json({"action": "unsubscribe", "channel": "quotations"})
            assert ws.receive_json() == {"type": "unsubscribed", "channel": "quotations"}

    def test_invalid_channel(self, test_client: TestClient, ws_token: str) -> None:
        with test_client.websocket_connect(f"/ws?token={ws_token}") as ws:
            ws.send_json({"action": "subscribe", "channel": "payroll"})
            data = ws.receive_json()
            assert data["type"] == "error"
            assert "Invalid channel" in data["message"]

    def test_invalid_json(self, test_client: TestClient, ws_token: str) -> None:
        with test_client.websocket_connect(f"/ws?token={ws_token}") as ws:
            ws.send_text("not valid json {{{")
            data = ws.receive_json()
            assert data == {"type": "error", "message": "Invalid JSON"}

    @pytest.mark.parametrize("payload", ["[]", "1", '"subscribe"', "null"])
    def test_non_object_json_keeps_connection(self, test_client: TestClient, ws_token: str, payload: str) -> None:
        with test_client.websocket_connect(f"/ws?token={ws_token}") as ws:
            ws.send_text(payload)
            assert ws.receive_json() == {"type": "error", "message": "Invalid JSON"}
            ws.send_json({"action": "ping"})
            assert ws.receive_json() == {"type": "pong"}

    def test_unknown_action(self, test_client: TestClient, ws_token: str) -> None:
        with test_client.websocket_connect(f"/ws?token={ws_token}") as ws:
            ws.send_json({"action": "explode"})
            assert "Unknown action" in ws.receive_json()["message"]

    def test_idle_connection_gets_heartbeat(
        self, monkeypatch: pytest.MonkeyPatch, test_client: TestClient, ws_token: str
    ) -> None:
        monkeypatch.setenv("LORO_WS_HEARTBEAT_INTERVAL_SECONDS", "1")
        get_settings.cache_clear()
        with test_client.websocket_connect(f"/ws?token={ws_token}") as ws:
            assert ws.receive_json() == {"type": "heartbeat"}
