"""
End-to-end WebSocket tests.

These tests run the real application through TestClient and cover the
upgrade, the echo/broadcast fan-out and connection cleanup.
"""

import pytest
from fastapi.testclient import TestClient
from prometheus_client import REGISTRY
from starlette.websockets import WebSocketDisconnect

from potato_server import application
from potato_server.api.ws.consumers.web import Web
from potato_server.settings import app_settings


def test_broadcast_to_all_then_only_remaining(client, app):
    """
    A and B connect, A's message reaches both; after B leaves only A
    receives A's next message.
    """
    hub = app.state.hub

    with client.websocket_connect("/ws") as ws_a:
        with client.websocket_connect("/ws") as ws_b:
            assert len(hub.registry) == 2

            ws_a.send_text("ping")
            assert ws_a.receive_text() == "Echo: ping"
            assert ws_b.receive_text() == "Echo: ping"

        assert len(hub.registry) == 1

        ws_a.send_text("ping2")
        assert ws_a.receive_text() == "Echo: ping2"
        assert len(hub.registry) == 1

    assert len(hub.registry) == 0


def test_messages_from_one_connection_keep_order(client):
    with client.websocket_connect("/ws") as ws_a:
        with client.websocket_connect("/ws") as ws_b:
            for i in range(5):
                ws_a.send_text(f"msg-{i}")

            assert [ws_b.receive_text() for _ in range(5)] == [
                f"Echo: msg-{i}" for i in range(5)
            ]
            assert [ws_a.receive_text() for _ in range(5)] == [
                f"Echo: msg-{i}" for i in range(5)
            ]


def test_plain_http_get_on_upgrade_path_is_rejected(client, app):
    response = client.get("/ws")

    assert response.status_code == 400
    assert response.json() == {"detail": "WebSocket upgrade required"}
    assert client.head("/ws").status_code == 400
    assert client.options("/ws").status_code == 400
    assert client.post("/ws").status_code == 400
    assert len(app.state.hub.registry) == 0


def test_binary_frame_closes_connection(client, app):
    with client.websocket_connect("/ws") as ws:
        ws.send_bytes(b"\x00\x01")
        with pytest.raises(WebSocketDisconnect) as exc_info:
            ws.receive_text()

    assert exc_info.value.code == 1003
    assert len(app.state.hub.registry) == 0


def test_sender_excluded_when_configured(monkeypatch):
    monkeypatch.setattr(app_settings, "WS_BROADCAST_INCLUDE_SENDER", False)
    app = application()

    with TestClient(app) as client:
        with client.websocket_connect("/ws") as ws_a:
            with client.websocket_connect("/ws") as ws_b:
                ws_a.send_text("ping")
                assert ws_b.receive_text() == "Echo: ping"

                ws_b.send_text("pong")
                # A's first message is B's broadcast, not its own echo
                assert ws_a.receive_text() == "Echo: pong"


def test_commands_answer_sender_only(monkeypatch):
    monkeypatch.setattr(app_settings, "WS_COMMANDS_ENABLED", True)
    app = application()

    with TestClient(app) as client:
        with client.websocket_connect("/ws") as ws_a:
            with client.websocket_connect("/ws") as ws_b:
                ws_a.send_text("command1")
                assert ws_a.receive_text() == "Command 1 received and processed"

                ws_a.send_text("hello")
                # B never saw the command reply
                assert ws_b.receive_text() == "Echo: hello"
                assert ws_a.receive_text() == "Echo: hello"


def test_idle_connection_is_closed_after_receive_timeout(monkeypatch):
    monkeypatch.setattr(app_settings, "WS_RECEIVE_TIMEOUT", 0.1)
    app = application()

    with TestClient(app) as client:
        with client.websocket_connect("/ws") as ws:
            with pytest.raises(WebSocketDisconnect) as exc_info:
                ws.receive_text()

        assert exc_info.value.code == 1001
        assert len(app.state.hub.registry) == 0


def _connection_events(status: str) -> float:
    return (
        REGISTRY.get_sample_value("ws_connections_total", {"status": status})
        or 0.0
    )


def test_transport_error_drops_only_that_connection(client, app, monkeypatch):
    async def reset_on_receive(self, websocket, data):
        raise ConnectionResetError("connection reset by peer")

    monkeypatch.setattr(Web, "on_receive", reset_on_receive)
    errors_before = _connection_events("error")
    closed_before = _connection_events("closed")

    with client.websocket_connect("/ws") as ws:
        ws.send_text("ping")
        with pytest.raises(WebSocketDisconnect) as exc_info:
            ws.receive_text()

    assert exc_info.value.code == 1011
    assert len(app.state.hub.registry) == 0
    # Counted once, as an error
    assert _connection_events("error") == errors_before + 1
    assert _connection_events("closed") == closed_before

    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["connections"] == 0


def test_normal_close_counted_as_closed(client):
    errors_before = _connection_events("error")
    closed_before = _connection_events("closed")

    with client.websocket_connect("/ws") as ws:
        ws.send_text("ping")
        ws.receive_text()

    assert _connection_events("closed") == closed_before + 1
    assert _connection_events("error") == errors_before
