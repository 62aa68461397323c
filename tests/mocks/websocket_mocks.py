"""
Mock factory functions for WebSocket testing.
"""

from unittest.mock import AsyncMock, MagicMock

from starlette.websockets import WebSocket, WebSocketState


def create_mock_websocket(
    state: WebSocketState = WebSocketState.CONNECTED,
    send_error: Exception | None = None,
):
    """
    Creates a mock WebSocket connection.

    Args:
        state: Value used for both client_state and application_state.
        send_error: Exception raised by send_text, if any.

    Returns:
        MagicMock: Mocked WebSocket instance
    """
    ws_mock = MagicMock(spec=WebSocket)

    ws_mock.send_text = AsyncMock(side_effect=send_error)
    ws_mock.receive_text = AsyncMock(return_value="")
    ws_mock.accept = AsyncMock()
    ws_mock.close = AsyncMock()

    ws_mock.client_state = state
    ws_mock.application_state = state
    ws_mock.headers = {}
    ws_mock.query_params = {}

    return ws_mock
