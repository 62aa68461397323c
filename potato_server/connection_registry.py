"""WebSocket connection registry for tracking open client connections."""

import threading

from starlette.websockets import WebSocket


class ConnectionRegistry:
    """
    Set of currently open WebSocket connections.

    Connections are keyed by handle identity, so a connection appears at most
    once no matter how often it is registered. Every operation takes the
    registry lock, which makes each one atomic on its own; iteration always
    goes through `snapshot()`.
    """

    def __init__(self) -> None:
        self._connections: dict[int, WebSocket] = {}
        self._lock = threading.Lock()

    def register(self, websocket: WebSocket) -> None:
        """
        Add a newly upgraded connection.

        Args:
            websocket: The accepted WebSocket connection.
        """
        with self._lock:
            self._connections[id(websocket)] = websocket

    def unregister(self, websocket: WebSocket) -> bool:
        """
        Remove a connection. Removing an absent connection is a no-op.

        Args:
            websocket: The WebSocket connection to remove.

        Returns:
            True if the connection was registered, False otherwise.
        """
        with self._lock:
            return self._connections.pop(id(websocket), None) is not None

    def snapshot(self) -> list[WebSocket]:
        """
        Return a stable copy of the current members.

        Connections registered or removed after the call do not affect the
        returned list.
        """
        with self._lock:
            return list(self._connections.values())

    def __contains__(self, websocket: object) -> bool:
        with self._lock:
            return self._connections.get(id(websocket)) is websocket

    def __len__(self) -> int:
        with self._lock:
            return len(self._connections)
