import asyncio
import time

from starlette.websockets import WebSocket, WebSocketDisconnect, WebSocketState

from potato_server.api.ws.commands import CommandTable
from potato_server.connection_registry import ConnectionRegistry
from potato_server.constants import (
    WS_CLOSE_TIMEOUT_SECONDS,
    WS_SHUTDOWN_CLOSE_CODE,
)
from potato_server.logging import logger
from potato_server.utils.metrics import (
    ws_broadcast_duration_seconds,
    ws_connections_active,
    ws_messages_sent_total,
    ws_send_failures_total,
)


def is_open(websocket: WebSocket) -> bool:
    """Check that both sides of the connection are still connected."""
    return (
        websocket.client_state == WebSocketState.CONNECTED
        and websocket.application_state == WebSocketState.CONNECTED
    )


async def close_connection(websocket: WebSocket, code: int) -> bool:
    """
    Closes an open connection, logging instead of raising on failure.

    Args:
        websocket: The WebSocket connection to close.
        code: WebSocket close code sent to the client.

    Returns:
        True if a close frame was sent, False if the connection was already
        closed or closing failed.
    """
    if not is_open(websocket):
        return False
    try:
        await asyncio.wait_for(
            websocket.close(code=code), timeout=WS_CLOSE_TIMEOUT_SECONDS
        )
    except (asyncio.TimeoutError, ConnectionError, RuntimeError) as e:
        logger.warning(f"Failed to close connection {id(websocket)}: {e}")
        return False
    return True


class BroadcastHub:
    """
    Fan-out of text messages to every registered WebSocket connection.

    The hub owns a `ConnectionRegistry` and the message policy applied to
    inbound frames: the echo prefix, whether the sender receives its own
    broadcast, and the optional command table.
    """

    def __init__(
        self,
        registry: ConnectionRegistry | None = None,
        *,
        echo_prefix: str = "Echo: ",
        include_sender: bool = True,
        commands: CommandTable | None = None,
    ) -> None:
        """
        Args:
            registry: Registry to broadcast to. A new empty one by default.
            echo_prefix: Prepended to every received text; empty passes the
                text through unchanged.
            include_sender: Deliver a connection's broadcast back to itself.
            commands: Command table consulted before broadcasting. None
                disables command dispatch.
        """
        self.registry = registry if registry is not None else ConnectionRegistry()
        self.echo_prefix = echo_prefix
        self.include_sender = include_sender
        self.commands = commands

    def connect(self, websocket: WebSocket) -> None:
        """
        Registers an accepted WebSocket connection.

        Args:
            websocket: The WebSocket connection to be added.
        """
        self.registry.register(websocket)
        ws_connections_active.set(len(self.registry))
        logger.debug(
            f"websocket object ({id(websocket)}) added to active connections"
        )

    def disconnect(self, websocket: WebSocket) -> None:
        """
        Removes a WebSocket connection. Safe to call more than once.

        Args:
            websocket: The WebSocket connection to remove.
        """
        if not self.registry.unregister(websocket):
            return

        ws_connections_active.set(len(self.registry))
        logger.debug(
            f"websocket object ({id(websocket)}) removed from active connections"
        )

    def format_message(self, text: str) -> str:
        """Build the outbound message for a received text frame."""
        return f"{self.echo_prefix}{text}"

    async def handle_text(self, websocket: WebSocket, text: str) -> int:
        """
        Process one text frame received on `websocket`.

        Commands are answered to the sender only; anything else is formatted
        and broadcast according to the sender-inclusion policy.

        Args:
            websocket: The connection the frame arrived on.
            text: The frame's text.

        Returns:
            Number of connections the reply or broadcast was delivered to.
        """
        if self.commands is not None:
            reply = await self.commands.dispatch(text)
            if reply is not None:
                logger.debug(f"Command {text.strip()!r} answered to sender")
                return int(await self._safe_send(websocket, reply))

        exclude = None if self.include_sender else websocket
        return await self.broadcast(self.format_message(text), exclude=exclude)

    async def broadcast(
        self, message: str, exclude: WebSocket | None = None
    ) -> int:
        """
        Broadcasts a text message to all open connections concurrently.

        Works on a snapshot of the registry. Members found closed are
        unregistered without a send attempt. A failed send only unregisters
        that recipient; it never propagates to the caller.

        Args:
            message: The text to send.
            exclude: Optional connection left out of this broadcast.

        Returns:
            Number of successful deliveries.
        """
        recipients = []
        for connection in self.registry.snapshot():
            if connection is exclude:
                continue
            if not is_open(connection):
                self.disconnect(connection)
                continue
            recipients.append(connection)

        if not recipients:
            return 0

        start_time = time.perf_counter()
        results = await asyncio.gather(
            *[self._safe_send(connection, message) for connection in recipients],
            return_exceptions=True,
        )
        ws_broadcast_duration_seconds.observe(time.perf_counter() - start_time)

        return sum(1 for result in results if result is True)

    async def _safe_send(self, connection: WebSocket, message: str) -> bool:
        """
        Sends a message to a single connection with error handling.

        Args:
            connection: The WebSocket connection to send to.
            message: The text to send.

        Returns:
            True if the message was sent, False if the send failed.
        """
        try:
            await connection.send_text(message)
        except (WebSocketDisconnect, ConnectionError, RuntimeError) as e:
            # WebSocketDisconnect: Client disconnected
            # ConnectionError: Network errors
            # RuntimeError: WebSocket in invalid state
            logger.warning(f"Failed to send to connection {id(connection)}: {e}")
            ws_send_failures_total.inc()
            self.disconnect(connection)
            return False
        except Exception as e:
            logger.warning(
                f"Unexpected error sending to connection {id(connection)}: {e}"
            )
            ws_send_failures_total.inc()
            self.disconnect(connection)
            return False

        ws_messages_sent_total.inc()
        return True

    async def close_all(self, code: int = WS_SHUTDOWN_CLOSE_CODE) -> int:
        """
        Closes every registered connection and empties the registry.

        Used on application shutdown. Receive loops blocked on these
        connections observe the disconnect and terminate.

        Args:
            code: WebSocket close code sent to each client.

        Returns:
            Number of connections that were closed.
        """
        connections = self.registry.snapshot()
        if not connections:
            return 0

        logger.info(f"Closing {len(connections)} open websocket connections")

        async def safe_close(connection: WebSocket) -> bool:
            self.disconnect(connection)
            return await close_connection(connection, code)

        results = await asyncio.gather(
            *[safe_close(connection) for connection in connections],
            return_exceptions=True,
        )
        return sum(1 for result in results if result is True)
