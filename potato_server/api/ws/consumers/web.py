import asyncio
import uuid

from fastapi import APIRouter, HTTPException, Request
from starlette import status
from starlette.endpoints import WebSocketEndpoint
from starlette.websockets import WebSocket, WebSocketDisconnect

from potato_server.constants import CONNECTION_ID_LOG_LENGTH, WS_IDLE_CLOSE_CODE
from potato_server.dependencies import get_hub
from potato_server.logging import clear_log_context, logger, set_log_context
from potato_server.managers.broadcast_hub import BroadcastHub, close_connection
from potato_server.settings import app_settings
from potato_server.utils.metrics import (
    ws_connections_total,
    ws_messages_received_total,
)

router = APIRouter()


@router.api_route(
    app_settings.WS_PATH,
    methods=["GET", "HEAD", "OPTIONS", "POST", "PUT", "PATCH", "DELETE"],
    include_in_schema=False,
)
async def reject_plain_http(request: Request) -> None:
    """
    Rejects non-upgrade HTTP requests on the WebSocket path with 400.
    """
    logger.debug(
        f"Rejected {request.method} {request.url.path}: not a websocket upgrade"
    )
    raise HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail="WebSocket upgrade required",
    )


class Web(WebSocketEndpoint):
    """
    Echo/broadcast WebSocket endpoint.

    Every accepted connection is registered with the application's
    `BroadcastHub`; each received text frame is handed to the hub, which
    broadcasts it (or answers a command) according to its policy.

    Per-connection lifecycle: Open while the receive loop waits for frames,
    Closing once a close frame, transport error or idle timeout is seen,
    Closed after the connection is unregistered in `on_disconnect`.
    """

    hub: BroadcastHub

    async def dispatch(self) -> None:
        """
        Run the connection lifecycle.

        1. Accepts and registers the connection (`on_connect`).
        2. Receives frames until the client closes, a transport error occurs
           or the optional receive timeout expires.
        3. Text frames go to `on_receive`; binary frames close the connection
           with 1003.
        4. Always unregisters the connection (`on_disconnect`).

        Transport errors end only this connection. Unexpected errors are
        re-raised after cleanup.
        """
        websocket = WebSocket(self.scope, receive=self.receive, send=self.send)
        self.hub = get_hub(websocket)
        await self.on_connect(websocket)

        close_code = status.WS_1000_NORMAL_CLOSURE

        try:
            while True:
                message = await self._receive_frame(websocket)
                if message["type"] == "websocket.receive":
                    if message.get("text") is None:
                        logger.debug("Received binary frame, closing")
                        close_code = status.WS_1003_UNSUPPORTED_DATA
                        await websocket.close(code=close_code)
                        break
                    await self.on_receive(websocket, message["text"])
                elif message["type"] == "websocket.disconnect":
                    close_code = int(
                        message.get("code") or status.WS_1000_NORMAL_CLOSURE
                    )
                    break
        except asyncio.TimeoutError:
            logger.info(
                f"No message within {app_settings.WS_RECEIVE_TIMEOUT}s, closing"
            )
            close_code = WS_IDLE_CLOSE_CODE
            await close_connection(websocket, close_code)
        except (WebSocketDisconnect, ConnectionError, RuntimeError) as exc:
            # WebSocketDisconnect: Client went away mid-operation
            # ConnectionError: Network errors
            # RuntimeError: WebSocket in invalid state
            logger.warning(f"Transport error, dropping connection: {exc}")
            close_code = status.WS_1011_INTERNAL_ERROR
            await close_connection(websocket, close_code)
        except Exception:
            close_code = status.WS_1011_INTERNAL_ERROR
            await close_connection(websocket, close_code)
            raise
        finally:
            await self.on_disconnect(websocket, close_code)

    async def _receive_frame(self, websocket: WebSocket) -> dict:
        if app_settings.WS_RECEIVE_TIMEOUT is None:
            return await websocket.receive()
        return await asyncio.wait_for(
            websocket.receive(), timeout=app_settings.WS_RECEIVE_TIMEOUT
        )

    async def on_connect(self, websocket: WebSocket) -> None:
        """
        Accepts the upgrade and registers the connection with the hub.
        """
        await websocket.accept()

        self.connection_id = uuid.uuid4().hex[:CONNECTION_ID_LOG_LENGTH]
        set_log_context(connection_id=self.connection_id)

        self.hub.connect(websocket)
        ws_connections_total.labels(status="accepted").inc()
        logger.info(
            f"Client connected to websocket ({len(self.hub.registry)} open)"
        )

    async def on_receive(self, websocket: WebSocket, data: str) -> None:
        """
        Hands a received text frame to the hub.

        Args:
            websocket: The WebSocket connection instance
            data: The received frame text
        """
        ws_messages_received_total.inc()
        logger.info(f"Received: {data}")

        delivered = await self.hub.handle_text(websocket, data)
        logger.debug(f"Delivered to {delivered} connections")

    async def on_disconnect(self, websocket: WebSocket, close_code: int) -> None:
        """
        Unregisters the connection; runs on every exit path of the loop.
        """
        self.hub.disconnect(websocket)
        outcome = (
            "error" if close_code == status.WS_1011_INTERNAL_ERROR else "closed"
        )
        ws_connections_total.labels(status=outcome).inc()
        logger.info(f"Client disconnected with code {close_code}")
        clear_log_context()


router.add_websocket_route(app_settings.WS_PATH, Web)
