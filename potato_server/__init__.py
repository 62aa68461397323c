# Uvicorn application factory <https://www.uvicorn.org/#application-factories>
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI

from potato_server.api.ws.commands import command_table
from potato_server.logging import logger
from potato_server.managers.broadcast_hub import BroadcastHub
from potato_server.routing import collect_subrouters
from potato_server.settings import app_settings
from potato_server.storage.db import engine, wait_and_init_db


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager.

    Startup waits for the settings database and creates its tables.
    Shutdown closes every open WebSocket connection, which ends their
    receive loops, then disposes the database engine.
    """
    logger.info("Application startup initiated")
    await wait_and_init_db()
    logger.info("Initialized database and tables")

    yield

    logger.info("Application shutdown initiated")
    closed = await app.state.hub.close_all()
    if closed:
        logger.info(f"Closed {closed} websocket connections")
    await engine.dispose()
    logger.info("Application shutdown complete")


def create_hub() -> BroadcastHub:
    """
    Build a broadcast hub from the WebSocket settings.
    """
    return BroadcastHub(
        echo_prefix=app_settings.WS_ECHO_PREFIX,
        include_sender=app_settings.WS_BROADCAST_INCLUDE_SENDER,
        commands=command_table if app_settings.WS_COMMANDS_ENABLED else None,
    )


def application() -> FastAPI:
    """
    Initializes and configures the FastAPI application.

    Each application owns a fresh `BroadcastHub` on `app.state.hub`, so
    the connection registry starts empty on every process start. Routers
    are collected from `api/http` and `api/ws/consumers`.
    """
    app = FastAPI(
        title="Potato Server",
        description="Health, settings and WebSocket broadcast service",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.hub = create_hub()

    app.include_router(collect_subrouters())

    return app
