"""
Dependency injection configuration for FastAPI.

Provides the database session, the settings repository and the broadcast
hub owned by the running application. Override with
`app.dependency_overrides` in tests.
"""

from typing import Annotated

from fastapi import Depends
from sqlmodel.ext.asyncio.session import AsyncSession
from starlette.requests import HTTPConnection

from potato_server.managers.broadcast_hub import BroadcastHub
from potato_server.repositories.env_setting_repository import (
    EnvSettingRepository,
)
from potato_server.storage.db import get_session

SessionDep = Annotated[AsyncSession, Depends(get_session)]


def get_hub(connection: HTTPConnection) -> BroadcastHub:
    """
    Get the broadcast hub of the application serving `connection`.

    Works for both HTTP requests and WebSocket connections.
    """
    return connection.app.state.hub


def get_env_setting_repository(session: SessionDep) -> EnvSettingRepository:
    """
    Get EnvSetting repository bound to the request's session.

    Args:
        session: Database session (injected).

    Returns:
        EnvSettingRepository instance.
    """
    return EnvSettingRepository(session)


HubDep = Annotated[BroadcastHub, Depends(get_hub)]
EnvSettingRepoDep = Annotated[
    EnvSettingRepository, Depends(get_env_setting_repository)
]
