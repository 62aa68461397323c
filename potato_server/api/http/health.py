"""Health check endpoint for monitoring service status."""

from fastapi import APIRouter, Response, status
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from potato_server.dependencies import HubDep
from potato_server.logging import logger
from potato_server.storage.db import engine

router = APIRouter()


class HealthResponse(BaseModel):
    """Response model for health check endpoint."""

    status: str
    database: str
    connections: int


@router.get(
    "/health",
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
    summary="Health check endpoint",
    tags=["health"],
)
async def health_check(response: Response, hub: HubDep) -> HealthResponse:
    """
    Check health status of the service.

    Verifies that the settings database answers a trivial query and reports
    the number of open WebSocket connections.

    Returns:
        HealthResponse: Health status of the service and its database.
        Responds with 503 Service Unavailable if the database is unhealthy.
    """
    db_status = "healthy"

    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError, TimeoutError) as e:
        logger.error(f"Database health check failed: {e}")
        db_status = "unhealthy"
    except Exception as e:
        # Catch-all for health checks to prevent endpoint failure
        logger.error(f"Unexpected database health check error: {e}")
        db_status = "unhealthy"

    if db_status == "unhealthy":
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    return HealthResponse(
        status=db_status,
        database=db_status,
        connections=len(hub.registry),
    )
