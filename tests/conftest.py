"""
Pytest configuration and fixtures for testing.

Environment variables are set before any `potato_server` module is imported,
because settings, logging and the database engine are created at import.
"""

import os
import tempfile

import pytest

_TEST_DB_PATH = os.path.join(
    tempfile.gettempdir(), f"potato_server_test_{os.getpid()}.db"
)

os.environ.setdefault("DATABASE_URL", f"sqlite+aiosqlite:///{_TEST_DB_PATH}")
os.environ.setdefault(
    "LOG_FILE_PATH",
    os.path.join(tempfile.gettempdir(), "potato_server_test_errors.log"),
)
os.environ.setdefault("DB_INIT_MAX_RETRIES", "1")


def pytest_sessionfinish(session, exitstatus):
    """Remove the temporary settings database."""
    if os.path.exists(_TEST_DB_PATH):
        os.remove(_TEST_DB_PATH)


@pytest.fixture
def mock_websocket():
    """
    Provides an open mock WebSocket connection.

    Returns:
        MagicMock: Mocked WebSocket instance
    """
    from tests.mocks.websocket_mocks import create_mock_websocket

    return create_mock_websocket()


@pytest.fixture
def registry():
    """Provides an empty ConnectionRegistry."""
    from potato_server.connection_registry import ConnectionRegistry

    return ConnectionRegistry()


@pytest.fixture
def hub(registry):
    """Provides a BroadcastHub with the default echo policy."""
    from potato_server.managers.broadcast_hub import BroadcastHub

    return BroadcastHub(registry)


@pytest.fixture
def app():
    """
    Create a fresh application with its own broadcast hub.

    Returns:
        FastAPI: FastAPI application instance.
    """
    from potato_server import application

    return application()


@pytest.fixture
def client(app):
    """
    Test client running the application lifespan.

    All WebSocket sessions opened through this client share one event loop,
    like connections served by a single uvicorn worker.
    """
    from fastapi.testclient import TestClient

    with TestClient(app) as test_client:
        yield test_client
