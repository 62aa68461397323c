import os
from enum import Enum

from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    """Application environment types."""

    DEV = "dev"
    STAGING = "staging"
    PRODUCTION = "production"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(case_sensitive=True)

    ENVIRONMENT: Environment = Environment.DEV

    # Database settings
    DATABASE_URL: str = "sqlite+aiosqlite:///envsettings.db"
    DB_ECHO: bool = False
    DB_INIT_RETRY_INTERVAL: int = 2
    DB_INIT_MAX_RETRIES: int = 5

    # WebSocket settings
    WS_PATH: str = "/ws"
    WS_ECHO_PREFIX: str = "Echo: "
    WS_BROADCAST_INCLUDE_SENDER: bool = True
    WS_COMMANDS_ENABLED: bool = False
    WS_RECEIVE_TIMEOUT: float | None = None
    WS_MAX_MESSAGE_SIZE: int = 4 * 1024

    # Logging settings
    LOG_LEVEL: str = "INFO"
    LOG_CONSOLE_FORMAT: str = "human"
    LOG_FILE_PATH: str = "logs/logging_errors.log"
    LOG_EXCLUDED_PATHS: list[str] = ["/metrics", "/health"]

    # Server settings
    SERVER_HOST: str = "0.0.0.0"
    SERVER_PORT: int = 8000

    def __init__(self, **kwargs):
        """Initialize settings with environment-specific defaults."""
        super().__init__(**kwargs)
        self._apply_environment_defaults()

    def _apply_environment_defaults(self) -> None:
        """Apply environment-specific logging defaults."""
        if self.ENVIRONMENT == Environment.PRODUCTION:
            if os.getenv("LOG_CONSOLE_FORMAT") is None:
                self.LOG_CONSOLE_FORMAT = "json"
            if os.getenv("LOG_LEVEL") is None:
                self.LOG_LEVEL = "WARNING"
        elif self.ENVIRONMENT == Environment.STAGING:
            if os.getenv("LOG_CONSOLE_FORMAT") is None:
                self.LOG_CONSOLE_FORMAT = "json"


app_settings = Settings()
