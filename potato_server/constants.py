"""
Application-level constants.

These values define protocol and logging limits and are not meant to be
overridden via environment variables. For configurable values see
potato_server/settings.py.
"""

# ============================================================================
# WebSocket Protocol Constants
# ============================================================================

# Close code sent to every open connection when the application shuts down
WS_SHUTDOWN_CLOSE_CODE = 1001

# Close code sent when a connection exceeds WS_RECEIVE_TIMEOUT
WS_IDLE_CLOSE_CODE = 1001

# Timeout (seconds) when closing WebSocket connections during shutdown
WS_CLOSE_TIMEOUT_SECONDS = 5

# Length of the connection id prefix carried in log lines
CONNECTION_ID_LOG_LENGTH = 8


# ============================================================================
# Logging Constants
# ============================================================================

# Upper bound for a single structured log line
MAX_LOG_SIZE_BYTES = 64 * 1024
