"""Custom filters for uvicorn access logging."""

import logging

from potato_server.settings import app_settings


class ExcludeMonitoringFilter(logging.Filter):
    """
    Logging filter to exclude monitoring endpoint requests from access logs.

    Health checks and Prometheus scraping would otherwise flood uvicorn's
    access log. The excluded paths come from LOG_EXCLUDED_PATHS.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        """
        Returns:
            False if the request path is in excluded paths, True otherwise.
        """
        message = record.getMessage()
        return not any(
            path in message for path in app_settings.LOG_EXCLUDED_PATHS
        )
