import logging

from potato_server.uvicorn_filters import ExcludeMonitoringFilter


def _access_record(path: str) -> logging.LogRecord:
    return logging.LogRecord(
        name="uvicorn.access",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg='%s - "%s %s HTTP/1.1" %d',
        args=("127.0.0.1:5000", "GET", path, 200),
        exc_info=None,
    )


def test_monitoring_paths_are_filtered():
    log_filter = ExcludeMonitoringFilter()

    assert log_filter.filter(_access_record("/health")) is False
    assert log_filter.filter(_access_record("/metrics")) is False


def test_other_paths_pass():
    log_filter = ExcludeMonitoringFilter()

    assert log_filter.filter(_access_record("/api/settings")) is True
    assert log_filter.filter(_access_record("/ws")) is True
