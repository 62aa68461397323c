"""
Prometheus metrics for WebSocket connection monitoring.

Metrics are created through get-or-create helpers so that re-importing this
module (e.g. with --reload) does not raise duplicate registration errors.
"""

from prometheus_client import REGISTRY, Counter, Gauge, Histogram


def _get_or_create_counter(
    name: str, doc: str, labels: list[str] | None = None
) -> Counter:
    """
    Get existing counter or create new one.

    Args:
        name: Metric name.
        doc: Metric documentation.
        labels: Optional list of label names.

    Returns:
        Counter instance.
    """
    try:
        return Counter(name, doc, labels or [])
    except ValueError:
        # Metric already exists, retrieve it from registry
        return REGISTRY._names_to_collectors[name]


def _get_or_create_gauge(name: str, doc: str) -> Gauge:
    """Get existing gauge or create new one."""
    try:
        return Gauge(name, doc)
    except ValueError:
        return REGISTRY._names_to_collectors[name]


def _get_or_create_histogram(
    name: str,
    doc: str,
    buckets: tuple[float, ...],
) -> Histogram:
    """Get existing histogram or create new one."""
    try:
        return Histogram(name, doc, buckets=buckets)
    except ValueError:
        return REGISTRY._names_to_collectors[name]


ws_connections_active = _get_or_create_gauge(
    "ws_connections_active", "Number of active WebSocket connections"
)

ws_connections_total = _get_or_create_counter(
    "ws_connections_total",
    "Total WebSocket connection lifecycle events",
    ["status"],  # accepted, closed, error
)

ws_messages_received_total = _get_or_create_counter(
    "ws_messages_received_total", "Total WebSocket messages received"
)

ws_messages_sent_total = _get_or_create_counter(
    "ws_messages_sent_total", "Total WebSocket messages sent"
)

ws_send_failures_total = _get_or_create_counter(
    "ws_send_failures_total", "Total failed WebSocket sends during broadcast"
)

ws_broadcast_duration_seconds = _get_or_create_histogram(
    "ws_broadcast_duration_seconds",
    "Time spent fanning out one broadcast in seconds",
    buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0),
)
