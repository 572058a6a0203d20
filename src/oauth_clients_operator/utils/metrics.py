"""Prometheus metrics for bootstrap OAuth client reconciliation."""

from __future__ import annotations

from prometheus_client import Counter, Histogram, start_http_server

SYNC_TOTAL = Counter(
    "oauth_clients_sync_total",
    "Total sync runs",
    ["result"],
)

SYNC_DURATION = Histogram(
    "oauth_clients_sync_duration_seconds",
    "Time spent in a sync run",
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)

ENSURE_TOTAL = Counter(
    "oauth_clients_ensure_total",
    "OAuthClient ensure results",
    ["client", "outcome"],
)

UPDATE_CONFLICTS = Counter(
    "oauth_clients_update_conflicts_total",
    "OAuthClient updates rejected with a write conflict",
    ["client"],
)


def start_metrics_server(port: int = 9090) -> None:
    """Start the Prometheus metrics HTTP server."""
    start_http_server(port)
