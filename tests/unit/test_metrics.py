"""Unit tests for the metrics module."""

from unittest.mock import patch

from prometheus_client import REGISTRY

from oauth_clients_operator.utils.metrics import (
    ENSURE_TOTAL,
    SYNC_DURATION,
    SYNC_TOTAL,
    UPDATE_CONFLICTS,
    start_metrics_server,
)


class TestMetricsDefinitions:
    """Tests that metric objects are properly defined."""

    def test_sync_total_is_counter(self) -> None:
        assert SYNC_TOTAL._type == "counter"

    def test_sync_total_labels(self) -> None:
        assert SYNC_TOTAL._labelnames == ("result",)

    def test_sync_duration_buckets(self) -> None:
        expected = [0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, float("inf")]
        assert list(SYNC_DURATION._upper_bounds) == expected

    def test_ensure_total_labels(self) -> None:
        assert ENSURE_TOTAL._labelnames == ("client", "outcome")

    def test_update_conflicts_labels(self) -> None:
        assert UPDATE_CONFLICTS._labelnames == ("client",)


class TestMetricsIncrement:
    """Tests that metrics can be incremented without error."""

    def test_increment_sync_total(self) -> None:
        SYNC_TOTAL.labels(result="success").inc()
        value = REGISTRY.get_sample_value("oauth_clients_sync_total", {"result": "success"})
        assert value is not None
        assert value >= 1

    def test_observe_sync_duration(self) -> None:
        SYNC_DURATION.observe(0.2)
        value = REGISTRY.get_sample_value("oauth_clients_sync_duration_seconds_count")
        assert value is not None
        assert value >= 1

    def test_increment_update_conflicts(self) -> None:
        UPDATE_CONFLICTS.labels(client="metrics-test").inc()
        value = REGISTRY.get_sample_value(
            "oauth_clients_update_conflicts_total", {"client": "metrics-test"}
        )
        assert value == 1


class TestStartMetricsServer:
    """Tests for start_metrics_server."""

    def test_default_port(self) -> None:
        with patch("oauth_clients_operator.utils.metrics.start_http_server") as mock_start:
            start_metrics_server()
            mock_start.assert_called_once_with(9090)

    def test_custom_port(self) -> None:
        with patch("oauth_clients_operator.utils.metrics.start_http_server") as mock_start:
            start_metrics_server(port=8000)
            mock_start.assert_called_once_with(8000)
