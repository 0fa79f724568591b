"""Unit tests for delivery metrics adapters."""

from mantis.adapters.delivery_metrics import FakeDeliveryMetrics, PrometheusDeliveryMetrics
from mantis.core.protocols import DeliveryMetrics


class TestFakeDeliveryMetrics:
    """Tests for the FakeDeliveryMetrics test helper."""

    def test_satisfies_protocol(self):
        assert isinstance(FakeDeliveryMetrics(), DeliveryMetrics)

    def test_records_deliveries_and_errors(self):
        fake = FakeDeliveryMetrics()
        fake.observe_delivery("latency_ms", "success", 0.01)
        fake.observe_delivery("latency_ms", "failure", 0.02)
        fake.inc_computation_error("custom")
        fake.inc_computation_error("custom")

        assert fake.outcomes("latency_ms") == ["success", "failure"]
        assert fake.computation_errors == {"custom": 2}

    def test_clear_resets_all_state(self):
        fake = FakeDeliveryMetrics()
        fake.observe_delivery("latency_ms", "success", 0.01)
        fake.inc_computation_error("custom")

        fake.clear()

        assert fake.deliveries == []
        assert fake.computation_errors == {}


class TestPrometheusDeliveryMetrics:
    """Tests for the Prometheus adapter."""

    def test_registry_is_separate_from_default(self):
        """Adapter registry must not be the default global registry."""
        from prometheus_client import REGISTRY

        adapter = PrometheusDeliveryMetrics()
        assert adapter._registry is not REGISTRY

    def test_two_adapters_do_not_collide(self):
        PrometheusDeliveryMetrics()
        PrometheusDeliveryMetrics()

    def test_generate_contains_expected_families(self):
        adapter = PrometheusDeliveryMetrics()
        adapter.observe_delivery("latency_ms", "success", 0.01)
        adapter.inc_computation_error("custom")

        output = adapter.generate().decode()
        assert "mantis_metric_deliveries_total" in output
        assert "mantis_metric_delivery_duration_seconds" in output
        assert "mantis_metric_computation_errors_total" in output

    def test_observe_delivery_increments_counter(self):
        adapter = PrometheusDeliveryMetrics()
        adapter.observe_delivery("error_rate", "failure", 0.05)
        adapter.observe_delivery("error_rate", "failure", 0.03)

        output = adapter.generate().decode()
        assert 'mantis_metric_deliveries_total{metric="error_rate",outcome="failure"} 2.0' in output

    def test_computation_errors_labelled_by_function(self):
        adapter = PrometheusDeliveryMetrics()
        adapter.inc_computation_error("db_time")

        output = adapter.generate().decode()
        assert 'mantis_metric_computation_errors_total{function="db_time"} 1.0' in output

    def test_content_type_is_prometheus_format(self):
        adapter = PrometheusDeliveryMetrics()
        assert adapter.content_type.startswith("text/plain; version=")
