"""Tests for the engine metrics collector."""

from __future__ import annotations

import pytest
from prometheus_client import CollectorRegistry

from zcash_analytics.metrics.collector import EngineMetrics, MetricsCollector


@pytest.fixture
def metrics() -> EngineMetrics:
    return EngineMetrics(MetricsCollector(CollectorRegistry()))


class TestEngineMetrics:
    def test_track_upstream(self, metrics: EngineMetrics) -> None:
        with metrics.track_upstream("blockchair"):
            pass
        count = metrics.registry.get_sample_value(
            "zcash_upstream_request_histogram_count", {"service": "blockchair"}
        )
        assert count == 1.0

    def test_track_upstream_records_on_error(self, metrics: EngineMetrics) -> None:
        with pytest.raises(RuntimeError), metrics.track_upstream("explorer"):
            raise RuntimeError("boom")
        count = metrics.registry.get_sample_value(
            "zcash_upstream_request_histogram_count", {"service": "explorer"}
        )
        assert count == 1.0

    def test_upstream_failure(self, metrics: EngineMetrics) -> None:
        metrics.record_upstream_failure("explorer")
        metrics.record_upstream_failure("explorer")
        assert metrics.registry.get_sample_value(
            "zcash_upstream_failure_total", {"service": "explorer"}
        ) == 2.0

    def test_cache_lookup(self, metrics: EngineMetrics) -> None:
        metrics.record_cache_lookup("explorer", hit=True)
        metrics.record_cache_lookup("explorer", hit=False)
        metrics.record_cache_lookup("explorer", hit=False)
        get = metrics.registry.get_sample_value
        assert get("zcash_cache_lookup_total", {"namespace": "explorer", "result": "hit"}) == 1.0
        assert get("zcash_cache_lookup_total", {"namespace": "explorer", "result": "miss"}) == 2.0

    def test_demo_fallback(self, metrics: EngineMetrics) -> None:
        metrics.record_demo_fallback("store")
        assert metrics.registry.get_sample_value(
            "zcash_demo_fallback_total", {"operation": "store"}
        ) == 1.0

    def test_separate_registries(self) -> None:
        # Two instances must not collide on metric names.
        EngineMetrics()
        EngineMetrics()
