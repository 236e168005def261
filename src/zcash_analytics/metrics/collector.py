"""Metrics collector — Prometheus counters and histograms.

- ``zcash_upstream_request_histogram``  duration of upstream calls by service
- ``zcash_upstream_failure_total``      failed upstream calls by service
- ``zcash_cache_lookup_total``          cache lookups by namespace and result
- ``zcash_demo_fallback_total``         confidential-storage demo fallbacks by operation
"""

from __future__ import annotations

import time
from contextlib import contextmanager
from typing import TYPE_CHECKING

from prometheus_client import CollectorRegistry, Counter, Histogram

if TYPE_CHECKING:
    from collections.abc import Iterator

_PREFIX = "zcash"


class MetricsCollector:
    """Low-level Prometheus collector that owns the registry.

    Use :class:`EngineMetrics` for the high-level tracking interface.
    """

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        self._registry = registry or CollectorRegistry()

    @property
    def registry(self) -> CollectorRegistry:
        """Return the underlying Prometheus registry."""
        return self._registry

    def histogram(self, name: str, doc: str, labels: tuple[str, ...] = ()) -> Histogram:
        """Register and return a Histogram."""
        return Histogram(name, doc, labels, registry=self._registry)

    def counter(self, name: str, doc: str, labels: tuple[str, ...] = ()) -> Counter:
        """Register and return a Counter."""
        return Counter(name, doc, labels, registry=self._registry)


class EngineMetrics:
    """High-level metrics for the dashboard services.

    Histograms track operation duration in seconds.
    """

    def __init__(self, collector: MetricsCollector | None = None) -> None:
        self._collector = collector or MetricsCollector()

        self._upstream = self._collector.histogram(
            f"{_PREFIX}_upstream_request_histogram",
            "Duration of upstream API calls",
            ("service",),
        )
        self._upstream_failures = self._collector.counter(
            f"{_PREFIX}_upstream_failure_total",
            "Upstream API calls that failed or returned an error status",
            ("service",),
        )
        self._cache_lookups = self._collector.counter(
            f"{_PREFIX}_cache_lookup_total",
            "Cache lookups by namespace and result",
            ("namespace", "result"),
        )
        self._demo_fallbacks = self._collector.counter(
            f"{_PREFIX}_demo_fallback_total",
            "Confidential storage operations served by the local demo store",
            ("operation",),
        )

    @property
    def registry(self) -> CollectorRegistry:
        """Return the underlying Prometheus registry."""
        return self._collector.registry

    @contextmanager
    def track_upstream(self, service: str) -> Iterator[None]:
        """Track the duration of one upstream call."""
        start = time.monotonic()
        try:
            yield
        finally:
            self._upstream.labels(service=service).observe(time.monotonic() - start)

    def record_upstream_failure(self, service: str) -> None:
        self._upstream_failures.labels(service=service).inc()

    def record_cache_lookup(self, namespace: str, *, hit: bool) -> None:
        self._cache_lookups.labels(namespace=namespace, result="hit" if hit else "miss").inc()

    def record_demo_fallback(self, operation: str) -> None:
        self._demo_fallbacks.labels(operation=operation).inc()
