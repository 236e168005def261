"""Metrics — Prometheus metrics collection and exposure."""

from __future__ import annotations

from zcash_analytics.metrics.collector import EngineMetrics, MetricsCollector

__all__ = ["EngineMetrics", "MetricsCollector"]
