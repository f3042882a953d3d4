"""
Metrics module.

Builds labeled metric families and renders them in Prometheus text format.
Also holds the exporter's own operational metrics.
"""

from .exposition import CONTENT_TYPE, FamilyCollector, render, write_metric
from .family import COMMITMENT_LABEL, MetricFamily, MetricSeries, MetricType, build_family
from .registry import (
    REGISTRY,
    generate_metrics,
    last_refresh_slot,
    refresh_duration,
    refresh_failures_total,
    refreshes_total,
    vote_state_decode_errors_total,
)

__all__ = [
    "COMMITMENT_LABEL",
    "CONTENT_TYPE",
    "FamilyCollector",
    "MetricFamily",
    "MetricSeries",
    "MetricType",
    "REGISTRY",
    "build_family",
    "generate_metrics",
    "last_refresh_slot",
    "refresh_duration",
    "refresh_failures_total",
    "refreshes_total",
    "render",
    "vote_state_decode_errors_total",
    "write_metric",
]
