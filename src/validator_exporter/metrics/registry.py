"""
Exporter self-metrics using prometheus_client.

These describe the exporter itself (refresh health, decode problems), as
opposed to the cluster families rendered per scrape from snapshots.
"""

from __future__ import annotations

from prometheus_client import (
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
)

REGISTRY = CollectorRegistry()
"""Registry for exporter self-metrics only. Process and platform collectors are not registered."""

# -----------------------------------------------------------------------------
# Snapshot Refresh
# -----------------------------------------------------------------------------

refreshes_total = Counter(
    "solana_exporter_refreshes_total",
    "Snapshot refreshes completed successfully",
    registry=REGISTRY,
)

refresh_failures_total = Counter(
    "solana_exporter_refresh_failures_total",
    "Snapshot refreshes that failed and kept the previous state",
    registry=REGISTRY,
)

refresh_duration = Histogram(
    "solana_exporter_refresh_seconds",
    "Time taken to rebuild all commitment snapshots",
    buckets=(0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
    registry=REGISTRY,
)

last_refresh_slot = Gauge(
    "solana_exporter_last_refresh_slot",
    "Finalized slot of the most recent successful refresh",
    registry=REGISTRY,
)

# -----------------------------------------------------------------------------
# Data Quality
# -----------------------------------------------------------------------------

vote_state_decode_errors_total = Counter(
    "solana_exporter_vote_state_decode_errors_total",
    "Vote accounts whose state could not be decoded and was read as empty",
    registry=REGISTRY,
)


def generate_metrics() -> bytes:
    """Render the self-metrics in Prometheus text format."""
    return generate_latest(REGISTRY)
