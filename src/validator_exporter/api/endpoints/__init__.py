"""Route handlers for the metrics server."""

from . import health, metrics

__all__ = [
    "health",
    "metrics",
]
