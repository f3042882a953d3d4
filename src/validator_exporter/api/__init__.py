"""
API server module for Prometheus scrapes and health checks.

Provides HTTP endpoints for:
- /metrics - Cluster metrics rendered from the latest snapshots
- /health - Health check endpoint
"""

from .server import ApiServer, ApiServerConfig

__all__ = [
    "ApiServer",
    "ApiServerConfig",
]
