"""Health endpoint handler."""

from __future__ import annotations

import json
from typing import Final

from aiohttp import web

STATUS_HEALTHY: Final = "healthy"
"""Fixed healthy status returned by the health endpoint."""

SERVICE_NAME: Final = "validator-exporter"
"""Fixed service identifier returned by the health endpoint."""


async def handle(_request: web.Request) -> web.Response:
    """
    Handle health check request.

    Reports that the HTTP server is up. Says nothing about the freshness of
    the snapshots; `/metrics` answers 503 until the first refresh lands.

    Response: JSON object with fields:
        - status (string): Always healthy when the endpoint is reachable.
        - service (string): Fixed identifier "validator-exporter".

    Status Codes:
        200 OK: Server is running.
    """
    return web.Response(
        body=json.dumps({"status": STATUS_HEALTHY, "service": SERVICE_NAME}),
        content_type="application/json",
    )
