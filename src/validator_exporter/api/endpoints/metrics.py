"""Metrics endpoint handler."""

from __future__ import annotations

import io
import logging
from collections.abc import Callable

from aiohttp import web

from validator_exporter.metrics import generate_metrics
from validator_exporter.service import ExporterState

logger = logging.getLogger(__name__)

CHARSET = "utf-8"
"""Character encoding for Prometheus metrics."""

STATE_GETTER: web.AppKey[Callable[[], ExporterState | None]] = web.AppKey(
    "state_getter", Callable[[], ExporterState | None]
)
"""Application key holding the callable that returns the current exporter state."""


async def handle(request: web.Request) -> web.Response:
    """
    Handle metrics request.

    Renders the cluster families from the current state, followed by the
    exporter's own metrics.

    Response: Prometheus text format (text/plain; version=0.0.4)

    Status Codes:
        200 OK: Metrics returned.
        500 Internal Server Error: Rendering failed.
        503 Service Unavailable: No snapshot has been loaded yet.
    """
    state = request.app[STATE_GETTER]()
    if state is None:
        raise web.HTTPServiceUnavailable(reason="No snapshot loaded yet")

    buffer = io.BytesIO()
    try:
        state.write(buffer)
    except OSError as e:
        logger.error("Failed to render cluster metrics: %s", e)
        raise web.HTTPInternalServerError(reason="Rendering failed") from e
    buffer.write(generate_metrics())

    return web.Response(
        body=buffer.getvalue(),
        content_type="text/plain; version=0.0.4",
        charset=CHARSET,
    )
