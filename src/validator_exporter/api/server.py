"""
HTTP server exposing the exporter to Prometheus.

Serves two routes:
- /metrics - cluster families from the latest state, then the exporter's own metrics
- /health - liveness probe
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from aiohttp import web

from validator_exporter.service import ExporterState

from .endpoints.metrics import STATE_GETTER
from .routes import ROUTES

logger = logging.getLogger(__name__)


def _no_state() -> ExporterState | None:
    """State getter used before the refresh service is wired in."""
    return None


@dataclass(frozen=True, slots=True)
class ApiServerConfig:
    """Where and whether to serve scrapes."""

    host: str = "0.0.0.0"
    """Bind address."""

    port: int = 9100
    """Bind port. 9100 is the usual exporter port."""

    enabled: bool = True
    """False runs the exporter without an HTTP listener."""


@dataclass(slots=True)
class ApiServer:
    """
    aiohttp server answering Prometheus scrapes.

    The server never owns exporter state. Each request calls `state_getter`
    once and renders whatever state it returns.
    """

    config: ApiServerConfig
    """Bind settings."""

    state_getter: Callable[[], ExporterState | None] = _no_state
    """Returns the most recently published state, or None."""

    _runner: web.AppRunner | None = field(default=None, init=False)
    """Runner of the live application, None when not serving."""

    _stopped: asyncio.Event | None = field(default=None, init=False)
    """Set once the runner has been cleaned up."""

    @property
    def state(self) -> ExporterState | None:
        """State a scrape arriving now would render."""
        return self.state_getter()

    @property
    def is_serving(self) -> bool:
        """Whether the listener is bound."""
        return self._runner is not None

    def create_app(self) -> web.Application:
        """Build the aiohttp application with every route registered."""
        app = web.Application()
        app[STATE_GETTER] = self.state_getter
        app.add_routes([web.get(path, handler) for path, handler in ROUTES.items()])
        return app

    async def start(self) -> None:
        """Bind the listener and return once it accepts connections."""
        if not self.config.enabled:
            logger.info("HTTP listener disabled, metrics will not be served")
            return

        runner = web.AppRunner(self.create_app())
        await runner.setup()
        await web.TCPSite(runner, self.config.host, self.config.port).start()

        self._runner = runner
        self._stopped = asyncio.Event()
        logger.info("Serving metrics on http://%s:%d/metrics", self.config.host, self.config.port)

    async def run(self) -> None:
        """Serve until `stop()` has completed."""
        await self.start()
        if self._stopped is not None:
            await self._stopped.wait()

    def stop(self) -> None:
        """Schedule shutdown of the listener. Safe to call more than once."""
        if self._runner is not None:
            asyncio.create_task(self._async_stop())

    async def _async_stop(self) -> None:
        """Release the listener and wake `run()`."""
        runner, self._runner = self._runner, None
        if runner is None:
            return

        await runner.cleanup()
        if self._stopped is not None:
            self._stopped.set()
        logger.info("HTTP listener stopped")
