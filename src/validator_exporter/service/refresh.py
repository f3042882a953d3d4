"""
Refresh service that keeps the exporter state current.

Every refresh interval the service reloads the node identity and one ledger
snapshot per commitment level, then publishes a new `ExporterState`. A failed
refresh keeps the previous state in place and increments the failure counter.

Validator info changes rarely and is expensive to fetch (it scans every
Config program account), so it is refreshed on its own, slower, schedule.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field

from validator_exporter.identity import IdentityInfoMap
from validator_exporter.ledger import LedgerSnapshot
from validator_exporter.metrics import (
    last_refresh_slot,
    refresh_duration,
    refresh_failures_total,
    refreshes_total,
)
from validator_exporter.rpc import (
    RpcClient,
    fetch_commitment_snapshots,
    fetch_node_identity,
)
from validator_exporter.types import Pubkey, RpcError

from .state import ExporterState, StateHolder

logger = logging.getLogger(__name__)

IdentityInfoLoader = Callable[[], Awaitable[IdentityInfoMap]]
"""Loads validator metadata. Called on the identity info schedule."""


@dataclass(slots=True)
class RefreshService:
    """
    Periodically rebuilds and publishes the exporter state.

    The service is intentionally minimal:
    - Timer loop that wakes every refresh interval
    - Loads a full state and publishes it atomically
    - Leaves the previous state in place on failure
    """

    client: RpcClient
    """Node RPC client."""

    holder: StateHolder
    """Where new states are published."""

    vote_accounts: frozenset[Pubkey]
    """Vote accounts to report on."""

    interval: float = 10.0
    """Seconds between refreshes."""

    identity_info_loader: IdentityInfoLoader | None = None
    """Validator metadata source. None disables metadata."""

    identity_info_interval: float = 3600.0
    """Seconds between validator metadata reloads."""

    time_fn: Callable[[], float] = time.monotonic
    """Monotonic clock, injectable for tests."""

    identity_info: IdentityInfoMap = field(default_factory=IdentityInfoMap, repr=False)
    """Most recently loaded validator metadata. Used as-is when there is no loader."""

    _identity_info_loaded_at: float | None = field(default=None, repr=False)
    """Clock reading of the last successful metadata load."""

    _running: bool = field(default=False, repr=False)
    """Whether the service is running."""

    @property
    def is_running(self) -> bool:
        """Check if the service is currently running."""
        return self._running

    def stop(self) -> None:
        """Request the run loop to exit at the next sleep boundary."""
        self._running = False

    async def _maybe_reload_identity_info(self) -> IdentityInfoMap:
        """Reload validator metadata when it is due. Failures keep the old map."""
        if self.identity_info_loader is None:
            return self.identity_info

        now = self.time_fn()
        due = (
            self._identity_info_loaded_at is None
            or now - self._identity_info_loaded_at >= self.identity_info_interval
        )
        if not due:
            return self.identity_info

        try:
            self.identity_info = await self.identity_info_loader()
            self._identity_info_loaded_at = now
        except RpcError as e:
            logger.warning("Validator info reload failed, keeping previous: %s", e)

        return self.identity_info

    async def refresh_once(self) -> bool:
        """
        Load and publish a fresh state.

        Returns:
            True if a new state was published, False if the refresh failed.
        """
        started = self.time_fn()
        try:
            node_identity = await fetch_node_identity(self.client)
            snapshots = await fetch_commitment_snapshots(
                self.client, node_identity.id(), self.vote_accounts
            )
        except RpcError as e:
            refresh_failures_total.inc()
            logger.error("Refresh failed, keeping previous state: %s", e)
            return False

        identity_info = await self._maybe_reload_identity_info()

        self.holder.publish(
            ExporterState(
                snapshots=snapshots,
                node_identity=node_identity,
                vote_accounts=self.vote_accounts,
                identity_info=identity_info,
            )
        )

        finalized = snapshots.finalized
        finalized_slot = finalized.slot if isinstance(finalized, LedgerSnapshot) else None
        if finalized_slot is not None:
            last_refresh_slot.set(int(finalized_slot))
        refreshes_total.inc()
        refresh_duration.observe(max(self.time_fn() - started, 0.0))

        logger.info(
            "Refreshed: identity=%s finalized_slot=%s vote_accounts=%d",
            node_identity.id(),
            finalized_slot,
            len(self.vote_accounts),
        )
        return True

    async def run(self) -> None:
        """
        Main loop - refresh every interval until stopped.

        The first refresh happens immediately so the exporter can serve
        metrics as soon as possible.
        """
        self._running = True
        logger.info("Refresh service started, interval=%.1fs", self.interval)

        while self._running:
            await self.refresh_once()
            if not self._running:
                break
            await asyncio.sleep(self.interval)

        logger.info("Refresh service stopped")
