"""
Consistent exporter state and its atomic handoff.

A scrape must see snapshots, identity and metadata from the same refresh.
The refresh service therefore builds a complete `ExporterState` off to the
side and publishes it with a single reference assignment. Readers take the
reference once and use it for the whole scrape.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import IO

from validator_exporter.cluster import write_cluster_metrics
from validator_exporter.identity import IdentityInfoMap, NodeIdentity
from validator_exporter.ledger import CommitmentSnapshots
from validator_exporter.types import Pubkey


@dataclass(frozen=True, slots=True)
class ExporterState:
    """Everything one scrape renders, taken from one refresh."""

    snapshots: CommitmentSnapshots
    """One ledger snapshot per commitment level."""

    node_identity: NodeIdentity
    """The node's identity and version."""

    vote_accounts: frozenset[Pubkey]
    """Vote accounts being reported on."""

    identity_info: IdentityInfoMap = field(default_factory=IdentityInfoMap)
    """Published validator metadata."""

    def write(self, out: IO[bytes]) -> None:
        """
        Write the cluster metrics for this state.

        Raises:
            OSError: If writing to the sink fails.
        """
        write_cluster_metrics(
            self.snapshots,
            self.node_identity,
            self.vote_accounts,
            self.identity_info,
            out,
        )


@dataclass(slots=True)
class StateHolder:
    """Holds the latest published state. None until the first refresh succeeds."""

    state: ExporterState | None = None
    """Most recently published state."""

    def get(self) -> ExporterState | None:
        """Return the current state."""
        return self.state

    def publish(self, state: ExporterState) -> None:
        """Replace the current state."""
        self.state = state
