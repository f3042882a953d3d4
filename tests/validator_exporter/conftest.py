"""
Shared pytest fixtures for all validator_exporter tests.

Provides a small synthetic cluster: one node identity, two vote accounts and
the commitment snapshots that describe them.
"""

from __future__ import annotations

import pytest

from validator_exporter.identity import IdentityInfoMap, NodeIdentity
from validator_exporter.ledger import CommitmentSnapshots, LedgerSnapshot
from validator_exporter.service import ExporterState
from validator_exporter.types import Pubkey
from tests.validator_exporter.helpers import (
    make_identity_info,
    make_node_identity,
    make_pubkey,
    make_snapshot,
    make_snapshots,
    make_vote_account,
)


@pytest.fixture
def identity() -> Pubkey:
    """Identity of the exporting node."""
    return make_pubkey(1)


@pytest.fixture
def vote_a() -> Pubkey:
    """Vote account whose validator published a name."""
    return make_pubkey(10)


@pytest.fixture
def vote_b() -> Pubkey:
    """Vote account whose validator published nothing."""
    return make_pubkey(20)


@pytest.fixture
def identity_b() -> Pubkey:
    """Identity voting with `vote_b`."""
    return make_pubkey(2)


@pytest.fixture
def node_identity(identity: Pubkey) -> NodeIdentity:
    """Node identity advertising version 1.18.22."""
    return make_node_identity(identity)


@pytest.fixture
def identity_info(identity: Pubkey) -> IdentityInfoMap:
    """Metadata naming only the exporting node."""
    return make_identity_info({identity: "Alpha"})


@pytest.fixture
def populated_snapshots(
    identity: Pubkey, identity_b: Pubkey, vote_a: Pubkey, vote_b: Pubkey
) -> CommitmentSnapshots:
    """
    Both vote accounts staked and voting at every commitment level.

    Processed is ahead of confirmed, which is ahead of finalized.
    """

    def level(slot: int) -> LedgerSnapshot:
        return make_snapshot(
            slot=slot,
            balances={identity: 5_000_000_000, vote_a: 2_500_000_000, vote_b: 1_000_000_000},
            vote_accounts={
                vote_a: make_vote_account(
                    identity, votes=[slot - 2, slot], credits=1_000, stake=10**12
                ),
                vote_b: make_vote_account(
                    identity_b, votes=[slot - 1], credits=500, stake=3 * 10**11
                ),
            },
        )

    return make_snapshots(
        finalized=level(100),
        confirmed=level(130),
        processed=level(132),
    )


@pytest.fixture
def exporter_state(
    populated_snapshots: CommitmentSnapshots,
    node_identity: NodeIdentity,
    identity_info: IdentityInfoMap,
    vote_a: Pubkey,
    vote_b: Pubkey,
) -> ExporterState:
    """A complete state ready to be rendered."""
    return ExporterState(
        snapshots=populated_snapshots,
        node_identity=node_identity,
        vote_accounts=frozenset({vote_a, vote_b}),
        identity_info=identity_info,
    )
