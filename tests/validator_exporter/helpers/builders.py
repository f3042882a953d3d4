"""
Builders for synthetic ledger state.

Every builder returns plain values so tests can assemble exactly the
snapshot shape they need without an RPC node.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from prometheus_client.core import Metric
from prometheus_client.parser import text_string_to_metric_families

from validator_exporter.identity import IdentityInfoMap, NodeIdentity, ValidatorInfo
from validator_exporter.ledger import (
    CommitmentSnapshots,
    EpochCredits,
    LedgerSnapshot,
    Lockout,
    VoteAccount,
    VoteState,
)
from validator_exporter.types import Epoch, Lamports, Pubkey, Slot, Uint64


def make_pubkey(seed: int) -> Pubkey:
    """Deterministic pubkey with every byte set to `seed` (1-255)."""
    return Pubkey.from_bytes(bytes([seed]) * 32)


def make_vote_state(
    identity: Pubkey,
    votes: Sequence[int] = (),
    credits: int = 0,
) -> VoteState:
    """Vote state with the given tower slots and lifetime credits."""
    return VoteState(
        node_pubkey=identity,
        votes=tuple(Lockout(slot=Slot(slot)) for slot in votes),
        epoch_credits=(
            (EpochCredits(epoch=Epoch(1), credits=Uint64(credits), previous_credits=Uint64(0)),)
            if credits
            else ()
        ),
    )


def make_vote_account(
    identity: Pubkey,
    votes: Sequence[int] = (),
    credits: int = 0,
    stake: int = 0,
) -> VoteAccount:
    """Staked vote account with a decoded vote state."""
    return VoteAccount(
        activated_stake=Lamports(stake),
        decoded_state=make_vote_state(identity, votes, credits),
    )


def make_snapshot(
    slot: int = 100,
    balances: Mapping[Pubkey, int] | None = None,
    vote_accounts: Mapping[Pubkey, VoteAccount] | None = None,
) -> LedgerSnapshot:
    """Ledger snapshot from plain integers."""
    return LedgerSnapshot(
        slot=Slot(slot),
        balances={key: Lamports(value) for key, value in (balances or {}).items()},
        accounts=dict(vote_accounts or {}),
    )


def make_snapshots(
    finalized: LedgerSnapshot | None = None,
    confirmed: LedgerSnapshot | None = None,
    processed: LedgerSnapshot | None = None,
) -> CommitmentSnapshots:
    """Commitment snapshots; missing levels are empty snapshots."""
    return CommitmentSnapshots(
        finalized=finalized or make_snapshot(),
        confirmed=confirmed or make_snapshot(),
        processed=processed or make_snapshot(),
    )


def make_identity_info(names: Mapping[Pubkey, str]) -> IdentityInfoMap:
    """Identity metadata holding only display names."""
    return IdentityInfoMap({key: ValidatorInfo(name=name) for key, name in names.items()})


def make_node_identity(identity: Pubkey, version: str | None = "1.18.22") -> NodeIdentity:
    """Node identity advertising one version, or none."""
    return NodeIdentity(
        identity=identity,
        versions={identity: version} if version is not None else {},
    )


def parse_families(output: bytes) -> list[Metric]:
    """Parse rendered exposition text back into families, in output order."""
    return list(text_string_to_metric_families(output.decode("utf-8")))


def families_by_name(output: bytes) -> dict[str, Metric]:
    """
    Parse rendered exposition text into families keyed by name.

    Counter names are reported without the `_total` suffix.
    """
    return {family.name: family for family in parse_families(output)}
