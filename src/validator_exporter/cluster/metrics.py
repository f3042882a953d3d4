"""
Cluster metrics writer.

Emits the node-identity families and the per-vote-account families in a fixed
order. Every commitment-granular family is built by fanning one query out
over the commitment snapshots, so a value missing at one level only removes
that level's series.

Output for one tracked vote account with all three levels populated:

    # HELP solana_validator_last_vote_slot The voted-on slot of the ...
    # TYPE solana_validator_last_vote_slot gauge
    solana_validator_last_vote_slot{commitment="finalized",identity_account="...",...} ...
    solana_validator_last_vote_slot{commitment="confirmed",identity_account="...",...} ...
    solana_validator_last_vote_slot{commitment="processed",identity_account="...",...} ...
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator
from typing import IO

from validator_exporter.identity import ClusterIdentity, IdentityInfoMap
from validator_exporter.ledger import AccountSnapshot, CommitmentLevel, CommitmentSnapshots
from validator_exporter.metrics import (
    MetricFamily,
    MetricSeries,
    MetricType,
    build_family,
    write_metric,
)
from validator_exporter.types import Pubkey

from .vote_info import get_vote_account_balance, get_vote_state

logger = logging.getLogger(__name__)

SeriesQuery = Callable[[AccountSnapshot, Pubkey], MetricSeries | None]
"""Reads one series for one vote account from one snapshot."""


def _fan_out_vote_accounts(
    snapshots: CommitmentSnapshots,
    vote_accounts: Iterable[Pubkey],
    query: SeriesQuery,
) -> Iterator[tuple[CommitmentLevel, MetricSeries]]:
    """Evaluate a per-vote-account query at every commitment level."""
    for vote_pubkey in vote_accounts:
        yield from snapshots.for_each_commitment(lambda snapshot: query(snapshot, vote_pubkey))


def cluster_metric_families(
    snapshots: CommitmentSnapshots,
    cluster_identity: ClusterIdentity,
    vote_accounts: Iterable[Pubkey],
    identity_info: IdentityInfoMap,
) -> Iterator[MetricFamily]:
    """
    Build the cluster families lazily, in emission order.

    Each family is only computed when the previous one has been consumed.

    Args:
        snapshots: One ledger snapshot per commitment level.
        cluster_identity: The node's identity and version lookup.
        vote_accounts: Vote accounts to report on. Visited in sorted order.
        identity_info: Published validator metadata.
    """
    identity_pubkey = cluster_identity.id()
    tracked = sorted(set(vote_accounts))

    yield MetricFamily(
        name="solana_node_identity_public_key_info",
        help="The node's current identity",
        type_="counter",
        series=(MetricSeries.new(1).with_label("identity_account", identity_pubkey),),
    )

    yield build_family(
        "solana_node_identity_balance_sol",
        "The balance of the node's identity account",
        "gauge",
        snapshots.for_each_commitment(
            lambda snapshot: MetricSeries.new_sol(snapshot.get_balance(identity_pubkey)).with_label(
                "identity_account", identity_pubkey
            )
        ),
    )

    version = cluster_identity.get_version(identity_pubkey)
    if version is None:
        logger.debug("No version known for identity %s", identity_pubkey)
    yield MetricFamily(
        name="solana_node_version_info",
        help="The current Solana node's version",
        type_="counter",
        series=(
            (MetricSeries.new(1).with_label("version", version),) if version is not None else ()
        ),
    )

    def vote_series(
        series: MetricSeries, identity: Pubkey, vote_pubkey: Pubkey, name: str | None
    ) -> MetricSeries:
        return (
            series.with_label("identity_account", identity)
            .with_label("vote_account", vote_pubkey)
            .with_optional_label("validator_name", name)
        )

    def last_vote(snapshot: AccountSnapshot, vote_pubkey: Pubkey) -> MetricSeries | None:
        info = get_vote_state(snapshot, vote_pubkey, identity_info)
        if info is None:
            return None
        return vote_series(
            MetricSeries.new(info.last_vote), info.identity, vote_pubkey, info.validator_name
        )

    def balance(snapshot: AccountSnapshot, vote_pubkey: Pubkey) -> MetricSeries | None:
        info = get_vote_account_balance(snapshot, vote_pubkey, identity_info)
        if info is None:
            return None
        return vote_series(
            MetricSeries.new_sol(info.balance), info.identity, vote_pubkey, info.validator_name
        )

    def vote_credits(snapshot: AccountSnapshot, vote_pubkey: Pubkey) -> MetricSeries | None:
        info = get_vote_state(snapshot, vote_pubkey, identity_info)
        if info is None:
            return None
        return vote_series(
            MetricSeries.new(info.vote_credits), info.identity, vote_pubkey, info.validator_name
        )

    def active_stake(snapshot: AccountSnapshot, vote_pubkey: Pubkey) -> MetricSeries | None:
        info = get_vote_state(snapshot, vote_pubkey, identity_info)
        if info is None:
            return None
        return vote_series(
            MetricSeries.new_sol(info.activated_stake),
            info.identity,
            vote_pubkey,
            info.validator_name,
        )

    vote_families: list[tuple[str, str, MetricType, SeriesQuery]] = [
        (
            "solana_validator_last_vote_slot",
            "The voted-on slot of the validator's last vote that got included in the chain",
            "gauge",
            last_vote,
        ),
        (
            "solana_validator_vote_account_balance_sol",
            "The balance of the vote account at the given address",
            "gauge",
            balance,
        ),
        (
            "solana_validator_vote_credits",
            "The total number of vote credits credited to this vote account",
            "gauge",
            vote_credits,
        ),
        (
            "solana_validator_active_stake_sol",
            "The total amount of Sol actively staked to this validator",
            "gauge",
            active_stake,
        ),
    ]

    for name, help_text, type_, query in vote_families:
        yield build_family(
            name, help_text, type_, _fan_out_vote_accounts(snapshots, tracked, query)
        )


def write_cluster_metrics(
    snapshots: CommitmentSnapshots,
    cluster_identity: ClusterIdentity,
    vote_accounts: Iterable[Pubkey],
    identity_info: IdentityInfoMap,
    out: IO[bytes],
) -> None:
    """
    Write the cluster families to a binary sink.

    Families are written one at a time. If the sink fails, the families
    already written stay written and the remaining ones are never built.

    Raises:
        OSError: If writing to the sink fails.
    """
    families = cluster_metric_families(snapshots, cluster_identity, vote_accounts, identity_info)
    for family in families:
        write_metric(out, family)
