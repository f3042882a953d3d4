"""Cluster metrics: vote account resolution and the cluster metrics writer."""

from .metrics import cluster_metric_families, write_cluster_metrics
from .vote_info import (
    ValidatorVoteInfo,
    VoteAccountBalance,
    get_vote_account_balance,
    get_vote_state,
)

__all__ = [
    "ValidatorVoteInfo",
    "VoteAccountBalance",
    "cluster_metric_families",
    "get_vote_account_balance",
    "get_vote_state",
    "write_cluster_metrics",
]
