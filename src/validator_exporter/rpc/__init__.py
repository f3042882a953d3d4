"""
Solana JSON-RPC access.

Provides the async client and the loaders that turn RPC responses into
commitment snapshots, node identity and validator info.
"""

from .client import DEFAULT_TIMEOUT, RpcClient
from .loader import (
    decode_vote_state,
    fetch_commitment_snapshots,
    fetch_identity_info,
    fetch_ledger_snapshot,
    fetch_node_identity,
)
from .models import RpcAccount, RpcVersion, RpcVoteAccountInfo, RpcVoteAccounts

__all__ = [
    "DEFAULT_TIMEOUT",
    "RpcAccount",
    "RpcClient",
    "RpcVersion",
    "RpcVoteAccountInfo",
    "RpcVoteAccounts",
    "decode_vote_state",
    "fetch_commitment_snapshots",
    "fetch_identity_info",
    "fetch_ledger_snapshot",
    "fetch_node_identity",
]
