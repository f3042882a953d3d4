"""Test helpers for validator_exporter unit tests."""

from __future__ import annotations

import asyncio
from collections.abc import Coroutine
from typing import TypeVar

from .builders import (
    families_by_name,
    make_identity_info,
    make_node_identity,
    make_pubkey,
    make_snapshot,
    make_snapshots,
    make_vote_account,
    make_vote_state,
    parse_families,
)
from .mocks import FailingSink, MockRpcNode
from .rpc_payloads import ClusterNode, parsed_vote_account, vote_account_entry, with_context

_T = TypeVar("_T")


def run_async(coro: Coroutine[object, object, _T]) -> _T:
    """Run an async coroutine synchronously."""
    return asyncio.run(coro)


__all__ = [
    # Builders
    "families_by_name",
    "make_identity_info",
    "make_node_identity",
    "make_pubkey",
    "make_snapshot",
    "make_snapshots",
    "make_vote_account",
    "make_vote_state",
    "parse_families",
    # Mocks
    "FailingSink",
    "MockRpcNode",
    # RPC payloads
    "ClusterNode",
    "parsed_vote_account",
    "vote_account_entry",
    "with_context",
    # Async utilities
    "run_async",
]
