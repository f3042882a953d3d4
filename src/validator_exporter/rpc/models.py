"""Response models for the Solana JSON-RPC methods the exporter calls."""

from __future__ import annotations

from typing import Any

from pydantic import Field

from validator_exporter.types import CamelModel, Lamports, Pubkey, Slot


class RpcVoteAccountInfo(CamelModel):
    """One entry of `getVoteAccounts`, from either the current or delinquent set."""

    vote_pubkey: Pubkey
    node_pubkey: Pubkey
    activated_stake: Lamports
    commission: int = 0
    last_vote: Slot = Slot(0)
    root_slot: Slot = Slot(0)
    epoch_vote_account: bool = True


class RpcVoteAccounts(CamelModel):
    """Result of `getVoteAccounts`."""

    current: list[RpcVoteAccountInfo] = []
    delinquent: list[RpcVoteAccountInfo] = []

    def all(self) -> list[RpcVoteAccountInfo]:
        """Current and delinquent vote accounts together."""
        return [*self.current, *self.delinquent]


class RpcAccount(CamelModel):
    """
    An account as returned by `getMultipleAccounts` with jsonParsed encoding.

    `data` is either a parsed object (`{"program": ..., "parsed": ...}`) or,
    when the node has no parser for the owning program, a `[base64, encoding]`
    pair.
    """

    lamports: Lamports
    owner: Pubkey
    data: Any = None
    executable: bool = False
    space: int | None = None


class RpcVersion(CamelModel):
    """Result of `getVersion`."""

    solana_core: str = Field(alias="solana-core")
    feature_set: int | None = Field(default=None, alias="feature-set")
