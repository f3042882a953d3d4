"""
Read-only views of ledger state at one commitment level.

The cluster writer only ever asks two questions of the ledger: what is the
balance of an account, and which vote accounts carry stake. `AccountSnapshot`
is that contract. `LedgerSnapshot` is the concrete value the RPC loader
builds; tests build it directly from synthetic data.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Protocol, runtime_checkable

from validator_exporter.types import Lamports, Pubkey, Slot

from .vote_state import VoteAccount


@runtime_checkable
class AccountSnapshot(Protocol):
    """Ledger state as of one commitment level."""

    def get_balance(self, pubkey: Pubkey) -> Lamports:
        """Balance of an account, zero if the account does not exist."""
        ...

    def vote_accounts(self) -> Mapping[Pubkey, VoteAccount]:
        """Vote accounts with their activated stake and vote state."""
        ...


@dataclass(frozen=True, slots=True)
class LedgerSnapshot:
    """
    An immutable snapshot of the accounts the exporter reads.

    Only accounts the exporter asked for are present. Absent balances read
    as zero, matching how the runtime reports accounts that do not exist.
    """

    slot: Slot
    """Slot the snapshot was taken at."""

    balances: Mapping[Pubkey, Lamports] = field(default_factory=dict)
    """Balances of the identity account and the tracked vote accounts."""

    accounts: Mapping[Pubkey, VoteAccount] = field(default_factory=dict)
    """Staked vote accounts keyed by vote account address."""

    def __post_init__(self) -> None:
        # Freeze the mappings so readers cannot mutate a shared snapshot.
        object.__setattr__(self, "balances", MappingProxyType(dict(self.balances)))
        object.__setattr__(self, "accounts", MappingProxyType(dict(self.accounts)))

    def get_balance(self, pubkey: Pubkey) -> Lamports:
        """Balance of an account, zero if the account is unknown."""
        return self.balances.get(pubkey, Lamports(0))

    def vote_accounts(self) -> Mapping[Pubkey, VoteAccount]:
        """Vote accounts with their activated stake and vote state."""
        return self.accounts
