"""Ledger state as consumed by the exporter: snapshots, vote state, commitment levels."""

from .commitment import COMMITMENT_LEVELS, CommitmentLevel, CommitmentSnapshots
from .snapshot import AccountSnapshot, LedgerSnapshot
from .vote_state import EpochCredits, Lockout, VoteAccount, VoteState

__all__ = [
    "AccountSnapshot",
    "COMMITMENT_LEVELS",
    "CommitmentLevel",
    "CommitmentSnapshots",
    "EpochCredits",
    "LedgerSnapshot",
    "Lockout",
    "VoteAccount",
    "VoteState",
]
