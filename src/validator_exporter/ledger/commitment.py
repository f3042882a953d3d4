"""
Commitment levels and the per-commitment fan-out.

A node holds several views of the ledger at once. `processed` is the newest
bank the node has seen, `confirmed` has been voted on by a supermajority, and
`finalized` is rooted. Every commitment-granular metric evaluates the same
query against each view and labels the result with the level it came from.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass
from enum import Enum
from typing import TypeVar

from .snapshot import AccountSnapshot

T = TypeVar("T")


class CommitmentLevel(str, Enum):
    """
    A consistency level of ledger state.

    The value doubles as the metric label value and the RPC `commitment`
    parameter.
    """

    FINALIZED = "finalized"
    CONFIRMED = "confirmed"
    PROCESSED = "processed"

    def __str__(self) -> str:
        return self.value


COMMITMENT_LEVELS: tuple[CommitmentLevel, ...] = (
    CommitmentLevel.FINALIZED,
    CommitmentLevel.CONFIRMED,
    CommitmentLevel.PROCESSED,
)
"""Fixed fan-out order. Output order follows it."""


@dataclass(frozen=True, slots=True)
class CommitmentSnapshots:
    """One account snapshot per commitment level."""

    finalized: AccountSnapshot
    """Rooted state."""

    confirmed: AccountSnapshot
    """State voted on by a supermajority of stake."""

    processed: AccountSnapshot
    """Most recent state the node has processed."""

    def get(self, level: CommitmentLevel) -> AccountSnapshot:
        """Return the snapshot for one commitment level."""
        return getattr(self, level.value)

    def __iter__(self) -> Iterator[tuple[CommitmentLevel, AccountSnapshot]]:
        for level in COMMITMENT_LEVELS:
            yield level, self.get(level)

    def for_each_commitment(
        self, query: Callable[[AccountSnapshot], T | None]
    ) -> list[tuple[CommitmentLevel, T]]:
        """
        Evaluate a query against every commitment level.

        Levels where the query returns None are dropped: they contribute no
        series at all rather than a zero.

        Args:
            query: Function reading one snapshot. Returns None when the
                value does not exist at that level.

        Returns:
            `(level, value)` pairs in `COMMITMENT_LEVELS` order.
        """
        results: list[tuple[CommitmentLevel, T]] = []
        for level, snapshot in self:
            value = query(snapshot)
            if value is not None:
                results.append((level, value))
        return results
