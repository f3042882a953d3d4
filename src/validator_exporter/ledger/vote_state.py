"""
Vote program state.

A vote account records the validator's voting activity: the tower of recent
votes (each a `Lockout`), the credits earned per epoch, and the node identity
that signs the votes.

The models read the `jsonParsed` encoding of a vote account as returned by
`getAccountInfo` / `getMultipleAccounts`:

    {
        "program": "vote",
        "parsed": {
            "type": "vote",
            "info": {
                "nodePubkey": "...",
                "votes": [{"slot": 1000, "confirmationCount": 31}, ...],
                "epochCredits": [{"epoch": 5, "credits": "812", "previousCredits": "400"}],
                ...
            }
        }
    }
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from validator_exporter.types import CamelModel, Epoch, Lamports, Pubkey, Slot, Uint64

VOTE_PROGRAM = "vote"
"""Program name reported by the jsonParsed encoder for vote accounts."""


class Lockout(CamelModel):
    """A single vote in the vote tower."""

    model_config = CamelModel.model_config | {"frozen": True}

    slot: Slot
    """The voted-on slot."""

    confirmation_count: int = 1
    """Number of votes stacked on top of this one, including itself."""


class EpochCredits(CamelModel):
    """Credits earned during one epoch."""

    model_config = CamelModel.model_config | {"frozen": True}

    epoch: Epoch
    """The epoch the credits were earned in."""

    credits: Uint64
    """Cumulative credits at the end of the epoch."""

    previous_credits: Uint64
    """Cumulative credits at the start of the epoch."""


class VoteState(CamelModel):
    """
    Decoded state of a vote account.

    Immutable: snapshots hand the same instance to every reader.
    """

    model_config = CamelModel.model_config | {"frozen": True}

    node_pubkey: Pubkey
    """Identity of the validator node that votes with this account."""

    authorized_withdrawer: Pubkey | None = None
    """Key allowed to withdraw from the vote account."""

    commission: int = 0
    """Commission percentage taken from staking rewards."""

    votes: tuple[Lockout, ...] = ()
    """Vote tower, oldest first."""

    root_slot: Slot | None = None
    """Most recent rooted slot, if any vote has been rooted."""

    epoch_credits: tuple[EpochCredits, ...] = ()
    """Per-epoch credit history, oldest first."""

    @classmethod
    def default(cls) -> VoteState:
        """An empty vote state: no votes, no credits, all-zero node key."""
        return cls(node_pubkey=Pubkey.default())

    @classmethod
    def from_parsed_account(cls, data: Any) -> VoteState:
        """
        Decode the `data` field of a jsonParsed vote account.

        Raises:
            ValueError: If the account is not a parsed vote account.
            pydantic.ValidationError: If the parsed fields are malformed.
        """
        if not isinstance(data, dict) or data.get("program") != VOTE_PROGRAM:
            raise ValueError("account data is not a parsed vote account")

        parsed = data.get("parsed")
        if not isinstance(parsed, dict) or "info" not in parsed:
            raise ValueError("parsed vote account has no info")

        return cls.model_validate(parsed["info"])

    def last_vote(self) -> Lockout | None:
        """The most recent vote in the tower, if any."""
        return self.votes[-1] if self.votes else None

    def credits(self) -> Uint64:
        """Cumulative credits earned over the lifetime of the account."""
        if not self.epoch_credits:
            return Uint64(0)
        return self.epoch_credits[-1].credits


@dataclass(frozen=True, slots=True)
class VoteAccount:
    """
    A staked vote account as seen by one snapshot.

    The decoded state is None when the account data could not be decoded.
    """

    activated_stake: Lamports
    """Stake currently delegated and active."""

    decoded_state: VoteState | None = None
    """Decoded vote program state."""

    def vote_state(self) -> VoteState | None:
        """Return the decoded vote state, or None if the data was unreadable."""
        return self.decoded_state
