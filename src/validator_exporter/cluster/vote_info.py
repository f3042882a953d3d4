"""
Vote account resolution.

Joins one snapshot's view of a vote account with the identity metadata of
the validator behind it. Every stage may legitimately come up empty: the
account may not be staked at this commitment level, or the validator may not
have voted yet. Those cases return None and the caller drops the series.
"""

from __future__ import annotations

from dataclasses import dataclass

from validator_exporter.identity import IdentityInfoMap, ValidatorInfo
from validator_exporter.ledger import AccountSnapshot, VoteState
from validator_exporter.types import Lamports, Pubkey, Slot, Uint64


@dataclass(frozen=True, slots=True)
class ValidatorVoteInfo:
    """Consolidated view of a vote account at one commitment level."""

    balance: Lamports
    """Balance of the vote account."""

    last_vote: Slot
    """Slot of the most recent vote in the tower."""

    vote_credits: Uint64
    """Cumulative credits earned."""

    identity: Pubkey
    """Identity of the node voting with this account."""

    activated_stake: Lamports
    """Stake currently delegated and active."""

    validator_info: ValidatorInfo | None
    """Published metadata of the identity, if any."""

    @property
    def validator_name(self) -> str | None:
        """Display name of the validator, if published."""
        return self.validator_info.name if self.validator_info is not None else None


@dataclass(frozen=True, slots=True)
class VoteAccountBalance:
    """Balance of a vote account with the identity it votes for."""

    balance: Lamports
    identity: Pubkey
    validator_info: ValidatorInfo | None

    @property
    def validator_name(self) -> str | None:
        """Display name of the validator, if published."""
        return self.validator_info.name if self.validator_info is not None else None


def _lookup_vote_state(
    snapshot: AccountSnapshot, vote_pubkey: Pubkey
) -> tuple[Lamports, VoteState] | None:
    """
    Find a vote account and its state.

    An account whose data could not be decoded reads as an empty vote state.
    """
    vote_account = snapshot.vote_accounts().get(vote_pubkey)
    if vote_account is None:
        return None

    vote_state = vote_account.vote_state()
    if vote_state is None:
        vote_state = VoteState.default()

    return vote_account.activated_stake, vote_state


def get_vote_state(
    snapshot: AccountSnapshot,
    vote_pubkey: Pubkey,
    identity_info: IdentityInfoMap,
) -> ValidatorVoteInfo | None:
    """
    Resolve a vote account at one commitment level.

    Args:
        snapshot: Ledger state at one commitment level.
        vote_pubkey: Address of the vote account.
        identity_info: Published validator metadata.

    Returns:
        The vote info, or None if the account is not a staked vote account
        in this snapshot or has not cast any vote.
    """
    found = _lookup_vote_state(snapshot, vote_pubkey)
    if found is None:
        return None
    activated_stake, vote_state = found

    last_vote = vote_state.last_vote()
    if last_vote is None:
        return None

    return ValidatorVoteInfo(
        balance=snapshot.get_balance(vote_pubkey),
        last_vote=last_vote.slot,
        vote_credits=vote_state.credits(),
        identity=vote_state.node_pubkey,
        activated_stake=activated_stake,
        validator_info=identity_info.get(vote_state.node_pubkey),
    )


def get_vote_account_balance(
    snapshot: AccountSnapshot,
    vote_pubkey: Pubkey,
    identity_info: IdentityInfoMap,
) -> VoteAccountBalance | None:
    """
    Resolve the balance of a vote account at one commitment level.

    Unlike `get_vote_state`, this does not require the account to have
    voted: a freshly created vote account still holds a balance.

    Returns:
        The balance, or None if the account is not a staked vote account
        in this snapshot.
    """
    found = _lookup_vote_state(snapshot, vote_pubkey)
    if found is None:
        return None
    _, vote_state = found

    return VoteAccountBalance(
        balance=snapshot.get_balance(vote_pubkey),
        identity=vote_state.node_pubkey,
        validator_info=identity_info.get(vote_state.node_pubkey),
    )
