"""
Building snapshots from a node's JSON-RPC endpoint.

One `LedgerSnapshot` per commitment level is assembled from four calls made
at that commitment:

- `getSlot` for the snapshot slot,
- `getVoteAccounts` for the staked vote-account set and activated stake,
- `getMultipleAccounts` for the tracked vote accounts' balances and state,
- `getBalance` for the node identity's balance.

The three levels are loaded concurrently.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable

from pydantic import ValidationError

from validator_exporter.identity import CONFIG_PROGRAM_ID, IdentityInfoMap, NodeIdentity
from validator_exporter.ledger import (
    CommitmentLevel,
    CommitmentSnapshots,
    LedgerSnapshot,
    VoteAccount,
    VoteState,
)
from validator_exporter.metrics import vote_state_decode_errors_total
from validator_exporter.types import Lamports, Pubkey

from .client import RpcClient
from .models import RpcAccount

logger = logging.getLogger(__name__)


def decode_vote_state(
    vote_pubkey: Pubkey, account: RpcAccount | None, commitment: CommitmentLevel
) -> VoteState | None:
    """
    Decode a vote account fetched with jsonParsed encoding.

    Undecodable accounts are reported through a warning and the
    `solana_exporter_vote_state_decode_errors_total` counter, then read as
    None so the resolver can fall back to an empty vote state.
    """
    if account is None:
        logger.warning(
            "Vote account %s is staked but missing at %s commitment", vote_pubkey, commitment
        )
        vote_state_decode_errors_total.inc()
        return None

    try:
        return VoteState.from_parsed_account(account.data)
    except (ValueError, ValidationError) as e:
        logger.warning(
            "Could not decode vote state of %s at %s commitment: %s", vote_pubkey, commitment, e
        )
        vote_state_decode_errors_total.inc()
        return None


async def fetch_ledger_snapshot(
    client: RpcClient,
    commitment: CommitmentLevel,
    identity: Pubkey,
    vote_accounts: Iterable[Pubkey],
) -> LedgerSnapshot:
    """
    Load the accounts the exporter needs at one commitment level.

    Raises:
        RpcError: If any of the underlying calls fails.
    """
    tracked = sorted(set(vote_accounts))

    slot, staked, accounts, identity_balance = await asyncio.gather(
        client.get_slot(commitment),
        client.get_vote_accounts(commitment),
        client.get_multiple_accounts(tracked, commitment),
        client.get_balance(identity, commitment),
    )

    balances: dict[Pubkey, Lamports] = {identity: identity_balance}
    fetched = dict(zip(tracked, accounts, strict=True))
    for pubkey, account in fetched.items():
        if account is not None:
            balances[pubkey] = account.lamports

    # Only tracked accounts are kept: the resolver never asks about others.
    tracked_set = set(tracked)
    vote_account_map: dict[Pubkey, VoteAccount] = {}
    for info in staked.all():
        if info.vote_pubkey not in tracked_set:
            continue
        vote_account_map[info.vote_pubkey] = VoteAccount(
            activated_stake=info.activated_stake,
            decoded_state=decode_vote_state(
                info.vote_pubkey, fetched.get(info.vote_pubkey), commitment
            ),
        )

    logger.debug(
        "Loaded %s snapshot at slot %d: %d/%d tracked vote accounts staked",
        commitment,
        slot,
        len(vote_account_map),
        len(tracked),
    )
    return LedgerSnapshot(slot=slot, balances=balances, accounts=vote_account_map)


async def fetch_commitment_snapshots(
    client: RpcClient,
    identity: Pubkey,
    vote_accounts: Iterable[Pubkey],
) -> CommitmentSnapshots:
    """
    Load one snapshot per commitment level, concurrently.

    Raises:
        RpcError: If any level fails to load.
    """
    tracked = frozenset(vote_accounts)
    finalized, confirmed, processed = await asyncio.gather(
        fetch_ledger_snapshot(client, CommitmentLevel.FINALIZED, identity, tracked),
        fetch_ledger_snapshot(client, CommitmentLevel.CONFIRMED, identity, tracked),
        fetch_ledger_snapshot(client, CommitmentLevel.PROCESSED, identity, tracked),
    )
    return CommitmentSnapshots(finalized=finalized, confirmed=confirmed, processed=processed)


async def fetch_node_identity(client: RpcClient) -> NodeIdentity:
    """
    Load the node's identity and its software version.

    Raises:
        RpcError: If either call fails.
    """
    identity, version = await asyncio.gather(client.get_identity(), client.get_version())
    return NodeIdentity(identity=identity, versions={identity: version.solana_core})


async def fetch_identity_info(client: RpcClient) -> IdentityInfoMap:
    """
    Load published validator info from the Config program.

    Raises:
        RpcError: If the program account query fails.
    """
    accounts = await client.get_program_accounts(CONFIG_PROGRAM_ID)
    identity_info = IdentityInfoMap.from_config_accounts(accounts)
    logger.info("Loaded validator info for %d identities", len(identity_info))
    return identity_info
