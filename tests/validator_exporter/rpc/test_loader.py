"""Tests for building snapshots from RPC responses."""

from __future__ import annotations

from typing import Any

import pytest

from validator_exporter.identity import CONFIG_PROGRAM_ID, VALIDATOR_INFO_KEY, ValidatorInfo
from validator_exporter.ledger import CommitmentLevel, CommitmentSnapshots, LedgerSnapshot
from validator_exporter.metrics import REGISTRY
from validator_exporter.rpc import (
    RpcAccount,
    RpcClient,
    decode_vote_state,
    fetch_commitment_snapshots,
    fetch_identity_info,
    fetch_ledger_snapshot,
    fetch_node_identity,
)
from validator_exporter.types import Lamports, RpcError
from tests.validator_exporter.helpers import (
    ClusterNode,
    MockRpcNode,
    make_pubkey,
    parsed_vote_account,
    run_async,
)

URL = "http://rpc.test"
IDENTITY = make_pubkey(1)
VOTE = make_pubkey(10)
UNTRACKED = make_pubkey(11)
DECODE_ERRORS = "solana_exporter_vote_state_decode_errors_total"


def decode_errors() -> float:
    """Current value of the decode error counter."""
    return REGISTRY.get_sample_value(DECODE_ERRORS) or 0.0


def snapshot_at(node: MockRpcNode, level: CommitmentLevel, tracked: list[Any]) -> LedgerSnapshot:
    """Load one snapshot from a mock node."""

    async def run_test() -> LedgerSnapshot:
        async with RpcClient(URL, transport=node.transport()) as client:
            return await fetch_ledger_snapshot(client, level, IDENTITY, tracked)

    return run_async(run_test())


class TestDecodeVoteState:
    """Tests for decoding one fetched vote account."""

    def test_decodes_parsed_account(self) -> None:
        """A jsonParsed vote account yields its state."""
        account = RpcAccount.model_validate(parsed_vote_account(IDENTITY, 1, votes=[7]))

        state = decode_vote_state(VOTE, account, CommitmentLevel.FINALIZED)

        assert state is not None
        assert state.node_pubkey == IDENTITY

    def test_binary_data_is_counted_and_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        """Data the node could not parse is reported and read as None."""
        account = RpcAccount.model_validate(
            {"lamports": 1, "owner": make_pubkey(3), "data": ["AAAA", "base64"]}
        )
        before = decode_errors()

        assert decode_vote_state(VOTE, account, CommitmentLevel.CONFIRMED) is None
        assert decode_errors() == before + 1
        assert "Could not decode vote state" in caplog.text

    def test_missing_account_is_counted(self, caplog: pytest.LogCaptureFixture) -> None:
        """A staked account the node did not return is reported."""
        before = decode_errors()

        assert decode_vote_state(VOTE, None, CommitmentLevel.PROCESSED) is None
        assert decode_errors() == before + 1
        assert "missing at processed commitment" in caplog.text


class TestFetchLedgerSnapshot:
    """Tests for loading one commitment level."""

    def test_builds_snapshot(self) -> None:
        """Slot, balances, stake and vote state come from the node."""
        cluster = ClusterNode(
            IDENTITY,
            staked={VOTE: (IDENTITY, 10**12)},
            accounts={
                VOTE: parsed_vote_account(IDENTITY, 2_000_000_000, votes=[98, 99], credits=7)
            },
            slots={"finalized": 99},
        )
        node = MockRpcNode(cluster.handlers())

        snapshot = snapshot_at(node, CommitmentLevel.FINALIZED, [VOTE])

        assert snapshot.slot == 99
        assert snapshot.get_balance(IDENTITY) == Lamports(5_000_000_000)
        assert snapshot.get_balance(VOTE) == Lamports(2_000_000_000)

        vote_account = snapshot.vote_accounts()[VOTE]
        assert vote_account.activated_stake == Lamports(10**12)
        state = vote_account.vote_state()
        assert state is not None
        assert [lockout.slot for lockout in state.votes] == [98, 99]
        assert state.credits() == 7

    def test_every_call_uses_the_level(self) -> None:
        """All four calls are issued at the requested commitment."""
        cluster = ClusterNode(IDENTITY, staked={}, accounts={})
        node = MockRpcNode(cluster.handlers())

        snapshot_at(node, CommitmentLevel.CONFIRMED, [VOTE])

        assert node.calls("getSlot")[0][0]["commitment"] == "confirmed"
        assert node.calls("getVoteAccounts")[0][0]["commitment"] == "confirmed"
        assert node.calls("getMultipleAccounts")[0][1]["commitment"] == "confirmed"
        assert node.calls("getBalance")[0][1]["commitment"] == "confirmed"

    def test_only_tracked_accounts_are_kept(self) -> None:
        """Staked accounts outside the tracked set are dropped."""
        cluster = ClusterNode(
            IDENTITY,
            staked={VOTE: (IDENTITY, 1), UNTRACKED: (make_pubkey(2), 1)},
            accounts={VOTE: parsed_vote_account(IDENTITY, 1, votes=[1])},
        )

        snapshot = snapshot_at(MockRpcNode(cluster.handlers()), CommitmentLevel.FINALIZED, [VOTE])

        assert set(snapshot.vote_accounts()) == {VOTE}

    def test_unstaked_tracked_account_has_balance_only(self) -> None:
        """A tracked account missing from the vote set keeps its balance."""
        cluster = ClusterNode(
            IDENTITY,
            staked={},
            accounts={VOTE: parsed_vote_account(IDENTITY, 3_000_000_000)},
        )

        snapshot = snapshot_at(MockRpcNode(cluster.handlers()), CommitmentLevel.FINALIZED, [VOTE])

        assert snapshot.vote_accounts() == {}
        assert snapshot.get_balance(VOTE) == Lamports(3_000_000_000)

    def test_undecodable_account_stays_staked(self) -> None:
        """A staked account with unreadable data is kept without a state."""
        cluster = ClusterNode(
            IDENTITY,
            staked={VOTE: (IDENTITY, 1)},
            accounts={
                VOTE: {
                    "lamports": 1,
                    "owner": make_pubkey(3),
                    "data": ["AAAA", "base64"],
                    "executable": False,
                }
            },
        )

        snapshot = snapshot_at(MockRpcNode(cluster.handlers()), CommitmentLevel.FINALIZED, [VOTE])

        assert snapshot.vote_accounts()[VOTE].vote_state() is None

    def test_rpc_failure_propagates(self) -> None:
        """A failing call fails the whole snapshot."""
        cluster = ClusterNode(IDENTITY, staked={}, accounts={})
        handlers = cluster.handlers()
        del handlers["getVoteAccounts"]

        with pytest.raises(RpcError):
            snapshot_at(MockRpcNode(handlers), CommitmentLevel.FINALIZED, [VOTE])


class TestFetchCommitmentSnapshots:
    """Tests for loading all three levels."""

    def test_loads_each_level(self) -> None:
        """Each level gets its own snapshot."""
        cluster = ClusterNode(
            IDENTITY,
            staked={},
            accounts={},
            slots={"finalized": 10, "confirmed": 40, "processed": 42},
        )
        node = MockRpcNode(cluster.handlers())

        async def run_test() -> CommitmentSnapshots:
            async with RpcClient(URL, transport=node.transport()) as client:
                return await fetch_commitment_snapshots(client, IDENTITY, [VOTE])

        snapshots = run_async(run_test())

        slots = {}
        for level, snapshot in snapshots:
            assert isinstance(snapshot, LedgerSnapshot)
            slots[level.value] = int(snapshot.slot)
        assert slots == {"finalized": 10, "confirmed": 40, "processed": 42}


class TestFetchNodeIdentity:
    """Tests for loading the node identity."""

    def test_identity_and_version(self) -> None:
        """The node's own version is keyed by its identity."""
        cluster = ClusterNode(IDENTITY, staked={}, accounts={}, version="2.0.3")
        node = MockRpcNode(cluster.handlers())

        async def run_test() -> Any:
            async with RpcClient(URL, transport=node.transport()) as client:
                return await fetch_node_identity(client)

        node_identity = run_async(run_test())

        assert node_identity.id() == IDENTITY
        assert node_identity.get_version(IDENTITY) == "2.0.3"


class TestFetchIdentityInfo:
    """Tests for loading validator info from the Config program."""

    def test_queries_config_program(self) -> None:
        """Validator info accounts become the metadata map."""
        record = {
            "pubkey": make_pubkey(200),
            "account": {
                "lamports": 1,
                "owner": CONFIG_PROGRAM_ID,
                "executable": False,
                "data": {
                    "program": "config",
                    "parsed": {
                        "type": "validatorInfo",
                        "info": {
                            "keys": [
                                {"pubkey": VALIDATOR_INFO_KEY, "signer": False},
                                {"pubkey": IDENTITY, "signer": True},
                            ],
                            "configData": {"name": "Alpha"},
                        },
                    },
                },
            },
        }
        node = MockRpcNode({"getProgramAccounts": lambda params: [record]})

        async def run_test() -> Any:
            async with RpcClient(URL, transport=node.transport()) as client:
                return await fetch_identity_info(client)

        identity_info = run_async(run_test())

        assert identity_info.get(IDENTITY) == ValidatorInfo(name="Alpha")
        assert node.calls("getProgramAccounts") == [[CONFIG_PROGRAM_ID, {"encoding": "jsonParsed"}]]
