"""Tests for the node identity."""

from __future__ import annotations

from validator_exporter.identity import ClusterIdentity, NodeIdentity
from tests.validator_exporter.helpers import make_pubkey


def test_id_is_the_identity() -> None:
    """id() returns the node's identity key."""
    identity = make_pubkey(1)

    assert NodeIdentity(identity=identity).id() == identity


def test_version_lookup() -> None:
    """Known identities return their version, unknown ones None."""
    identity = make_pubkey(1)
    node: ClusterIdentity = NodeIdentity(identity=identity, versions={identity: "2.0.1"})

    assert node.get_version(identity) == "2.0.1"
    assert node.get_version(make_pubkey(2)) is None
