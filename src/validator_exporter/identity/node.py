"""The exporting node's own identity and software version."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Protocol

from validator_exporter.types import Pubkey


class ClusterIdentity(Protocol):
    """Gossip-level view of who this node is and what it runs."""

    def id(self) -> Pubkey:
        """The node's identity pubkey."""
        ...

    def get_version(self, pubkey: Pubkey) -> str | None:
        """Software version advertised by a node, if known."""
        ...


@dataclass(frozen=True, slots=True)
class NodeIdentity:
    """Identity of the exporting node plus the versions advertised in gossip."""

    identity: Pubkey
    """The node's identity pubkey."""

    versions: Mapping[Pubkey, str] = field(default_factory=dict)
    """Advertised software version per node identity."""

    def __post_init__(self) -> None:
        object.__setattr__(self, "versions", MappingProxyType(dict(self.versions)))

    def id(self) -> Pubkey:
        """The node's identity pubkey."""
        return self.identity

    def get_version(self, pubkey: Pubkey) -> str | None:
        """Software version advertised by a node, None if unknown."""
        return self.versions.get(pubkey)
