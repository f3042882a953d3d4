"""Validator identity: the node's own key and published validator metadata."""

from .info import CONFIG_PROGRAM_ID, VALIDATOR_INFO_KEY, IdentityInfoMap, ValidatorInfo
from .node import ClusterIdentity, NodeIdentity

__all__ = [
    "CONFIG_PROGRAM_ID",
    "ClusterIdentity",
    "IdentityInfoMap",
    "NodeIdentity",
    "VALIDATOR_INFO_KEY",
    "ValidatorInfo",
]
