"""Reusable type definitions for the exporter."""

from .base import CamelModel, StrictBaseModel
from .exceptions import ConfigError, ExporterError, RpcError
from .pubkey import Base58, Pubkey
from .uint import LAMPORTS_PER_SOL, Epoch, Lamports, Slot, Uint64

__all__ = [
    # Core types
    "Uint64",
    "Slot",
    "Epoch",
    "Lamports",
    "LAMPORTS_PER_SOL",
    "Pubkey",
    "Base58",
    "CamelModel",
    "StrictBaseModel",
    # Exceptions
    "ExporterError",
    "ConfigError",
    "RpcError",
]
