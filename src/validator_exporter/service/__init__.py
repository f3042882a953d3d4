"""Exporter state and the service that keeps it fresh."""

from .refresh import IdentityInfoLoader, RefreshService
from .state import ExporterState, StateHolder

__all__ = [
    "ExporterState",
    "IdentityInfoLoader",
    "RefreshService",
    "StateHolder",
]
