"""Exception hierarchy for the exporter."""

from __future__ import annotations

from typing import Any


class ExporterError(Exception):
    """
    Base exception for all exporter errors.

    Attributes:
        message: Human-readable error description.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r})"


class ConfigError(ExporterError):
    """Raised when the exporter configuration is unusable."""


class RpcError(ExporterError):
    """
    Raised when a JSON-RPC call fails.

    Covers transport failures, non-2xx responses, JSON-RPC error objects
    and responses whose result does not have the expected shape.

    Attributes:
        method: The JSON-RPC method that failed.
        code: The JSON-RPC error code, if the node returned one.
        data: The JSON-RPC error data, if any.
    """

    def __init__(
        self,
        method: str,
        detail: str,
        *,
        code: int | None = None,
        data: Any = None,
    ) -> None:
        self.method = method
        self.code = code
        self.data = data

        msg = f"{method} failed: {detail}"
        if code is not None:
            msg = f"{msg} (code {code})"

        super().__init__(msg)
