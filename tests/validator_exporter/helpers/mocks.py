"""
Mock classes for testing sinks and the RPC transport.

Each mock provides minimal implementations for isolated testing.
"""

from __future__ import annotations

import json
from collections.abc import Callable, Mapping
from typing import Any

import httpx


class FailingSink:
    """
    Binary sink that fails on a chosen write.

    Records every chunk written before the failure.
    """

    def __init__(self, fail_on_write: int) -> None:
        """Fail on the `fail_on_write`-th call to `write` (1-based)."""
        self.fail_on_write = fail_on_write
        self.chunks: list[bytes] = []
        self.attempts = 0

    def write(self, data: bytes) -> int:
        """Record the chunk, or raise on the configured attempt."""
        self.attempts += 1
        if self.attempts == self.fail_on_write:
            raise BrokenPipeError("sink closed")
        self.chunks.append(data)
        return len(data)


RpcHandler = Callable[[list[Any]], Any]
"""Returns the JSON-RPC result for the given params."""


class MockRpcNode:
    """
    In-process JSON-RPC node for httpx's MockTransport.

    Register a handler per method; unregistered methods answer with a
    JSON-RPC "method not found" error. Every request is recorded.
    """

    def __init__(self, handlers: Mapping[str, RpcHandler] | None = None) -> None:
        self.handlers: dict[str, RpcHandler] = dict(handlers or {})
        self.requests: list[dict[str, Any]] = []

    def on(self, method: str, handler: RpcHandler) -> None:
        """Register or replace the handler for a method."""
        self.handlers[method] = handler

    def calls(self, method: str) -> list[list[Any]]:
        """Params of every recorded call to a method."""
        return [r["params"] for r in self.requests if r["method"] == method]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        payload = json.loads(request.content)
        self.requests.append(payload)

        handler = self.handlers.get(payload["method"])
        if handler is None:
            body: dict[str, Any] = {
                "jsonrpc": "2.0",
                "id": payload["id"],
                "error": {"code": -32601, "message": "Method not found"},
            }
        else:
            body = {"jsonrpc": "2.0", "id": payload["id"], "result": handler(payload["params"])}
        return httpx.Response(200, json=body)

    def transport(self) -> httpx.MockTransport:
        """An httpx transport routing requests to this node."""
        return httpx.MockTransport(self)
