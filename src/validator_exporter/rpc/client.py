"""
Async JSON-RPC client for a Solana node.

Thin wrapper over httpx. Each method issues one JSON-RPC request and
validates the result into a typed model. All failures surface as `RpcError`
so callers have a single exception type to handle.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

import httpx
from pydantic import TypeAdapter, ValidationError
from typing_extensions import Self

from validator_exporter.ledger import CommitmentLevel
from validator_exporter.types import Lamports, Pubkey, RpcError, Slot

from .models import RpcAccount, RpcVersion, RpcVoteAccounts

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0
"""HTTP request timeout in seconds."""

MAX_MULTIPLE_ACCOUNTS = 100
"""Maximum number of keys the node accepts in one `getMultipleAccounts` call."""

_ACCOUNTS_ADAPTER = TypeAdapter(list[RpcAccount | None])


@dataclass(slots=True)
class RpcClient:
    """
    JSON-RPC client bound to one node endpoint.

    Use as an async context manager, or call `close()` when done.
    """

    url: str
    """JSON-RPC endpoint, e.g. http://127.0.0.1:8899."""

    timeout: float = DEFAULT_TIMEOUT
    """Per-request timeout in seconds."""

    transport: httpx.AsyncBaseTransport | None = None
    """Optional transport override, used to stub the node in tests."""

    _client: httpx.AsyncClient | None = field(default=None, init=False, repr=False)
    """Lazily created HTTP client."""

    _next_id: int = field(default=1, init=False, repr=False)
    """JSON-RPC request id counter."""

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def _http(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout, transport=self.transport)
        return self._client

    async def call(self, method: str, params: Sequence[Any] = ()) -> Any:
        """
        Issue one JSON-RPC request and return its `result`.

        Raises:
            RpcError: On transport errors, HTTP errors, JSON-RPC errors, or a
                response without a result.
        """
        request_id = self._next_id
        self._next_id += 1
        payload = {"jsonrpc": "2.0", "id": request_id, "method": method, "params": list(params)}

        try:
            response = await self._http().post(self.url, json=payload)
            response.raise_for_status()
            body = response.json()
        except httpx.RequestError as exc:
            raise RpcError(method, f"network error contacting {exc.request.url}: {exc}") from exc
        except httpx.HTTPStatusError as exc:
            raise RpcError(
                method, f"HTTP {exc.response.status_code}: {exc.response.text[:200]}"
            ) from exc
        except ValueError as exc:
            raise RpcError(method, f"invalid JSON response: {exc}") from exc

        if not isinstance(body, dict):
            raise RpcError(method, f"unexpected response type {type(body).__name__}")

        error = body.get("error")
        if error is not None:
            raise RpcError(
                method,
                str(error.get("message", error)) if isinstance(error, dict) else str(error),
                code=error.get("code") if isinstance(error, dict) else None,
                data=error.get("data") if isinstance(error, dict) else None,
            )

        if "result" not in body:
            raise RpcError(method, "response has neither result nor error")

        logger.debug("%s -> ok", method)
        return body["result"]

    async def _call_value(self, method: str, params: Sequence[Any]) -> Any:
        """Call a method whose result is wrapped in `{"context": ..., "value": ...}`."""
        result = await self.call(method, params)
        if not isinstance(result, dict) or "value" not in result:
            raise RpcError(method, "result is missing the context value")
        return result["value"]

    async def get_slot(self, commitment: CommitmentLevel) -> Slot:
        """Current slot at a commitment level."""
        result = await self.call("getSlot", [{"commitment": commitment.value}])
        return self._validate("getSlot", Slot, result)

    async def get_balance(self, pubkey: Pubkey, commitment: CommitmentLevel) -> Lamports:
        """Balance of an account at a commitment level."""
        value = await self._call_value("getBalance", [pubkey, {"commitment": commitment.value}])
        return self._validate("getBalance", Lamports, value)

    async def get_vote_accounts(self, commitment: CommitmentLevel) -> RpcVoteAccounts:
        """Current and delinquent vote accounts at a commitment level."""
        result = await self.call(
            "getVoteAccounts",
            [{"commitment": commitment.value, "keepUnstakedDelinquents": True}],
        )
        try:
            return RpcVoteAccounts.model_validate(result)
        except ValidationError as exc:
            raise RpcError("getVoteAccounts", f"malformed result: {exc}") from exc

    async def get_multiple_accounts(
        self, pubkeys: Sequence[Pubkey], commitment: CommitmentLevel
    ) -> list[RpcAccount | None]:
        """
        Fetch accounts with jsonParsed encoding, in the order requested.

        Missing accounts are None. Large requests are split into batches the
        node accepts.
        """
        accounts: list[RpcAccount | None] = []
        for start in range(0, len(pubkeys), MAX_MULTIPLE_ACCOUNTS):
            batch = list(pubkeys[start : start + MAX_MULTIPLE_ACCOUNTS])
            value = await self._call_value(
                "getMultipleAccounts",
                [batch, {"commitment": commitment.value, "encoding": "jsonParsed"}],
            )
            try:
                decoded = _ACCOUNTS_ADAPTER.validate_python(value)
            except ValidationError as exc:
                raise RpcError("getMultipleAccounts", f"malformed result: {exc}") from exc
            if len(decoded) != len(batch):
                raise RpcError(
                    "getMultipleAccounts",
                    f"requested {len(batch)} accounts, got {len(decoded)}",
                )
            accounts.extend(decoded)
        return accounts

    async def get_identity(self) -> Pubkey:
        """Identity pubkey of the node serving the RPC endpoint."""
        result = await self.call("getIdentity")
        if not isinstance(result, dict) or "identity" not in result:
            raise RpcError("getIdentity", "result has no identity")
        return self._validate("getIdentity", Pubkey, result["identity"])

    async def get_version(self) -> RpcVersion:
        """Software version of the node serving the RPC endpoint."""
        result = await self.call("getVersion")
        try:
            return RpcVersion.model_validate(result)
        except ValidationError as exc:
            raise RpcError("getVersion", f"malformed result: {exc}") from exc

    async def get_program_accounts(self, program_id: Pubkey) -> list[Any]:
        """All accounts owned by a program, jsonParsed, as raw dicts."""
        result = await self.call(
            "getProgramAccounts",
            [program_id, {"encoding": "jsonParsed"}],
        )
        if not isinstance(result, list):
            raise RpcError("getProgramAccounts", "result is not a list")
        return result

    @staticmethod
    def _validate(method: str, type_: Any, value: Any) -> Any:
        """Coerce a scalar result, turning validation failures into `RpcError`."""
        try:
            return TypeAdapter(type_).validate_python(value)
        except ValidationError as exc:
            raise RpcError(method, f"malformed result: {exc}") from exc
