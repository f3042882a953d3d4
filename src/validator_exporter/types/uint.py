"""
Unsigned 64-bit quantities read from the ledger.

Slots, epochs, credits and lamport amounts are all u64 on chain. Each gets its
own `int` subclass so a slot is never passed where a balance is expected.
"""

from __future__ import annotations

from typing import Any, ClassVar, SupportsInt

from pydantic import GetCoreSchemaHandler
from pydantic_core import core_schema
from typing_extensions import Self

LAMPORTS_PER_SOL = 1_000_000_000
"""Number of lamports in one SOL."""


class BaseUint(int):
    """An `int` restricted to [0, 2**BITS)."""

    BITS: ClassVar[int]
    """Width of the on-chain integer."""

    def __new__(cls, value: SupportsInt | str) -> Self:
        """
        Build a checked value.

        Decimal strings are accepted: the RPC encodes epoch credits and
        other u64 amounts as strings so JSON parsers do not round them.

        Raises:
            OverflowError: If `value` does not fit in BITS unsigned bits.
        """
        int_value = int(value)
        if not 0 <= int_value < 2**cls.BITS:
            raise OverflowError(f"{int_value} is out of range for {cls.__name__}")
        return super().__new__(cls, int_value)

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        """Validate through the constructor and serialize as a plain int."""

        def validate(value: Any) -> BaseUint:
            if isinstance(value, bool):
                raise ValueError(f"{cls.__name__} does not accept booleans")
            try:
                return cls(value)
            except (OverflowError, TypeError, ValueError) as e:
                raise ValueError(str(e)) from e

        return core_schema.no_info_plain_validator_function(
            validate,
            serialization=core_schema.plain_serializer_function_ser_schema(int),
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}({int(self)})"

    def __str__(self) -> str:
        return str(int(self))


class Uint64(BaseUint):
    """A u64 as stored on chain."""

    BITS = 64


class Slot(Uint64):
    """A ledger slot number."""


class Epoch(Uint64):
    """An epoch number."""


class Lamports(Uint64):
    """An amount of the native token, denominated in lamports."""

    def to_sol(self) -> float:
        """
        Convert to whole SOL for display.

        Amounts above 2**53 lamports lose precision in the float result.
        """
        return int(self) / LAMPORTS_PER_SOL
