"""
Ed25519 public keys as used for Solana account addresses.

Addresses travel as Base58 strings in RPC payloads, configuration files and
metric labels. The exporter never needs the raw key bytes beyond validating
them, so `Pubkey` is a `str` subclass that only accepts well-formed addresses.
"""

from __future__ import annotations

from typing import Any, ClassVar, Final

from pydantic import GetCoreSchemaHandler
from pydantic_core import core_schema
from typing_extensions import Self

PUBKEY_LENGTH: Final[int] = 32
"""Length of an ed25519 public key in bytes."""


class Base58:
    """
    Base58 encoding with the Bitcoin alphabet.

    Solana uses the same alphabet as Bitcoin and libp2p.
    """

    ALPHABET: ClassVar[str] = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"
    """Base58 alphabet without 0, O, I and l."""

    @classmethod
    def encode(cls, data: bytes) -> str:
        """
        Encode bytes as Base58 string.

        Leading zero bytes become leading '1' characters.
        """
        leading_zeros = len(data) - len(data.lstrip(b"\x00"))

        num = int.from_bytes(data, "big")
        result: list[str] = []
        while num > 0:
            num, remainder = divmod(num, 58)
            result.append(cls.ALPHABET[remainder])

        result.extend([cls.ALPHABET[0]] * leading_zeros)
        return "".join(reversed(result))

    @classmethod
    def decode(cls, s: str) -> bytes:
        """
        Decode Base58 string to bytes.

        Leading '1' characters become leading zero bytes.

        Raises:
            ValueError: If string contains invalid characters.
        """
        leading_ones = len(s) - len(s.lstrip(cls.ALPHABET[0]))

        num = 0
        for char in s:
            index = cls.ALPHABET.find(char)
            if index < 0:
                raise ValueError(f"Invalid Base58 character: {char!r}")
            num = num * 58 + index

        result = b"" if num == 0 else num.to_bytes((num.bit_length() + 7) // 8, "big")
        return b"\x00" * leading_ones + result


class Pubkey(str):
    """A Base58-encoded 32-byte public key."""

    def __new__(cls, value: str) -> Self:
        """
        Validate and wrap a Base58 address.

        Raises:
            ValueError: If the string is not Base58 or does not decode to 32 bytes.
        """
        if not isinstance(value, str):
            raise TypeError(f"Pubkey expects a str, got {type(value).__name__}")
        raw = Base58.decode(value)
        if len(raw) != PUBKEY_LENGTH:
            raise ValueError(
                f"Pubkey must decode to {PUBKEY_LENGTH} bytes, got {len(raw)}: {value!r}"
            )
        return super().__new__(cls, value)

    @classmethod
    def from_bytes(cls, data: bytes) -> Pubkey:
        """Build a pubkey from its 32 raw bytes."""
        if len(data) != PUBKEY_LENGTH:
            raise ValueError(f"Pubkey must be {PUBKEY_LENGTH} bytes, got {len(data)}")
        return cls(Base58.encode(data))

    @classmethod
    def default(cls) -> Pubkey:
        """The all-zero key, `11111111111111111111111111111111`."""
        return cls.from_bytes(b"\x00" * PUBKEY_LENGTH)

    def to_bytes(self) -> bytes:
        """Return the raw key bytes."""
        return Base58.decode(self)

    def __repr__(self) -> str:
        return f"Pubkey({str.__str__(self)!r})"

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        """Validate Base58 strings into `Pubkey` instances."""

        def validate(value: Any) -> Pubkey:
            try:
                return cls(value)
            except TypeError as e:
                raise ValueError(str(e)) from e

        return core_schema.no_info_plain_validator_function(
            validate,
            serialization=core_schema.plain_serializer_function_ser_schema(str),
        )
