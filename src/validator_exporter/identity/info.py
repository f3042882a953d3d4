"""
Off-chain validator identity metadata.

Validators publish a display name and a few descriptive fields through the
Config program. Each record is a config account whose first key is the
`Va1idator1nfo...` marker and whose second key is the validator identity that
signed it. The `configData` JSON carries the fields themselves.

Operators without RPC access to the Config program can supply the same data
as a YAML file keyed by identity:

    7Np41oeYqPefeNQEHSv1UDhYrehxin3NStELsSKCT4K2:
      name: Example Validator
      website: https://example.org
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Final

import yaml
from pydantic import ValidationError

from validator_exporter.types import CamelModel, Pubkey

logger = logging.getLogger(__name__)

CONFIG_PROGRAM_ID: Final = Pubkey("Config1111111111111111111111111111111111111")
"""Address of the Config program that stores validator info accounts."""

VALIDATOR_INFO_KEY: Final = Pubkey("Va1idator1nfo111111111111111111111111111111")
"""Marker key identifying validator info config accounts."""


class ValidatorInfo(CamelModel):
    """Descriptive metadata a validator published about itself."""

    model_config = CamelModel.model_config | {"frozen": True}

    name: str
    """Display name. The only field used as a metric label."""

    website: str | None = None
    """Project website."""

    details: str | None = None
    """Free-form description."""

    keybase_username: str | None = None
    """Keybase username used for the validator's avatar."""

    icon_url: str | None = None
    """URL of the validator's icon."""


def _parse_config_account(entry: Any) -> tuple[Pubkey, ValidatorInfo] | None:
    """
    Extract `(identity, info)` from one `getProgramAccounts` entry.

    Returns None for config accounts that are not validator info records.

    Raises:
        ValueError: If a validator info record is malformed.
    """
    parsed = entry["account"]["data"]["parsed"]
    if parsed.get("type") != "validatorInfo":
        return None

    keys = parsed["info"]["keys"]
    if len(keys) < 2 or keys[0]["pubkey"] != VALIDATOR_INFO_KEY:
        return None

    identity = Pubkey(keys[1]["pubkey"])
    info = ValidatorInfo.model_validate(parsed["info"]["configData"])
    return identity, info


@dataclass(frozen=True, slots=True)
class IdentityInfoMap:
    """
    Lookup from validator identity to published metadata.

    Missing entries are normal: most validators never publish any.
    """

    entries: Mapping[Pubkey, ValidatorInfo] = field(default_factory=dict)
    """Metadata keyed by identity pubkey."""

    def __post_init__(self) -> None:
        object.__setattr__(self, "entries", MappingProxyType(dict(self.entries)))

    def get(self, identity: Pubkey) -> ValidatorInfo | None:
        """Metadata for an identity, or None if it published nothing."""
        return self.entries.get(identity)

    def __contains__(self, identity: object) -> bool:
        return identity in self.entries

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[Pubkey]:
        return iter(self.entries)

    @classmethod
    def empty(cls) -> IdentityInfoMap:
        """A map without any metadata."""
        return cls()

    @classmethod
    def from_config_accounts(cls, accounts: Iterable[Any]) -> IdentityInfoMap:
        """
        Build the map from jsonParsed Config program accounts.

        Malformed records are skipped with a warning. When an identity signed
        several records, the first one wins.
        """
        entries: dict[Pubkey, ValidatorInfo] = {}
        for entry in accounts:
            try:
                parsed = _parse_config_account(entry)
            except (KeyError, TypeError, ValueError, ValidationError) as e:
                logger.warning(
                    "Skipping malformed validator info account %s: %s",
                    entry.get("pubkey") if isinstance(entry, dict) else entry,
                    e,
                )
                continue

            if parsed is None:
                continue

            identity, info = parsed
            if identity in entries:
                logger.debug("Duplicate validator info for %s ignored", identity)
                continue
            entries[identity] = info

        return cls(entries)

    @classmethod
    def from_yaml(cls, content: str) -> IdentityInfoMap:
        """
        Load metadata from a YAML string keyed by identity pubkey.

        Raises:
            yaml.YAMLError: If the content is not valid YAML.
            ValueError: If a key is not a pubkey or an entry fails validation.
        """
        data = yaml.safe_load(content) or {}
        if not isinstance(data, dict):
            raise ValueError(f"identity info must be a mapping, got {type(data).__name__}")

        return cls(
            {Pubkey(str(key)): ValidatorInfo.model_validate(value) for key, value in data.items()}
        )

    @classmethod
    def from_yaml_file(cls, path: Path | str) -> IdentityInfoMap:
        """
        Load metadata from a YAML file keyed by identity pubkey.

        Raises:
            FileNotFoundError: If the file does not exist.
            yaml.YAMLError: If the file is not valid YAML.
            ValueError: If a key is not a pubkey or an entry fails validation.
        """
        path = Path(path)
        with path.open(encoding="utf-8") as f:
            return cls.from_yaml(f.read())
