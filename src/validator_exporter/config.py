"""
Exporter configuration loader.

Loads the exporter configuration from a YAML file. Keys use UPPERCASE, the
same convention as the other files operators keep next to a validator:

    RPC_URL: http://127.0.0.1:8899
    VOTE_ACCOUNTS:
    - 3ZYfXHmgjzyUfQ9bZVRuT4ZSxNPzA6yiyxYfKSAHPpBj
    LISTEN_PORT: 9100
    REFRESH_INTERVAL: 10.0
    IDENTITY_INFO_SOURCE: rpc

Every key is optional. Command-line flags override values from the file.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

import yaml
from pydantic import Field, model_validator

from validator_exporter.types import Pubkey, StrictBaseModel

IdentityInfoSource = Literal["rpc", "file", "none"]
"""Where validator metadata comes from."""


class ExporterConfig(StrictBaseModel):
    """
    Runtime configuration of the exporter.

    Field names use UPPERCASE aliases in YAML.
    Pydantic aliases map them to snake_case Python attributes.
    """

    rpc_url: str = Field(default="http://127.0.0.1:8899", alias="RPC_URL")
    """JSON-RPC endpoint of the validator node."""

    vote_accounts: list[Pubkey] = Field(default_factory=list, alias="VOTE_ACCOUNTS")
    """Vote accounts to report on."""

    listen_host: str = Field(default="0.0.0.0", alias="LISTEN_HOST")
    """Address the HTTP server binds to."""

    listen_port: int = Field(default=9100, ge=1, le=65535, alias="LISTEN_PORT")
    """Port the HTTP server binds to."""

    refresh_interval: float = Field(default=10.0, gt=0, alias="REFRESH_INTERVAL")
    """Seconds between snapshot refreshes."""

    rpc_timeout: float = Field(default=10.0, gt=0, alias="RPC_TIMEOUT")
    """Per-request RPC timeout in seconds."""

    identity_info_source: IdentityInfoSource = Field(default="rpc", alias="IDENTITY_INFO_SOURCE")
    """
    Where validator metadata comes from.

    - rpc: Config program accounts on the node
    - file: `IDENTITY_INFO_FILE`
    - none: no metadata, no `validator_name` labels
    """

    identity_info_file: str | None = Field(default=None, alias="IDENTITY_INFO_FILE")
    """YAML file with validator metadata keyed by identity."""

    identity_info_interval: float = Field(default=3600.0, gt=0, alias="IDENTITY_INFO_INTERVAL")
    """Seconds between validator metadata reloads from RPC."""

    @model_validator(mode="after")
    def validate_identity_info_file(self) -> ExporterConfig:
        """A file source needs a file."""
        if self.identity_info_source == "file" and self.identity_info_file is None:
            raise ValueError("IDENTITY_INFO_SOURCE is 'file' but IDENTITY_INFO_FILE is not set")
        return self

    @model_validator(mode="after")
    def validate_unique_vote_accounts(self) -> ExporterConfig:
        """Each vote account may be listed once."""
        if len(set(self.vote_accounts)) != len(self.vote_accounts):
            raise ValueError("VOTE_ACCOUNTS contains duplicates")
        return self

    @classmethod
    def from_yaml_file(cls, path: Path | str) -> ExporterConfig:
        """
        Load configuration from a YAML file.

        Raises:
            FileNotFoundError: If the file does not exist.
            yaml.YAMLError: If the file is not valid YAML.
            pydantic.ValidationError: If the data fails validation.
        """
        path = Path(path)
        with path.open(encoding="utf-8") as f:
            data = yaml.safe_load(f)
        return cls.model_validate(data or {})

    @classmethod
    def from_yaml(cls, content: str) -> ExporterConfig:
        """
        Load configuration from a YAML string.

        Useful for testing or programmatic config generation.
        """
        data = yaml.safe_load(content)
        return cls.model_validate(data or {})
