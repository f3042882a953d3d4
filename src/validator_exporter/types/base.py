"""Reusable pydantic base models for RPC payloads and configuration."""

from typing import Any, Self

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """
    A base model that maps snake_case fields onto camelCase keys.

    Solana's JSON-RPC responses use camelCase throughout
    (`votePubkey`, `activatedStake`, `epochCredits`), so a field named
    `activated_stake` reads the `activatedStake` key of a response.

    Unknown keys are ignored: the node adds fields between releases and
    the exporter only needs a stable subset.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        validate_default=True,
        arbitrary_types_allowed=True,
    )

    def copy(self: Self, **kwargs: Any) -> Self:
        """Create a copy of the model with the updated fields that are validated."""
        return self.__class__(**(self.model_dump(exclude_unset=True) | kwargs))


class StrictBaseModel(CamelModel):
    """A strict, immutable pydantic base model."""

    model_config = CamelModel.model_config | {
        "extra": "forbid",
        "frozen": True,
        "strict": True,
    }
