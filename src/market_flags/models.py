"""Feature flag data model."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class SplitPercentage(BaseModel):
    """Traffic split between the new and current implementation."""

    model_config = ConfigDict(frozen=True, strict=True)

    new: int
    current: int


class FeatureFlag(BaseModel):
    """Flag configuration for a single market."""

    model_config = ConfigDict(frozen=True, strict=True, populate_by_name=True)

    market: str
    new_feature_active: bool = Field(alias="newFeatureActive")
    ab_split_percentage: SplitPercentage | None = Field(
        default=None, alias="abSplitPercentage"
    )

    def to_json(self) -> bytes:
        """Encode with wire names. An absent split is omitted, not null."""
        return self.model_dump_json(by_alias=True, exclude_none=True).encode("utf-8")


class FlagSet(BaseModel):
    """Ordered flag records as stored in the dataset object.

    Duplicate markets are kept; lookups take the first one.
    """

    model_config = ConfigDict(frozen=True, strict=True, populate_by_name=True)

    feature_flags: list[FeatureFlag] = Field(default_factory=list, alias="featureFlags")

    @classmethod
    def from_json(cls, data: bytes | str) -> FlagSet:
        return cls.model_validate_json(data)


class RequestBody(BaseModel):
    """Inbound lookup request.

    The field name is matched case-insensitively (`Market`, `market`,
    `MARKET`, ...); an exact `Market` key takes precedence.
    """

    model_config = ConfigDict(frozen=True, strict=True)

    market: str = Field(default="", validation_alias="Market")

    @model_validator(mode="before")
    @classmethod
    def _fold_field_case(cls, data: Any) -> Any:
        if not isinstance(data, dict) or "Market" in data:
            return data
        for key, value in data.items():
            if isinstance(key, str) and key.lower() == "market":
                return {"Market": value}
        return data
