"""Archetype templates and their linear mapping rules."""

from __future__ import annotations

from typing import Dict, List, Mapping

from pydantic import AliasChoices, BaseModel, Field, field_validator
from pydantic.config import ConfigDict


class MappingRule(BaseModel):
    """``intercept + sum(weight * subset[key])`` for one derived rating.

    Older catalogs spell the fields ``a0`` and ``w``; both spellings load.
    """

    intercept: float = Field(default=0.0, validation_alias=AliasChoices("intercept", "a0"))
    weights: Dict[str, float] = Field(default_factory=dict, validation_alias=AliasChoices("weights", "w"))

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    @field_validator("weights")
    @classmethod
    def _upper_keys(cls, value: Dict[str, float]) -> Dict[str, float]:
        return {str(key).strip().upper(): float(weight) for key, weight in value.items()}

    def evaluate(self, subset: Mapping[str, float]) -> float:
        total = self.intercept
        for key, weight in self.weights.items():
            value = subset.get(key)
            if value is not None:
                total += weight * value
        return total


class Archetype(BaseModel):
    archetype_id: str = Field(..., min_length=1)
    position: str
    name: str
    subset_keys: List[str] = Field(default_factory=list)
    base_template: Dict[str, int] = Field(default_factory=dict)
    mapping_config: Dict[str, MappingRule] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)

    @field_validator("position", "name")
    @classmethod
    def _strip(cls, value: str) -> str:
        return value.strip()

    @field_validator("subset_keys")
    @classmethod
    def _upper_subset(cls, value: List[str]) -> List[str]:
        return [key.strip().upper() for key in value if key and key.strip()]

    @field_validator("mapping_config")
    @classmethod
    def _upper_mapping(cls, value: Dict[str, MappingRule]) -> Dict[str, MappingRule]:
        return {str(key).strip().upper(): rule for key, rule in value.items()}
