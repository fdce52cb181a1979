"""Player identity models shared by the store, services and API."""

from __future__ import annotations

import re
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator
from pydantic.config import ConfigDict


DevTrait = Literal["Normal", "Impact", "Star", "Elite"]
DEV_TRAITS: tuple[str, ...] = ("Normal", "Impact", "Star", "Elite")

ClassYear = Literal["Freshman", "Sophomore", "Junior", "Senior"]

SourceType = Literal["manual", "predicted", "import"]


def sanitize_text(value: Optional[str]) -> str:
    """Trim and collapse internal whitespace."""

    return re.sub(r"\s+", " ", (value or "").strip())


class PlayerFields(BaseModel):
    name: str = Field(..., min_length=1)
    position: str = Field(..., min_length=1)
    height_in: Optional[int] = Field(default=None, ge=55, le=90)
    weight_lb: Optional[int] = Field(default=None, ge=120, le=380)
    enrollment_year: int = Field(..., ge=1900, le=2200)
    redshirt: bool = False
    archetype_id: Optional[str] = None
    dev_trait: DevTrait = "Normal"
    dev_cap: Optional[int] = Field(default=None, ge=0, le=99)
    source_type: SourceType = "manual"

    @field_validator("name")
    @classmethod
    def _clean_name(cls, value: str) -> str:
        cleaned = sanitize_text(value)
        if not cleaned:
            raise ValueError("name must not be blank")
        return cleaned

    @field_validator("position")
    @classmethod
    def _clean_position(cls, value: str) -> str:
        cleaned = sanitize_text(value).upper()
        if not cleaned:
            raise ValueError("position must not be blank")
        return cleaned


class NewPlayer(PlayerFields):
    """Payload for registering a player; the store assigns the id."""


class Player(PlayerFields):
    """A stored player. Holds no ratings; those live on snapshots."""

    player_id: str = Field(..., min_length=1)

    model_config = ConfigDict(frozen=True)


class PlayerUpdate(BaseModel):
    """Administrative edits; identity corrections plus archetype/dev fields."""

    name: Optional[str] = None
    position: Optional[str] = None
    height_in: Optional[int] = Field(default=None, ge=55, le=90)
    weight_lb: Optional[int] = Field(default=None, ge=120, le=380)
    redshirt: Optional[bool] = None
    archetype_id: Optional[str] = None
    dev_trait: Optional[DevTrait] = None
    dev_cap: Optional[int] = Field(default=None, ge=0, le=99)

    model_config = ConfigDict(extra="forbid")

    @field_validator("name")
    @classmethod
    def _clean_name(cls, value: Optional[str]) -> Optional[str]:
        return sanitize_text(value) if value is not None else None

    @field_validator("position")
    @classmethod
    def _clean_position(cls, value: Optional[str]) -> Optional[str]:
        return sanitize_text(value).upper() if value is not None else None
