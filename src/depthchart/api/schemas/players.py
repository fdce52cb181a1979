from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from depthchart.models import ClassYear, DevTrait, NewPlayer, Player, RatingSnapshot, sanitize_text


class PlayerCreateRequest(BaseModel):
    """Registration payload; give ``enrollment_year`` or a ``class_year`` to derive it."""

    name: str = Field(..., min_length=1)
    position: str = Field(..., min_length=1)
    season: int = Field(..., ge=1900, le=2200)
    enrollment_year: Optional[int] = Field(default=None, ge=1900, le=2200)
    class_year: Optional[ClassYear] = None
    redshirt: bool = False
    height_in: Optional[int] = Field(default=None, ge=55, le=90)
    weight_lb: Optional[int] = Field(default=None, ge=120, le=380)
    archetype_id: Optional[str] = None
    dev_trait: DevTrait = "Normal"
    dev_cap: Optional[int] = Field(default=None, ge=0, le=99)
    subset: Dict[str, float] = Field(default_factory=dict)
    ratings: Optional[Dict[str, float]] = None

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

    def to_new_player(self, enrollment_year: int) -> NewPlayer:
        return NewPlayer(
            name=self.name,
            position=self.position,
            height_in=self.height_in,
            weight_lb=self.weight_lb,
            enrollment_year=enrollment_year,
            redshirt=self.redshirt,
            archetype_id=self.archetype_id,
            dev_trait=self.dev_trait,
            dev_cap=self.dev_cap,
        )


class PlayerResponse(BaseModel):
    player_id: str
    name: str
    position: str
    height_in: Optional[int]
    weight_lb: Optional[int]
    enrollment_year: int
    redshirt: bool
    archetype_id: Optional[str]
    dev_trait: str
    dev_cap: Optional[int]
    source_type: str

    @classmethod
    def from_player(cls, player: Player) -> "PlayerResponse":
        return cls.model_validate(player.model_dump())


class SnapshotResponse(BaseModel):
    player_id: str
    season: int
    ovr: int
    predicted: bool
    ratings: Dict[str, int]

    @classmethod
    def from_snapshot(cls, snapshot: RatingSnapshot) -> "SnapshotResponse":
        return cls.model_validate(snapshot.model_dump())


class PlayerCreateResponse(BaseModel):
    player: PlayerResponse
    snapshot: Optional[SnapshotResponse] = None


class PlayerListResponse(BaseModel):
    players: List[PlayerResponse]
