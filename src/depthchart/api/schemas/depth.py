from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class DepthPlayerResponse(BaseModel):
    player_id: str
    name: str
    abbreviation: str
    ovr: int
    dev_trait: str


class ContributorResponse(BaseModel):
    player_id: str
    name: str
    abbreviation: str
    ovr: int
    weight: float = Field(ge=0.0)


class DepthSlotResponse(BaseModel):
    slot_key: str
    pos: str
    group: str
    family: str
    type: str
    x: float
    y: float
    player: Optional[DepthPlayerResponse] = None
    contributors: List[ContributorResponse] = Field(default_factory=list)
    composite_ovr: Optional[int] = None


class FormationMetaResponse(BaseModel):
    formation_id: str
    side: str
    name: str
    variant: Optional[str]


class DepthResponse(BaseModel):
    formation: Optional[FormationMetaResponse]
    season: Optional[int]
    view: str
    slots: List[DepthSlotResponse]


class FormationSlotResponse(BaseModel):
    slot_id: str
    slot_key: str
    position_hints: List[str]
    x: float
    y: float


class FormationResponse(BaseModel):
    formation_id: str
    side: str
    name: str
    variant: Optional[str]
    key: str
    slots: List[FormationSlotResponse]
