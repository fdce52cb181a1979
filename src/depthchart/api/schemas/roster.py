from __future__ import annotations

from typing import Dict, List

from pydantic import BaseModel


class RosterEntryResponse(BaseModel):
    player_id: str
    name: str
    ovr: int
    class_label: str
    band: str


class RosterRowResponse(BaseModel):
    pos: str
    players: List[RosterEntryResponse]


class RosterResponse(BaseModel):
    side: str
    season: int
    rows: List[RosterRowResponse]


class ArchetypeResponse(BaseModel):
    archetype_id: str
    position: str
    name: str
    subset_keys: List[str]
    base_template: Dict[str, int]
