"""Per-season rating snapshots."""

from __future__ import annotations

from typing import Dict

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


class RatingSnapshot(BaseModel):
    """Authoritative ratings for one player in one season."""

    player_id: str
    season: int
    ratings: Dict[str, int]
    ovr: int = Field(..., ge=0, le=99)
    predicted: bool = False

    model_config = ConfigDict(frozen=True)
