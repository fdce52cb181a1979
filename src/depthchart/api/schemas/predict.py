from __future__ import annotations

from typing import Dict, Optional

from pydantic import BaseModel, Field

from depthchart.models import DevTrait


class PredictRequest(BaseModel):
    position: str = Field(..., min_length=1)
    archetype_id: str = Field(..., min_length=1)
    subset: Dict[str, float] = Field(default_factory=dict)
    dev_trait: DevTrait = "Normal"
    dev_cap: Optional[int] = Field(default=None, ge=0, le=99)


class PredictResponse(BaseModel):
    ratings: Dict[str, int]
    ovr: int
    archetype: str
    archetype_position: str
