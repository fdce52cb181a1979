from __future__ import annotations

from typing import List

from pydantic import BaseModel


class ProgressionFailureResponse(BaseModel):
    player_id: str
    kind: str
    message: str


class ProgressionResponse(BaseModel):
    start_season: int
    horizon: int
    created: int
    players_processed: int
    skipped_player_ids: List[str]
    failures: List[ProgressionFailureResponse]
