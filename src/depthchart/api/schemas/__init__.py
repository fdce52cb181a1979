"""Pydantic models for API I/O."""

from .depth import (
    ContributorResponse,
    DepthPlayerResponse,
    DepthResponse,
    DepthSlotResponse,
    FormationMetaResponse,
    FormationResponse,
    FormationSlotResponse,
)
from .players import (
    PlayerCreateRequest,
    PlayerCreateResponse,
    PlayerListResponse,
    PlayerResponse,
    SnapshotResponse,
)
from .predict import PredictRequest, PredictResponse
from .progression import ProgressionFailureResponse, ProgressionResponse
from .roster import ArchetypeResponse, RosterEntryResponse, RosterResponse, RosterRowResponse

__all__ = [
    "ArchetypeResponse",
    "ContributorResponse",
    "DepthPlayerResponse",
    "DepthResponse",
    "DepthSlotResponse",
    "FormationMetaResponse",
    "FormationResponse",
    "FormationSlotResponse",
    "PlayerCreateRequest",
    "PlayerCreateResponse",
    "PlayerListResponse",
    "PlayerResponse",
    "PredictRequest",
    "PredictResponse",
    "ProgressionFailureResponse",
    "ProgressionResponse",
    "RosterEntryResponse",
    "RosterResponse",
    "RosterRowResponse",
    "SnapshotResponse",
]
