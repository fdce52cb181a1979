"""Depth chart resolution against formations."""

from .export import EXPORT_HEADERS, export_depth_to_csv
from .positions import (
    FAMILY_OF,
    PLAYER_POSITION_SYNONYMS,
    SLOT_GROUP_SYNONYMS,
    family_of,
    is_known_slot_label,
    normalize_player_position,
    normalize_slot_group,
)
from .resolver import (
    VIEWS,
    Contributor,
    DepthChart,
    DepthPlayer,
    FormationMeta,
    SlotResult,
    abbreviate_name,
    resolve_depth,
    weighted_composite,
)

__all__ = [
    "Contributor",
    "DepthChart",
    "DepthPlayer",
    "EXPORT_HEADERS",
    "FAMILY_OF",
    "FormationMeta",
    "PLAYER_POSITION_SYNONYMS",
    "SLOT_GROUP_SYNONYMS",
    "SlotResult",
    "VIEWS",
    "abbreviate_name",
    "export_depth_to_csv",
    "family_of",
    "is_known_slot_label",
    "normalize_player_position",
    "normalize_slot_group",
    "resolve_depth",
    "weighted_composite",
]
