"""Player registration and the per-position roster board."""

from .board import (
    DEF_POSITIONS,
    OFF_POSITIONS,
    RosterBoard,
    RosterEntry,
    RosterRow,
    build_roster,
    ovr_band,
    side_positions,
)
from .service import (
    RegisteredPlayer,
    class_label,
    derive_enrollment_year,
    register_player,
    update_player,
)

__all__ = [
    "DEF_POSITIONS",
    "OFF_POSITIONS",
    "RegisteredPlayer",
    "RosterBoard",
    "RosterEntry",
    "RosterRow",
    "build_roster",
    "class_label",
    "derive_enrollment_year",
    "ovr_band",
    "register_player",
    "side_positions",
    "update_player",
]
