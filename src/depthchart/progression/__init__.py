"""Season-by-season rating progression."""

from .service import (
    AGE_CURVE,
    BASE_GROWTH,
    DEV_MULTIPLIERS,
    PlayerFailure,
    ProgressionReport,
    age_multiplier,
    apply_age_nudge,
    ensure_player_snapshots,
    ensure_snapshots,
    grow_ratings,
    project_next_season,
    years_since_enrollment,
)

__all__ = [
    "AGE_CURVE",
    "BASE_GROWTH",
    "DEV_MULTIPLIERS",
    "PlayerFailure",
    "ProgressionReport",
    "age_multiplier",
    "apply_age_nudge",
    "ensure_player_snapshots",
    "ensure_snapshots",
    "grow_ratings",
    "project_next_season",
    "years_since_enrollment",
]
