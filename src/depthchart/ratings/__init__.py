"""Rating vector model and the OVR formula."""

from .ovr import GENERIC_FORMULA, OVR_FORMULAS, POSITION_FORMULA, compute_ovr, formula_for
from .vector import (
    ATTRIBUTE_KEYS,
    RATING_KEYS,
    RatingVector,
    apply_dev_cap,
    clamp_rating,
    empty_vector,
    is_rating_key,
    merge_known,
    validate_ratings,
)

__all__ = [
    "ATTRIBUTE_KEYS",
    "GENERIC_FORMULA",
    "OVR_FORMULAS",
    "POSITION_FORMULA",
    "RATING_KEYS",
    "RatingVector",
    "apply_dev_cap",
    "clamp_rating",
    "compute_ovr",
    "empty_vector",
    "formula_for",
    "is_rating_key",
    "merge_known",
    "validate_ratings",
]
