"""Fill a full rating vector from sparse inputs and an archetype."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Mapping, Optional, Tuple

from depthchart.errors import InvalidInput
from depthchart.models import DEV_TRAITS
from depthchart.ratings import (
    ATTRIBUTE_KEYS,
    RatingVector,
    apply_dev_cap,
    clamp_rating,
    compute_ovr,
    empty_vector,
    merge_known,
)

from .archetypes import ArchetypeSource, ResolvedArchetype, resolve_archetype


logger = logging.getLogger(__name__)

NO_SIGNAL_DEFAULT = 50

# Ordered substitute inputs for ratings without a mapping rule. A rating not
# listed here copies the same-named input when one was provided.
FALLBACK_CANDIDATES: Dict[str, Tuple[str, ...]] = {
    "ACC": ("SPD", "AGI"),
    "AGI": ("COD", "ACC"),
    "JKM": ("AGI", "COD"),
    "SPC": ("CTH", "JMP"),
    "SRR": ("CTH", "RLS", "SPD"),
    "MRR": ("CTH", "RLS", "SPD"),
    "DRR": ("CTH", "RLS", "SPD"),
    "PBK": ("STR", "AWR"),
    "PBP": ("STR", "AWR"),
    "PBF": ("STR", "AWR"),
    "RBK": ("STR", "AWR"),
    "RBP": ("STR", "AWR"),
    "RBF": ("STR", "AWR"),
    "MCV": ("SPD", "ACC", "AWR"),
    "ZCV": ("SPD", "ACC", "AWR"),
    "PRS": ("SPD", "ACC", "AWR"),
    "FMV": ("STR", "BSH"),
    "PMV": ("STR", "BSH"),
    "TAK": ("POW", "STR", "AWR"),
}


@dataclass(frozen=True)
class Prediction:
    ratings: RatingVector
    ovr: int
    archetype_name: str
    archetype_position: str


def normalize_subset(subset: Optional[Mapping[str, float]]) -> Dict[str, int]:
    """Uppercase keys and clamp values; non-numeric values are rejected."""

    cleaned: Dict[str, int] = {}
    for key, value in (subset or {}).items():
        token = str(key).strip().upper()
        if not token:
            continue
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise InvalidInput(f"Subset input {key!r} must be numeric")
        cleaned[token] = clamp_rating(value)
    return cleaned


def fallback_value(key: str, subset: Mapping[str, int]) -> int:
    """Copy the first available substitute, else the subset mean, else a neutral default."""

    for candidate in FALLBACK_CANDIDATES.get(key, (key,)):
        if candidate in subset:
            return subset[candidate]
    if subset:
        return clamp_rating(sum(subset.values()) / len(subset))
    return NO_SIGNAL_DEFAULT


def fill_ratings(
    archetype: ResolvedArchetype,
    subset: Mapping[str, int],
    *,
    dev_cap: Optional[int] = None,
) -> RatingVector:
    ratings = merge_known(empty_vector(), archetype.base_template)
    for key in ATTRIBUTE_KEYS:
        if ratings[key] > 0:
            continue
        rule = archetype.mapping_config.get(key)
        if rule is not None:
            ratings[key] = clamp_rating(rule.evaluate(subset))
        else:
            ratings[key] = fallback_value(key, subset)

    if dev_cap is not None:
        for key in ATTRIBUTE_KEYS:
            ratings[key] = clamp_rating(apply_dev_cap(ratings[key], dev_cap))
    return ratings


def predict_ratings(
    store: ArchetypeSource,
    *,
    position: str,
    archetype_id: str,
    subset: Optional[Mapping[str, float]] = None,
    dev_trait: str = "Normal",
    dev_cap: Optional[int] = None,
) -> Prediction:
    """Predict every rating and the OVR for a player.

    ``dev_trait`` is validated but does not change a single-season prediction;
    it only affects growth in the progression engine.
    """

    if dev_trait not in DEV_TRAITS:
        raise InvalidInput(f"Unknown dev trait {dev_trait!r}")
    if dev_cap is not None and not 0 <= dev_cap <= 99:
        raise InvalidInput(f"dev_cap {dev_cap} is outside 0-99")
    if not position or not position.strip():
        raise InvalidInput("position is required")

    archetype = resolve_archetype(store, archetype_id)
    cleaned = normalize_subset(subset)
    ratings = fill_ratings(archetype, cleaned, dev_cap=dev_cap)
    ratings["OVR"] = compute_ovr(position, ratings)
    logger.debug(
        "Predicted %s (%s) from %d inputs: OVR %d",
        position,
        archetype.name,
        len(cleaned),
        ratings["OVR"],
    )
    return Prediction(
        ratings=ratings,
        ovr=ratings["OVR"],
        archetype_name=archetype.name,
        archetype_position=archetype.position,
    )
