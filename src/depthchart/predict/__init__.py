"""Rating prediction from partial inputs plus an archetype template."""

from .archetypes import ArchetypeSource, ResolvedArchetype, resolve_archetype
from .service import (
    FALLBACK_CANDIDATES,
    Prediction,
    fallback_value,
    fill_ratings,
    normalize_subset,
    predict_ratings,
)

__all__ = [
    "ArchetypeSource",
    "FALLBACK_CANDIDATES",
    "Prediction",
    "ResolvedArchetype",
    "fallback_value",
    "fill_ratings",
    "normalize_subset",
    "predict_ratings",
    "resolve_archetype",
]
