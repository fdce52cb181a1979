"""The closed set of rating attributes and helpers over rating vectors."""

from __future__ import annotations

import math
from typing import Dict, Mapping, Tuple

from depthchart.errors import InvalidInput


RATING_KEYS: Tuple[str, ...] = (
    "OVR", "SPD", "ACC", "AGI", "COD", "STR", "AWR", "CAR", "BCV", "BTK", "TRK", "SFA", "SPM", "JKM",
    "CTH", "CIT", "SPC", "SRR", "MRR", "DRR", "RLS", "JMP",
    "THP", "SAC", "MAC", "DAC", "RUN", "TUP", "BSK", "PAC",
    "PBK", "PBP", "PBF", "RBK", "RBP", "RBF", "LBK", "ILB",
    "PRC", "TAK", "POW", "BSH", "FMV", "PMV", "PUR", "MCV", "ZCV", "PRS",
    "RET", "KPW", "KAC", "STA", "TGH", "INJ", "LSP",
)

# Every key except the derived overall.
ATTRIBUTE_KEYS: Tuple[str, ...] = tuple(key for key in RATING_KEYS if key != "OVR")

_KEY_SET = frozenset(RATING_KEYS)

RatingVector = Dict[str, int]


def clamp_rating(value: float) -> int:
    """Round half up and clamp into [0, 99]."""

    return max(0, min(99, math.floor(value + 0.5)))


def empty_vector() -> RatingVector:
    return {key: 0 for key in RATING_KEYS}


def is_rating_key(key: str) -> bool:
    return key in _KEY_SET


def merge_known(base: RatingVector, values: Mapping[str, float] | None) -> RatingVector:
    """Overlay known keys from ``values`` onto ``base``; unknown keys are ignored."""

    merged = dict(base)
    for key, value in (values or {}).items():
        token = str(key).strip().upper()
        if token in _KEY_SET and isinstance(value, (int, float)) and not isinstance(value, bool):
            merged[token] = clamp_rating(value)
    return merged


def validate_ratings(values: Mapping[str, float]) -> RatingVector:
    """Strict variant used for manual entry: unknown keys or out-of-range values are rejected."""

    vector = empty_vector()
    unknown = sorted(str(key) for key in values if str(key).strip().upper() not in _KEY_SET)
    if unknown:
        raise InvalidInput(f"Unknown rating keys: {', '.join(unknown)}")
    for key, value in values.items():
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise InvalidInput(f"Rating {key} must be numeric")
        if value < 0 or value > 99:
            raise InvalidInput(f"Rating {key}={value} is outside 0-99")
        vector[str(key).strip().upper()] = clamp_rating(value)
    return vector


def apply_dev_cap(value: float, dev_cap: int | None) -> float:
    """Soft ceiling: anything above the cap keeps half of the overshoot."""

    if dev_cap is None or value <= dev_cap:
        return value
    return dev_cap + 0.5 * (value - dev_cap)
