"""Position-keyed overall (OVR) formula shared by prediction and progression."""

from __future__ import annotations

from typing import Dict, Mapping, Tuple, Union

from .vector import clamp_rating


# A term is a single rating key or a tuple of keys whose mean is used.
Term = Union[str, Tuple[str, ...]]

OVR_FORMULAS: Dict[str, Tuple[Tuple[Term, float], ...]] = {
    "QB": (
        ("THP", 0.25), ("SAC", 0.15), ("MAC", 0.15), ("DAC", 0.10),
        ("TUP", 0.10), ("AWR", 0.10), ("RUN", 0.10), ("BSK", 0.05),
    ),
    "WR": (
        ("SPD", 0.20), ("ACC", 0.15), ("CTH", 0.15), ("SPC", 0.10), (("SRR", "MRR", "DRR"), 0.10),
        ("RLS", 0.10), ("AGI", 0.05), ("JMP", 0.05), ("AWR", 0.10),
    ),
    "HB": (
        ("SPD", 0.18), ("ACC", 0.16), ("AGI", 0.12), ("BCV", 0.10), ("BTK", 0.10),
        ("CAR", 0.08), ("JKM", 0.06), ("SPM", 0.06), ("SFA", 0.04), ("AWR", 0.10),
    ),
    "TE": (
        ("SPD", 0.16), ("CTH", 0.14), ("SPC", 0.10), (("SRR", "MRR"), 0.10), ("RBK", 0.10),
        ("PBK", 0.10), ("STR", 0.08), ("RLS", 0.07), ("JMP", 0.05), ("AWR", 0.10),
    ),
    "OL": (
        ("RBK", 0.25), ("PBK", 0.25), ("RBP", 0.10), ("RBF", 0.10),
        ("PBP", 0.10), ("PBF", 0.10), ("STR", 0.10),
    ),
    "DL": (
        ("PMV", 0.22), ("FMV", 0.18), ("BSH", 0.15), ("STR", 0.12),
        ("PUR", 0.10), ("PRC", 0.10), ("TAK", 0.13),
    ),
    "LB": (
        ("TAK", 0.18), ("PRC", 0.14), ("BSH", 0.14), ("PUR", 0.12), ("ZCV", 0.10),
        ("MCV", 0.08), ("SPD", 0.08), ("ACC", 0.08), ("STR", 0.08),
    ),
    "CB": (
        ("MCV", 0.22), ("ZCV", 0.18), ("SPD", 0.14), ("ACC", 0.10),
        ("PRS", 0.10), ("AGI", 0.08), ("JMP", 0.08), ("AWR", 0.10),
    ),
    "S": (
        ("ZCV", 0.20), ("MCV", 0.16), ("TAK", 0.14), ("PRC", 0.10),
        ("PUR", 0.10), ("SPD", 0.10), ("ACC", 0.08), ("AWR", 0.12),
    ),
    "K": (("KPW", 0.60), ("KAC", 0.40)),
    "P": (("KPW", 0.70), ("KAC", 0.30)),
}

# Unrecognized positions fall back to an even split of general athleticism.
GENERIC_FORMULA: Tuple[Tuple[Term, float], ...] = tuple(
    (key, 1.0 / 6) for key in ("SPD", "ACC", "AWR", "STR", "AGI", "PRC")
)

POSITION_FORMULA: Dict[str, str] = {
    "QB": "QB",
    "WR": "WR",
    "HB": "HB", "RB": "HB", "TB": "HB",
    "TE": "TE",
    "LT": "OL", "LG": "OL", "C": "OL", "RG": "OL", "RT": "OL", "OL": "OL",
    "LEDG": "DL", "REDG": "DL", "DT": "DL", "LE": "DL", "RE": "DL", "EDGE": "DL", "NT": "DL", "IDL": "DL",
    "SAM": "LB", "MIKE": "LB", "WILL": "LB", "MLB": "LB", "LOLB": "LB", "ROLB": "LB", "OLB": "LB", "ILB": "LB", "LB": "LB",
    "CB": "CB", "NB": "CB",
    "FS": "S", "SS": "S", "S": "S",
    "K": "K",
    "P": "P",
}


def formula_for(position: str) -> Tuple[Tuple[Term, float], ...]:
    key = POSITION_FORMULA.get((position or "").strip().upper())
    if key is None:
        return GENERIC_FORMULA
    return OVR_FORMULAS[key]


def _term_value(term: Term, ratings: Mapping[str, int]) -> float:
    if isinstance(term, tuple):
        return sum(ratings.get(key, 0) for key in term) / len(term)
    return ratings.get(term, 0)


def compute_ovr(position: str, ratings: Mapping[str, int]) -> int:
    """Convex combination of position-relevant ratings, rounded into [0, 99]."""

    total = sum(weight * _term_value(term, ratings) for term, weight in formula_for(position))
    return clamp_rating(total)
