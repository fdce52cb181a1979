"""Position vocabularies: slot labels and player positions to canonical groups and families."""

from __future__ import annotations

import re
from typing import Mapping


UNKNOWN_GROUP = "UNK"

# Slot labels as they appear on formation slots.
SLOT_GROUP_SYNONYMS: Mapping[str, str] = {
    "QB": "QB",
    "RB": "RB",
    "HB": "RB",
    "TB": "RB",
    "FB": "FB",
    "WR": "WR",
    "TE": "TE",
    "LT": "LT",
    "LG": "LG",
    "C": "C",
    "RG": "RG",
    "RT": "RT",
    "EDGE": "EDGE",
    "LEDG": "LE",
    "LE": "LE",
    "REDG": "RE",
    "RE": "RE",
    "DT": "DT",
    "NT": "DT",
    "IDL": "DT",
    "SAM": "LOLB",
    "LOLB": "LOLB",
    "OLB": "LOLB",
    "WILL": "ROLB",
    "ROLB": "ROLB",
    "MIKE": "MLB",
    "MLB": "MLB",
    "ILB": "MLB",
    "LB": "MLB",
    "CB": "CB",
    "NB": "CB",
    "NICKEL": "CB",
    "STAR": "CB",
    "FS": "FS",
    "SS": "SS",
    "S": "FS",
    "K": "K",
    "P": "P",
}

# Labels that start with one of these collapse to it (WRX, WRZ, WRSLOT -> WR).
SLOT_GROUP_PREFIXES: tuple[str, ...] = ("WR",)

# Stored player positions. HB/TB fold into RB here as well.
PLAYER_POSITION_SYNONYMS: Mapping[str, str] = {
    "QB": "QB",
    "RB": "RB",
    "HB": "RB",
    "TB": "RB",
    "FB": "FB",
    "WR": "WR",
    "TE": "TE",
    "LT": "LT",
    "LG": "LG",
    "C": "C",
    "RG": "RG",
    "RT": "RT",
    "EDGE": "EDGE",
    "LEDG": "LE",
    "LE": "LE",
    "REDG": "RE",
    "RE": "RE",
    "DT": "DT",
    "OLB": "LOLB",
    "SAM": "LOLB",
    "LOLB": "LOLB",
    "WILL": "ROLB",
    "ROLB": "ROLB",
    "MIKE": "MLB",
    "ILB": "MLB",
    "LB": "MLB",
    "MLB": "MLB",
    "CB": "CB",
    "NB": "CB",
    "NICKEL": "CB",
    "STAR": "CB",
    "FS": "FS",
    "SS": "SS",
    "S": "FS",
    "K": "K",
    "P": "P",
}

FAMILY_OF: Mapping[str, str] = {
    "QB": "QB",
    "RB": "BACK",
    "FB": "BACK",
    "WR": "WR",
    "TE": "TE",
    "LT": "OL",
    "LG": "OL",
    "C": "OL",
    "RG": "OL",
    "RT": "OL",
    "LE": "EDGE",
    "RE": "EDGE",
    "EDGE": "EDGE",
    "DT": "IDL",
    "MLB": "LB",
    "LOLB": "LB",
    "ROLB": "LB",
    "CB": "CB",
    "FS": "S",
    "SS": "S",
    "K": "K",
    "P": "P",
}

_NON_LETTERS = re.compile(r"[^A-Z]")


def _token(raw: str | None) -> str:
    return _NON_LETTERS.sub("", str(raw or "").upper())


def normalize_slot_group(raw: str | None) -> str:
    """Canonical group for a slot label ("WR3" -> "WR", "SAM" -> "LOLB")."""

    token = _token(raw)
    if not token:
        return UNKNOWN_GROUP
    if token in SLOT_GROUP_SYNONYMS:
        return SLOT_GROUP_SYNONYMS[token]
    for prefix in SLOT_GROUP_PREFIXES:
        if token.startswith(prefix):
            return prefix
    return token


def normalize_player_position(raw: str | None) -> str:
    token = _token(raw)
    if not token:
        return UNKNOWN_GROUP
    return PLAYER_POSITION_SYNONYMS.get(token, token)


def family_of(group: str) -> str:
    return FAMILY_OF.get(group, UNKNOWN_GROUP)


def is_known_slot_label(raw: str | None) -> bool:
    """True when a label maps onto a group with a family, used for column detection."""

    return family_of(normalize_slot_group(raw)) != UNKNOWN_GROUP


__all__ = [
    "FAMILY_OF",
    "PLAYER_POSITION_SYNONYMS",
    "SLOT_GROUP_PREFIXES",
    "SLOT_GROUP_SYNONYMS",
    "UNKNOWN_GROUP",
    "family_of",
    "is_known_slot_label",
    "normalize_player_position",
    "normalize_slot_group",
]
