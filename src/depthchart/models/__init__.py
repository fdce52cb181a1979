"""Canonical models shared across the store, services and API layers."""

from .archetype import Archetype, MappingRule
from .formation import Formation, FormationSlot, Side
from .player import DEV_TRAITS, ClassYear, DevTrait, NewPlayer, Player, PlayerUpdate, sanitize_text
from .snapshot import RatingSnapshot

__all__ = [
    "Archetype",
    "ClassYear",
    "DEV_TRAITS",
    "DevTrait",
    "Formation",
    "FormationSlot",
    "MappingRule",
    "NewPlayer",
    "Player",
    "PlayerUpdate",
    "RatingSnapshot",
    "Side",
    "sanitize_text",
]
