"""Built-in formation templates used to seed the store."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Mapping, Optional, Tuple


@dataclass(frozen=True)
class SlotTemplate:
    slot_key: str
    position: str
    x: float
    y: float


@dataclass(frozen=True)
class FormationTemplate:
    side: str
    name: str
    variant: Optional[str]
    slots: Tuple[SlotTemplate, ...]

    @property
    def key(self) -> str:
        return f"{self.name}:{self.variant}" if self.variant else self.name


def _slots(*rows: Tuple[str, str, float, float]) -> Tuple[SlotTemplate, ...]:
    return tuple(SlotTemplate(slot_key, position, x, y) for slot_key, position, x, y in rows)


_OFFENSIVE_LINE = (
    ("LT", "LT", 0.15, 0.50),
    ("LG", "LG", 0.20, 0.50),
    ("C", "C", 0.25, 0.50),
    ("RG", "RG", 0.30, 0.50),
    ("RT", "RT", 0.35, 0.50),
)


_FORMATIONS: Dict[Tuple[str, str, Optional[str]], FormationTemplate] = {
    ("OFF", "SHOTGUN", "5WR"): FormationTemplate(
        side="OFF",
        name="SHOTGUN",
        variant="5WR",
        slots=_slots(
            *_OFFENSIVE_LINE,
            ("QB", "QB", 0.25, 0.65),
            ("WR1", "WR", 0.05, 0.35),
            ("WR2", "WR", 0.15, 0.25),
            ("WR3", "WR", 0.35, 0.25),
            ("WR4", "WR", 0.20, 0.20),
            ("WR5", "WR", 0.30, 0.20),
        ),
    ),
    ("OFF", "SINGLEBACK", "ACE"): FormationTemplate(
        side="OFF",
        name="SINGLEBACK",
        variant="ACE",
        slots=_slots(
            *_OFFENSIVE_LINE,
            ("QB", "QB", 0.25, 0.58),
            ("HB", "HB", 0.25, 0.72),
            ("TE1", "TE", 0.10, 0.50),
            ("TE2", "TE", 0.40, 0.50),
            ("WR1", "WR", 0.03, 0.45),
            ("WR2", "WR", 0.47, 0.45),
        ),
    ),
    ("OFF", "I-FORM", "PRO"): FormationTemplate(
        side="OFF",
        name="I-FORM",
        variant="PRO",
        slots=_slots(
            *_OFFENSIVE_LINE,
            ("QB", "QB", 0.25, 0.56),
            ("FB", "FB", 0.25, 0.66),
            ("HB", "HB", 0.25, 0.76),
            ("TE", "TE", 0.40, 0.50),
            ("WR1", "WR", 0.03, 0.45),
            ("WR2", "WR", 0.47, 0.45),
        ),
    ),
    ("DEF", "3-3-5", None): FormationTemplate(
        side="DEF",
        name="3-3-5",
        variant=None,
        slots=_slots(
            ("LEDG", "LEDG", 0.15, 0.45),
            ("DT", "DT", 0.25, 0.45),
            ("REDG", "REDG", 0.35, 0.45),
            ("SAM", "SAM", 0.15, 0.58),
            ("MIKE", "MIKE", 0.25, 0.58),
            ("WILL", "WILL", 0.35, 0.58),
            ("CB1", "CB", 0.05, 0.35),
            ("CB2", "CB", 0.45, 0.35),
            ("FS", "FS", 0.25, 0.25),
            ("SS", "SS", 0.35, 0.30),
            ("NB", "CB", 0.15, 0.30),
        ),
    ),
    ("DEF", "4-3", "OVER"): FormationTemplate(
        side="DEF",
        name="4-3",
        variant="OVER",
        slots=_slots(
            ("LE", "LEDG", 0.12, 0.45),
            ("DT1", "DT", 0.22, 0.45),
            ("DT2", "DT", 0.30, 0.45),
            ("RE", "REDG", 0.40, 0.45),
            ("SAM", "SAM", 0.15, 0.58),
            ("MIKE", "MIKE", 0.25, 0.60),
            ("WILL", "WILL", 0.35, 0.58),
            ("CB1", "CB", 0.05, 0.35),
            ("CB2", "CB", 0.45, 0.35),
            ("FS", "FS", 0.20, 0.22),
            ("SS", "SS", 0.32, 0.28),
        ),
    ),
    ("DEF", "NICKEL", "2-4-5"): FormationTemplate(
        side="DEF",
        name="NICKEL",
        variant="2-4-5",
        slots=_slots(
            ("LE", "LEDG", 0.12, 0.45),
            ("DT1", "DT", 0.22, 0.45),
            ("DT2", "DT", 0.30, 0.45),
            ("RE", "REDG", 0.40, 0.45),
            ("MLB1", "MIKE", 0.20, 0.58),
            ("MLB2", "WILL", 0.32, 0.58),
            ("CB1", "CB", 0.05, 0.35),
            ("CB2", "CB", 0.45, 0.35),
            ("NB", "CB", 0.15, 0.32),
            ("FS", "FS", 0.20, 0.22),
            ("SS", "SS", 0.32, 0.28),
        ),
    ),
}


def iter_templates() -> Iterable[FormationTemplate]:
    """Return an iterator over every built-in formation."""

    return _FORMATIONS.values()


def get_template_by_key(formation_key: str) -> FormationTemplate:
    """Resolve a template from "NAME:VARIANT" (or just "NAME") in either side."""

    if not isinstance(formation_key, str) or not formation_key.strip():
        raise ValueError("formation_key must be a non-empty string")
    name, _, variant = formation_key.strip().upper().partition(":")
    template = FORMATION_CONFIG.get(f"{name}:{variant}" if variant else name)
    if template is not None:
        return template
    raise KeyError(f"No formation template for {formation_key!r}")


# Keyed by template key ("NAME:VARIANT", or "NAME" without a variant); read-only.
FORMATION_CONFIG: Mapping[str, FormationTemplate] = {
    template.key: template for template in _FORMATIONS.values()
}
