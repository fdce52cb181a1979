"""Seed loaders for archetype and formation CSVs."""

from __future__ import annotations

import csv
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence

from depthchart.config import iter_templates
from depthchart.depth.positions import is_known_slot_label
from depthchart.errors import InvalidInput
from depthchart.models import Formation
from depthchart.persistence import RosterStore


logger = logging.getLogger(__name__)

_SKIP_COLUMNS = frozenset(
    {
        "id",
        "formationid",
        "formation_id",
        "slot_key",
        "slotkey",
        "createdat",
        "updatedat",
        "x",
        "y",
        "u",
        "v",
        "nx",
        "ny",
        "order",
        "index",
    }
)
_FALLBACK_COLUMNS: tuple[str, ...] = ("position", "pos", "label", "slot", "role", "name", "abbr")
_SLOT_KEY_COLUMNS: tuple[str, ...] = ("slot_key", "slotkey", "slot", "key")
_X_COLUMNS: tuple[str, ...] = ("x", "u", "nx")
_Y_COLUMNS: tuple[str, ...] = ("y", "v", "ny")


@dataclass
class ArchetypeDraft:
    position: str
    name: str
    subset_keys: List[str]
    base_template: Dict[str, int] = field(default_factory=dict)
    mapping_config: Dict[str, Any] = field(default_factory=dict)


@dataclass
class SlotDraft:
    slot_key: str
    position_hints: List[str]
    x: float
    y: float

    def as_mapping(self) -> Dict[str, Any]:
        return {
            "slot_key": self.slot_key,
            "position_hints": list(self.position_hints),
            "x": self.x,
            "y": self.y,
        }


def load_archetype_csv(path: Path) -> List[ArchetypeDraft]:
    """Read ``position,name,subset...`` rows (no header)."""

    drafts: List[ArchetypeDraft] = []
    with path.open(newline="", encoding="utf-8-sig") as handle:
        for row in csv.reader(handle):
            cells = [cell.strip().strip('"') for cell in row]
            if len(cells) < 2 or not cells[0] or not cells[1]:
                continue
            drafts.append(
                ArchetypeDraft(
                    position=cells[0].upper(),
                    name=cells[1],
                    subset_keys=[cell.upper() for cell in cells[2:] if cell],
                )
            )
    logger.info("Loaded %s archetypes from %s", len(drafts), path)
    return drafts


def _is_numeric(value: Any) -> bool:
    try:
        float(value)
    except (TypeError, ValueError):
        return False
    return True


def detect_position_column(rows: Sequence[Mapping[str, Any]]) -> Optional[str]:
    """Pick the column whose values most often normalize to a known slot group."""

    if not rows:
        return None
    first = rows[0]
    best_column: Optional[str] = None
    best_score = -1
    for column, sample in first.items():
        if column is None or column.strip().lower() in _SKIP_COLUMNS:
            continue
        if not isinstance(sample, str) or _is_numeric(sample):
            continue
        score = sum(1 for row in rows if is_known_slot_label(str(row.get(column) or "")))
        if score > best_score:
            best_score = score
            best_column = column
    if best_column is not None and best_score > 0:
        return best_column
    lowered = {str(column).strip().lower(): column for column in first if column is not None}
    for candidate in _FALLBACK_COLUMNS:
        if candidate in lowered:
            return lowered[candidate]
    return best_column


def _first_number(row: Mapping[str, Any], columns: Sequence[str], default: float) -> float:
    lowered = {str(key).strip().lower(): value for key, value in row.items() if key is not None}
    for column in columns:
        value = lowered.get(column)
        if value not in (None, "") and _is_numeric(value):
            return min(1.0, max(0.0, float(value)))
    return default


def _slot_key(row: Mapping[str, Any], label: str, counts: Dict[str, int]) -> str:
    lowered = {str(key).strip().lower(): value for key, value in row.items() if key is not None}
    for column in _SLOT_KEY_COLUMNS:
        value = lowered.get(column)
        if value and str(value).strip():
            return str(value).strip().upper()
    base = label.upper() or "SLOT"
    counts[base] = counts.get(base, 0) + 1
    return f"{base}{counts[base]}"


def slots_from_rows(rows: Sequence[Mapping[str, Any]]) -> List[SlotDraft]:
    column = detect_position_column(rows)
    if column is None:
        raise InvalidInput("Could not find a position column in formation rows")
    logger.info("Using column %r as slot position", column)
    counts: Dict[str, int] = {}
    drafts: List[SlotDraft] = []
    for row in rows:
        label = str(row.get(column) or "").strip().upper()
        drafts.append(
            SlotDraft(
                slot_key=_slot_key(row, label, counts),
                position_hints=[label] if label else [],
                x=_first_number(row, _X_COLUMNS, 0.5),
                y=_first_number(row, _Y_COLUMNS, 0.5),
            )
        )
    return drafts


def load_formation_csv(path: Path) -> List[SlotDraft]:
    """Read slot rows with a header of unknown shape."""

    with path.open(newline="", encoding="utf-8-sig") as handle:
        rows = list(csv.DictReader(handle))
    if not rows:
        raise InvalidInput(f"No slot rows in {path}")
    return slots_from_rows(rows)


def import_archetypes(store: RosterStore, drafts: Sequence[ArchetypeDraft]) -> int:
    for draft in drafts:
        store.save_archetype(
            position=draft.position,
            name=draft.name,
            subset_keys=draft.subset_keys,
            base_template=draft.base_template or None,
            mapping_config=draft.mapping_config or None,
        )
    logger.info("Seeded/updated %s archetypes", len(drafts))
    return len(drafts)


def import_formation(
    store: RosterStore,
    *,
    side: str,
    name: str,
    variant: Optional[str],
    slots: Sequence[SlotDraft],
) -> Formation:
    if (side or "").strip().upper() not in {"OFF", "DEF"}:
        raise InvalidInput(f"side must be OFF or DEF, got {side!r}")
    if not slots:
        raise InvalidInput("A formation needs at least one slot")
    return store.save_formation(
        side=side,
        name=name,
        variant=variant,
        slots=[slot.as_mapping() for slot in slots],
    )


def seed_defaults(store: RosterStore) -> List[Formation]:
    """Write every built-in formation; re-running replaces their slots."""

    formations: List[Formation] = []
    for template in iter_templates():
        formations.append(
            store.save_formation(
                side=template.side,
                name=template.name,
                variant=template.variant,
                slots=[
                    {
                        "slot_key": slot.slot_key,
                        "position_hints": [slot.position],
                        "x": slot.x,
                        "y": slot.y,
                    }
                    for slot in template.slots
                ],
            )
        )
    logger.info("Seeded/updated formations: %s", len(formations))
    return formations


__all__ = [
    "ArchetypeDraft",
    "SlotDraft",
    "detect_position_column",
    "import_archetypes",
    "import_formation",
    "load_archetype_csv",
    "load_formation_csv",
    "seed_defaults",
    "slots_from_rows",
]
