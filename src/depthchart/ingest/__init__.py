"""Seed data loaders."""

from .seed import (
    ArchetypeDraft,
    SlotDraft,
    detect_position_column,
    import_archetypes,
    import_formation,
    load_archetype_csv,
    load_formation_csv,
    seed_defaults,
    slots_from_rows,
)

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
