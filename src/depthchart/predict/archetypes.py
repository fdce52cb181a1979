"""Archetype lookups for the predictor."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Protocol, Tuple

from depthchart.errors import ArchetypeNotFound
from depthchart.models import Archetype, MappingRule
from depthchart.ratings import is_rating_key


class ArchetypeSource(Protocol):
    def find_archetype(self, archetype_id: str) -> Archetype | None: ...


@dataclass(frozen=True)
class ResolvedArchetype:
    archetype_id: str
    position: str
    name: str
    base_template: Dict[str, int] = field(default_factory=dict)
    mapping_config: Dict[str, MappingRule] = field(default_factory=dict)
    subset_keys: Tuple[str, ...] = ()


def resolve_archetype(store: ArchetypeSource, archetype_id: str) -> ResolvedArchetype:
    """Load an archetype's template, mapping rules and subset keys.

    Template and mapping entries that do not name a known rating are dropped.
    """

    archetype = store.find_archetype(archetype_id) if archetype_id else None
    if archetype is None:
        raise ArchetypeNotFound(archetype_id)
    template = {
        key.strip().upper(): value
        for key, value in archetype.base_template.items()
        if is_rating_key(key.strip().upper())
    }
    mapping = {key: rule for key, rule in archetype.mapping_config.items() if is_rating_key(key)}
    return ResolvedArchetype(
        archetype_id=archetype.archetype_id,
        position=archetype.position,
        name=archetype.name,
        base_template=template,
        mapping_config=mapping,
        subset_keys=tuple(archetype.subset_keys),
    )
