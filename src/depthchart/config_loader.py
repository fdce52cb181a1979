"""Persist and load archetype catalogs as JSON."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List

from depthchart.ingest.seed import ArchetypeDraft


@dataclass
class ArchetypeCatalog:
    archetypes: List[ArchetypeDraft] = field(default_factory=list)

    @classmethod
    def load(cls, path: Path) -> "ArchetypeCatalog":
        data = json.loads(path.read_text(encoding="utf-8"))
        entries = data.get("archetypes", []) if isinstance(data, dict) else data
        return cls(archetypes=[_draft_from_json(entry) for entry in entries])

    def save(self, path: Path) -> None:
        payload = {
            "archetypes": [
                {
                    "position": draft.position,
                    "name": draft.name,
                    "subsetKeys": draft.subset_keys,
                    "baseTemplate": draft.base_template,
                    "mappingConfig": draft.mapping_config,
                }
                for draft in self.archetypes
            ]
        }
        path.write_text(json.dumps(payload, indent=2), encoding="utf-8")


def _draft_from_json(entry: Dict[str, Any]) -> ArchetypeDraft:
    return ArchetypeDraft(
        position=str(entry["position"]).strip().upper(),
        name=str(entry["name"]).strip(),
        subset_keys=[str(key).strip().upper() for key in entry.get("subsetKeys", entry.get("subset_keys", []))],
        base_template=dict(entry.get("baseTemplate", entry.get("base_template", {}))),
        mapping_config=dict(entry.get("mappingConfig", entry.get("mapping_config", {}))),
    )
