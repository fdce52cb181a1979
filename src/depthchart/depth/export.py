"""CSV export for resolved depth charts."""

from __future__ import annotations

import csv
from io import StringIO
from typing import Sequence

from .resolver import DepthChart, SlotResult


EXPORT_HEADERS: tuple[str, ...] = (
    "slot_key",
    "pos",
    "group",
    "type",
    "player_id",
    "name",
    "ovr",
    "weights",
)


def _slot_rows(slot: SlotResult) -> list[list[object]]:
    """One row per assigned player; weighted slots emit one row per contributor."""

    base = [slot.slot_key, slot.pos, slot.group, slot.type]
    if slot.type == "weighted":
        if not slot.contributors:
            return [[*base, "", "", "", ""]]
        return [
            [*base, item.player_id, item.name, item.ovr, f"{item.weight:g}"]
            for item in slot.contributors
        ]
    if slot.player is None:
        return [[*base, "", "", "", ""]]
    return [[*base, slot.player.player_id, slot.player.name, slot.player.ovr, ""]]


def export_depth_to_csv(chart: DepthChart, *, headers: Sequence[str] = EXPORT_HEADERS) -> str:
    buffer = StringIO()
    writer = csv.writer(buffer)
    writer.writerow(headers)
    for slot in chart.slots:
        for row in _slot_rows(slot):
            writer.writerow(row)
    return buffer.getvalue()


__all__ = ["EXPORT_HEADERS", "export_depth_to_csv"]
