"""Per-position roster listing for one side of the ball."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import List, Optional

from depthchart.errors import InvalidInput
from depthchart.persistence import RosterStore

from .service import class_label


OFF_POSITIONS: tuple[str, ...] = ("QB", "HB", "FB", "WR", "TE", "LT", "LG", "C", "RG", "RT")
DEF_POSITIONS: tuple[str, ...] = ("LEDG", "REDG", "DT", "SAM", "MIKE", "WILL", "CB", "FS", "SS")

# (minimum OVR, band), checked top-down.
OVR_BANDS: tuple[tuple[int, str], ...] = (
    (90, "elite"),
    (80, "great"),
    (75, "good"),
    (70, "solid"),
    (65, "average"),
    (60, "weak"),
)


@dataclass(frozen=True)
class RosterEntry:
    player_id: str
    name: str
    ovr: int
    class_label: str
    band: str


@dataclass
class RosterRow:
    pos: str
    players: List[RosterEntry] = field(default_factory=list)


@dataclass
class RosterBoard:
    side: str
    season: int
    rows: List[RosterRow]

    def to_dict(self) -> dict:
        return asdict(self)


def side_positions(side: str) -> tuple[str, ...]:
    normalized = (side or "").strip().upper()
    if normalized == "OFF":
        return OFF_POSITIONS
    if normalized == "DEF":
        return DEF_POSITIONS
    raise InvalidInput(f"side must be OFF or DEF, got {side!r}")


def ovr_band(ovr: Optional[int]) -> str:
    if ovr is None:
        return "none"
    for threshold, band in OVR_BANDS:
        if ovr >= threshold:
            return band
    return "poor"


def build_roster(store: RosterStore, season: int, side: str = "OFF") -> RosterBoard:
    """Players with a snapshot in ``season`` listed under their stored position, best first."""

    positions = side_positions(side)
    players = {player.player_id: player for player in store.list_players()}
    entries: dict[str, List[RosterEntry]] = {pos: [] for pos in positions}
    for snapshot in store.list_snapshots(season):
        player = players.get(snapshot.player_id)
        if player is None or player.position not in entries:
            continue
        entries[player.position].append(
            RosterEntry(
                player_id=player.player_id,
                name=player.name,
                ovr=snapshot.ovr,
                class_label=class_label(season, player.enrollment_year, player.redshirt),
                band=ovr_band(snapshot.ovr),
            )
        )
    rows = [
        RosterRow(pos=pos, players=sorted(entries[pos], key=lambda entry: -entry.ovr))
        for pos in positions
    ]
    return RosterBoard(side=side.strip().upper(), season=season, rows=rows)


__all__ = [
    "DEF_POSITIONS",
    "OFF_POSITIONS",
    "OVR_BANDS",
    "RosterBoard",
    "RosterEntry",
    "RosterRow",
    "build_roster",
    "ovr_band",
    "side_positions",
]
