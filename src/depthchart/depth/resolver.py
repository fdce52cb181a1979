"""Resolve a formation's slots to players for one season."""

from __future__ import annotations

import logging
import re
from dataclasses import asdict, dataclass, field
from typing import Dict, List, Mapping, Optional, Protocol, Sequence, Tuple

from depthchart.config import env_float_list
from depthchart.errors import FormationNotFound, InvalidInput, NoSlotsForFormation
from depthchart.models import Formation, Player, RatingSnapshot

from .positions import family_of, normalize_player_position, normalize_slot_group


logger = logging.getLogger(__name__)

VIEWS: tuple[str, ...] = ("starters", "backups", "weighted")

DEPTH_WEIGHTS_ENV = "DEPTH_WEIGHTS"
DEFAULT_DEPTH_CURVE: tuple[float, ...] = (1.0, 0.6, 0.35, 0.2, 0.1)

_THREE_DEEP = (0.6, 0.25, 0.15)
_FOUR_DEEP = (0.5, 0.25, 0.15, 0.1)

# Weighted view contributions by canonical group; other groups use the global curve.
POSITION_DEPTH_WEIGHTS: Mapping[str, tuple[float, ...]] = {
    "QB": (0.7, 0.3),
    "RB": _THREE_DEEP,
    "WR": _FOUR_DEEP,
    "TE": (0.7, 0.3),
    "LT": _THREE_DEEP,
    "LG": _THREE_DEEP,
    "C": _THREE_DEEP,
    "RG": _THREE_DEEP,
    "RT": _THREE_DEEP,
    "LE": _THREE_DEEP,
    "RE": _THREE_DEEP,
    "EDGE": _THREE_DEEP,
    "DT": _THREE_DEEP,
    "LOLB": _THREE_DEEP,
    "MLB": _THREE_DEEP,
    "ROLB": _THREE_DEEP,
    "CB": _FOUR_DEEP,
    "FS": _THREE_DEEP,
    "SS": _THREE_DEEP,
}


class DepthStore(Protocol):
    def find_formation(self, formation_id: str) -> Formation | None: ...

    def list_players(self) -> List[Player]: ...

    def list_snapshots(self, season: int) -> List[RatingSnapshot]: ...


@dataclass(frozen=True)
class DepthPlayer:
    player_id: str
    name: str
    abbreviation: str
    ovr: int
    dev_trait: str


@dataclass(frozen=True)
class Contributor:
    player_id: str
    name: str
    abbreviation: str
    ovr: int
    weight: float


@dataclass
class SlotResult:
    slot_key: str
    pos: str
    group: str
    family: str
    type: str
    x: float
    y: float
    player: Optional[DepthPlayer] = None
    contributors: List[Contributor] = field(default_factory=list)
    composite_ovr: Optional[int] = None


@dataclass(frozen=True)
class FormationMeta:
    formation_id: str
    side: str
    name: str
    variant: Optional[str]


@dataclass
class DepthChart:
    formation: FormationMeta
    season: int
    view: str
    slots: List[SlotResult]

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class _Candidate:
    player: Player
    ovr: int


@dataclass(frozen=True)
class _Slot:
    index: int
    slot_key: str
    label: str
    group: str
    family: str
    x: float
    y: float


def abbreviate_name(full_name: str) -> str:
    """First initial plus upper-cased last name ("J.J. Snapp" -> "J. SNAPP")."""

    parts = [part for part in re.split(r"\s+", full_name.strip()) if part]
    if not parts:
        return ""
    letters = re.sub(r"[^A-Za-z]", "", parts[0])
    if len(parts) == 1 or not letters:
        return full_name.strip().upper()
    return f"{letters[0].upper()}. {parts[-1].upper()}"


def depth_weights() -> tuple[float, ...]:
    return env_float_list(DEPTH_WEIGHTS_ENV, DEFAULT_DEPTH_CURVE)


def weights_for_group(group: str, fallback: Sequence[float]) -> tuple[float, ...]:
    return tuple(POSITION_DEPTH_WEIGHTS.get(group, tuple(fallback)))


def weighted_composite(contributors: Sequence[Contributor]) -> Optional[int]:
    """round(sum(w * ovr) / sum(w)); None when the weights sum to zero."""

    total_weight = sum(item.weight for item in contributors)
    if total_weight <= 0:
        return None
    total = sum(item.weight * item.ovr for item in contributors)
    # Half-up rounding for non-negative values.
    return int(total / total_weight + 0.5)


def _load_formation(store: DepthStore, formation_id: str) -> Formation:
    formation = store.find_formation(formation_id)
    if formation is None:
        raise FormationNotFound(formation_id)
    if not formation.slots:
        raise NoSlotsForFormation(formation_id)
    return formation


def _prepare_slots(formation: Formation) -> List[_Slot]:
    prepared: List[_Slot] = []
    for index, slot in enumerate(formation.slots):
        label = slot.position_label
        group = normalize_slot_group(label)
        prepared.append(
            _Slot(
                index=index,
                slot_key=slot.slot_key,
                label=label,
                group=group,
                family=family_of(group),
                x=slot.x,
                y=slot.y,
            )
        )
    return prepared


def _build_pools(
    players: Sequence[Player],
    snapshots: Sequence[RatingSnapshot],
) -> Tuple[Dict[str, List[_Candidate]], Dict[str, List[_Candidate]]]:
    ovr_by_id = {snapshot.player_id: snapshot.ovr for snapshot in snapshots}
    exact: Dict[str, List[_Candidate]] = {}
    family: Dict[str, List[_Candidate]] = {}
    for player in players:
        if player.player_id not in ovr_by_id:
            continue
        candidate = _Candidate(player=player, ovr=ovr_by_id[player.player_id])
        group = normalize_player_position(player.position)
        exact.setdefault(group, []).append(candidate)
        family.setdefault(family_of(group), []).append(candidate)
    for pools in (exact, family):
        for pool in pools.values():
            pool.sort(key=lambda candidate: -candidate.ovr)
    return exact, family


def _pool_for(
    group: str,
    exact: Mapping[str, List[_Candidate]],
    family: Mapping[str, List[_Candidate]],
) -> List[_Candidate]:
    pool = exact.get(group) or []
    if pool:
        return pool
    return family.get(family_of(group)) or []


def _group_slots(slots: Sequence[_Slot]) -> Dict[str, List[_Slot]]:
    grouped: Dict[str, List[_Slot]] = {}
    for slot in slots:
        grouped.setdefault(slot.group, []).append(slot)
    return grouped


def _to_depth_player(candidate: _Candidate) -> DepthPlayer:
    return DepthPlayer(
        player_id=candidate.player.player_id,
        name=candidate.player.name,
        abbreviation=abbreviate_name(candidate.player.name),
        ovr=candidate.ovr,
        dev_trait=candidate.player.dev_trait,
    )


def _assign_unique(
    slots: Sequence[_Slot],
    exact: Mapping[str, List[_Candidate]],
    family: Mapping[str, List[_Candidate]],
    *,
    view: str,
    used: set[str],
) -> List[SlotResult]:
    """Fill each group's slots from its pool without reusing a player anywhere in the chart."""

    slot_type = "starter" if view == "starters" else "backup"
    results: List[Tuple[int, SlotResult]] = []
    for group, group_slots in _group_slots(slots).items():
        pool = _pool_for(group, exact, family)
        cursor = 0 if view == "starters" else len(group_slots)
        for slot in group_slots:
            chosen: Optional[_Candidate] = None
            while cursor < len(pool):
                candidate = pool[cursor]
                cursor += 1
                if candidate.player.player_id not in used:
                    chosen = candidate
                    break
            if chosen is not None:
                used.add(chosen.player.player_id)
            results.append(
                (
                    slot.index,
                    SlotResult(
                        slot_key=slot.slot_key,
                        pos=slot.label or slot.group,
                        group=slot.group,
                        family=slot.family,
                        type=slot_type,
                        x=slot.x,
                        y=slot.y,
                        player=_to_depth_player(chosen) if chosen is not None else None,
                    ),
                )
            )
    results.sort(key=lambda item: item[0])
    return [result for _, result in results]


def _assign_weighted(
    slots: Sequence[_Slot],
    exact: Mapping[str, List[_Candidate]],
    family: Mapping[str, List[_Candidate]],
) -> List[SlotResult]:
    curve = depth_weights()
    grouped = _group_slots(slots)
    results: List[SlotResult] = []
    for slot in slots:
        depth = max(len(grouped[slot.group]), 1)
        weights = weights_for_group(slot.group, curve)
        pool = _pool_for(slot.group, exact, family)
        contributors = [
            Contributor(
                player_id=candidate.player.player_id,
                name=candidate.player.name,
                abbreviation=abbreviate_name(candidate.player.name),
                ovr=candidate.ovr,
                weight=float(weights[rank]) if rank < len(weights) else 0.0,
            )
            for rank, candidate in enumerate(pool[:depth])
        ]
        results.append(
            SlotResult(
                slot_key=slot.slot_key,
                pos=slot.label or slot.group,
                group=slot.group,
                family=slot.family,
                type="weighted",
                x=slot.x,
                y=slot.y,
                contributors=contributors,
                composite_ovr=weighted_composite(contributors),
            )
        )
    return results


def resolve_depth(
    store: DepthStore,
    formation_id: str,
    season: int,
    view: str = "starters",
) -> DepthChart:
    """Assign players to every slot of a formation for ``season``.

    ``starters`` and ``backups`` never place one player in two slots;
    ``backups`` treats the starters as already taken. ``weighted`` reports
    a composite OVR per slot from the top of its pool. Slot order in the
    result always matches the formation.
    """

    if view not in VIEWS:
        raise InvalidInput(f"view must be one of: {', '.join(VIEWS)}")
    if isinstance(season, bool) or not isinstance(season, int):
        raise InvalidInput("season must be an integer")

    formation = _load_formation(store, formation_id)
    slots = _prepare_slots(formation)
    snapshots = store.list_snapshots(season)
    exact, family = _build_pools(store.list_players(), snapshots)
    if not snapshots:
        logger.info("No snapshots for season %s; depth chart %s resolves empty", season, formation.key)

    if view == "weighted":
        resolved = _assign_weighted(slots, exact, family)
    elif view == "starters":
        resolved = _assign_unique(slots, exact, family, view="starters", used=set())
    else:
        used: set[str] = set()
        _assign_unique(slots, exact, family, view="starters", used=used)
        resolved = _assign_unique(slots, exact, family, view="backups", used=used)

    return DepthChart(
        formation=FormationMeta(
            formation_id=formation.formation_id,
            side=formation.side,
            name=formation.name,
            variant=formation.variant,
        ),
        season=season,
        view=view,
        slots=resolved,
    )


__all__ = [
    "Contributor",
    "DEFAULT_DEPTH_CURVE",
    "DepthChart",
    "DepthPlayer",
    "FormationMeta",
    "POSITION_DEPTH_WEIGHTS",
    "SlotResult",
    "VIEWS",
    "abbreviate_name",
    "depth_weights",
    "resolve_depth",
    "weighted_composite",
    "weights_for_group",
]
