"""Player registration and administrative edits."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from depthchart.errors import ArchetypeNotFound, InvalidInput
from depthchart.models import ClassYear, NewPlayer, Player, PlayerUpdate, RatingSnapshot
from depthchart.persistence import RosterStore
from depthchart.predict import predict_ratings
from depthchart.ratings import compute_ovr, empty_vector, merge_known, validate_ratings


logger = logging.getLogger(__name__)

YEARS_PLAYED: Mapping[str, int] = {
    "Freshman": 0,
    "Sophomore": 1,
    "Junior": 2,
    "Senior": 3,
}

CLASS_LABELS: tuple[str, ...] = ("Fr", "So", "Jr", "Sr")


@dataclass(frozen=True)
class RegisteredPlayer:
    player: Player
    snapshot: Optional[RatingSnapshot]


def derive_enrollment_year(registry_year: int, class_year: ClassYear, redshirt: bool) -> int:
    """Enrollment year for a player registered as ``class_year`` in ``registry_year``."""

    try:
        years_played = YEARS_PLAYED[class_year]
    except KeyError as exc:
        raise InvalidInput(f"Unknown class year {class_year!r}") from exc
    return registry_year - years_played - (1 if redshirt else 0)


def class_label(season: int, enrollment_year: int, redshirt: bool) -> str:
    years = season - enrollment_year - (1 if redshirt else 0)
    return CLASS_LABELS[min(max(years, 0), len(CLASS_LABELS) - 1)]


def _require_archetype(store: RosterStore, archetype_id: Optional[str]) -> None:
    if archetype_id and store.find_archetype(archetype_id) is None:
        raise ArchetypeNotFound(archetype_id)


def register_player(
    store: RosterStore,
    new_player: NewPlayer,
    *,
    season: int,
    subset: Optional[Mapping[str, float]] = None,
    ratings: Optional[Mapping[str, float]] = None,
) -> RegisteredPlayer:
    """Create a player and its baseline snapshot for ``season``.

    Manual ``ratings`` win over the archetype and are stored as observed.
    Without them an archetype prediction seeds the snapshot; with neither the
    player is stored with no snapshot.
    """

    _require_archetype(store, new_player.archetype_id)
    baseline: Optional[dict[str, int]] = None
    predicted = False
    if ratings:
        baseline = merge_known(empty_vector(), validate_ratings(ratings))
        baseline["OVR"] = compute_ovr(new_player.position, baseline)
    elif new_player.archetype_id:
        baseline = predict_ratings(
            store,
            position=new_player.position,
            archetype_id=new_player.archetype_id,
            subset=subset,
            dev_trait=new_player.dev_trait,
            dev_cap=new_player.dev_cap,
        ).ratings
        predicted = True
        if new_player.source_type == "manual":
            new_player = new_player.model_copy(update={"source_type": "predicted"})

    player = store.create_player(new_player)
    snapshot: Optional[RatingSnapshot] = None
    if baseline is not None:
        snapshot = store.create_snapshot(
            player_id=player.player_id,
            season=season,
            ratings=baseline,
            ovr=baseline["OVR"],
            predicted=predicted,
        )
    logger.info(
        "Registered %s (%s) for %s; baseline snapshot: %s",
        player.name,
        player.position,
        season,
        "none" if snapshot is None else ("predicted" if predicted else "manual"),
    )
    return RegisteredPlayer(player=player, snapshot=snapshot)


def update_player(
    store: RosterStore,
    player_id: str,
    changes: PlayerUpdate | Mapping[str, Any],
) -> Player:
    update = changes if isinstance(changes, PlayerUpdate) else PlayerUpdate.model_validate(dict(changes))
    values = update.model_dump(exclude_unset=True)
    if "name" in values and not values["name"]:
        raise InvalidInput("name must not be blank")
    if "position" in values and not values["position"]:
        raise InvalidInput("position must not be blank")
    if values.get("dev_trait") is None:
        values.pop("dev_trait", None)
    if values.get("redshirt") is None:
        values.pop("redshirt", None)
    _require_archetype(store, values.get("archetype_id"))
    return store.update_player(player_id, values)


__all__ = [
    "CLASS_LABELS",
    "ClassYear",
    "RegisteredPlayer",
    "YEARS_PLAYED",
    "class_label",
    "derive_enrollment_year",
    "register_player",
    "update_player",
]
