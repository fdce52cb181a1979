"""Season-over-season rating progression and snapshot backfill."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Protocol, Sequence, Tuple

from depthchart.config import env_int
from depthchart.errors import DepthChartError, InvalidInput, UpstreamFailure
from depthchart.models import Archetype, Player, RatingSnapshot
from depthchart.predict import predict_ratings
from depthchart.ratings import (
    ATTRIBUTE_KEYS,
    POSITION_FORMULA,
    RatingVector,
    apply_dev_cap,
    clamp_rating,
    compute_ovr,
    empty_vector,
    merge_known,
)


logger = logging.getLogger("uvicorn.error")
logger.setLevel(logging.INFO)

_WORKERS_ENV = "DEPTHCHART_PROGRESSION_WORKERS"
_WORKERS_DEFAULT = 1

MAX_HORIZON = 25

# Points per season before multipliers.
BASE_GROWTH: Dict[str, float] = {
    # physical
    "SPD": 0.6, "ACC": 0.8, "AGI": 0.8, "COD": 0.6, "STR": 1.0, "JMP": 0.6,
    # ball skills / technique
    "CTH": 1.2, "CIT": 1.0, "SPC": 1.0, "SRR": 1.6, "MRR": 1.6, "DRR": 1.6, "RLS": 1.2,
    "THP": 0.6, "SAC": 1.6, "MAC": 1.6, "DAC": 1.2, "RUN": 1.2, "TUP": 1.4, "BSK": 1.0, "PAC": 1.0,
    "PBK": 1.6, "PBP": 1.4, "PBF": 1.4, "RBK": 1.6, "RBP": 1.4, "RBF": 1.4, "LBK": 1.0, "ILB": 1.0,
    "TAK": 1.4, "POW": 1.0, "BSH": 1.2, "FMV": 1.2, "PMV": 1.2, "PUR": 1.2, "MCV": 1.6, "ZCV": 1.6, "PRS": 1.2,
    "KPW": 0.4, "KAC": 0.8, "RET": 0.6, "LSP": 0.2,
    # game IQ / durability
    "AWR": 2.0, "PRC": 1.8, "STA": 0.6, "TGH": 0.4, "INJ": 0.2,
    # ball carrier
    "CAR": 1.0, "BCV": 1.2, "BTK": 1.2, "TRK": 1.0, "SFA": 1.0, "SPM": 1.0, "JKM": 1.0,
}
DEFAULT_GROWTH = 0.8

DEV_MULTIPLIERS: Dict[str, float] = {
    "Normal": 1.00,
    "Impact": 1.15,
    "Star": 1.30,
    "Elite": 1.45,
}

# Keyed by OVR formula family; boosted ratings grow 10% faster.
POSITIONAL_BOOSTS: Dict[str, Tuple[frozenset[str], float]] = {
    "QB": (frozenset({"SAC", "MAC", "TUP"}), 1.1),
    "OL": (frozenset({"PBK", "RBK"}), 1.1),
    "CB": (frozenset({"MCV", "ZCV"}), 1.1),
}

# Years since enrollment -> multiplier; later years use LATE_CAREER_MULTIPLIER.
AGE_CURVE: Dict[int, float] = {0: 1.20, 1: 1.10, 2: 1.00, 3: 0.70}
LATE_CAREER_MULTIPLIER = 0.40

# Fraction of the age multiplier's deviation from 1.0 added to each rating.
AGE_NUDGE_SCALE = 0.5


class ProgressionStore(Protocol):
    def list_players(self) -> List[Player]: ...

    def find_archetype(self, archetype_id: str) -> Archetype | None: ...

    def find_snapshot(self, player_id: str, season: int) -> RatingSnapshot | None: ...

    def find_latest_snapshot_before(self, player_id: str, season: int) -> RatingSnapshot | None: ...

    def create_snapshot(
        self,
        *,
        player_id: str,
        season: int,
        ratings: Mapping[str, int],
        ovr: int,
        predicted: bool,
    ) -> RatingSnapshot: ...


@dataclass
class PlayerFailure:
    player_id: str
    kind: str
    message: str


@dataclass
class ProgressionReport:
    start_season: int
    horizon: int
    created: int = 0
    players_processed: int = 0
    skipped_player_ids: List[str] = field(default_factory=list)
    failures: List[PlayerFailure] = field(default_factory=list)


def age_multiplier(years_since_enroll: int) -> float:
    if years_since_enroll <= 0:
        return AGE_CURVE[0]
    return AGE_CURVE.get(years_since_enroll, LATE_CAREER_MULTIPLIER)


def years_since_enrollment(season: int, enrollment_year: int, redshirt: bool) -> int:
    return season - enrollment_year - (1 if redshirt else 0)


def _growth_for(key: str, position: str, dev_multiplier: float) -> float:
    growth = BASE_GROWTH.get(key, DEFAULT_GROWTH) * dev_multiplier
    family = POSITION_FORMULA.get(position.strip().upper())
    boost = POSITIONAL_BOOSTS.get(family) if family else None
    if boost is not None and key in boost[0]:
        growth *= boost[1]
    return growth


def grow_ratings(
    current: Mapping[str, int],
    *,
    position: str,
    dev_trait: str,
    dev_cap: Optional[int] = None,
) -> RatingVector:
    """One season of base growth scaled by the dev trait, soft-capped and clamped."""

    dev_multiplier = DEV_MULTIPLIERS.get(dev_trait, 1.0)
    out = merge_known(empty_vector(), current)
    for key in ATTRIBUTE_KEYS:
        value = out[key] + _growth_for(key, position, dev_multiplier)
        out[key] = clamp_rating(apply_dev_cap(value, dev_cap))
    return out


def apply_age_nudge(ratings: Mapping[str, int], multiplier: float) -> RatingVector:
    """Shift every rating by a fraction of the multiplier's deviation from 1.0."""

    nudge = (multiplier - 1.0) * AGE_NUDGE_SCALE
    out = dict(ratings)
    for key in ATTRIBUTE_KEYS:
        out[key] = clamp_rating(out.get(key, 0) + nudge)
    return out


def project_next_season(
    current: Mapping[str, int],
    *,
    season: int,
    player: Player,
) -> RatingVector:
    """Ratings for ``season`` given the previous season's ratings."""

    grown = grow_ratings(
        current,
        position=player.position,
        dev_trait=player.dev_trait,
        dev_cap=player.dev_cap,
    )
    years = years_since_enrollment(season, player.enrollment_year, player.redshirt)
    aged = apply_age_nudge(grown, age_multiplier(years))
    aged["OVR"] = compute_ovr(player.position, aged)
    return aged


def _save_projection(
    store: ProgressionStore,
    player: Player,
    season: int,
    previous: Mapping[str, int],
) -> RatingVector:
    ratings = project_next_season(previous, season=season, player=player)
    store.create_snapshot(
        player_id=player.player_id,
        season=season,
        ratings=ratings,
        ovr=ratings["OVR"],
        predicted=True,
    )
    return ratings


def ensure_player_snapshots(
    store: ProgressionStore,
    player: Player,
    start_season: int,
    horizon: int,
) -> Optional[int]:
    """Fill missing seasons for one player; returns the number created, or None if not eligible."""

    end_season = start_season + horizon
    existing: Dict[int, RatingSnapshot] = {}
    for season in range(start_season, end_season + 1):
        snapshot = store.find_snapshot(player.player_id, season)
        if snapshot is not None:
            existing[season] = snapshot

    created = 0
    if start_season in existing:
        last = merge_known(empty_vector(), existing[start_season].ratings)
    else:
        previous = store.find_latest_snapshot_before(player.player_id, start_season)
        if previous is not None:
            last = merge_known(empty_vector(), previous.ratings)
            for season in range(previous.season + 1, start_season + 1):
                last = _save_projection(store, player, season, last)
                created += 1
        elif player.enrollment_year <= start_season and player.archetype_id:
            prediction = predict_ratings(
                store,
                position=player.position,
                archetype_id=player.archetype_id,
                subset={},
                dev_trait=player.dev_trait,
                dev_cap=player.dev_cap,
            )
            store.create_snapshot(
                player_id=player.player_id,
                season=start_season,
                ratings=prediction.ratings,
                ovr=prediction.ovr,
                predicted=True,
            )
            last = prediction.ratings
            created += 1
        else:
            return None

    for season in range(start_season + 1, end_season + 1):
        if season in existing:
            last = merge_known(empty_vector(), existing[season].ratings)
            continue
        last = _save_projection(store, player, season, last)
        created += 1
    return created


def _validate_window(start_season: int, horizon: int) -> None:
    if isinstance(start_season, bool) or not isinstance(start_season, int):
        raise InvalidInput("start season must be an integer")
    if isinstance(horizon, bool) or not isinstance(horizon, int):
        raise InvalidInput("horizon must be an integer")
    if horizon < 0 or horizon > MAX_HORIZON:
        raise InvalidInput(f"horizon must be between 0 and {MAX_HORIZON}")


def ensure_snapshots(
    store: ProgressionStore,
    start_season: int,
    horizon: int,
    *,
    workers: Optional[int] = None,
    players: Optional[Sequence[Player]] = None,
) -> ProgressionReport:
    """Guarantee a snapshot for every player and every season in the window.

    Existing snapshots are never rewritten. A failure while processing one
    player is recorded on the report and the remaining players still run.
    """

    _validate_window(start_season, horizon)
    roster = list(players) if players is not None else store.list_players()
    worker_count = workers if workers is not None else env_int(_WORKERS_ENV, _WORKERS_DEFAULT, min_value=1)
    report = ProgressionReport(start_season=start_season, horizon=horizon)

    def run(player: Player) -> Tuple[Player, Optional[int], Optional[DepthChartError]]:
        try:
            return player, ensure_player_snapshots(store, player, start_season, horizon), None
        except DepthChartError as exc:
            return player, None, exc
        except Exception as exc:
            logger.exception("Unexpected error while progressing player %s", player.player_id)
            failure = UpstreamFailure("Player progression failed unexpectedly")
            failure.__cause__ = exc
            return player, None, failure

    if worker_count > 1 and len(roster) > 1:
        with ThreadPoolExecutor(max_workers=worker_count) as pool:
            outcomes = list(pool.map(run, roster))
    else:
        outcomes = [run(player) for player in roster]

    for player, created, error in outcomes:
        if error is not None:
            logger.warning(
                "Progression failed for player %s (%s): %s",
                player.player_id,
                error.kind,
                error.message,
            )
            report.failures.append(PlayerFailure(player.player_id, error.kind, error.message))
            continue
        if created is None:
            report.skipped_player_ids.append(player.player_id)
            continue
        report.players_processed += 1
        report.created += created

    logger.info(
        "Progression %s..%s: %s snapshots created for %s players (%s skipped, %s failed)",
        start_season,
        start_season + horizon,
        report.created,
        report.players_processed,
        len(report.skipped_player_ids),
        len(report.failures),
    )
    return report
