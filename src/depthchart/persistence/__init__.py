"""Persistence layer for players, archetypes, formations and rating snapshots."""

from __future__ import annotations

import json
import logging
import math
import os
import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable, Iterator, List, Mapping, Optional, Sequence
from uuid import uuid4

from pydantic import ValidationError

from depthchart.errors import Conflict, InvalidInput, PlayerNotFound, UpstreamFailure
from depthchart.models import (
    Archetype,
    Formation,
    FormationSlot,
    MappingRule,
    NewPlayer,
    Player,
    RatingSnapshot,
)
from depthchart.ratings import clamp_rating


logger = logging.getLogger(__name__)

DB_PATH_ENV = "DEPTHCHART_DB_PATH"

_PLAYER_COLUMNS = (
    "name",
    "position",
    "height_in",
    "weight_lb",
    "enrollment_year",
    "redshirt",
    "archetype_id",
    "dev_trait",
    "dev_cap",
    "source_type",
)


class RosterStore:
    """SQLite-backed store; one connection per operation.

    The store holds no in-memory cache, so every read sees current data. The
    at-most-one snapshot per (player, season) rule is a UNIQUE constraint.
    """

    def __init__(self, db_path: Path | str):
        self._use_uri = False
        env_db = os.getenv(DB_PATH_ENV)
        target: Path | str = env_db or db_path
        if isinstance(target, str) and target.startswith("file:"):
            self.db_path: Path | str = target
            self._use_uri = True
        else:
            self.db_path = Path(target)
        self._ensure_schema()

    def _connect(self) -> sqlite3.Connection:
        try:
            if isinstance(self.db_path, Path):
                self.db_path.parent.mkdir(parents=True, exist_ok=True)
                conn = sqlite3.connect(self.db_path)
            else:
                conn = sqlite3.connect(self.db_path, uri=self._use_uri)
        except (sqlite3.Error, OSError) as exc:
            logger.error("Unable to open roster database %s: %s", self.db_path, exc)
            raise UpstreamFailure("Roster store is unavailable") from exc
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        return conn

    @contextmanager
    def _session(self) -> Iterator[sqlite3.Connection]:
        conn = self._connect()
        try:
            with conn:
                yield conn
        except sqlite3.IntegrityError as exc:
            logger.info("Integrity violation: %s", exc)
            raise Conflict("Record conflicts with an existing entry") from exc
        except sqlite3.Error as exc:
            logger.error("Roster store error: %s", exc)
            raise UpstreamFailure("Roster store operation failed") from exc
        finally:
            conn.close()

    def _ensure_schema(self) -> None:
        with self._session() as conn:
            self._create_schema(conn)

    def _create_schema(self, conn: sqlite3.Connection) -> None:
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS archetypes (
                id TEXT PRIMARY KEY,
                position TEXT NOT NULL,
                name TEXT NOT NULL,
                subset_keys_json TEXT NOT NULL,
                base_template_json TEXT NOT NULL,
                mapping_config_json TEXT NOT NULL,
                UNIQUE (position, name)
            )
            """
        )
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS players (
                id TEXT PRIMARY KEY,
                name TEXT NOT NULL,
                position TEXT NOT NULL,
                height_in INTEGER,
                weight_lb INTEGER,
                enrollment_year INTEGER NOT NULL,
                redshirt INTEGER NOT NULL DEFAULT 0,
                archetype_id TEXT REFERENCES archetypes(id),
                dev_trait TEXT NOT NULL DEFAULT 'Normal',
                dev_cap INTEGER,
                source_type TEXT NOT NULL DEFAULT 'manual',
                created_at TEXT NOT NULL
            )
            """
        )
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS rating_snapshots (
                id TEXT PRIMARY KEY,
                player_id TEXT NOT NULL REFERENCES players(id) ON DELETE CASCADE,
                season INTEGER NOT NULL,
                ratings_json TEXT NOT NULL,
                ovr INTEGER NOT NULL,
                predicted INTEGER NOT NULL DEFAULT 0,
                created_at TEXT NOT NULL,
                UNIQUE (player_id, season)
            )
            """
        )
        conn.execute(
            "CREATE INDEX IF NOT EXISTS idx_snapshots_season ON rating_snapshots (season)"
        )
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS formations (
                id TEXT PRIMARY KEY,
                side TEXT NOT NULL,
                name TEXT NOT NULL,
                variant TEXT
            )
            """
        )
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS formation_slots (
                id TEXT PRIMARY KEY,
                formation_id TEXT NOT NULL REFERENCES formations(id) ON DELETE CASCADE,
                sort_order INTEGER NOT NULL,
                slot_key TEXT NOT NULL,
                position_hints_json TEXT NOT NULL,
                x REAL NOT NULL,
                y REAL NOT NULL
            )
            """
        )

    # -- archetypes -------------------------------------------------------

    def find_archetype(self, archetype_id: str) -> Optional[Archetype]:
        with self._session() as conn:
            row = conn.execute("SELECT * FROM archetypes WHERE id = ?", (archetype_id,)).fetchone()
        return self._row_to_archetype(row) if row is not None else None

    def list_archetypes(self, *, position: str | None = None) -> List[Archetype]:
        query = "SELECT * FROM archetypes"
        params: list[str] = []
        if position:
            query += " WHERE position = ?"
            params.append(position.strip().upper())
        query += " ORDER BY position, name"
        with self._session() as conn:
            rows = conn.execute(query, tuple(params)).fetchall()
        return [self._row_to_archetype(row) for row in rows]

    def save_archetype(
        self,
        *,
        position: str,
        name: str,
        subset_keys: Sequence[str],
        base_template: Mapping[str, int] | None = None,
        mapping_config: Mapping[str, Any] | None = None,
    ) -> Archetype:
        """Upsert by (position, name). Existing template/mapping survive unless replaced."""

        position = position.strip().upper()
        name = name.strip()
        subset_json = json.dumps([key.strip().upper() for key in subset_keys if key.strip()])
        with self._session() as conn:
            existing = conn.execute(
                "SELECT * FROM archetypes WHERE position = ? AND name = ?",
                (position, name),
            ).fetchone()
            if existing is None:
                archetype_id = uuid4().hex
                conn.execute(
                    """
                    INSERT INTO archetypes (
                        id, position, name, subset_keys_json, base_template_json, mapping_config_json
                    ) VALUES (?, ?, ?, ?, ?, ?)
                    """,
                    (
                        archetype_id,
                        position,
                        name,
                        subset_json,
                        json.dumps(_clean_template(base_template)),
                        json.dumps(_dump_mapping(mapping_config)),
                    ),
                )
            else:
                archetype_id = existing["id"]
                template_json = (
                    json.dumps(_clean_template(base_template)) if base_template is not None else existing["base_template_json"]
                )
                mapping_json = (
                    json.dumps(_dump_mapping(mapping_config))
                    if mapping_config is not None
                    else existing["mapping_config_json"]
                )
                conn.execute(
                    """
                    UPDATE archetypes
                    SET subset_keys_json = ?, base_template_json = ?, mapping_config_json = ?
                    WHERE id = ?
                    """,
                    (subset_json, template_json, mapping_json, archetype_id),
                )
        archetype = self.find_archetype(archetype_id)
        if archetype is None:  # pragma: no cover
            raise KeyError(f"Archetype {archetype_id} not found after upsert")
        return archetype

    # -- formations -------------------------------------------------------

    def find_formation(self, formation_id: str) -> Optional[Formation]:
        with self._session() as conn:
            row = conn.execute("SELECT * FROM formations WHERE id = ?", (formation_id,)).fetchone()
            if row is None:
                return None
            slot_rows = conn.execute(
                "SELECT * FROM formation_slots WHERE formation_id = ? ORDER BY sort_order, id",
                (formation_id,),
            ).fetchall()
        return self._row_to_formation(row, slot_rows)

    def find_formation_by_key(
        self,
        name: str,
        variant: str | None = None,
        *,
        side: str | None = None,
    ) -> Optional[Formation]:
        query = "SELECT id FROM formations WHERE name = ? AND IFNULL(variant, '') = ?"
        params: list[str] = [name.strip().upper(), (variant or "").strip().upper()]
        if side:
            query += " AND side = ?"
            params.append(side.strip().upper())
        query += " ORDER BY side LIMIT 1"
        with self._session() as conn:
            row = conn.execute(query, tuple(params)).fetchone()
        return self.find_formation(row["id"]) if row is not None else None

    def list_formations(self) -> List[Formation]:
        with self._session() as conn:
            rows = conn.execute(
                "SELECT id FROM formations ORDER BY side, name, IFNULL(variant, '')"
            ).fetchall()
        formations = [self.find_formation(row["id"]) for row in rows]
        return [formation for formation in formations if formation is not None]

    def save_formation(
        self,
        *,
        side: str,
        name: str,
        variant: str | None,
        slots: Iterable[Mapping[str, Any]],
    ) -> Formation:
        """Find-or-create by (side, name, variant) and replace its slots."""

        side = side.strip().upper()
        name = name.strip().upper()
        variant = variant.strip().upper() if variant and variant.strip() else None
        slot_list = list(slots)
        with self._session() as conn:
            existing = conn.execute(
                "SELECT id FROM formations WHERE side = ? AND name = ? AND IFNULL(variant, '') = ?",
                (side, name, variant or ""),
            ).fetchone()
            if existing is None:
                formation_id = uuid4().hex
                conn.execute(
                    "INSERT INTO formations (id, side, name, variant) VALUES (?, ?, ?, ?)",
                    (formation_id, side, name, variant),
                )
            else:
                formation_id = existing["id"]
                conn.execute("DELETE FROM formation_slots WHERE formation_id = ?", (formation_id,))
            for order, slot in enumerate(slot_list):
                hints = [str(hint).strip().upper() for hint in slot.get("position_hints", []) if str(hint).strip()]
                conn.execute(
                    """
                    INSERT INTO formation_slots (
                        id, formation_id, sort_order, slot_key, position_hints_json, x, y
                    ) VALUES (?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        uuid4().hex,
                        formation_id,
                        order,
                        str(slot["slot_key"]).strip().upper(),
                        json.dumps(hints),
                        float(slot.get("x", 0.5)),
                        float(slot.get("y", 0.5)),
                    ),
                )
        formation = self.find_formation(formation_id)
        if formation is None:  # pragma: no cover
            raise KeyError(f"Formation {formation_id} not found after save")
        return formation

    # -- players ----------------------------------------------------------

    def list_players(self) -> List[Player]:
        with self._session() as conn:
            rows = conn.execute("SELECT * FROM players ORDER BY created_at, rowid").fetchall()
        return [self._row_to_player(row) for row in rows]

    def get_player(self, player_id: str) -> Optional[Player]:
        with self._session() as conn:
            row = conn.execute("SELECT * FROM players WHERE id = ?", (player_id,)).fetchone()
        return self._row_to_player(row) if row is not None else None

    def create_player(self, player: NewPlayer, *, player_id: str | None = None) -> Player:
        player_id = player_id or uuid4().hex
        values = player.model_dump()
        with self._session() as conn:
            conn.execute(
                f"""
                INSERT INTO players (id, {", ".join(_PLAYER_COLUMNS)}, created_at)
                VALUES (?, {", ".join("?" for _ in _PLAYER_COLUMNS)}, ?)
                """,
                (
                    player_id,
                    *(_to_column(values[column]) for column in _PLAYER_COLUMNS),
                    datetime.now(timezone.utc).isoformat(),
                ),
            )
        created = self.get_player(player_id)
        if created is None:  # pragma: no cover
            raise KeyError(f"Player {player_id} not found after insert")
        return created

    def update_player(self, player_id: str, changes: Mapping[str, Any]) -> Player:
        unknown = set(changes) - set(_PLAYER_COLUMNS)
        if unknown:
            raise KeyError(f"Unsupported player fields: {', '.join(sorted(unknown))}")
        if self.get_player(player_id) is None:
            raise PlayerNotFound(player_id)
        if changes:
            assignments = ", ".join(f"{column} = ?" for column in changes)
            with self._session() as conn:
                conn.execute(
                    f"UPDATE players SET {assignments} WHERE id = ?",
                    (*(_to_column(value) for value in changes.values()), player_id),
                )
        updated = self.get_player(player_id)
        if updated is None:  # pragma: no cover
            raise PlayerNotFound(player_id)
        return updated

    def delete_player(self, player_id: str) -> None:
        with self._session() as conn:
            conn.execute("DELETE FROM rating_snapshots WHERE player_id = ?", (player_id,))
            deleted = conn.execute("DELETE FROM players WHERE id = ?", (player_id,)).rowcount
        if not deleted:
            raise PlayerNotFound(player_id)

    # -- snapshots --------------------------------------------------------

    def list_snapshots(self, season: int) -> List[RatingSnapshot]:
        """Latest snapshot per player for ``season``."""

        with self._session() as conn:
            rows = conn.execute(
                """
                SELECT s.* FROM rating_snapshots AS s
                JOIN players AS p ON p.id = s.player_id
                WHERE s.season = ?
                ORDER BY p.created_at, p.rowid, s.created_at DESC
                """,
                (season,),
            ).fetchall()
        latest: dict[str, RatingSnapshot] = {}
        for row in rows:
            latest.setdefault(row["player_id"], self._row_to_snapshot(row))
        return list(latest.values())

    def list_player_snapshots(self, player_id: str) -> List[RatingSnapshot]:
        with self._session() as conn:
            rows = conn.execute(
                "SELECT * FROM rating_snapshots WHERE player_id = ? ORDER BY season",
                (player_id,),
            ).fetchall()
        return [self._row_to_snapshot(row) for row in rows]

    def find_snapshot(self, player_id: str, season: int) -> Optional[RatingSnapshot]:
        with self._session() as conn:
            row = conn.execute(
                "SELECT * FROM rating_snapshots WHERE player_id = ? AND season = ?",
                (player_id, season),
            ).fetchone()
        return self._row_to_snapshot(row) if row is not None else None

    def find_latest_snapshot_before(self, player_id: str, season: int) -> Optional[RatingSnapshot]:
        with self._session() as conn:
            row = conn.execute(
                """
                SELECT * FROM rating_snapshots
                WHERE player_id = ? AND season < ?
                ORDER BY season DESC LIMIT 1
                """,
                (player_id, season),
            ).fetchone()
        return self._row_to_snapshot(row) if row is not None else None

    def create_snapshot(
        self,
        *,
        player_id: str,
        season: int,
        ratings: Mapping[str, int],
        ovr: int,
        predicted: bool,
    ) -> RatingSnapshot:
        """Insert a snapshot; raises Conflict if (player_id, season) already exists."""

        with self._session() as conn:
            conn.execute(
                """
                INSERT INTO rating_snapshots (
                    id, player_id, season, ratings_json, ovr, predicted, created_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    uuid4().hex,
                    player_id,
                    season,
                    json.dumps(dict(ratings)),
                    ovr,
                    1 if predicted else 0,
                    datetime.now(timezone.utc).isoformat(),
                ),
            )
        return RatingSnapshot(
            player_id=player_id,
            season=season,
            ratings=dict(ratings),
            ovr=ovr,
            predicted=predicted,
        )

    # -- row mapping ------------------------------------------------------

    def _row_to_archetype(self, row: sqlite3.Row) -> Archetype:
        try:
            return Archetype(
                archetype_id=row["id"],
                position=row["position"],
                name=row["name"],
                subset_keys=_loads(row["subset_keys_json"], []),
                base_template=_loads(row["base_template_json"], {}),
                mapping_config=_loads(row["mapping_config_json"], {}),
            )
        except ValidationError as exc:
            logger.error("Stored archetype %s is malformed: %s", row["id"], exc)
            raise UpstreamFailure(f"Stored archetype {row['id']!r} is malformed") from exc

    def _row_to_formation(self, row: sqlite3.Row, slot_rows: Sequence[sqlite3.Row]) -> Formation:
        return Formation(
            formation_id=row["id"],
            side=row["side"],
            name=row["name"],
            variant=row["variant"],
            slots=[
                FormationSlot(
                    slot_id=slot["id"],
                    slot_key=slot["slot_key"],
                    position_hints=_loads(slot["position_hints_json"], []),
                    x=slot["x"],
                    y=slot["y"],
                )
                for slot in slot_rows
            ],
        )

    def _row_to_player(self, row: sqlite3.Row) -> Player:
        return Player(
            player_id=row["id"],
            name=row["name"],
            position=row["position"],
            height_in=row["height_in"],
            weight_lb=row["weight_lb"],
            enrollment_year=row["enrollment_year"],
            redshirt=bool(row["redshirt"]),
            archetype_id=row["archetype_id"],
            dev_trait=row["dev_trait"],
            dev_cap=row["dev_cap"],
            source_type=row["source_type"],
        )

    def _row_to_snapshot(self, row: sqlite3.Row) -> RatingSnapshot:
        return RatingSnapshot(
            player_id=row["player_id"],
            season=row["season"],
            ratings=_loads(row["ratings_json"], {}),
            ovr=row["ovr"],
            predicted=bool(row["predicted"]),
        )


def _loads(text: Optional[str], default: Any) -> Any:
    """Parse stored JSON; malformed payloads read back as ``default``."""

    if not text:
        return default
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        logger.warning("Ignoring malformed JSON payload in roster store")
        return default


def _clean_template(base_template: Mapping[str, Any] | None) -> dict[str, int]:
    """Template values stored as whole ratings; 72.5 is kept as 73."""

    cleaned: dict[str, int] = {}
    for key, value in (base_template or {}).items():
        try:
            number = float(value)
        except (TypeError, ValueError) as exc:
            raise InvalidInput(f"Template rating {key} must be numeric") from exc
        if isinstance(value, bool) or not math.isfinite(number):
            raise InvalidInput(f"Template rating {key} must be numeric")
        cleaned[str(key).strip().upper()] = clamp_rating(number)
    return cleaned


def _dump_mapping(mapping_config: Mapping[str, Any] | None) -> dict[str, Any]:
    dumped: dict[str, Any] = {}
    for key, rule in (mapping_config or {}).items():
        try:
            parsed = rule if isinstance(rule, MappingRule) else MappingRule.model_validate(rule)
        except ValidationError as exc:
            raise InvalidInput(f"Mapping rule for {key} is malformed") from exc
        dumped[str(key).strip().upper()] = parsed.model_dump()
    return dumped


def _to_column(value: Any) -> Any:
    if isinstance(value, bool):
        return 1 if value else 0
    return value


__all__ = ["DB_PATH_ENV", "RosterStore"]
