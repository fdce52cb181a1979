"""REST API for the depth chart service."""

from __future__ import annotations

import logging
from dataclasses import asdict
from pathlib import Path
from typing import List, Optional

from fastapi import FastAPI, HTTPException, Query
from pydantic import ValidationError

from depthchart.api.schemas import (
    ArchetypeResponse,
    DepthResponse,
    FormationResponse,
    PlayerCreateRequest,
    PlayerCreateResponse,
    PlayerListResponse,
    PlayerResponse,
    PredictRequest,
    PredictResponse,
    ProgressionResponse,
    RosterResponse,
    SnapshotResponse,
)
from depthchart.config import env_int
from depthchart.depth import resolve_depth
from depthchart.errors import DepthChartError, InvalidInput, PlayerNotFound
from depthchart.models import NewPlayer, PlayerUpdate
from depthchart.persistence import RosterStore
from depthchart.predict import predict_ratings
from depthchart.progression import ensure_snapshots
from depthchart.roster import build_roster, derive_enrollment_year, register_player, update_player


logger = logging.getLogger(__name__)

DEFAULT_HORIZON_ENV = "DEPTHCHART_DEFAULT_HORIZON"
DEFAULT_HORIZON = 5
DEFAULT_DB_PATH = Path(__file__).resolve().parent.parent / "depthchart.sqlite"


def _http_error(exc: DepthChartError) -> HTTPException:
    if exc.status_code >= 500:
        logger.error("Request failed: %s (%s)", exc.message, exc.kind)
    return HTTPException(status_code=exc.status_code, detail=exc.to_dict())


def _enrollment_year(payload: PlayerCreateRequest) -> int:
    if payload.enrollment_year is not None:
        return payload.enrollment_year
    if payload.class_year:
        return derive_enrollment_year(payload.season, payload.class_year, payload.redshirt)
    raise InvalidInput("enrollment_year or class_year is required")


def _new_player(payload: PlayerCreateRequest) -> NewPlayer:
    try:
        return payload.to_new_player(_enrollment_year(payload))
    except ValidationError as exc:
        fields = ", ".join(sorted({str(error["loc"][0]) for error in exc.errors() if error.get("loc")}))
        raise InvalidInput(f"Invalid player fields: {fields or 'payload'}") from exc


def create_app(store: RosterStore | None = None) -> FastAPI:
    app = FastAPI(title="depthchart")
    app.state.store = store or RosterStore(DEFAULT_DB_PATH)

    def current_store() -> RosterStore:
        return app.state.store

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/archetypes", response_model=List[ArchetypeResponse])
    async def list_archetypes(position: Optional[str] = Query(None)) -> List[ArchetypeResponse]:
        try:
            archetypes = current_store().list_archetypes(position=position)
        except DepthChartError as exc:
            raise _http_error(exc) from exc
        return [
            ArchetypeResponse(
                archetype_id=archetype.archetype_id,
                position=archetype.position,
                name=archetype.name,
                subset_keys=archetype.subset_keys,
                base_template=archetype.base_template,
            )
            for archetype in archetypes
        ]

    @app.get("/formations", response_model=List[FormationResponse])
    async def list_formations() -> List[FormationResponse]:
        try:
            formations = current_store().list_formations()
        except DepthChartError as exc:
            raise _http_error(exc) from exc
        return [
            FormationResponse.model_validate({**formation.model_dump(), "key": formation.key})
            for formation in formations
        ]

    @app.get("/players", response_model=PlayerListResponse)
    async def list_players() -> PlayerListResponse:
        try:
            players = current_store().list_players()
        except DepthChartError as exc:
            raise _http_error(exc) from exc
        return PlayerListResponse(players=[PlayerResponse.from_player(player) for player in players])

    @app.post("/players", response_model=PlayerCreateResponse, status_code=201)
    async def create_player(payload: PlayerCreateRequest) -> PlayerCreateResponse:
        try:
            registered = register_player(
                current_store(),
                _new_player(payload),
                season=payload.season,
                subset=payload.subset,
                ratings=payload.ratings,
            )
        except DepthChartError as exc:
            raise _http_error(exc) from exc
        return PlayerCreateResponse(
            player=PlayerResponse.from_player(registered.player),
            snapshot=SnapshotResponse.from_snapshot(registered.snapshot) if registered.snapshot else None,
        )

    @app.patch("/players/{player_id}", response_model=PlayerResponse)
    async def patch_player(player_id: str, changes: PlayerUpdate) -> PlayerResponse:
        try:
            player = update_player(current_store(), player_id, changes)
        except DepthChartError as exc:
            raise _http_error(exc) from exc
        return PlayerResponse.from_player(player)

    @app.delete("/players/{player_id}")
    async def delete_player(player_id: str) -> dict[str, bool]:
        try:
            current_store().delete_player(player_id)
        except DepthChartError as exc:
            raise _http_error(exc) from exc
        return {"ok": True}

    @app.get("/players/{player_id}/snapshots", response_model=List[SnapshotResponse])
    async def player_snapshots(player_id: str) -> List[SnapshotResponse]:
        store = current_store()
        try:
            if store.get_player(player_id) is None:
                raise PlayerNotFound(player_id)
            snapshots = store.list_player_snapshots(player_id)
        except DepthChartError as exc:
            raise _http_error(exc) from exc
        return [SnapshotResponse.from_snapshot(snapshot) for snapshot in snapshots]

    @app.post("/predict", response_model=PredictResponse)
    async def predict(payload: PredictRequest) -> PredictResponse:
        try:
            prediction = predict_ratings(
                current_store(),
                position=payload.position,
                archetype_id=payload.archetype_id,
                subset=payload.subset,
                dev_trait=payload.dev_trait,
                dev_cap=payload.dev_cap,
            )
        except DepthChartError as exc:
            raise _http_error(exc) from exc
        return PredictResponse(
            ratings=prediction.ratings,
            ovr=prediction.ovr,
            archetype=prediction.archetype_name,
            archetype_position=prediction.archetype_position,
        )

    @app.post("/progression", response_model=ProgressionResponse)
    async def progression(
        start: int = Query(...),
        horizon: Optional[int] = Query(None),
    ) -> ProgressionResponse:
        if horizon is None:
            horizon = env_int(DEFAULT_HORIZON_ENV, DEFAULT_HORIZON, min_value=0)
        try:
            report = ensure_snapshots(current_store(), start, horizon)
        except DepthChartError as exc:
            raise _http_error(exc) from exc
        return ProgressionResponse.model_validate(asdict(report))

    @app.get("/depth", response_model=DepthResponse)
    async def depth(
        formation_id: Optional[str] = Query(None),
        season: Optional[int] = Query(None),
        view: str = Query("starters"),
    ) -> DepthResponse:
        if not formation_id:
            return DepthResponse(formation=None, season=season, view=view, slots=[])
        try:
            if season is None:
                raise InvalidInput("season is required")
            chart = resolve_depth(current_store(), formation_id, season, view)
        except DepthChartError as exc:
            raise _http_error(exc) from exc
        return DepthResponse.model_validate(chart.to_dict())

    @app.get("/roster", response_model=RosterResponse)
    async def roster(season: int = Query(...), side: str = Query("OFF")) -> RosterResponse:
        try:
            board = build_roster(current_store(), season, side)
        except DepthChartError as exc:
            raise _http_error(exc) from exc
        return RosterResponse.model_validate(board.to_dict())

    return app


__all__ = ["create_app"]
