"""Command-line interface for seeding, predicting, progressing and resolving depth charts."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from depthchart.api import DEFAULT_DB_PATH, DEFAULT_HORIZON, DEFAULT_HORIZON_ENV
from depthchart.config import env_int, get_template_by_key
from depthchart.config_loader import ArchetypeCatalog
from depthchart.depth import VIEWS, export_depth_to_csv, resolve_depth
from depthchart.errors import DepthChartError, FormationNotFound
from depthchart.ingest import (
    ArchetypeDraft,
    import_archetypes,
    import_formation,
    load_archetype_csv,
    load_formation_csv,
    seed_defaults,
)
from depthchart.persistence import RosterStore
from depthchart.predict import predict_ratings
from depthchart.progression import ensure_snapshots
from depthchart.roster import build_roster


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Depth chart, rating prediction and progression tools")
    parser.add_argument("--db", type=Path, default=DEFAULT_DB_PATH, help="Path to the SQLite database")
    parser.add_argument("--verbose", action="store_true", help="Log at DEBUG level")
    sub = parser.add_subparsers(dest="command", required=True)

    seed = sub.add_parser("seed", help="Write built-in formations and optional seed files")
    seed.add_argument("--archetypes", type=Path, default=None, help="Archetype CSV or JSON catalog")
    seed.add_argument("--formation", type=Path, default=None, help="Formation slot CSV")
    seed.add_argument("--side", default="OFF", help="Side for --formation (OFF or DEF)")
    seed.add_argument("--name", default=None, help="Formation name for --formation")
    seed.add_argument("--variant", default=None, help="Formation variant for --formation")
    seed.add_argument("--export-catalog", type=Path, default=None, help="Write stored archetypes to JSON")

    predict = sub.add_parser("predict", help="Predict a full rating vector")
    predict.add_argument("position", help="Player position (e.g., QB)")
    predict.add_argument("archetype_id", help="Archetype id")
    predict.add_argument(
        "--subset",
        action="append",
        default=[],
        help="Known rating as KEY=VALUE (repeatable)",
    )
    predict.add_argument("--dev-trait", default="Normal", help="Normal, Impact, Star or Elite")
    predict.add_argument("--dev-cap", type=int, default=None, help="Soft cap for ratings")

    progress = sub.add_parser("progress", help="Fill missing snapshots for a season window")
    progress.add_argument("--start", type=int, required=True, help="First season of the window")
    progress.add_argument(
        "--horizon",
        type=int,
        default=None,
        help=f"Seasons after --start (default ${DEFAULT_HORIZON_ENV} or {DEFAULT_HORIZON})",
    )
    progress.add_argument("--workers", type=int, default=None, help="Players processed in parallel")

    depth = sub.add_parser("depth", help="Resolve a formation's depth chart")
    depth.add_argument("formation", help="Formation id or NAME:VARIANT (e.g., SHOTGUN:5WR)")
    depth.add_argument("--season", type=int, required=True)
    depth.add_argument("--view", choices=VIEWS, default="starters")
    depth.add_argument("--output", type=Path, default=None, help="Write CSV instead of JSON")

    roster = sub.add_parser("roster", help="Show the roster board for one side")
    roster.add_argument("--season", type=int, required=True)
    roster.add_argument("--side", default="OFF", choices=("OFF", "DEF"))

    serve = sub.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8000)

    return parser.parse_args(argv)


def _parse_mapping(entries: list[str]) -> dict[str, float]:
    mapping: dict[str, float] = {}
    for entry in entries:
        if "=" not in entry:
            raise ValueError(f"Invalid subset entry '{entry}', expected KEY=VALUE")
        key, value = entry.split("=", 1)
        try:
            mapping[key.strip().upper()] = float(value)
        except ValueError as exc:
            raise ValueError(f"Invalid subset value '{value}' for {key.strip()}") from exc
    return mapping


def _find_formation_id(store: RosterStore, reference: str) -> str:
    if store.find_formation(reference) is not None:
        return reference
    name, _, variant = reference.partition(":")
    try:
        side: str | None = get_template_by_key(reference).side
    except (KeyError, ValueError):
        side = None
    formation = store.find_formation_by_key(name, variant or None, side=side)
    if formation is None:
        raise FormationNotFound(reference)
    return formation.formation_id


def _run_seed(store: RosterStore, args: argparse.Namespace) -> None:
    formations = seed_defaults(store)
    print(f"Seeded {len(formations)} built-in formations")
    if args.archetypes:
        if args.archetypes.suffix.lower() == ".json":
            drafts = ArchetypeCatalog.load(args.archetypes).archetypes
        else:
            drafts = load_archetype_csv(args.archetypes)
        print(f"Seeded/updated {import_archetypes(store, drafts)} archetypes")
    if args.formation:
        if not args.name:
            raise ValueError("--name is required with --formation")
        formation = import_formation(
            store,
            side=args.side,
            name=args.name,
            variant=args.variant,
            slots=load_formation_csv(args.formation),
        )
        print(f"Imported formation {formation.key} ({len(formation.slots)} slots) as {formation.formation_id}")
    if args.export_catalog:
        catalog = ArchetypeCatalog(
            archetypes=[
                ArchetypeDraft(
                    position=archetype.position,
                    name=archetype.name,
                    subset_keys=list(archetype.subset_keys),
                    base_template=dict(archetype.base_template),
                    mapping_config={
                        key: rule.model_dump() for key, rule in archetype.mapping_config.items()
                    },
                )
                for archetype in store.list_archetypes()
            ]
        )
        catalog.save(args.export_catalog)
        print(f"Wrote archetype catalog to {args.export_catalog}")


def _run(store: RosterStore, args: argparse.Namespace) -> None:
    if args.command == "seed":
        _run_seed(store, args)
    elif args.command == "predict":
        prediction = predict_ratings(
            store,
            position=args.position,
            archetype_id=args.archetype_id,
            subset=_parse_mapping(args.subset),
            dev_trait=args.dev_trait,
            dev_cap=args.dev_cap,
        )
        print(json.dumps({"ovr": prediction.ovr, "ratings": prediction.ratings}, indent=2))
    elif args.command == "progress":
        horizon = args.horizon
        if horizon is None:
            horizon = env_int(DEFAULT_HORIZON_ENV, DEFAULT_HORIZON, min_value=0)
        report = ensure_snapshots(store, args.start, horizon, workers=args.workers)
        print(
            f"Created {report.created} snapshots for {report.players_processed} players "
            f"({len(report.skipped_player_ids)} skipped, {len(report.failures)} failed)"
        )
        for failure in report.failures:
            print(f"  {failure.player_id}: {failure.kind}: {failure.message}")
    elif args.command == "depth":
        chart = resolve_depth(store, _find_formation_id(store, args.formation), args.season, args.view)
        if args.output:
            args.output.write_text(export_depth_to_csv(chart), encoding="utf-8")
            print(f"Wrote {len(chart.slots)} slots to {args.output}")
        else:
            print(json.dumps(chart.to_dict(), indent=2))
    elif args.command == "roster":
        board = build_roster(store, args.season, args.side)
        for row in board.rows:
            names = ", ".join(f"{entry.name} {entry.ovr} ({entry.class_label})" for entry in row.players)
            print(f"{row.pos:<5} {names or '-'}")


def main(argv: list[str] | None = None) -> None:
    args = _parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    if args.command == "serve":
        import uvicorn

        from depthchart.api import create_app

        uvicorn.run(create_app(RosterStore(args.db)), host=args.host, port=args.port)
        return

    try:
        _run(RosterStore(args.db), args)
    except DepthChartError as exc:
        print(f"{exc.kind}: {exc.message}", file=sys.stderr)
        raise SystemExit(1) from exc
    except ValueError as exc:
        print(str(exc), file=sys.stderr)
        raise SystemExit(2) from exc


if __name__ == "__main__":
    main()
