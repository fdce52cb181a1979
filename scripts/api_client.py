"""Lightweight REST client for the depthchart API."""

from __future__ import annotations

import argparse
import json
from pathlib import Path

import httpx


def build_subset(raw: str) -> dict[str, float]:
    if not raw:
        return {}
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        raise SystemExit(f"Invalid subset JSON: {exc}") from exc


def _print(resp: httpx.Response) -> None:
    if resp.status_code >= 400:
        detail = resp.json().get("detail") if resp.headers.get("content-type", "").startswith("application/json") else resp.text
        raise SystemExit(f"{resp.status_code}: {detail}")
    print(json.dumps(resp.json(), indent=2))


def main() -> None:
    parser = argparse.ArgumentParser(description="Interact with the depthchart REST API")
    parser.add_argument("base_url", help="Base URL of the API, e.g. http://localhost:8000")
    parser.add_argument("--list-formations", action="store_true", help="List formations and exit")
    parser.add_argument("--list-players", action="store_true", help="List players and exit")
    parser.add_argument("--archetypes", metavar="POSITION", nargs="?", const="", help="List archetypes")
    parser.add_argument("--predict", nargs=2, metavar=("POSITION", "ARCHETYPE_ID"), help="Predict ratings")
    parser.add_argument("--subset", default="", help="JSON object of known ratings for --predict")
    parser.add_argument("--progress", type=int, metavar="START", help="Fill snapshots from START season")
    parser.add_argument("--horizon", type=int, default=None, help="Seasons after START")
    parser.add_argument("--depth", metavar="FORMATION_ID", help="Resolve a depth chart")
    parser.add_argument("--season", type=int, default=None, help="Season for --depth/--roster")
    parser.add_argument("--view", default="starters", help="starters, backups or weighted")
    parser.add_argument("--roster", metavar="SIDE", help="Roster board for OFF or DEF")
    parser.add_argument("--output", type=Path, help="Write the JSON response to this path")
    args = parser.parse_args()

    with httpx.Client(base_url=args.base_url) as client:
        if args.list_formations:
            _print(client.get("/formations"))
        if args.list_players:
            _print(client.get("/players"))
        if args.archetypes is not None:
            params = {"position": args.archetypes} if args.archetypes else {}
            _print(client.get("/archetypes", params=params))
        if args.predict:
            position, archetype_id = args.predict
            payload = {
                "position": position,
                "archetype_id": archetype_id,
                "subset": build_subset(args.subset),
            }
            _print(client.post("/predict", json=payload))
        if args.progress is not None:
            params = {"start": args.progress}
            if args.horizon is not None:
                params["horizon"] = args.horizon
            _print(client.post("/progression", params=params, timeout=120.0))
        if args.depth:
            if args.season is None:
                raise SystemExit("--season is required with --depth")
            resp = client.get(
                "/depth",
                params={"formation_id": args.depth, "season": args.season, "view": args.view},
            )
            if args.output and resp.status_code < 400:
                args.output.write_text(json.dumps(resp.json(), indent=2), encoding="utf-8")
                print(f"Depth chart saved to {args.output}")
            else:
                _print(resp)
        if args.roster:
            if args.season is None:
                raise SystemExit("--season is required with --roster")
            _print(client.get("/roster", params={"season": args.season, "side": args.roster}))


if __name__ == "__main__":
    main()
