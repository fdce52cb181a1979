import pytest
from httpx import ASGITransport, AsyncClient

from depthchart.api import create_app
from depthchart.ingest import seed_defaults
from depthchart.models import NewPlayer


@pytest.fixture
async def client(store):
    seed_defaults(store)
    app = create_app(store)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as async_client:
        async_client.app = app
        yield async_client


def _pocket_passer(store):
    return store.save_archetype(
        position="QB",
        name="Pocket Passer",
        subset_keys=["THP"],
        mapping_config={"SAC": {"intercept": 10, "weights": {"THP": 0.5}}},
    )


def _formation_id(client, key):
    name, _, variant = key.partition(":")
    return client.app.state.store.find_formation_by_key(name, variant or None).formation_id


def _add_receivers(store, ovrs, season=2026):
    for index, ovr in enumerate(ovrs):
        player = store.create_player(NewPlayer(name=f"Wide Out{index}", position="WR", enrollment_year=2024))
        store.create_snapshot(player_id=player.player_id, season=season, ratings={}, ovr=ovr, predicted=False)


@pytest.mark.anyio
async def test_health(client):
    resp = await client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


@pytest.mark.anyio
async def test_formations_listed_after_seed(client):
    resp = await client.get("/formations")
    assert resp.status_code == 200
    keys = {item["key"] for item in resp.json()}
    assert "SHOTGUN:5WR" in keys
    assert "3-3-5" in keys


@pytest.mark.anyio
async def test_create_player_with_archetype(client):
    archetype = _pocket_passer(client.app.state.store)
    resp = await client.post(
        "/players",
        json={
            "name": "Cam Arm",
            "position": "qb",
            "season": 2026,
            "class_year": "Sophomore",
            "archetype_id": archetype.archetype_id,
            "subset": {"THP": 80},
        },
    )
    assert resp.status_code == 201
    body = resp.json()
    assert body["player"]["position"] == "QB"
    assert body["player"]["enrollment_year"] == 2025
    assert body["player"]["source_type"] == "predicted"
    assert body["snapshot"]["predicted"] is True
    assert body["snapshot"]["ratings"]["SAC"] == 50

    listing = await client.get("/players")
    assert [player["name"] for player in listing.json()["players"]] == ["Cam Arm"]


@pytest.mark.anyio
async def test_create_player_requires_enrollment(client):
    resp = await client.post("/players", json={"name": "No Year", "position": "WR", "season": 2026})
    assert resp.status_code == 400
    assert resp.json()["detail"]["kind"] == "invalid_input"


@pytest.mark.anyio
async def test_create_player_blank_name_is_rejected(client):
    resp = await client.post(
        "/players",
        json={"name": "   ", "position": "WR", "season": 2026, "enrollment_year": 2026},
    )
    assert resp.status_code == 422
    assert client.app.state.store.list_players() == []


@pytest.mark.anyio
async def test_create_player_class_year_out_of_range(client):
    resp = await client.post(
        "/players",
        json={"name": "Old Timer", "position": "WR", "season": 1900, "class_year": "Senior"},
    )
    assert resp.status_code == 400
    detail = resp.json()["detail"]
    assert detail["kind"] == "invalid_input"
    assert "enrollment_year" in detail["message"]
    assert client.app.state.store.list_players() == []


@pytest.mark.anyio
async def test_create_player_unknown_class_year(client):
    resp = await client.post(
        "/players",
        json={"name": "Grad Transfer", "position": "WR", "season": 2026, "class_year": "Graduate"},
    )
    assert resp.status_code == 422


@pytest.mark.anyio
async def test_create_player_unknown_archetype(client):
    resp = await client.post(
        "/players",
        json={"name": "Lost", "position": "QB", "season": 2026, "enrollment_year": 2026, "archetype_id": "nope"},
    )
    assert resp.status_code == 404
    assert resp.json()["detail"]["kind"] == "not_found"


@pytest.mark.anyio
async def test_predict(client):
    archetype = _pocket_passer(client.app.state.store)
    resp = await client.post(
        "/predict",
        json={"position": "QB", "archetype_id": archetype.archetype_id, "subset": {"THP": 80}},
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["ratings"]["SAC"] == 50
    assert body["ovr"] == body["ratings"]["OVR"]
    assert body["archetype"] == "Pocket Passer"


@pytest.mark.anyio
async def test_progression_fills_window(client):
    store = client.app.state.store
    player = store.create_player(NewPlayer(name="Grow Er", position="WR", enrollment_year=2025))
    store.create_snapshot(player_id=player.player_id, season=2025, ratings={"SPD": 70}, ovr=60, predicted=False)

    resp = await client.post("/progression", params={"start": 2025, "horizon": 2})
    assert resp.status_code == 200
    body = resp.json()
    assert body["created"] == 2
    assert body["failures"] == []
    assert [snap.season for snap in store.list_player_snapshots(player.player_id)] == [2025, 2026, 2027]

    again = await client.post("/progression", params={"start": 2025, "horizon": 2})
    assert again.json()["created"] == 0


@pytest.mark.anyio
async def test_progression_rejects_negative_horizon(client):
    resp = await client.post("/progression", params={"start": 2025, "horizon": -1})
    assert resp.status_code == 400


@pytest.mark.anyio
async def test_depth_starters(client):
    _add_receivers(client.app.state.store, [74, 91, 55, 85, 65, 80, 60, 70])
    resp = await client.get(
        "/depth",
        params={"formation_id": _formation_id(client, "SHOTGUN:5WR"), "season": 2026, "view": "starters"},
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["formation"]["name"] == "SHOTGUN"
    receivers = [slot for slot in body["slots"] if slot["group"] == "WR"]
    assert [slot["player"]["ovr"] for slot in receivers] == [91, 85, 80, 74, 70]
    qb = next(slot for slot in body["slots"] if slot["slot_key"] == "QB")
    assert qb["player"] is None


@pytest.mark.anyio
async def test_depth_weighted(client):
    _add_receivers(client.app.state.store, [90, 80])
    resp = await client.get(
        "/depth",
        params={"formation_id": _formation_id(client, "SHOTGUN:5WR"), "season": 2026, "view": "weighted"},
    )
    assert resp.status_code == 200
    wr1 = next(slot for slot in resp.json()["slots"] if slot["slot_key"] == "WR1")
    assert wr1["type"] == "weighted"
    assert wr1["composite_ovr"] is not None
    assert [contributor["ovr"] for contributor in wr1["contributors"]][:1] == [90]


@pytest.mark.anyio
async def test_depth_without_formation_is_empty(client):
    resp = await client.get("/depth", params={"season": 2026})
    assert resp.status_code == 200
    assert resp.json()["slots"] == []
    assert resp.json()["formation"] is None


@pytest.mark.anyio
async def test_depth_errors(client):
    missing = await client.get("/depth", params={"formation_id": "nope", "season": 2026})
    assert missing.status_code == 404
    assert missing.json()["detail"]["kind"] == "not_found"

    empty = client.app.state.store.save_formation(side="OFF", name="EMPTY", variant=None, slots=[])
    no_slots = await client.get("/depth", params={"formation_id": empty.formation_id, "season": 2026})
    assert no_slots.status_code == 404
    assert no_slots.json()["detail"]["kind"] == "no_slots"

    bad_view = await client.get(
        "/depth",
        params={"formation_id": _formation_id(client, "SHOTGUN:5WR"), "season": 2026, "view": "depth"},
    )
    assert bad_view.status_code == 400

    no_season = await client.get("/depth", params={"formation_id": _formation_id(client, "SHOTGUN:5WR")})
    assert no_season.status_code == 400


@pytest.mark.anyio
async def test_roster(client):
    _add_receivers(client.app.state.store, [77])
    resp = await client.get("/roster", params={"season": 2026, "side": "OFF"})
    assert resp.status_code == 200
    rows = {row["pos"]: row["players"] for row in resp.json()["rows"]}
    assert rows["WR"][0]["ovr"] == 77
    assert rows["WR"][0]["band"] == "good"

    bad = await client.get("/roster", params={"season": 2026, "side": "ST"})
    assert bad.status_code == 400


@pytest.mark.anyio
async def test_patch_and_delete_player(client):
    store = client.app.state.store
    player = store.create_player(NewPlayer(name="Edit Me", position="CB", enrollment_year=2024))

    patched = await client.patch(f"/players/{player.player_id}", json={"dev_trait": "Star", "dev_cap": 85})
    assert patched.status_code == 200
    assert patched.json()["dev_trait"] == "Star"

    rejected = await client.patch(f"/players/{player.player_id}", json={"jersey": 12})
    assert rejected.status_code == 422

    snapshots = await client.get(f"/players/{player.player_id}/snapshots")
    assert snapshots.status_code == 200
    assert snapshots.json() == []

    deleted = await client.delete(f"/players/{player.player_id}")
    assert deleted.json() == {"ok": True}

    gone = await client.get(f"/players/{player.player_id}/snapshots")
    assert gone.status_code == 404
    again = await client.delete(f"/players/{player.player_id}")
    assert again.status_code == 404
