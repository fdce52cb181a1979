import pytest

from depthchart.errors import Conflict, InvalidInput, PlayerNotFound, UpstreamFailure
from depthchart.models import NewPlayer
from depthchart.persistence import RosterStore


def _player(store, name="Sam Slot", position="WR"):
    return store.create_player(NewPlayer(name=name, position=position, enrollment_year=2024))


def test_duplicate_snapshot_conflicts(store):
    player = _player(store)
    store.create_snapshot(player_id=player.player_id, season=2025, ratings={"SPD": 80}, ovr=70, predicted=False)
    with pytest.raises(Conflict):
        store.create_snapshot(player_id=player.player_id, season=2025, ratings={"SPD": 81}, ovr=71, predicted=True)
    assert store.find_snapshot(player.player_id, 2025).ovr == 70


def test_snapshot_lookups(store):
    player = _player(store)
    for season, ovr in ((2022, 60), (2024, 64)):
        store.create_snapshot(player_id=player.player_id, season=season, ratings={}, ovr=ovr, predicted=False)
    assert store.find_latest_snapshot_before(player.player_id, 2025).season == 2024
    assert store.find_latest_snapshot_before(player.player_id, 2024).season == 2022
    assert store.find_latest_snapshot_before(player.player_id, 2022) is None
    assert [snap.player_id for snap in store.list_snapshots(2024)] == [player.player_id]
    assert store.list_snapshots(2023) == []


def test_player_crud(store):
    player = _player(store, name="  Sam   Slot ", position="wr")
    assert player.name == "Sam Slot"
    assert player.position == "WR"
    assert store.get_player(player.player_id) == player

    updated = store.update_player(player.player_id, {"dev_trait": "Star", "dev_cap": 88})
    assert updated.dev_trait == "Star"
    assert updated.dev_cap == 88

    store.create_snapshot(player_id=player.player_id, season=2025, ratings={}, ovr=70, predicted=False)
    store.delete_player(player.player_id)
    assert store.get_player(player.player_id) is None
    assert store.list_player_snapshots(player.player_id) == []


def test_missing_player(store):
    with pytest.raises(PlayerNotFound):
        store.update_player("missing", {"dev_cap": 80})
    with pytest.raises(PlayerNotFound):
        store.delete_player("missing")
    with pytest.raises(KeyError):
        store.update_player("missing", {"jersey": 1})


def test_archetype_upsert_keeps_template(store):
    first = store.save_archetype(
        position="qb",
        name="Scrambler",
        subset_keys=["spd"],
        base_template={"THP": 80},
        mapping_config={"SAC": {"intercept": 5, "weights": {"THP": 0.5}}},
    )
    second = store.save_archetype(position="QB", name="Scrambler", subset_keys=["SPD", "ACC"])
    assert second.archetype_id == first.archetype_id
    assert second.subset_keys == ["SPD", "ACC"]
    assert second.base_template == {"THP": 80}
    assert second.mapping_config["SAC"].intercept == 5
    assert [item.name for item in store.list_archetypes(position="qb")] == ["Scrambler"]
    assert store.list_archetypes(position="WR") == []


def test_save_formation_replaces_slots(store):
    slots = [{"slot_key": "qb", "position_hints": ["qb"], "x": 0.5, "y": 0.6}]
    first = store.save_formation(side="off", name="pistol", variant=None, slots=slots)
    second = store.save_formation(side="OFF", name="PISTOL", variant="", slots=slots * 2)
    assert first.formation_id == second.formation_id
    assert len(second.slots) == 2
    assert second.slots[0].slot_key == "QB"
    assert second.slots[0].position_hints == ["QB"]
    assert store.find_formation_by_key("pistol") == second


def test_env_path_overrides(tmp_path, monkeypatch):
    target = tmp_path / "from_env.sqlite"
    monkeypatch.setenv("DEPTHCHART_DB_PATH", str(target))
    store = RosterStore(tmp_path / "ignored.sqlite")
    assert store.db_path == target
    assert target.exists()


def test_unavailable_store(tmp_path, monkeypatch):
    monkeypatch.delenv("DEPTHCHART_DB_PATH", raising=False)
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory", encoding="utf-8")
    with pytest.raises(UpstreamFailure):
        RosterStore(blocker / "db.sqlite")


def test_archetype_template_is_coerced_to_ratings(store):
    archetype = store.save_archetype(
        position="WR",
        name="Deep Threat",
        subset_keys=["SPD"],
        base_template={"spd": 72.5, "CTH": 120, "AWR": "64"},
    )
    assert archetype.base_template == {"SPD": 73, "CTH": 99, "AWR": 64}
    assert store.find_archetype(archetype.archetype_id) == archetype


def test_archetype_rejects_malformed_template_and_rules(store):
    with pytest.raises(InvalidInput):
        store.save_archetype(position="WR", name="Bad", subset_keys=[], base_template={"SPD": "fast"})
    with pytest.raises(InvalidInput):
        store.save_archetype(
            position="WR",
            name="Bad",
            subset_keys=[],
            mapping_config={"CTH": {"intercept": "high", "weights": {}}},
        )
    assert store.list_archetypes(position="WR") == []
