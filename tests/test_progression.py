import sqlite3

import pytest

from depthchart.errors import InvalidInput, UpstreamFailure
from depthchart.models import NewPlayer
from depthchart.persistence import RosterStore
from depthchart.progression import (
    age_multiplier,
    apply_age_nudge,
    ensure_snapshots,
    grow_ratings,
    project_next_season,
    years_since_enrollment,
)
from depthchart.ratings import ATTRIBUTE_KEYS, compute_ovr


def _archetype(store):
    return store.save_archetype(position="WR", name="Route Runner", subset_keys=["SPD", "CTH"])


def _player(store, *, enrollment_year=2025, redshirt=False, archetype_id=None, position="WR", name="Test Player"):
    return store.create_player(
        NewPlayer(
            name=name,
            position=position,
            enrollment_year=enrollment_year,
            redshirt=redshirt,
            archetype_id=archetype_id,
        )
    )


def _flat(value: int) -> dict[str, int]:
    return {key: value for key in ATTRIBUTE_KEYS}


def test_age_curve():
    assert age_multiplier(-1) == 1.2
    assert age_multiplier(0) == 1.2
    assert age_multiplier(1) == 1.1
    assert age_multiplier(2) == 1.0
    assert age_multiplier(3) == 0.7
    assert age_multiplier(6) == 0.4
    assert years_since_enrollment(2027, 2025, True) == 1


def test_grow_ratings_uses_dev_trait_and_position_boost():
    ratings = _flat(60)
    qb = grow_ratings(ratings, position="QB", dev_trait="Elite")
    wr = grow_ratings(ratings, position="WR", dev_trait="Elite")
    normal = grow_ratings(ratings, position="WR", dev_trait="Normal")
    assert qb["SAC"] == 63
    assert wr["SAC"] == 62
    assert normal["AWR"] == 62
    assert normal["INJ"] == 60


def test_grow_ratings_soft_caps():
    grown = grow_ratings(_flat(79), position="WR", dev_trait="Normal", dev_cap=80)
    # 79 + 2.0 = 81 -> 80 + 0.5
    assert grown["AWR"] == 81
    assert all(value <= 99 for value in grow_ratings(_flat(99), position="WR", dev_trait="Elite").values())


def test_age_nudge_is_gentle():
    nudged = apply_age_nudge(_flat(70), 1.2)
    assert nudged["SPD"] == 70
    assert apply_age_nudge(_flat(0), 0.4)["SPD"] == 0


def test_project_next_season_recomputes_ovr(store):
    player = _player(store)
    projected = project_next_season(_flat(70), season=2026, player=player)
    assert projected["SPD"] == 71
    assert projected["AWR"] == 72
    assert projected["OVR"] == compute_ovr("WR", projected)


def test_baseline_snapshot_for_redshirt_enrollee(store):
    archetype = _archetype(store)
    player = _player(store, enrollment_year=2025, redshirt=True, archetype_id=archetype.archetype_id)

    report = ensure_snapshots(store, 2025, 0)

    assert report.created == 1
    snapshots = store.list_player_snapshots(player.player_id)
    assert [snap.season for snap in snapshots] == [2025]
    assert snapshots[0].predicted is True
    assert snapshots[0].ratings["SPD"] == 50


def test_fills_every_season_without_gaps(store):
    archetype = _archetype(store)
    player = _player(store, archetype_id=archetype.archetype_id)
    ensure_snapshots(store, 2025, 3)
    seasons = [snap.season for snap in store.list_player_snapshots(player.player_id)]
    assert seasons == [2025, 2026, 2027, 2028]


def test_walks_forward_from_earlier_snapshot(store):
    player = _player(store, enrollment_year=2022)
    store.create_snapshot(player_id=player.player_id, season=2023, ratings=_flat(65), ovr=65, predicted=False)

    report = ensure_snapshots(store, 2025, 1)

    assert report.created == 3
    seasons = [snap.season for snap in store.list_player_snapshots(player.player_id)]
    assert seasons == [2023, 2024, 2025, 2026]
    assert store.find_snapshot(player.player_id, 2023).predicted is False


def test_existing_snapshots_are_never_rewritten(store):
    player = _player(store)
    store.create_snapshot(player_id=player.player_id, season=2025, ratings=_flat(70), ovr=70, predicted=False)
    store.create_snapshot(player_id=player.player_id, season=2027, ratings=_flat(40), ovr=40, predicted=False)

    ensure_snapshots(store, 2025, 3)

    assert store.find_snapshot(player.player_id, 2027).ovr == 40
    # 2028 grows from the stored 2027 ratings
    assert store.find_snapshot(player.player_id, 2028).ratings["AWR"] == 42


def test_second_run_writes_nothing(store):
    archetype = _archetype(store)
    player = _player(store, archetype_id=archetype.archetype_id)
    ensure_snapshots(store, 2025, 2)
    before = store.list_player_snapshots(player.player_id)

    report = ensure_snapshots(store, 2025, 2)

    assert report.created == 0
    assert store.list_player_snapshots(player.player_id) == before


def test_ineligible_players_are_skipped(store):
    archetype = _archetype(store)
    future = _player(store, enrollment_year=2027, archetype_id=archetype.archetype_id)
    no_archetype = _player(store, name="No Archetype")

    report = ensure_snapshots(store, 2025, 1)

    assert set(report.skipped_player_ids) == {future.player_id, no_archetype.player_id}
    assert store.list_player_snapshots(future.player_id) == []


class _FlakyStore(RosterStore):
    def __init__(self, db_path, failing_player_id=None):
        super().__init__(db_path)
        self.failing_player_id = failing_player_id

    def create_snapshot(self, *, player_id, **kwargs):
        if player_id == self.failing_player_id:
            raise UpstreamFailure("store unavailable")
        return super().create_snapshot(player_id=player_id, **kwargs)


@pytest.mark.parametrize("workers", [1, 4])
def test_failure_is_isolated_per_player(tmp_path, monkeypatch, workers):
    monkeypatch.delenv("DEPTHCHART_DB_PATH", raising=False)
    flaky = _FlakyStore(tmp_path / "flaky.sqlite")
    archetype = _archetype(flaky)
    broken = _player(flaky, archetype_id=archetype.archetype_id, name="Broken Player")
    healthy = _player(flaky, archetype_id=archetype.archetype_id, name="Healthy Player")
    flaky.failing_player_id = broken.player_id

    report = ensure_snapshots(flaky, 2025, 1, workers=workers)

    assert [failure.player_id for failure in report.failures] == [broken.player_id]
    assert report.failures[0].kind == "upstream_failure"
    assert len(flaky.list_player_snapshots(healthy.player_id)) == 2
    assert flaky.list_player_snapshots(broken.player_id) == []


class _CrashingStore(RosterStore):
    def __init__(self, db_path, crashing_player_id=None):
        super().__init__(db_path)
        self.crashing_player_id = crashing_player_id

    def find_snapshot(self, player_id, season):
        if player_id == self.crashing_player_id:
            raise RuntimeError("disk went away")
        return super().find_snapshot(player_id, season)


@pytest.mark.parametrize("workers", [1, 4])
def test_unexpected_error_is_isolated_per_player(tmp_path, monkeypatch, workers):
    monkeypatch.delenv("DEPTHCHART_DB_PATH", raising=False)
    crashing = _CrashingStore(tmp_path / "crashing.sqlite")
    archetype = _archetype(crashing)
    broken = _player(crashing, archetype_id=archetype.archetype_id, name="Broken Player")
    healthy = _player(crashing, archetype_id=archetype.archetype_id, name="Healthy Player")
    crashing.crashing_player_id = broken.player_id

    report = ensure_snapshots(crashing, 2025, 1, workers=workers)

    assert [failure.player_id for failure in report.failures] == [broken.player_id]
    assert report.failures[0].kind == "upstream_failure"
    assert "disk went away" not in report.failures[0].message
    assert len(crashing.list_player_snapshots(healthy.player_id)) == 2


def test_malformed_stored_archetype_fails_only_its_players(store):
    good = _archetype(store)
    bad = store.save_archetype(position="WR", name="Bad", subset_keys=["SPD"])
    conn = sqlite3.connect(store.db_path)
    with conn:
        conn.execute(
            "UPDATE archetypes SET base_template_json = ? WHERE id = ?",
            ('{"SPD": 72.5}', bad.archetype_id),
        )
    conn.close()
    poisoned = _player(store, archetype_id=bad.archetype_id, name="Poisoned Player")
    healthy = _player(store, archetype_id=good.archetype_id, name="Healthy Player")

    report = ensure_snapshots(store, 2025, 1)

    assert [failure.player_id for failure in report.failures] == [poisoned.player_id]
    assert report.failures[0].kind == "upstream_failure"
    assert report.players_processed == 1
    assert len(store.list_player_snapshots(healthy.player_id)) == 2
    assert store.list_player_snapshots(poisoned.player_id) == []


def test_invalid_window(store):
    with pytest.raises(InvalidInput):
        ensure_snapshots(store, 2025, -1)
    with pytest.raises(InvalidInput):
        ensure_snapshots(store, "2025", 1)
