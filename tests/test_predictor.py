import pytest

from depthchart.errors import ArchetypeNotFound, InvalidInput
from depthchart.predict import fallback_value, predict_ratings
from depthchart.ratings import RATING_KEYS, compute_ovr


def _pocket_passer(store):
    return store.save_archetype(
        position="QB",
        name="Pocket Passer",
        subset_keys=["THP", "SAC"],
        base_template={"STA": 77},
        mapping_config={"SAC": {"intercept": 10, "weights": {"THP": 0.5}}},
    )


def test_mapping_rule_scenario(store):
    archetype = _pocket_passer(store)
    prediction = predict_ratings(store, position="QB", archetype_id=archetype.archetype_id, subset={"THP": 80})
    assert prediction.ratings["SAC"] == 50
    assert prediction.ratings["THP"] == 80


def test_legacy_rule_spelling(store):
    archetype = store.save_archetype(
        position="QB",
        name="Legacy",
        subset_keys=["THP"],
        mapping_config={"MAC": {"a0": 5, "w": {"thp": 0.25}}},
    )
    prediction = predict_ratings(store, position="QB", archetype_id=archetype.archetype_id, subset={"THP": 80})
    assert prediction.ratings["MAC"] == 25


def test_every_key_in_range_and_ovr_consistent(store):
    archetype = _pocket_passer(store)
    prediction = predict_ratings(
        store,
        position="QB",
        archetype_id=archetype.archetype_id,
        subset={"THP": 95, "SPD": 70, "AWR": 60},
    )
    assert set(prediction.ratings) == set(RATING_KEYS)
    assert all(0 <= value <= 99 for value in prediction.ratings.values())
    assert prediction.ovr == compute_ovr("QB", prediction.ratings)
    assert prediction.ratings["OVR"] == prediction.ovr


def test_template_values_are_kept(store):
    archetype = _pocket_passer(store)
    prediction = predict_ratings(store, position="QB", archetype_id=archetype.archetype_id, subset={})
    assert prediction.ratings["STA"] == 77


def test_prediction_is_deterministic(store):
    archetype = _pocket_passer(store)
    kwargs = dict(position="QB", archetype_id=archetype.archetype_id, subset={"THP": 88, "SPD": 64})
    first = predict_ratings(store, **kwargs)
    second = predict_ratings(store, **kwargs)
    assert first == second


def test_dev_cap_applied_to_prediction(store):
    archetype = _pocket_passer(store)
    prediction = predict_ratings(
        store,
        position="QB",
        archetype_id=archetype.archetype_id,
        subset={"THP": 90, "AWR": 80},
        dev_cap=80,
    )
    assert prediction.ratings["THP"] == 85
    assert prediction.ratings["AWR"] == 80


def test_no_inputs_default_to_neutral(store):
    archetype = store.save_archetype(position="WR", name="Deep Threat", subset_keys=["SPD"])
    prediction = predict_ratings(store, position="WR", archetype_id=archetype.archetype_id)
    assert prediction.ratings["SPD"] == 50
    assert prediction.ratings["CTH"] == 50


def test_fallback_chain():
    assert fallback_value("ACC", {"SPD": 91}) == 91
    assert fallback_value("ACC", {"AGI": 70}) == 70
    assert fallback_value("PBK", {"AWR": 66, "SPD": 90}) == 66
    assert fallback_value("SPD", {"SPD": 88}) == 88
    assert fallback_value("TAK", {"SPD": 60, "CTH": 71}) == 66
    assert fallback_value("TAK", {}) == 50


def test_unknown_archetype(store):
    with pytest.raises(ArchetypeNotFound):
        predict_ratings(store, position="QB", archetype_id="missing")


def test_invalid_inputs(store):
    archetype = _pocket_passer(store)
    with pytest.raises(InvalidInput):
        predict_ratings(store, position="QB", archetype_id=archetype.archetype_id, dev_trait="Legend")
    with pytest.raises(InvalidInput):
        predict_ratings(store, position="QB", archetype_id=archetype.archetype_id, subset={"THP": "high"})
