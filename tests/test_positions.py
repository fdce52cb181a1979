import pytest

from depthchart.depth import (
    FAMILY_OF,
    PLAYER_POSITION_SYNONYMS,
    SLOT_GROUP_SYNONYMS,
    family_of,
    is_known_slot_label,
    normalize_player_position,
    normalize_slot_group,
)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("WR1", "WR"),
        ("wr5", "WR"),
        ("WRX", "WR"),
        ("HB", "RB"),
        ("TB", "RB"),
        ("FB", "FB"),
        ("LT", "LT"),
        ("C", "C"),
        ("LEDG", "LE"),
        ("REDG", "RE"),
        ("NT", "DT"),
        ("IDL", "DT"),
        ("SAM", "LOLB"),
        ("OLB", "LOLB"),
        ("WILL", "ROLB"),
        ("MIKE", "MLB"),
        ("LB", "MLB"),
        ("NICKEL", "CB"),
        ("STAR", "CB"),
        ("CB2", "CB"),
        ("S", "FS"),
        ("SS", "SS"),
        ("K", "K"),
        ("P", "P"),
        ("", "UNK"),
        ("12", "UNK"),
        ("ATH", "ATH"),
    ],
)
def test_normalize_slot_group(raw, expected):
    assert normalize_slot_group(raw) == expected


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("HB", "RB"),
        ("tb", "RB"),
        ("RB", "RB"),
        ("LEDG", "LE"),
        ("REDG", "RE"),
        ("OLB", "LOLB"),
        ("SAM", "LOLB"),
        ("WILL", "ROLB"),
        ("MIKE", "MLB"),
        ("ILB", "MLB"),
        ("NB", "CB"),
        ("S", "FS"),
        ("SS", "SS"),
        ("EDGE", "EDGE"),
        ("", "UNK"),
        ("ATH", "ATH"),
    ],
)
def test_normalize_player_position(raw, expected):
    assert normalize_player_position(raw) == expected


def test_every_synonym_has_a_family():
    for group in set(SLOT_GROUP_SYNONYMS.values()) | set(PLAYER_POSITION_SYNONYMS.values()):
        assert family_of(group) != "UNK", group


def test_families():
    assert family_of("RB") == family_of("FB") == "BACK"
    assert {family_of(group) for group in ("LT", "LG", "C", "RG", "RT")} == {"OL"}
    assert family_of("LE") == family_of("EDGE") == "EDGE"
    assert family_of("DT") == "IDL"
    assert family_of("FS") == family_of("SS") == "S"
    assert family_of("ATH") == "UNK"
    assert set(FAMILY_OF.values()) == {
        "QB", "BACK", "WR", "TE", "OL", "EDGE", "IDL", "LB", "CB", "S", "K", "P",
    }


def test_is_known_slot_label():
    assert is_known_slot_label("WR3")
    assert is_known_slot_label("MIKE")
    assert not is_known_slot_label("hello")
    assert not is_known_slot_label("")
