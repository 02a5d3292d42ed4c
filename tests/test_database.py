import pytest

from garden_engine.catalog import load_catalog
from garden_engine.database import build_plant_database, parse_zone
from garden_engine.plant_builder import OrnamentalDisplay


def test_database_contains_catalog(database):
    assert len(database) == 22
    assert database.frost_anchor_day == 120
    assert [p.id for p in database][:3] == ["1", "2", "3"]
    assert database.get("bell-peppers").name == "Bell Peppers"
    assert database.get("missing") is None


def test_database_cached_per_anchor():
    first = build_plant_database(100)
    assert build_plant_database(100) is first
    assert build_plant_database("100") is first
    assert build_plant_database(101) is not first


def test_invalid_anchor_uses_default(database):
    assert build_plant_database("soon") is database
    assert build_plant_database(float("nan")) is database


def test_ids_stable_across_anchors():
    early = build_plant_database(90)
    late = build_plant_database(150)
    assert {p.slug: p.id for p in early} == {p.slug: p.id for p in late}
    assert early.get("tomatoes") != late.get("tomatoes")


def test_display_only_records(database):
    assert isinstance(database.get("hydrangea").schedule, OrnamentalDisplay)
    assert isinstance(database.get("tulip").schedule, OrnamentalDisplay)
    assert database.get("sunflower").cultivated is not None


@pytest.mark.parametrize(
    "zone, expected",
    [("6b", 6), ("10a", 10), (" 7 ", 7), (5, 5), ("zone", None), (None, None), (True, None)],
)
def test_parse_zone(zone, expected):
    assert parse_zone(zone) == expected


def test_plants_for_zone(database):
    names = {p.name for p in database.plants_for_zone("10b")}
    assert "Tomatoes" in names
    assert "Lettuce" not in names
    assert len(database.plants_for_zone("unknown")) == len(database)


def test_custom_catalog():
    catalog = tuple(s for s in load_catalog() if s.category == "Herbs")
    herbs = build_plant_database(120, catalog)
    assert {p.name for p in herbs} == {"Basil", "Cilantro", "Parsley", "Dill"}
    assert herbs.get("basil").id == "1"
