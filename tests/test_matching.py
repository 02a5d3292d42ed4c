import pytest

from garden_engine.matching import LEGACY_NAME_MAP, find_plant_match, legacy_name_map


@pytest.mark.parametrize(
    "record, expected",
    [
        ({"name": "tomato"}, "Tomatoes"),
        ({"name": "carrot"}, "Carrots"),
        ({"name": "  Peppers "}, "Bell Peppers"),
        ({"name": "LETTUCE"}, "Lettuce"),
        ({"name": "Cucumber"}, "Cucumbers"),
        ({"name": "Sunflowers"}, "Sunflower"),
        ({"name": "beans"}, "Green Beans"),
        ({"slug": "zucchini", "name": "Courgette"}, "Zucchini"),
        ({"slug": "gone", "name": "Basil"}, "Basil"),
    ],
)
def test_find_plant_match(database, record, expected):
    assert find_plant_match(record, database).name == expected


@pytest.mark.parametrize(
    "record",
    [
        {"name": "xyzzy-unknown"},
        {"name": ""},
        {"name": 12},
        {},
        None,
        "tomato",
        42,
    ],
)
def test_find_plant_match_none(database, record):
    assert find_plant_match(record, database) is None


def test_match_accepts_plant_objects(database):
    plant = database.get("onions")
    assert find_plant_match(plant, database) is plant


def test_legacy_map_includes_dataset():
    table = legacy_name_map()
    for key, value in LEGACY_NAME_MAP.items():
        assert table[key] == value
    assert table["bean"] == "Green Beans"
