import pytest

from garden_engine.catalog import PlantPeriod, RawPlantSpecies, ScheduleWindow
from garden_engine.plant_builder import (
    CultivatedSchedule,
    OrnamentalDisplay,
    Plant,
    build_plant,
    earliest_start_day,
    format_window,
    periods_signature,
    summarize_planting_mode,
)

INDOOR = ScheduleWindow(-42, 78, 14)
TRANSPLANT = ScheduleWindow(14, 134, 7)
OUTDOOR = ScheduleWindow(-14, 106, 21)


def _tomatoes(**overrides):
    values = dict(
        name="Tomatoes",
        category="Vegetables",
        min_zone=3,
        max_zone=11,
        default_periods=(PlantPeriod(indoor=INDOOR, transplant=TRANSPLANT),),
    )
    values.update(overrides)
    return RawPlantSpecies(**values)


@pytest.mark.parametrize(
    "indoor, transplant, outdoor, expected",
    [
        (True, True, True, "Indoor seed → outdoor transplant"),
        (True, True, False, "Start indoors & transplant"),
        (True, False, True, "Start indoors"),
        (True, False, False, "Start indoors"),
        (False, True, True, "Direct sow outdoors"),
        (False, False, True, "Direct sow outdoors"),
        (False, True, False, "Transplant outdoors"),
        (False, False, False, "Refer to schedule"),
    ],
)
def test_summarize_planting_mode(indoor, transplant, outdoor, expected):
    period = PlantPeriod(
        indoor=INDOOR if indoor else None,
        transplant=TRANSPLANT if transplant else None,
        outdoor=OUTDOOR if outdoor else None,
    )
    assert summarize_planting_mode([period]) == expected


def test_planting_mode_across_periods():
    periods = [PlantPeriod(indoor=INDOOR), PlantPeriod(transplant=TRANSPLANT)]
    assert summarize_planting_mode(periods) == "Start indoors & transplant"


def test_build_tomatoes_for_anchor_100():
    plant = build_plant(_tomatoes(), 100, plant_id="1")
    schedule = plant.cultivated
    assert plant.slug == "tomatoes"
    assert schedule.start_seed_indoor == "Feb 27 - Mar 12"
    assert schedule.transplant_outdoor == "Apr 24 - Apr 30"
    assert schedule.start_seed_outdoor == "Not applicable"
    assert schedule.transplant_day == 56
    assert schedule.days_to_harvest == 75
    assert schedule.harvest_date == "May 13 (est.)"
    assert plant.indoor_outdoor == "Start indoors & transplant"
    assert schedule.periods[0].indoor.start_day_localized == 58


def test_build_is_deterministic():
    species = _tomatoes()
    assert build_plant(species, 100, plant_id="1") == build_plant(species, 100, plant_id="1")


def test_anchor_shifts_every_window():
    early = build_plant(_tomatoes(), 100, plant_id="1")
    late = build_plant(_tomatoes(), 110, plant_id="1")
    assert early.transplant_day == late.transplant_day
    assert late.cultivated.start_seed_indoor == "Mar 9 - Mar 22"


def test_unknown_category_uses_default_estimate():
    plant = build_plant(_tomatoes(category="Mushrooms"), 120, plant_id="1")
    assert plant.days_to_harvest == 75


def test_herbs_estimate():
    plant = build_plant(_tomatoes(name="Basil", category="Herbs"), 120, plant_id="1")
    assert plant.days_to_harvest == 50


def test_ornamental_without_periods_is_display_only():
    species = RawPlantSpecies(
        name="Hydrangea",
        category="Shrubs",
        min_zone=3,
        max_zone=9,
        plant_type="ornamental",
        bloom_season="Summer",
    )
    plant = build_plant(species, 120, plant_id="7")
    assert isinstance(plant.schedule, OrnamentalDisplay)
    assert plant.indoor_outdoor == "Outdoor"
    assert plant.cultivated is None
    assert plant.days_to_harvest is None
    data = plant.as_dict()
    assert "harvestDate" not in data
    assert data["bloomSeason"] == "Summer"


def test_flower_with_periods_is_cultivated():
    species = RawPlantSpecies(
        name="Sunflower",
        category="Flowers",
        min_zone=2,
        max_zone=11,
        plant_type="flower",
        default_periods=(PlantPeriod(outdoor=ScheduleWindow(7, 127, 28)),),
    )
    plant = build_plant(species, 120, plant_id="1")
    assert isinstance(plant.schedule, CultivatedSchedule)
    assert plant.is_ornamental
    assert plant.indoor_outdoor == "Direct sow outdoors"


def test_vegetable_without_periods_falls_back_to_anchor():
    species = RawPlantSpecies(name="Kale", category="Vegetables", min_zone=3, max_zone=9)
    plant = build_plant(species, 120, plant_id="1")
    schedule = plant.cultivated
    assert schedule.start_seed_indoor == "Not applicable"
    assert schedule.transplant_day == 0
    assert schedule.harvest_date == "Jul 14 (est.)"
    assert plant.indoor_outdoor == "Refer to schedule"


def test_earliest_start_prefers_indoor():
    periods = (PlantPeriod(outdoor=ScheduleWindow(-14, 106, 21, start_day_localized=90)),
               PlantPeriod(indoor=ScheduleWindow(-42, 78, 14, start_day_localized=60)))
    assert earliest_start_day(periods) == 60
    assert earliest_start_day(()) is None


def test_format_window_missing():
    assert format_window(None) == "Not applicable"


def test_periods_signature_stable():
    a = (PlantPeriod(indoor=INDOOR),)
    b = (PlantPeriod(indoor=ScheduleWindow(-42, 78, 14)),)
    assert periods_signature(a) == periods_signature(b)
    assert periods_signature(a) != periods_signature((PlantPeriod(indoor=TRANSPLANT),))


def test_plant_dict_round_trip():
    plant = build_plant(_tomatoes(), 100, plant_id="1")
    assert Plant.from_dict(plant.as_dict()) == plant


def test_plant_from_dict_tolerates_garbage():
    plant = Plant.from_dict({"name": "  ", "minZone": "x", "defaultPeriods": "nope"})
    assert plant.name == "Unknown Plant"
    assert plant.slug == "unknown-plant"
    assert plant.category == "Uncategorized"
    assert (plant.min_zone, plant.max_zone) == (1, 13)
    assert plant.cultivated.start_seed_indoor == "Not applicable"


def test_plant_from_dict_ornamental_snapshot():
    plant = Plant.from_dict({"name": "Peony", "plantType": "ornamental", "bloomSeason": "Late spring"})
    assert isinstance(plant.schedule, OrnamentalDisplay)
    assert plant.bloom_season == "Late spring"
