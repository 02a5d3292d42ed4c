import json
from datetime import timedelta

import pytest

from garden_engine.engine import GardenEngine
from garden_engine.tracking import PlantTimelineEntry


class _Clock:
    def __init__(self, start):
        self.value = start

    def __call__(self):
        return self.value


@pytest.fixture
def clock(now):
    return _Clock(now)


@pytest.fixture
def engine(clock):
    return GardenEngine(clock=clock)


def test_default_anchor(engine):
    assert engine.frost_anchor_day == 120
    assert engine.plant("tomatoes").cultivated.harvest_date == "Jun 2 (est.)"
    with pytest.raises(KeyError):
        engine.plant("triffid")


def test_garden_commands(engine):
    tomatoes = engine.plant("tomatoes")
    garden_id = engine.create_garden("", "", 2, 2)
    garden = engine.place_plant(garden_id, 0, 1, tomatoes)
    assert garden.name == "Garden 1"
    assert engine.state.added_plants == (tomatoes,)

    engine.remove_plant(garden_id, 0, 1)
    assert engine.state.get_garden(garden_id).plants() == []

    removed = engine.delete_garden(garden_id)
    assert engine.state.gardens == ()
    engine.restore_garden(removed)
    assert engine.state.gardens == (removed,)


def test_tracking_flow(engine, clock):
    tomatoes = engine.plant("tomatoes")
    first = engine.start_tracking(tomatoes)
    second = engine.start_tracking(tomatoes)
    assert first.tracking_id != second.tracking_id

    engine.confirm_planted_date(first.tracking_id, clock.value)
    clock.value += timedelta(days=60)
    progress = engine.calculate_progress(first.tracking_id)
    assert progress.phase == "outdoor"
    assert progress.days_passed == 60

    assert engine.watering_status(first.tracking_id).reminder_due
    assert {t.tracking_id for t in engine.overdue_plants()} == {
        first.tracking_id,
        second.tracking_id,
    }
    engine.log_watering(first.tracking_id)
    assert [t.tracking_id for t in engine.overdue_plants()] == [second.tracking_id]

    engine.toggle_watering_reminder(second.tracking_id, False)
    assert engine.overdue_plants() == []

    engine.update_watering_settings(first.tracking_id, "frequent")
    entry = PlantTimelineEntry(id="n1", date="2025-07-01", title="First flower", created_at="2025-07-01")
    updated = engine.add_timeline_entry(first.tracking_id, entry)
    assert updated.watering_interval_days == 2
    assert updated.timeline[-1].title == "First flower"

    engine.update_tracked_plant_details(first.tracking_id, notes="staked")
    assert engine.state.get_tracked(first.tracking_id).notes == "staked"

    engine.remove_tracked_plant(second.tracking_id)
    with pytest.raises(KeyError):
        engine.calculate_progress(second.tracking_id)


def test_location_change_refreshes_plants(engine):
    tomatoes = engine.plant("tomatoes")
    engine.add_plant_to_list(tomatoes)
    tracked = engine.start_tracking(tomatoes)

    engine.update_location({"zip": "02134", "springFrostDay": 100})
    assert engine.frost_anchor_day == 100
    fresh = engine.state.added_plants[0]
    assert fresh.cultivated.start_seed_indoor == "Feb 27 - Mar 12"
    refreshed = engine.state.get_tracked(tracked.tracking_id)
    assert refreshed.plant is fresh
    assert refreshed.seed_planted_date == tracked.seed_planted_date

    engine.update_location(None)
    assert engine.frost_anchor_day == 120
    assert engine.state.added_plants[0] is tomatoes


def test_load_and_dump(engine, clock):
    blob = json.dumps(
        {
            "addedPlants": [{"name": "tomato"}],
            "trackedPlants": [{"name": "Carrots", "trackingId": "abc"}],
            "location": {"stationId": "USW00014739", "springFrostDay": 100},
        }
    )
    state = engine.load(blob)
    assert state.location.spring_frost_day == 100
    assert state.added_plants[0] is engine.plant("tomatoes")
    assert state.added_plants[0].cultivated.start_seed_indoor == "Feb 27 - Mar 12"

    dumped = json.loads(engine.dump())
    assert dumped["trackedPlants"][0]["trackingId"] == "abc"
    assert dumped["location"]["springFrostDay"] == 100

    again = GardenEngine(clock=clock)
    assert again.load(engine.dump()) == state


def test_custom_watering_commands(engine):
    entry = engine.add_custom_watering_entry(None, 2, linked_plant_id="3")
    assert entry.name == "Carrots"
    watered = engine.mark_custom_watering_entry_watered(entry.id)
    assert watered.last_watered_at is not None
    updated = engine.update_custom_watering_entry(entry.id, frequency_days=5)
    assert updated.schedule.frequency_days == 5
    engine.delete_custom_watering_entry(entry.id)
    assert engine.state.custom_watering == ()
    with pytest.raises(KeyError):
        engine.delete_custom_watering_entry(entry.id)


def test_month_events(engine):
    engine.add_plant_to_list(engine.plant("tomatoes"))
    engine.add_plant_to_list(engine.plant("hydrangea"))
    kinds = [(e.slug, e.kind) for e in engine.month_events(3)]
    assert kinds == [("tomatoes", "sow-indoors")]


def test_load_out_of_range_values(engine):
    state = engine.load(
        {
            "location": {"zip": "12345", "springFrostDay": 10_000_000},
            "addedPlants": [{"name": "Tomatoes"}],
            "trackedPlants": [
                {"name": "Carrots", "trackingId": "abc", "wateringIntervalDays": 10**12}
            ],
            "customWateringEntries": [{"id": "c1", "schedule": {"frequencyDays": 1e12}}],
        }
    )
    assert engine.frost_anchor_day == 120
    assert state.added_plants[0] is engine.plant("tomatoes")
    assert state.tracked_plants[0].watering_interval_days == 4
    assert state.custom_watering[0].schedule.frequency_days == 4
    assert engine.watering_status("abc").interval_days == 4
