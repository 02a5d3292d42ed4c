from datetime import UTC, datetime, timedelta

import pytest

from garden_engine.progress import PHASES, calculate_progress, days_since_planting
from garden_engine.tracking import TrackedPlant

PLANTED = datetime(2025, 3, 1, 10, tzinfo=UTC)


def _tracked(plant, planted="2025-03-01T10:00:00.000Z"):
    return TrackedPlant(plant=plant, tracking_id="t", seed_planted_date=planted)


def test_tomatoes_progress_milestones(tomatoes):
    tracked = _tracked(tomatoes)

    start = calculate_progress(tracked, PLANTED)
    assert start.days_passed == 0
    assert start.phase == "transplant"
    assert start.next_milestone == "Transplant in 56 days"
    assert start.percent_complete == 0

    week = calculate_progress(tracked, PLANTED + timedelta(days=55))
    assert week.next_milestone == "Transplant in 1 day"

    outdoor = calculate_progress(tracked, PLANTED + timedelta(days=56))
    assert outdoor.transplant_reached
    assert outdoor.phase == "outdoor"
    assert outdoor.next_milestone == "Harvest in 19 days"

    done = calculate_progress(tracked, PLANTED + timedelta(days=90))
    assert done.harvest_ready
    assert done.phase == "harvest"
    assert done.percent_complete == 100
    assert done.next_milestone == "Harvest ready"


def test_progress_is_monotonic(tomatoes):
    tracked = _tracked(tomatoes)
    results = [calculate_progress(tracked, PLANTED + timedelta(days=d)) for d in range(0, 100, 3)]
    percents = [r.percent_complete for r in results]
    assert percents == sorted(percents)
    phases = [PHASES.index(r.phase) for r in results]
    assert phases == sorted(phases)
    assert all(0 <= p <= 100 for p in percents)


def test_direct_sow_progress(database):
    tracked = _tracked(database.get("carrots"))
    result = calculate_progress(tracked, PLANTED + timedelta(days=10))
    assert result.phase == "outdoor"
    assert not result.transplant_reached
    assert result.next_milestone == "Harvest in 65 days"


def test_transplant_only_progress(database):
    tracked = _tracked(database.get("strawberries"))
    result = calculate_progress(tracked, PLANTED)
    assert result.phase == "outdoor"
    assert result.next_milestone == "Harvest in 90 days"


def test_ornamental_progress(database):
    tracked = _tracked(database.get("tulip"))
    result = calculate_progress(tracked, PLANTED + timedelta(days=12))
    assert result.days_passed == 12
    assert result.percent_complete == 0
    assert result.next_milestone == "Blooms: Spring"
    assert not result.harvest_ready


def test_future_or_invalid_planting_date(tomatoes):
    assert days_since_planting(_tracked(tomatoes), PLANTED - timedelta(days=3)) == 0
    assert days_since_planting(_tracked(tomatoes, "someday"), PLANTED) == 0


def test_progress_as_dict(tomatoes):
    data = calculate_progress(_tracked(tomatoes), PLANTED).as_dict()
    assert set(data) == {
        "daysPassed",
        "percentComplete",
        "transplantReached",
        "harvestReady",
        "phase",
        "nextMilestone",
    }


@pytest.mark.parametrize("days", [0, 30, 75])
def test_percent_matches_days(tomatoes, days):
    result = calculate_progress(_tracked(tomatoes), PLANTED + timedelta(days=days))
    assert result.percent_complete == pytest.approx(min(days / 75 * 100, 100))
