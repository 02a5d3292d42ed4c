import json
import subprocess
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
SCRIPTS = ROOT / "scripts"


def _run(*args, check=True):
    return subprocess.run(
        [sys.executable, *map(str, args)],
        capture_output=True,
        text=True,
        check=check,
        cwd=ROOT,
    )


def test_plant_schedule_table():
    result = _run(SCRIPTS / "plant_schedule.py", "--frost-day", "100")
    assert "Tomatoes" in result.stdout
    assert "Feb 27 - Mar 12" in result.stdout


def test_plant_schedule_json_zone():
    result = _run(SCRIPTS / "plant_schedule.py", "--zone", "10b", "--format", "json")
    names = {row["name"] for row in json.loads(result.stdout)}
    assert "Tomatoes" in names
    assert "Lettuce" not in names


def test_plant_schedule_output_file(tmp_path):
    out_file = tmp_path / "schedule.json"
    _run(SCRIPTS / "plant_schedule.py", "--plant", "carrots", "--output", out_file)
    data = json.loads(out_file.read_text())
    assert [row["slug"] for row in data] == ["carrots"]
    assert data[0]["startSeedOutdoor"] == "Apr 9 - May 6"


def test_tracker_progress(tmp_path):
    state = {
        "trackedPlants": [
            {
                "name": "Tomatoes",
                "trackingId": "abc",
                "seedPlantedDate": "2025-03-01T00:00:00.000Z",
                "lastWatered": "2025-03-01T00:00:00.000Z",
            }
        ]
    }
    state_file = tmp_path / "state.json"
    state_file.write_text(json.dumps(state))

    result = _run(
        SCRIPTS / "tracker_progress.py", state_file, "--now", "2025-03-11T00:00:00Z", "--json"
    )
    report = json.loads(result.stdout)
    assert report[0]["trackingId"] == "abc"
    assert report[0]["daysPassed"] == 10
    assert report[0]["nextMilestone"] == "Transplant in 46 days"
    assert report[0]["wateringDue"] is True

    text = _run(SCRIPTS / "tracker_progress.py", state_file, "--now", "2025-03-11T00:00:00Z")
    assert "Tomatoes [abc]: day 10" in text.stdout


def test_validate_catalog_bundled():
    result = _run(SCRIPTS / "validate_catalog.py")
    assert "22 species OK" in result.stdout


def test_validate_catalog_invalid(tmp_path):
    bad = tmp_path / "catalog.json"
    bad.write_text(json.dumps({"plants": [{"name": "Kale"}]}))
    result = _run(SCRIPTS / "validate_catalog.py", bad, check=False)
    assert result.returncode == 1
    assert "invalid" in result.stderr


def test_validate_catalog_list():
    result = _run(SCRIPTS / "validate_catalog.py", "--list")
    assert "plant_catalog.json" in result.stdout.split()


def test_cli_dispatch():
    listing = _run("-m", "scripts", "--list")
    assert "plant-schedule:" in listing.stdout
    assert "validate-catalog:" in listing.stdout

    result = _run("-m", "scripts", "validate-catalog")
    assert "species OK" in result.stdout
