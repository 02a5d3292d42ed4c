import sys
from datetime import UTC, datetime
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from garden_engine.database import build_plant_database, clear_database_cache  # noqa: E402
from garden_engine.logging_utils import reset_warnings  # noqa: E402
from garden_engine.utils import clear_dataset_cache  # noqa: E402


@pytest.fixture(autouse=True)
def _isolated_datasets(monkeypatch):
    """Run every test against the bundled datasets with cold caches."""
    for env in ("GARDEN_DATA_DIR", "GARDEN_EXTRA_DATA_DIRS", "GARDEN_OVERLAY_DIR"):
        monkeypatch.delenv(env, raising=False)
    clear_dataset_cache()
    clear_database_cache()
    reset_warnings()
    yield
    clear_dataset_cache()
    clear_database_cache()


@pytest.fixture
def now():
    return datetime(2025, 5, 1, 12, 0, tzinfo=UTC)


@pytest.fixture
def database():
    return build_plant_database(None)


@pytest.fixture
def tomatoes(database):
    return database.get("tomatoes")
