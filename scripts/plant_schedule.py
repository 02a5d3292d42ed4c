#!/usr/bin/env python3
"""Print the localized planting schedule for a spring frost day."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pandas as pd

from garden_engine.database import build_plant_database
from garden_engine.utils import save_json

_LOGGER = logging.getLogger(__name__)

COLUMNS = [
    "name",
    "category",
    "indoorOutdoor",
    "startSeedIndoor",
    "startSeedOutdoor",
    "transplantOutdoor",
    "harvestDate",
]


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Localized planting schedule")
    parser.add_argument(
        "--frost-day",
        type=int,
        default=None,
        help="day of year of the last spring frost (default 120)",
    )
    parser.add_argument("--zone", help="only plants hardy in this zone, e.g. 6b")
    parser.add_argument("--plant", action="append", help="limit to plant slug(s)")
    parser.add_argument("--format", choices=["table", "csv", "json"], default="table")
    parser.add_argument("--output", type=Path, help="write JSON records to this file")
    parser.add_argument("--log-level", default="WARNING", help="Logging level")
    args = parser.parse_args(argv)

    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.WARNING))

    database = build_plant_database(args.frost_day)
    plants = database.plants_for_zone(args.zone) if args.zone else list(database)
    if args.plant:
        wanted = set(args.plant)
        plants = [p for p in plants if p.slug in wanted]
    _LOGGER.info("Selected %d plants for frost day %d", len(plants), database.frost_anchor_day)

    records = [plant.as_dict() for plant in plants]
    if args.output:
        save_json(args.output, records)
        return 0

    if args.format == "json":
        print(json.dumps(records, indent=2, ensure_ascii=False))
        return 0

    df = pd.DataFrame(records).reindex(columns=COLUMNS)
    df = df.fillna("")
    if args.format == "csv":
        print(df.to_csv(index=False), end="")
    else:
        print(df.to_string(index=False))
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
