#!/usr/bin/env python3
"""Report growth progress for every tracked plant in a saved state file."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from garden_engine.day_calendar import parse_timestamp
from garden_engine.engine import GardenEngine


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Tracked plant progress report")
    parser.add_argument("state_file", type=Path, help="saved garden state JSON")
    parser.add_argument("--now", help="ISO timestamp to evaluate at (default: now)")
    parser.add_argument("--max-temp", type=float, help="today's high in °F")
    parser.add_argument("--json", action="store_true", help="emit JSON instead of text")
    parser.add_argument("--log-level", default="WARNING", help="Logging level")
    args = parser.parse_args(argv)

    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.WARNING))

    now = parse_timestamp(args.now) if args.now else None
    if args.now and now is None:
        parser.error(f"invalid --now timestamp: {args.now}")

    engine = GardenEngine(clock=lambda: now) if now is not None else GardenEngine()
    engine.load(args.state_file.read_text(encoding="utf-8"))

    report = []
    for tracked in engine.state.tracked_plants:
        progress = engine.calculate_progress(tracked.tracking_id)
        status = engine.watering_status(tracked.tracking_id, args.max_temp)
        report.append(
            {
                "trackingId": tracked.tracking_id,
                "name": tracked.name,
                **progress.as_dict(),
                "wateringDue": status.reminder_due,
                "urgency": status.urgency,
            }
        )

    if args.json:
        print(json.dumps(report, indent=2, ensure_ascii=False))
        return 0

    for row in report:
        line = (
            f"{row['name']} [{row['trackingId']}]: day {row['daysPassed']}, "
            f"{row['percentComplete']:.0f}% {row['phase']} - {row['nextMilestone']}"
        )
        if row["wateringDue"]:
            line += f" ({row['urgency']} water)"
        print(line)
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
