#!/usr/bin/env python3
"""Validate the plant catalog dataset against the catalog schema."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import voluptuous as vol

from garden_engine.catalog import CATALOG_FILE, validate_catalog
from garden_engine.utils import list_dataset_files, load_data, load_dataset

_LOGGER = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Validate a plant catalog file")
    parser.add_argument(
        "path",
        nargs="?",
        type=Path,
        help="catalog file to check (default: the merged bundled catalog)",
    )
    parser.add_argument("--list", action="store_true", help="list dataset files and exit")
    parser.add_argument("--log-level", default="WARNING", help="Logging level")
    args = parser.parse_args(argv)

    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.WARNING))

    if args.list:
        for name in list_dataset_files():
            print(name)
        return 0

    if args.path is not None:
        if not args.path.is_file():
            print(f"{args.path}: no such file", file=sys.stderr)
            return 1
        try:
            data = load_data(args.path)
        except ValueError as err:
            print(f"{args.path}: {err}", file=sys.stderr)
            return 1
        label = str(args.path)
    else:
        data = load_dataset(CATALOG_FILE)
        label = CATALOG_FILE

    try:
        names = validate_catalog(data)
    except vol.Invalid as err:
        _LOGGER.debug("Validation of %s failed", label, exc_info=True)
        print(f"{label}: invalid: {err}", file=sys.stderr)
        return 1

    print(f"{label}: {len(names)} species OK")
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
