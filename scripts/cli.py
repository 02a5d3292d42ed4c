"""Single entry point for the garden engine scripts.

Usage::

    python -m scripts <command> [args]
    python -m scripts --list

Every module in the ``scripts`` package exposing ``main(argv)`` is a command;
underscores in module names become hyphens.
"""

from __future__ import annotations

import argparse
import importlib
import pkgutil
from pathlib import Path

_SKIP = {"cli", "__init__", "__main__"}


def _discover_commands() -> dict[str, str]:
    """Return mapping of command names to module paths."""
    package_dir = Path(__file__).resolve().parent
    return {
        mod.name.replace("_", "-"): f"scripts.{mod.name}"
        for mod in pkgutil.iter_modules([str(package_dir)])
        if not mod.ispkg and mod.name not in _SKIP
    }


def _summary(module_name: str) -> str:
    doc = importlib.import_module(module_name).__doc__ or ""
    lines = doc.strip().splitlines()
    return lines[0] if lines else ""


def main(argv: list[str] | None = None) -> int:
    """Dispatch to a script subcommand and return its exit status."""
    commands = _discover_commands()
    parser = argparse.ArgumentParser(prog="scripts", description="Garden engine utilities")
    parser.add_argument("--list", action="store_true", help="list available commands")
    parser.add_argument("command", nargs="?", choices=sorted(commands))
    parser.add_argument("args", nargs=argparse.REMAINDER)
    ns = parser.parse_args(argv)

    if ns.list or ns.command is None:
        for name in sorted(commands):
            print(f"{name}: {_summary(commands[name])}")
        return 0

    module = importlib.import_module(commands[ns.command])
    return module.main(ns.args) or 0


if __name__ == "__main__":  # pragma: no cover - manual execution
    raise SystemExit(main())
