"""Garden beds laid out as a grid of plant cells."""

from __future__ import annotations

import time
from dataclasses import dataclass, field, replace
from typing import Any, Iterable

from .plant_builder import Plant

__all__ = [
    "DEFAULT_BED_TYPE",
    "Grid",
    "Garden",
    "empty_grid",
    "create_garden",
    "place_plant",
    "remove_plant",
]

DEFAULT_BED_TYPE = "Raised Bed"

Grid = tuple[tuple[Plant | None, ...], ...]


def empty_grid(rows: int, cols: int) -> Grid:
    return tuple(tuple(None for _ in range(max(cols, 0))) for _ in range(max(rows, 0)))


@dataclass(frozen=True, slots=True)
class Garden:
    id: int
    name: str
    rows: int
    cols: int
    bed_type: str = DEFAULT_BED_TYPE
    grid: Grid = field(default_factory=tuple)

    def plants(self) -> list[Plant]:
        """Return every placed plant in row-major order."""
        return [cell for row in self.grid for cell in row if cell is not None]

    def as_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "bedType": self.bed_type,
            "rows": self.rows,
            "cols": self.cols,
            "grid": [
                [cell.as_dict() if cell is not None else None for cell in row]
                for row in self.grid
            ],
        }


def _new_id(existing: Iterable[Garden]) -> int:
    ids = {g.id for g in existing}
    candidate = int(time.time() * 1000)
    while candidate in ids:
        candidate += 1
    return candidate


def create_garden(
    name: str,
    bed_type: str,
    rows: int,
    cols: int,
    existing: Iterable[Garden] = (),
    garden_id: int | None = None,
) -> Garden:
    """Return a new empty garden of ``rows`` by ``cols`` cells.

    A blank ``name`` becomes ``"Garden N"`` where ``N`` follows the existing
    gardens.
    """
    existing = list(existing)
    if rows < 0 or cols < 0:
        raise ValueError("rows and cols must be non-negative")
    return Garden(
        id=garden_id if garden_id is not None else _new_id(existing),
        name=name or f"Garden {len(existing) + 1}",
        bed_type=bed_type or DEFAULT_BED_TYPE,
        rows=rows,
        cols=cols,
        grid=empty_grid(rows, cols),
    )


def _set_cell(garden: Garden, row: int, col: int, value: Plant | None) -> Garden:
    if not 0 <= row < len(garden.grid) or not 0 <= col < len(garden.grid[row]):
        raise IndexError(f"cell ({row}, {col}) is outside garden {garden.id}")
    cells = list(garden.grid[row])
    if cells[col] is value:
        return garden
    cells[col] = value
    grid = garden.grid[:row] + (tuple(cells),) + garden.grid[row + 1 :]
    return replace(garden, grid=grid)


def place_plant(garden: Garden, row: int, col: int, plant: Plant) -> Garden:
    return _set_cell(garden, row, col, plant)


def remove_plant(garden: Garden, row: int, col: int) -> Garden:
    return _set_cell(garden, row, col, None)
