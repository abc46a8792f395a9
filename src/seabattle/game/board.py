"""Immutable grid helpers.

Grids are tuples of row tuples indexed ``grid[y][x]``. Every transform
returns a new grid, so earlier states stay valid for replay and tests.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping, Sequence

from src.seabattle.game.errors import InvalidPlacement, OutOfBounds
from src.seabattle.game.models import BOARD_SIZE, Cell, Coord, Grid


def empty_grid(size: int = BOARD_SIZE) -> Grid:
    """Return a ``size`` x ``size`` grid of empty water."""
    return tuple(tuple(Cell.EMPTY for _ in range(size)) for _ in range(size))


def in_bounds(x: int, y: int, size: int = BOARD_SIZE) -> bool:
    return 0 <= x < size and 0 <= y < size


def cell_at(grid: Grid, x: int, y: int) -> Cell:
    """Return the cell at (x, y); raise OutOfBounds outside the grid."""
    if not in_bounds(x, y, len(grid)):
        raise OutOfBounds(f"({x}, {y}) is outside the {len(grid)}x{len(grid)} board")
    return grid[y][x]


def neighbors8(x: int, y: int, size: int = BOARD_SIZE) -> list[Coord]:
    """All surrounding cells, diagonals included, clipped to the board."""
    return [
        (x + dx, y + dy)
        for dy in (-1, 0, 1)
        for dx in (-1, 0, 1)
        if (dx or dy) and in_bounds(x + dx, y + dy, size)
    ]


def neighbors4(x: int, y: int, size: int = BOARD_SIZE) -> list[Coord]:
    """Orthogonal neighbours clipped to the board."""
    return [
        (x + dx, y + dy)
        for dx, dy in ((0, -1), (0, 1), (-1, 0), (1, 0))
        if in_bounds(x + dx, y + dy, size)
    ]


def with_cells(grid: Grid, updates: Mapping[Coord, Cell]) -> Grid:
    """Return a copy of ``grid`` with the given cells replaced."""
    if not updates:
        return grid
    rows = [list(row) for row in grid]
    for (x, y), cell in updates.items():
        if not in_bounds(x, y, len(grid)):
            raise OutOfBounds(f"({x}, {y}) is outside the board")
        rows[y][x] = cell
    return tuple(tuple(row) for row in rows)


def iter_cells(grid: Grid) -> Iterator[tuple[Coord, Cell]]:
    for y, row in enumerate(grid):
        for x, cell in enumerate(row):
            yield (x, y), cell


def count_cells(grid: Grid, *cells: Cell) -> int:
    return sum(1 for _, cell in iter_cells(grid) if cell in cells)


def grid_from_rows(rows: Sequence[Iterable[str]]) -> Grid:
    """Build a grid from wire values such as ``"ship"`` or ``"empty"``."""
    try:
        return tuple(tuple(Cell(value) for value in row) for row in rows)
    except ValueError as e:
        raise InvalidPlacement(f"Unknown cell value: {e}") from e


def grid_to_rows(grid: Grid) -> list[list[str]]:
    return [[cell.value for cell in row] for row in grid]
