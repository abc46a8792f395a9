"""Shot outcome evaluation and sunk-ship bookkeeping."""

from __future__ import annotations

from dataclasses import dataclass

from src.seabattle.game.board import cell_at, with_cells
from src.seabattle.game.models import Cell, Coord, Grid, ShotOutcome


@dataclass(frozen=True)
class ShotResult:
    grid: Grid
    outcome: ShotOutcome


def apply_shot(grid: Grid, x: int, y: int) -> ShotResult:
    """Resolve one shot against a grid.

    Resolved cells (hit, sunk, miss) report ALREADY_SHOT and return the grid
    untouched, so repeating a shot has no side effects.
    """
    cell = cell_at(grid, x, y)
    if cell.is_resolved:
        return ShotResult(grid, ShotOutcome.ALREADY_SHOT)
    if cell is Cell.SHIP:
        return ShotResult(with_cells(grid, {(x, y): Cell.HIT}), ShotOutcome.HIT)
    return ShotResult(with_cells(grid, {(x, y): Cell.MISS}), ShotOutcome.MISS)


def _ship_run(grid: Grid, x: int, y: int) -> list[Coord]:
    # Ships are straight: try the horizontal run first, then the vertical one.
    size = len(grid)
    run = [(x, y)]
    i = 1
    while x + i < size and grid[y][x + i].is_ship:
        run.append((x + i, y))
        i += 1
    if len(run) == 1:
        i = 1
        while y + i < size and grid[y + i][x].is_ship:
            run.append((x, y + i))
            i += 1
    return run


def reconcile_sunk_ships(grid: Grid) -> Grid:
    """Mark fully struck ships as SUNK and normalise partially struck ones to HIT."""
    visited: set[Coord] = set()
    updates: dict[Coord, Cell] = {}
    for y, row in enumerate(grid):
        for x, cell in enumerate(row):
            if (x, y) in visited or not cell.is_ship:
                continue
            run = _ship_run(grid, x, y)
            visited.update(run)
            if all(grid[ry][rx].is_struck for rx, ry in run):
                updates.update({coord: Cell.SUNK for coord in run})
            else:
                updates.update(
                    {(rx, ry): Cell.HIT for rx, ry in run if grid[ry][rx] is Cell.SUNK}
                )
    changed = {
        (x, y): cell for (x, y), cell in updates.items() if grid[y][x] is not cell
    }
    return with_cells(grid, changed)


def is_sunk_at(grid: Grid, x: int, y: int) -> bool:
    return cell_at(grid, x, y) is Cell.SUNK


def all_sunk(grid: Grid) -> bool:
    """True once no intact ship cell remains."""
    return not any(cell is Cell.SHIP for row in grid for cell in row)
