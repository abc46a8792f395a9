"""Shared fixtures: seeded randomness and a known-good fleet layout."""

from __future__ import annotations

import random
from collections.abc import Callable, Generator

import pytest

from src.seabattle.game.board import empty_grid
from src.seabattle.game.models import Grid, Orientation
from src.seabattle.game.placement import place

H = Orientation.HORIZONTAL
V = Orientation.VERTICAL

# (x, y, length, orientation) for a legal 10x10 fleet.
STANDARD_FLEET: list[tuple[int, int, int, Orientation]] = [
    (0, 0, 4, H),
    (5, 0, 3, H),
    (9, 0, 3, V),
    (0, 2, 2, H),
    (3, 2, 2, H),
    (6, 2, 2, H),
    (0, 4, 1, H),
    (2, 4, 1, H),
    (4, 4, 1, H),
    (6, 4, 1, H),
]


@pytest.fixture()
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture()
def make_grid() -> Callable[[list[tuple[int, int, int, Orientation]]], Grid]:
    """Build a 10x10 grid holding the given ships."""

    def _make(ships: list[tuple[int, int, int, Orientation]]) -> Grid:
        grid = empty_grid()
        for x, y, length, orientation in ships:
            grid = place(grid, x, y, length, orientation)
        return grid

    return _make


@pytest.fixture()
def fleet_grid(make_grid: Callable[..., Grid]) -> Grid:
    return make_grid(STANDARD_FLEET)


@pytest.fixture()
def fleet_rows(fleet_grid: Grid) -> list[list[str]]:
    return [[cell.value for cell in row] for row in fleet_grid]


@pytest.fixture(autouse=True)
def _reset_sessions() -> Generator[None, None, None]:
    yield
    from src.seabattle.api.routes.game import _SESSIONS

    _SESSIONS.clear()
