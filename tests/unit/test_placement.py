"""Tests for fleet placement rules and random fleet generation."""

from __future__ import annotations

import random
from collections.abc import Callable

import pytest

from src.seabattle.game.board import count_cells, empty_grid, with_cells
from src.seabattle.game.errors import PlacementExhausted
from src.seabattle.game.models import FLEET_TEMPLATE, Cell, Grid, Orientation
from src.seabattle.game.placement import (
    FleetBuilder,
    can_place,
    find_ships,
    footprint,
    generate_fleet,
    place,
    random_placement,
    validate_fleet,
)

H = Orientation.HORIZONTAL
V = Orientation.VERTICAL

FLEET_CELLS = 20
FLEET_SHIPS = 10
FLEET_LENGTHS = [4, 3, 3, 2, 2, 2, 1, 1, 1, 1]


@pytest.fixture()
def centre_ship() -> Grid:
    """A single-cell ship at (5, 5)."""
    return place(empty_grid(), 5, 5, 1, H)


class TestCanPlace:
    def test_runs_off_grid_horizontally(self) -> None:
        assert not can_place(empty_grid(), 8, 0, 3, H)

    def test_runs_off_grid_vertically(self) -> None:
        assert not can_place(empty_grid(), 0, 8, 3, V)

    def test_fits_flush_with_edge(self) -> None:
        assert can_place(empty_grid(), 7, 0, 3, H)
        assert can_place(empty_grid(), 9, 7, 3, V)

    def test_negative_anchor(self) -> None:
        assert not can_place(empty_grid(), -1, 0, 2, H)

    def test_overlap_rejected(self, centre_ship: Grid) -> None:
        assert not can_place(centre_ship, 4, 5, 3, H)

    @pytest.mark.parametrize(
        ("x", "y", "length", "orientation"),
        [
            (2, 4, 3, H),  # ends diagonally above-left
            (6, 4, 3, H),  # starts diagonally above-right
            (2, 6, 3, H),  # ends diagonally below-left
            (6, 6, 3, H),  # starts diagonally below-right
            (2, 5, 3, H),  # touches left edge
            (6, 5, 3, H),  # touches right edge
            (5, 2, 3, V),  # touches top edge
            (5, 6, 3, V),  # touches bottom edge
        ],
    )
    def test_buffer_rule_edges_and_corners(
        self, centre_ship: Grid, x: int, y: int, length: int, orientation: Orientation
    ) -> None:
        """No ship may touch another, orthogonally or diagonally."""
        assert not can_place(centre_ship, x, y, length, orientation)

    @pytest.mark.parametrize(
        ("x", "y", "length", "orientation"),
        [
            (1, 5, 3, H),
            (7, 5, 3, H),
            (5, 1, 3, V),
            (5, 7, 3, V),
            (7, 7, 1, H),
            (3, 3, 1, H),
        ],
    )
    def test_one_cell_gap_is_enough(
        self, centre_ship: Grid, x: int, y: int, length: int, orientation: Orientation
    ) -> None:
        assert can_place(centre_ship, x, y, length, orientation)

    def test_diagonal_neighbour_of_long_ship(self) -> None:
        grid = place(empty_grid(), 2, 2, 4, H)
        assert not can_place(grid, 6, 3, 2, V)
        assert not can_place(grid, 0, 1, 2, H)


class TestPlace:
    def test_place_writes_footprint(self) -> None:
        grid = place(empty_grid(), 2, 3, 3, V)
        assert footprint(2, 3, 3, V) == [(2, 3), (2, 4), (2, 5)]
        assert all(grid[y][x] is Cell.SHIP for x, y in footprint(2, 3, 3, V))
        assert count_cells(grid, Cell.SHIP) == 3

    def test_place_does_not_mutate_input(self) -> None:
        grid = empty_grid()
        place(grid, 0, 0, 4, H)
        assert count_cells(grid, Cell.SHIP) == 0


class TestRandomPlacement:
    @pytest.mark.parametrize("seed", range(10))
    def test_fleet_shape(self, seed: int) -> None:
        grid = random_placement(random.Random(seed))

        assert count_cells(grid, Cell.SHIP) == FLEET_CELLS
        ships = find_ships(grid)
        assert len(ships) == FLEET_SHIPS
        assert sorted((len(s) for s in ships), reverse=True) == FLEET_LENGTHS
        assert validate_fleet(grid).success

    def test_same_seed_same_fleet(self) -> None:
        assert random_placement(random.Random(7)) == random_placement(random.Random(7))

    def test_exhausted(self) -> None:
        with pytest.raises(PlacementExhausted):
            random_placement(random.Random(0), {3: 10}, size=5, max_attempts=50)

    def test_ship_longer_than_board(self) -> None:
        with pytest.raises(PlacementExhausted):
            random_placement(random.Random(0), {4: 1}, size=3)

    def test_generate_fleet_reports_failure(self) -> None:
        result = generate_fleet(
            random.Random(0), {3: 10}, size=5, retries=2, max_attempts=20
        )
        assert not result.success
        assert result.code == "placement_exhausted"

    def test_generate_fleet_ok(self, rng: random.Random) -> None:
        result = generate_fleet(rng)
        assert result.success
        assert count_cells(result.data, Cell.SHIP) == FLEET_CELLS


class TestValidateFleet:
    def test_standard_fleet_valid(self, fleet_grid: Grid) -> None:
        assert validate_fleet(fleet_grid).success

    def test_wrong_dimensions(self) -> None:
        result = validate_fleet(empty_grid(9))
        assert not result.success
        assert result.code == "invalid_placement"

    def test_ragged_rows(self, fleet_grid: Grid) -> None:
        ragged = fleet_grid[:-1] + (fleet_grid[-1][:-1],)
        assert not validate_fleet(ragged).success

    def test_missing_ship(self, make_grid: Callable[..., Grid]) -> None:
        grid = make_grid([(0, 0, 4, H)])
        result = validate_fleet(grid)
        assert not result.success
        assert "Fleet must be" in result.error

    def test_diagonal_touch(self, fleet_grid: Grid) -> None:
        # Move the single at (6, 4) so it touches the pair at (6, 2)-(7, 2).
        grid = with_cells(fleet_grid, {(6, 4): Cell.EMPTY, (8, 3): Cell.SHIP})
        result = validate_fleet(grid)
        assert not result.success
        assert "diagonally" in result.error

    def test_bent_ship(self, fleet_grid: Grid) -> None:
        grid = with_cells(fleet_grid, {(6, 4): Cell.EMPTY, (0, 1): Cell.SHIP})
        result = validate_fleet(grid)
        assert not result.success

    def test_shot_cells_rejected(self, fleet_grid: Grid) -> None:
        grid = with_cells(fleet_grid, {(0, 9): Cell.MISS})
        result = validate_fleet(grid)
        assert not result.success
        assert "miss" in result.error

    def test_empty_board_rejected(self) -> None:
        assert not validate_fleet(empty_grid()).success


class TestFleetBuilder:
    def test_starts_with_longest_ship(self) -> None:
        builder = FleetBuilder()
        assert builder.current is not None
        assert builder.current.length == 4
        assert not builder.is_complete

    def test_manual_setup(self) -> None:
        builder = FleetBuilder()
        assert builder.place(0, 0).success
        assert builder.place(5, 0).success
        builder.toggle_orientation()
        assert builder.place(9, 0).success
        builder.toggle_orientation()
        for x, y in [(0, 2), (3, 2), (6, 2), (0, 4), (2, 4), (4, 4), (6, 4)]:
            assert builder.place(x, y).success

        assert builder.is_complete
        assert builder.current is None
        assert validate_fleet(builder.grid).success
        assert not builder.place(8, 8).success

    def test_rejects_touching_ship(self) -> None:
        builder = FleetBuilder()
        builder.place(0, 0)
        result = builder.place(4, 1)
        assert not result.success
        assert builder.remaining[3] == FLEET_TEMPLATE[3]

    def test_select_length(self) -> None:
        builder = FleetBuilder()
        assert builder.select(1).success
        builder.place(9, 9)
        assert builder.remaining[1] == FLEET_TEMPLATE[1] - 1
        assert not builder.select(5).success

    def test_randomize_and_reset(self, rng: random.Random) -> None:
        builder = FleetBuilder()
        assert builder.randomize(rng).success
        assert builder.is_complete
        builder.reset()
        assert builder.remaining == FLEET_TEMPLATE
        assert count_cells(builder.grid, Cell.SHIP) == 0
