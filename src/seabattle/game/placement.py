"""Fleet placement validation and construction."""

from __future__ import annotations

import logging
import random
from collections import Counter

from src.seabattle.core.config import PLACEMENT_FLEET_RETRIES, PLACEMENT_MAX_ATTEMPTS
from src.seabattle.core.result import ServiceResult
from src.seabattle.game.board import (
    empty_grid,
    in_bounds,
    iter_cells,
    neighbors4,
    neighbors8,
    with_cells,
)
from src.seabattle.game.errors import InvalidPlacement, PlacementExhausted
from src.seabattle.game.models import (
    BOARD_SIZE,
    FLEET_TEMPLATE,
    Cell,
    Coord,
    Grid,
    Orientation,
    ShipSpec,
    fleet_lengths,
)

logger = logging.getLogger(__name__)


def footprint(x: int, y: int, length: int, orientation: Orientation) -> list[Coord]:
    """Cells occupied by a ship anchored at (x, y)."""
    if orientation is Orientation.HORIZONTAL:
        return [(x + i, y) for i in range(length)]
    return [(x, y + i) for i in range(length)]


def can_place(
    grid: Grid, x: int, y: int, length: int, orientation: Orientation
) -> bool:
    """Return whether the ship fits on the board without touching another ship."""
    size = len(grid)
    cells = footprint(x, y, length, orientation)
    if not all(in_bounds(cx, cy, size) for cx, cy in cells):
        return False
    for cx, cy in cells:
        if grid[cy][cx] is Cell.SHIP:
            return False
        for nx, ny in neighbors8(cx, cy, size):
            if grid[ny][nx] is Cell.SHIP:
                return False
    return True


def place(grid: Grid, x: int, y: int, length: int, orientation: Orientation) -> Grid:
    """Write a ship into the grid.

    The caller must have checked ``can_place`` first; nothing is re-validated here.
    """
    return with_cells(grid, {cell: Cell.SHIP for cell in footprint(x, y, length, orientation)})


def random_placement(
    rng: random.Random,
    template: dict[int, int] = FLEET_TEMPLATE,
    size: int = BOARD_SIZE,
    max_attempts: int = PLACEMENT_MAX_ATTEMPTS,
) -> Grid:
    """Place every ship of ``template`` at a random legal spot.

    Raises PlacementExhausted if any single ship cannot be placed within
    ``max_attempts`` samples; the partially filled grid is discarded.
    """
    grid = empty_grid(size)
    for length in fleet_lengths(template):
        if length > size:
            raise PlacementExhausted(f"Ship of length {length} does not fit the board")
        for _ in range(max_attempts):
            orientation = rng.choice((Orientation.HORIZONTAL, Orientation.VERTICAL))
            max_x = size - length if orientation is Orientation.HORIZONTAL else size - 1
            max_y = size - length if orientation is Orientation.VERTICAL else size - 1
            x = rng.randint(0, max_x)
            y = rng.randint(0, max_y)
            if can_place(grid, x, y, length, orientation):
                grid = place(grid, x, y, length, orientation)
                break
        else:
            raise PlacementExhausted(
                f"Could not place ship of length {length} in {max_attempts} attempts"
            )
    return grid


def generate_fleet(
    rng: random.Random,
    template: dict[int, int] = FLEET_TEMPLATE,
    size: int = BOARD_SIZE,
    retries: int = PLACEMENT_FLEET_RETRIES,
    max_attempts: int = PLACEMENT_MAX_ATTEMPTS,
) -> ServiceResult[Grid]:
    """Generate a whole random fleet, retrying from scratch when a ship gets stuck."""
    last_error = ""
    for attempt in range(1, retries + 1):
        try:
            return ServiceResult.ok(random_placement(rng, template, size, max_attempts))
        except PlacementExhausted as e:
            last_error = e.message
            logger.warning("Random placement attempt %d/%d failed: %s", attempt, retries, e)
    return ServiceResult.fail(
        f"Could not generate a fleet after {retries} tries ({last_error})",
        PlacementExhausted.code,
    )


def find_ships(grid: Grid) -> list[list[Coord]]:
    """Group edge-connected ship cells (intact, hit or sunk) into components."""
    size = len(grid)
    seen: set[Coord] = set()
    ships: list[list[Coord]] = []
    for coord, cell in iter_cells(grid):
        if coord in seen or not cell.is_ship:
            continue
        component: list[Coord] = []
        stack = [coord]
        seen.add(coord)
        while stack:
            cx, cy = stack.pop()
            component.append((cx, cy))
            for nx, ny in neighbors4(cx, cy, size):
                if (nx, ny) not in seen and grid[ny][nx].is_ship:
                    seen.add((nx, ny))
                    stack.append((nx, ny))
        ships.append(sorted(component, key=lambda c: (c[1], c[0])))
    return ships


def _is_straight(cells: list[Coord]) -> bool:
    xs = {x for x, _ in cells}
    ys = {y for _, y in cells}
    return len(xs) == 1 or len(ys) == 1


def validate_fleet(
    grid: Grid,
    template: dict[int, int] = FLEET_TEMPLATE,
    size: int = BOARD_SIZE,
) -> ServiceResult[Grid]:
    """Check that ``grid`` holds exactly the template fleet with proper spacing."""
    if len(grid) != size or any(len(row) != size for row in grid):
        return ServiceResult.fail(
            f"Board must be {size}x{size}.", InvalidPlacement.code
        )

    for (x, y), cell in iter_cells(grid):
        if cell not in (Cell.EMPTY, Cell.SHIP):
            return ServiceResult.fail(
                f"Cell ({x}, {y}) is '{cell.value}'; a new board may only hold "
                "empty water and ships.",
                InvalidPlacement.code,
            )

    ships = find_ships(grid)
    for cells in ships:
        if not _is_straight(cells):
            x, y = cells[0]
            return ServiceResult.fail(
                f"Ship at ({x}, {y}) is not a straight line or touches another ship.",
                InvalidPlacement.code,
            )

    owner = {cell: idx for idx, cells in enumerate(ships) for cell in cells}
    for idx, cells in enumerate(ships):
        for cx, cy in cells:
            for n in neighbors8(cx, cy, size):
                if owner.get(n, idx) != idx:
                    return ServiceResult.fail(
                        f"Ships at ({cx}, {cy}) and {n} touch diagonally.",
                        InvalidPlacement.code,
                    )

    found = Counter(len(cells) for cells in ships)
    expected = Counter({length: count for length, count in template.items() if count})
    if found != expected:
        return ServiceResult.fail(
            f"Fleet must be {_describe(expected)}; got {_describe(found) or 'no ships'}.",
            InvalidPlacement.code,
        )
    return ServiceResult.ok(grid)


def _describe(counts: Counter[int]) -> str:
    return ", ".join(
        f"{count}x{length}" for length, count in sorted(counts.items(), reverse=True)
    )


class FleetBuilder:
    """Setup-phase placement state: the grid being built and the ships still to place."""

    def __init__(
        self,
        template: dict[int, int] = FLEET_TEMPLATE,
        size: int = BOARD_SIZE,
    ) -> None:
        self.template = dict(template)
        self.size = size
        self.reset()

    def reset(self) -> None:
        self.grid: Grid = empty_grid(self.size)
        self.remaining: dict[int, int] = dict(self.template)
        self.orientation = Orientation.HORIZONTAL
        self.selected: int | None = None

    @property
    def is_complete(self) -> bool:
        return all(count == 0 for count in self.remaining.values())

    @property
    def current(self) -> ShipSpec | None:
        """Ship that the next ``place`` call will put down."""
        length = self.selected
        if length is None or self.remaining.get(length, 0) == 0:
            pending = [n for n, count in self.remaining.items() if count > 0]
            if not pending:
                return None
            length = max(pending)
        return ShipSpec(length, self.orientation)

    def select(self, length: int) -> ServiceResult[ShipSpec]:
        if self.remaining.get(length, 0) == 0:
            return ServiceResult.fail(
                f"No ship of length {length} left to place.", InvalidPlacement.code
            )
        self.selected = length
        return ServiceResult.ok(ShipSpec(length, self.orientation))

    def toggle_orientation(self) -> Orientation:
        self.orientation = (
            Orientation.VERTICAL
            if self.orientation is Orientation.HORIZONTAL
            else Orientation.HORIZONTAL
        )
        return self.orientation

    def place(self, x: int, y: int) -> ServiceResult[Grid]:
        spec = self.current
        if spec is None:
            return ServiceResult.fail("All ships are already placed.", InvalidPlacement.code)
        if not can_place(self.grid, x, y, spec.length, spec.orientation):
            return ServiceResult.fail(
                f"Cannot place a ship of length {spec.length} at ({x}, {y}).",
                InvalidPlacement.code,
            )
        self.grid = place(self.grid, x, y, spec.length, spec.orientation)
        self.remaining[spec.length] -= 1
        return ServiceResult.ok(self.grid)

    def randomize(self, rng: random.Random) -> ServiceResult[Grid]:
        """Replace the current layout with a complete random fleet."""
        result = generate_fleet(rng, self.template, self.size)
        if result.success:
            self.grid = result.data
            self.remaining = {length: 0 for length in self.template}
            self.selected = None
        return result
