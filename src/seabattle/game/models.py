"""Core domain models used by game logic."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

BOARD_SIZE = 10

# ship length -> number of ships of that length
FLEET_TEMPLATE: dict[int, int] = {4: 1, 3: 2, 2: 3, 1: 4}

Coord = tuple[int, int]


class Cell(Enum):
    EMPTY = "empty"
    SHIP = "ship"
    HIT = "hit"
    SUNK = "sunk"
    MISS = "miss"

    @property
    def is_ship(self) -> bool:
        """Cell belongs to a ship, whether struck or not."""
        return self in (Cell.SHIP, Cell.HIT, Cell.SUNK)

    @property
    def is_struck(self) -> bool:
        """Ship cell that has been hit."""
        return self in (Cell.HIT, Cell.SUNK)

    @property
    def is_resolved(self) -> bool:
        """Cell has already been fired upon."""
        return self in (Cell.HIT, Cell.SUNK, Cell.MISS)


Grid = tuple[tuple[Cell, ...], ...]


class Orientation(Enum):
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"


class Direction(Enum):
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"

    @property
    def offset(self) -> Coord:
        return _DIRECTION_OFFSETS[self]


_DIRECTION_OFFSETS: dict[Direction, Coord] = {
    Direction.UP: (0, -1),
    Direction.DOWN: (0, 1),
    Direction.LEFT: (-1, 0),
    Direction.RIGHT: (1, 0),
}


class ShotOutcome(Enum):
    HIT = "hit"
    MISS = "miss"
    ALREADY_SHOT = "already_shot"


class Player(Enum):
    PLAYER = "player"
    COMPUTER = "computer"


class Phase(Enum):
    SETUP = "setup"
    PLAYER_TURN = "player_turn"
    COMPUTER_TURN = "computer_turn"
    GAME_OVER = "game_over"


class BoardSide(Enum):
    """Which board a view is taken from."""

    PLAYER = "player"
    OPPONENT = "opponent"


@dataclass(frozen=True)
class ShipSpec:
    length: int
    orientation: Orientation = Orientation.HORIZONTAL

    def __post_init__(self) -> None:
        if self.length <= 0:
            raise ValueError(f"Ship length must be positive, got {self.length}")


def fleet_lengths(template: dict[int, int] = FLEET_TEMPLATE) -> list[int]:
    """Expand a template into individual ship lengths, longest first."""
    return [
        length
        for length, count in sorted(template.items(), reverse=True)
        for _ in range(count)
    ]
