"""Game rule violations raised inside the core and reported at the session boundary."""

from __future__ import annotations


class GameError(Exception):
    """Base class for recoverable game errors."""

    code = "game_error"

    def __init__(self, message: str = "") -> None:
        super().__init__(message or self.__class__.__doc__ or self.code)
        self.message = str(self.args[0])


class OutOfBounds(GameError):
    """Coordinate lies outside the board."""

    code = "out_of_bounds"


class InvalidPlacement(GameError):
    """Fleet does not satisfy the placement rules."""

    code = "invalid_placement"


class PlacementExhausted(GameError):
    """Random placement ran out of attempts."""

    code = "placement_exhausted"


class WrongTurn(GameError):
    """Action attempted out of turn."""

    code = "wrong_turn"


class GameAlreadyOver(GameError):
    """Game has already finished."""

    code = "game_already_over"


class BoardExhausted(GameError):
    """Every cell of the board has already been fired upon."""

    code = "board_exhausted"
