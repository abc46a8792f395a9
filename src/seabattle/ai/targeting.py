"""Hunt/target computer opponent.

Hunting fires at random untried cells. A hit switches to targeting: the AI
picks one of the four compass directions from the latest hit and keeps
walking that way while it hits. A miss or a blocked cell retires the
direction and another one is tried from the same latest hit. Once every
direction is retired, or the ship sinks, it goes back to hunting.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field

from src.seabattle.core.config import HUNT_MAX_ATTEMPTS
from src.seabattle.game.board import in_bounds
from src.seabattle.game.errors import BoardExhausted
from src.seabattle.game.models import BOARD_SIZE, Coord, Direction, ShotOutcome

logger = logging.getLogger(__name__)

HUNT = "hunt"
TARGET = "target"


@dataclass
class AIMove:
    """Represents an AI move decision."""

    x: int
    y: int
    mode: str
    reasoning: str


@dataclass
class TargetingState:
    hit_stack: list[Coord] = field(default_factory=list)
    fired: set[Coord] = field(default_factory=set)
    direction: Direction | None = None
    exhausted: set[Direction] = field(default_factory=set)

    @property
    def hunting(self) -> bool:
        return not self.hit_stack

    def reset_target(self) -> None:
        """Drop the current pursuit; the fired-at record is kept."""
        self.hit_stack.clear()
        self.exhausted.clear()
        self.direction = None


class HuntTargetAI:
    """Computer opponent choosing one shot per turn."""

    def __init__(
        self,
        rng: random.Random,
        size: int = BOARD_SIZE,
        max_attempts: int = HUNT_MAX_ATTEMPTS,
    ) -> None:
        self._rng = rng
        self.size = size
        self.max_attempts = max_attempts
        self.state = TargetingState()

    def make_move(self) -> AIMove:
        """Return the next coordinate to fire at."""
        if self.state.hunting:
            return self._hunt("No target, searching")

        # At most one pass per direction before giving up on the pursuit.
        for _ in range(len(Direction)):
            if self.state.direction is None:
                remaining = [d for d in Direction if d not in self.state.exhausted]
                if not remaining:
                    break
                self.state.direction = self._rng.choice(remaining)

            direction = self.state.direction
            last_x, last_y = self.state.hit_stack[-1]
            dx, dy = direction.offset
            target = (last_x + dx, last_y + dy)
            if in_bounds(*target, self.size) and target not in self.state.fired:
                return AIMove(
                    x=target[0],
                    y=target[1],
                    mode=TARGET,
                    reasoning=f"Following hit at ({last_x}, {last_y}) {direction.value}",
                )
            self.state.exhausted.add(direction)
            self.state.direction = None

        logger.debug("All directions exhausted from %s", self.state.hit_stack[-1])
        self.state.reset_target()
        return self._hunt("Lost the trail, searching")

    def update_game_state(
        self, x: int, y: int, outcome: ShotOutcome, *, sunk: bool = False
    ) -> None:
        """Update AI's knowledge after its shot at (x, y) was resolved."""
        self.state.fired.add((x, y))

        if outcome is ShotOutcome.HIT:
            if sunk:
                self.state.reset_target()
            elif self.state.hunting:
                self.state.hit_stack.append((x, y))
                self.state.direction = None
            else:
                self.state.hit_stack.append((x, y))
                self.state.exhausted.clear()
        elif outcome is ShotOutcome.MISS and not self.state.hunting:
            # Retire the direction only; whether its opposite was already
            # tried is not checked.
            if self.state.direction is not None:
                self.state.exhausted.add(self.state.direction)
            self.state.direction = None

    def _hunt(self, reasoning: str) -> AIMove:
        for _ in range(self.max_attempts):
            coord = (self._rng.randrange(self.size), self._rng.randrange(self.size))
            if coord not in self.state.fired:
                return AIMove(x=coord[0], y=coord[1], mode=HUNT, reasoning=reasoning)

        untried = [
            (x, y)
            for y in range(self.size)
            for x in range(self.size)
            if (x, y) not in self.state.fired
        ]
        if not untried:
            raise BoardExhausted("Every cell has already been fired upon.")
        x, y = untried[0]
        return AIMove(x=x, y=y, mode=HUNT, reasoning=f"{reasoning} (full scan)")
