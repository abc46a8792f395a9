"""Turn resolution and win detection for a single player-vs-computer game."""

from __future__ import annotations

import logging
import random
import threading
import uuid
from dataclasses import dataclass, field

from src.seabattle.ai.targeting import AIMove, HuntTargetAI
from src.seabattle.core.config import RANDOM_SEED, STATUS_LOG_LENGTH
from src.seabattle.core.result import ServiceResult
from src.seabattle.game.board import count_cells, in_bounds
from src.seabattle.game.errors import (
    GameAlreadyOver,
    GameError,
    InvalidPlacement,
    OutOfBounds,
    WrongTurn,
)
from src.seabattle.game.models import (
    BOARD_SIZE,
    BoardSide,
    Cell,
    Grid,
    Phase,
    Player,
    ShotOutcome,
)
from src.seabattle.game.placement import FleetBuilder, generate_fleet, validate_fleet
from src.seabattle.game.shots import (
    all_sunk,
    apply_shot,
    is_sunk_at,
    reconcile_sunk_ships,
)

logger = logging.getLogger(__name__)

# Each game and each suggested layout gets a child stream of this root.
_ROOT_RNG = random.Random(RANDOM_SEED)  # noqa: S311
_ROOT_RNG_LOCK = threading.Lock()


def new_rng() -> random.Random:
    with _ROOT_RNG_LOCK:
        return random.Random(_ROOT_RNG.getrandbits(64))  # noqa: S311


@dataclass
class FireResult:
    x: int
    y: int
    outcome: ShotOutcome
    sunk: bool
    game_over: bool
    winner: Player | None
    next_turn: Phase
    message: str
    ai_move: AIMove | None = None


@dataclass
class ShotCounter:
    shots: int = 0
    hits: int = 0

    def record(self, outcome: ShotOutcome) -> None:
        if outcome is ShotOutcome.ALREADY_SHOT:
            return
        self.shots += 1
        if outcome is ShotOutcome.HIT:
            self.hits += 1

    @property
    def accuracy(self) -> float:
        return round(self.hits / self.shots * 100, 1) if self.shots else 0.0


@dataclass
class GameSession:
    """Runtime state of one game: both grids, the turn and the computer's memory."""

    player_grid: Grid
    opponent_grid: Grid
    ai: HuntTargetAI
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    phase: Phase = Phase.SETUP
    winner: Player | None = None
    player_shots: ShotCounter = field(default_factory=ShotCounter)
    computer_shots: ShotCounter = field(default_factory=ShotCounter)
    log: list[str] = field(default_factory=list)
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def append_log(self, message: str) -> None:
        self.log.append(message)
        if len(self.log) > STATUS_LOG_LENGTH:
            self.log.pop(0)

    @property
    def game_over(self) -> bool:
        return self.phase is Phase.GAME_OVER

    def stats(self) -> dict[str, int | float | bool | str | None]:
        """Get current game statistics."""
        return {
            "phase": self.phase.value,
            "winner": self.winner.value if self.winner else None,
            "game_over": self.game_over,
            "player_shots": self.player_shots.shots,
            "player_hits": self.player_shots.hits,
            "player_accuracy": self.player_shots.accuracy,
            "computer_shots": self.computer_shots.shots,
            "computer_hits": self.computer_shots.hits,
            "computer_accuracy": self.computer_shots.accuracy,
            "player_cells_remaining": count_cells(self.player_grid, Cell.SHIP),
            "opponent_cells_remaining": count_cells(self.opponent_grid, Cell.SHIP),
            "board_size": len(self.player_grid),
        }


def start_session(
    player: Grid | FleetBuilder, rng: random.Random | None = None
) -> ServiceResult[GameSession]:
    """Validate the player's fleet, deal the computer's and open the battle.

    ``player`` is either a finished grid or the setup-phase builder; a builder
    with ships still to place is refused.
    """
    if isinstance(player, FleetBuilder):
        if not player.is_complete:
            return ServiceResult.fail(
                "Place all ships before starting the battle.", InvalidPlacement.code
            )
        player_grid = player.grid
    else:
        player_grid = player

    validation = validate_fleet(player_grid)
    if not validation.success:
        return validation.carry()

    rng = rng or new_rng()
    opponent = generate_fleet(rng, size=BOARD_SIZE)
    if not opponent.success:
        logger.error("Opponent fleet generation failed: %s", opponent.error)
        return opponent.carry()

    session = GameSession(
        player_grid=player_grid,
        opponent_grid=opponent.data,
        ai=HuntTargetAI(rng, size=BOARD_SIZE),
    )
    session.phase = Phase.PLAYER_TURN
    session.append_log("Battle started. Your turn.")
    logger.info("Session %s started", session.id)
    return ServiceResult.ok(session)


def _guard(session: GameSession, expected: Phase) -> None:
    if session.phase is Phase.GAME_OVER:
        raise GameAlreadyOver("The game is over.")
    if session.phase is not expected:
        raise WrongTurn(f"Not allowed during {session.phase.value}.")


def _finish(session: GameSession, winner: Player) -> None:
    session.phase = Phase.GAME_OVER
    session.winner = winner
    logger.info("Session %s over, winner=%s", session.id, winner.value)


def fire(session: GameSession, x: int, y: int) -> ServiceResult[FireResult]:
    """Resolve the player's shot at the opponent grid."""
    with session.lock:
        try:
            _guard(session, Phase.PLAYER_TURN)
            if not in_bounds(x, y, len(session.opponent_grid)):
                raise OutOfBounds(f"({x}, {y}) is outside the board.")
        except GameError as e:
            return ServiceResult.from_error(e)

        shot = apply_shot(session.opponent_grid, x, y)
        session.player_shots.record(shot.outcome)
        sunk = False

        if shot.outcome is ShotOutcome.ALREADY_SHOT:
            message = f"Already targeted ({x + 1}, {y + 1})."
        elif shot.outcome is ShotOutcome.HIT:
            session.opponent_grid = reconcile_sunk_ships(shot.grid)
            sunk = is_sunk_at(session.opponent_grid, x, y)
            message = f"{'SUNK' if sunk else 'HIT'} at ({x + 1}, {y + 1})!"
            if all_sunk(session.opponent_grid):
                _finish(session, Player.PLAYER)
                message += " VICTORY! Enemy fleet eliminated."
        else:
            session.opponent_grid = shot.grid
            session.phase = Phase.COMPUTER_TURN
            message = f"MISS at ({x + 1}, {y + 1}). Computer's turn."

        session.append_log(message)
        logger.debug("Session %s player shot (%d, %d): %s", session.id, x, y, shot.outcome.value)
        return ServiceResult.ok(
            FireResult(
                x=x,
                y=y,
                outcome=shot.outcome,
                sunk=sunk,
                game_over=session.game_over,
                winner=session.winner,
                next_turn=session.phase,
                message=message,
            )
        )


def computer_turn(session: GameSession) -> ServiceResult[FireResult]:
    """Let the computer choose and resolve one shot at the player grid."""
    with session.lock:
        try:
            _guard(session, Phase.COMPUTER_TURN)
            move = session.ai.make_move()
        except GameError as e:
            return ServiceResult.from_error(e)

        x, y = move.x, move.y
        shot = apply_shot(session.player_grid, x, y)
        session.computer_shots.record(shot.outcome)
        sunk = False

        if shot.outcome is ShotOutcome.HIT:
            session.player_grid = reconcile_sunk_ships(shot.grid)
            sunk = is_sunk_at(session.player_grid, x, y)
            message = f"Enemy {'sank your ship' if sunk else 'HIT'} at ({x + 1}, {y + 1})!"
            if all_sunk(session.player_grid):
                _finish(session, Player.COMPUTER)
                message += " DEFEAT! Your fleet is lost."
        elif shot.outcome is ShotOutcome.MISS:
            session.player_grid = shot.grid
            session.phase = Phase.PLAYER_TURN
            message = f"Enemy missed at ({x + 1}, {y + 1}). Your turn."
        else:
            message = f"Enemy fired at ({x + 1}, {y + 1}) again."

        session.ai.update_game_state(x, y, shot.outcome, sunk=sunk)
        session.append_log(message)
        logger.debug(
            "Session %s computer shot (%d, %d) [%s]: %s",
            session.id,
            x,
            y,
            move.mode,
            shot.outcome.value,
        )
        return ServiceResult.ok(
            FireResult(
                x=x,
                y=y,
                outcome=shot.outcome,
                sunk=sunk,
                game_over=session.game_over,
                winner=session.winner,
                next_turn=session.phase,
                message=message,
                ai_move=move,
            )
        )


def board_view(session: GameSession, which: BoardSide) -> Grid:
    """Snapshot of one board; intact opponent ships are shown as empty water."""
    with session.lock:
        if which is BoardSide.PLAYER:
            return session.player_grid
        return tuple(
            tuple(Cell.EMPTY if cell is Cell.SHIP else cell for cell in row)
            for row in session.opponent_grid
        )
