"""JSON routes for setting up and playing a game against the computer."""

from __future__ import annotations

import logging
import threading
from http import HTTPStatus
from typing import NoReturn

from fastapi import APIRouter, HTTPException, Response

from src.seabattle.api.schemas import (
    AIMoveInfo,
    BoardResponse,
    FireRequest,
    FireResponse,
    GameStatus,
    StartGameRequest,
    ValidationResponse,
)
from src.seabattle.core.config import MAX_SESSIONS
from src.seabattle.core.result import ServiceResult
from src.seabattle.game.board import grid_from_rows, grid_to_rows
from src.seabattle.game.errors import (
    BoardExhausted,
    GameAlreadyOver,
    InvalidPlacement,
    OutOfBounds,
    PlacementExhausted,
    WrongTurn,
)
from src.seabattle.game.models import BoardSide
from src.seabattle.game.placement import generate_fleet, validate_fleet
from src.seabattle.game.session import (
    FireResult,
    GameSession,
    board_view,
    computer_turn,
    fire,
    new_rng,
    start_session,
)

logger = logging.getLogger(__name__)

router = APIRouter()

GAME_NOT_FOUND = "game_not_found"

_ERROR_STATUS: dict[str, HTTPStatus] = {
    OutOfBounds.code: HTTPStatus.BAD_REQUEST,
    InvalidPlacement.code: HTTPStatus.BAD_REQUEST,
    WrongTurn.code: HTTPStatus.CONFLICT,
    GameAlreadyOver.code: HTTPStatus.CONFLICT,
    PlacementExhausted.code: HTTPStatus.SERVICE_UNAVAILABLE,
    BoardExhausted.code: HTTPStatus.CONFLICT,
    GAME_NOT_FOUND: HTTPStatus.NOT_FOUND,
}

# ---------------------------------------------------------------------------
# Session registry
# ---------------------------------------------------------------------------

_SESSIONS: dict[str, GameSession] = {}
_SESSIONS_LOCK = threading.Lock()


def register_session(session: GameSession) -> None:
    with _SESSIONS_LOCK:
        while len(_SESSIONS) >= MAX_SESSIONS:
            evicted = next(iter(_SESSIONS))
            del _SESSIONS[evicted]
            logger.warning("Session limit reached, evicted %s", evicted)
        _SESSIONS[session.id] = session


def get_session(game_id: str) -> GameSession:
    with _SESSIONS_LOCK:
        session = _SESSIONS.get(game_id)
    if session is None:
        _raise(GAME_NOT_FOUND, f"No game with id {game_id}.")
    return session


def _raise(code: str, message: str) -> NoReturn:
    status = _ERROR_STATUS.get(code, HTTPStatus.BAD_REQUEST)
    raise HTTPException(status_code=status, detail={"code": code, "message": message})


def _unwrap(result: ServiceResult):
    if not result.success:
        _raise(result.code, result.error)
    return result.data


def _fire_response(result: FireResult) -> FireResponse:
    return FireResponse(
        x=result.x,
        y=result.y,
        outcome=result.outcome.value,
        sunk=result.sunk,
        game_over=result.game_over,
        winner=result.winner.value if result.winner else None,
        next_turn=result.next_turn.value,
        message=result.message,
        ai=(
            AIMoveInfo(mode=result.ai_move.mode, reasoning=result.ai_move.reasoning)
            if result.ai_move
            else None
        ),
    )


def _parse_board(rows: list[list[str]]):
    try:
        return grid_from_rows(rows)
    except InvalidPlacement as e:
        _raise(e.code, e.message)


# ---------------------------------------------------------------------------
# Setup endpoints
# ---------------------------------------------------------------------------

@router.post("/placement/random", response_model=BoardResponse)
async def random_board() -> BoardResponse:
    """Deal a random, rule-abiding fleet for the player."""
    grid = _unwrap(generate_fleet(new_rng()))
    return BoardResponse(board=grid_to_rows(grid))


@router.post("/placement/validate", response_model=ValidationResponse)
async def validate_board(payload: StartGameRequest) -> ValidationResponse:
    result = validate_fleet(_parse_board(payload.player_board))
    return ValidationResponse(valid=result.success, message=result.error)


# ---------------------------------------------------------------------------
# Battle endpoints
# ---------------------------------------------------------------------------

@router.post("/games", response_model=GameStatus, status_code=HTTPStatus.CREATED)
async def new_game(payload: StartGameRequest) -> GameStatus:
    session = _unwrap(start_session(_parse_board(payload.player_board)))
    register_session(session)
    return _status(session)


@router.get("/games/{game_id}", response_model=GameStatus)
async def game_status(game_id: str) -> GameStatus:
    return _status(get_session(game_id))


@router.post("/games/{game_id}/fire", response_model=FireResponse)
async def player_fire(game_id: str, payload: FireRequest) -> FireResponse:
    session = get_session(game_id)
    return _fire_response(_unwrap(fire(session, payload.x, payload.y)))


@router.post("/games/{game_id}/computer-turn", response_model=FireResponse)
async def computer_fire(game_id: str) -> FireResponse:
    session = get_session(game_id)
    return _fire_response(_unwrap(computer_turn(session)))


@router.get("/games/{game_id}/boards/{which}", response_model=BoardResponse)
async def get_board(game_id: str, which: BoardSide) -> BoardResponse:
    session = get_session(game_id)
    return BoardResponse(board=grid_to_rows(board_view(session, which)))


@router.delete("/games/{game_id}", status_code=HTTPStatus.NO_CONTENT)
async def abandon_game(game_id: str) -> Response:
    with _SESSIONS_LOCK:
        session = _SESSIONS.pop(game_id, None)
    if session is None:
        _raise(GAME_NOT_FOUND, f"No game with id {game_id}.")
    logger.info("Session %s abandoned", game_id)
    return Response(status_code=HTTPStatus.NO_CONTENT)


def _status(session: GameSession) -> GameStatus:
    with session.lock:
        return GameStatus(
            game_id=session.id,
            phase=session.phase.value,
            winner=session.winner.value if session.winner else None,
            stats=session.stats(),
            log=list(session.log),
        )
