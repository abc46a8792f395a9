"""Pydantic schemas for the game API."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

CellValue = Literal["empty", "ship", "hit", "sunk", "miss"]

# Request payloads

class StartGameRequest(BaseModel):
    """JSON payload for starting a battle with the player's fleet."""

    player_board: list[list[CellValue]] = Field(min_length=1)


class FireRequest(BaseModel):
    x: int
    y: int


# Response models

class BoardResponse(BaseModel):
    board: list[list[CellValue]]


class ValidationResponse(BaseModel):
    valid: bool
    message: str = ""


class AIMoveInfo(BaseModel):
    mode: str
    reasoning: str


class FireResponse(BaseModel):
    """Outcome of one shot, from either side."""

    x: int
    y: int
    outcome: Literal["hit", "miss", "already_shot"]
    sunk: bool
    game_over: bool
    winner: Literal["player", "computer"] | None = None
    next_turn: str
    message: str
    ai: AIMoveInfo | None = None


class GameStatus(BaseModel):
    game_id: str
    phase: str
    winner: Literal["player", "computer"] | None = None
    stats: dict[str, int | float | bool | str | None]
    log: list[str]
