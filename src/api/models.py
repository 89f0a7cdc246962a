"""Requests and Response models"""

import re
from typing import Literal, Optional
from uuid import UUID

from pydantic import BaseModel, field_validator, model_validator

from src.core.exceptions import InvalidRequestError
from src.core.shared_types import Color, Status

FEN_FIELDS = 6
UCI_PATTERN = re.compile(r"^[a-h][1-8][a-h][1-8][qrbn]?$")

Notation = Literal["uci", "san"]


# --- REQUEST MODELS ---
class CreateGameRequest(BaseModel):
    starting_fen: Optional[str] = None

    @field_validator("starting_fen")
    @classmethod
    def validate_starting_fen(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value

        parts = value.strip().split(" ")
        if len(parts) != FEN_FIELDS:
            raise InvalidRequestError(
                f"FEN string must contain {FEN_FIELDS} space-separated parts."
            )
        return value.strip()


class GetGameRequest(BaseModel):
    game_id: UUID


class LegalMovesRequest(BaseModel):
    game_id: UUID


class MoveRequest(BaseModel):
    """Exactly one of uci / san must be given."""

    game_id: UUID
    uci: Optional[str] = None
    san: Optional[str] = None

    @field_validator("uci")
    @classmethod
    def validate_uci(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        if not UCI_PATTERN.match(value):
            raise InvalidRequestError(f"Cannot interpret {value!r} as a UCI move.")
        return value

    @model_validator(mode="after")
    def validate_one_notation(self) -> "MoveRequest":
        if (self.uci is None) == (self.san is None):
            raise InvalidRequestError("Supply the move either in UCI or in SAN.")
        return self


class LineRequest(BaseModel):
    game_id: UUID
    moves: list[str]
    notation: Notation = "uci"

    @field_validator("moves")
    @classmethod
    def validate_moves(cls, value: list[str]) -> list[str]:
        if not value:
            raise InvalidRequestError("A line must contain at least one move.")
        if any(not move.strip() or " " in move.strip() for move in value):
            raise InvalidRequestError("Every move of a line must be a single token.")
        return [move.strip() for move in value]


class UndoRequest(BaseModel):
    game_id: UUID


class ResignRequest(BaseModel):
    game_id: UUID
    color: Color


class AgreeDrawRequest(BaseModel):
    game_id: UUID


class DeleteGameRequest(BaseModel):
    game_id: UUID


# --- RESPONSE MODELS ---
class GameResponse(BaseModel):
    game_id: UUID
    fen_state: str
    starting_state: str
    move_history: list[str]
    movetext: str
    side_to_move: Color
    status: Status
    result: Optional[str] = None
    winner: Optional[Color] = None
    can_claim_draw: bool = False


class LegalMovesResponse(BaseModel):
    game_id: UUID
    color: Color
    legal_moves: list[str]
