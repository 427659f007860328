"""Requests and Response models"""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, field_validator

from src.chess.square import Square
from src.core.exceptions import InvalidNotationError, InvalidRequestError
from src.core.shared_types import Color, Status


def _validate_square_name(value: str) -> str:
    """Square names are the one textual format we accept: 'a1' through 'h8'."""
    try:
        Square.from_algebraic(value)
    except InvalidNotationError as exc:
        raise InvalidRequestError(
            f"Cannot interpret {value!r} as a valid square name."
        ) from exc
    return value


# --- REQUEST MODELS ---
class CreateGameRequest(BaseModel):
    pass


class GetGameRequest(BaseModel):
    game_id: UUID


class MoveRequest(BaseModel):
    game_id: UUID
    from_square: str
    to_square: str

    @field_validator(*["from_square", "to_square"])
    @classmethod
    def validate_square(cls, value: str) -> str:
        return _validate_square_name(value)


class LegalMovesRequest(BaseModel):
    game_id: UUID
    square: Optional[str] = None

    @field_validator("square")
    @classmethod
    def validate_square(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        return _validate_square_name(value)


class UndoMoveRequest(BaseModel):
    game_id: UUID


class ResetGameRequest(BaseModel):
    game_id: UUID


class DeleteGameRequest(BaseModel):
    game_id: UUID


# --- RESPONSE MODELS ---
class GameResponse(BaseModel):
    game_id: UUID
    current_player: Color
    status: Status
    winner: Optional[Color] = None
    is_check: bool
    move_history: list[str]
    moves_uci: list[str]
    captured_pieces: list[str]
    board: str


class LegalMovesResponse(BaseModel):
    game_id: UUID
    color: Color
    legal_moves: list[str]
