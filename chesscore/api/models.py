"""Requests and Response models"""

from typing import Optional, Self
from uuid import UUID

from pydantic import BaseModel, field_validator, model_validator

from chesscore.chess.fen import is_valid_fen, is_valid_square
from chesscore.core.exceptions import InvalidRequestError
from chesscore.core.shared_types import Color, PieceType, Status

PieceColor = str


def _validate_square_name(value: str) -> str:
    if not (len(value) == 2 and is_valid_square(value.lower())):
        raise InvalidRequestError(f"Cannot interpret {value!r} as a valid square name.")
    return value.lower()


# --- REQUEST MODELS ---
class CreateGameRequest(BaseModel):
    starting_fen: Optional[str] = None

    @field_validator("starting_fen")
    @classmethod
    def validate_starting_fen(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value

        value = value.strip()
        parts = value.split(" ")
        if len(parts) != 6:
            raise InvalidRequestError(
                "FEN string must contain 6 space-separated parts."
            )
        if not is_valid_fen(value):
            raise InvalidRequestError(f"Cannot interpret {value!r} as FEN.")
        return value


class GetGameRequest(BaseModel):
    game_id: UUID


class LegalMovesRequest(BaseModel):
    game_id: UUID
    square: Optional[str] = None

    @field_validator("square")
    @classmethod
    def validate_square(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        return _validate_square_name(value)


class MoveRequest(BaseModel):
    """
    Either the separate fields (from_square, to_square, promote_to) or a single `notation` field holding SAN ("Nf3") or UCI ("g1f3")
    """

    game_id: UUID
    from_square: Optional[str] = None
    to_square: Optional[str] = None
    promote_to: Optional[PieceType] = None
    notation: Optional[str] = None

    @field_validator("from_square", "to_square")
    @classmethod
    def validate_square(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        return _validate_square_name(value)

    @model_validator(mode="after")
    def validate_move_given(self) -> Self:
        has_squares = self.from_square is not None and self.to_square is not None
        if has_squares == (self.notation is not None):
            raise InvalidRequestError(
                "Supply either from_square + to_square, or notation (not both)."
            )
        return self


class ResignRequest(BaseModel):
    game_id: UUID
    color: Color


class DeleteGameRequest(BaseModel):
    game_id: UUID


# --- RESPONSE MODELS ---
class GameResponse(BaseModel):
    game_id: UUID
    fen_state: str
    starting_state: str
    move_history: list[str]
    san_history: list[str]
    status: Status
    winner: Optional[Color]
    color_to_move: Color
    in_check: bool
    captured: dict[PieceColor, list[PieceType]]
    material: dict[PieceColor, int]


class LegalMovesResponse(BaseModel):
    game_id: UUID
    square: Optional[str]
    color: Color
    legal_moves: list[str]
