"""Defines the types of chess pieces"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Self

from chesscore.core.exceptions import InvalidStateEncodingError


class PieceType(Enum):
    """Each piece type is identified by its (lower case) FEN letter"""

    PAWN = "p"
    KNIGHT = "n"
    BISHOP = "b"
    ROOK = "r"
    QUEEN = "q"
    KING = "k"

    @property
    def points(self) -> int:
        # NOTE: the king is priceless, it never counts towards material
        return PIECE_POINTS.get(self, 0)


class Color(Enum):
    WHITE = auto()
    BLACK = auto()

    @property
    def opponent(self) -> "Color":
        return Color.BLACK if self == Color.WHITE else Color.WHITE


AVAILABLE_COLOR_NAMES: list[str] = [color.name for color in Color]

FEN_TO_PIECE: dict[str, PieceType] = {piece_type.value: piece_type for piece_type in PieceType}
PIECE_TO_FEN: dict[PieceType, str] = {piece_type: piece_type.value for piece_type in PieceType}

PIECE_POINTS: dict[PieceType, int] = {
    PieceType.PAWN: 1,
    PieceType.KNIGHT: 3,
    PieceType.BISHOP: 3,
    PieceType.ROOK: 5,
    PieceType.QUEEN: 9,
}


@dataclass(frozen=True)
class Piece:
    type: PieceType
    color: Color

    @property
    def points(self) -> int:
        return self.type.points

    @classmethod
    def from_fen(cls, character: str) -> Self:
        """Upper case letters are white pieces, lower case letters black ones"""
        piece_type = FEN_TO_PIECE.get(character.lower())
        if piece_type is None:
            raise InvalidStateEncodingError(
                f"Character {character!r} does not denote a piece."
            )
        return cls(piece_type, Color.WHITE if character.isupper() else Color.BLACK)

    def to_fen(self) -> str:
        letter = self.type.value
        return letter.upper() if self.color == Color.WHITE else letter

    def promoted_to(self, new_type: PieceType) -> Self:
        """Pieces are immutable: promotion hands back a new piece of the same color"""
        return type(self)(new_type, self.color)
