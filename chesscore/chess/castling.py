"""Helpers for implementing Castling rules. Need to be imported by multiple sources"""

from dataclasses import dataclass
from enum import Enum
from typing import Self

from chesscore.chess.pieces import Color
from chesscore.chess.square import Square


class CastlingDirection(Enum):
    """The four castling directions. Values represent their encodings in FEN string."""

    WHITE_KING_SIDE = "K"
    WHITE_QUEEN_SIDE = "Q"
    BLACK_KING_SIDE = "k"
    BLACK_QUEEN_SIDE = "q"

    @property
    def color(self) -> Color:
        return Color.WHITE if self.value.isupper() else Color.BLACK

    @property
    def is_king_side(self) -> bool:
        return self.value.lower() == "k"


# FEN always lists the rights in this order
CASTLING_ORDER: tuple[CastlingDirection, ...] = (
    CastlingDirection.WHITE_KING_SIDE,
    CastlingDirection.WHITE_QUEEN_SIDE,
    CastlingDirection.BLACK_KING_SIDE,
    CastlingDirection.BLACK_QUEEN_SIDE,
)


@dataclass(frozen=True)
class CastlingSquares:
    """
    Store the squares where king/rook start from/end up in by castling.
    NOTE: If castling rights have not been revoked, we already know the king / rook are still at their starting squares.
    """

    king_from: Square
    king_to: Square
    rook_from: Square
    rook_to: Square

    @classmethod
    def from_algebraic(cls, k_from: str, k_to: str, r_from: str, r_to: str) -> Self:
        """Convenience method: to make mapping shown below (from CastlingDirection) more readable"""
        king_from = Square.from_algebraic(k_from)
        king_to = Square.from_algebraic(k_to)
        rook_from = Square.from_algebraic(r_from)
        rook_to = Square.from_algebraic(r_to)
        return cls(king_from, king_to, rook_from, rook_to)

    def squares_between(self) -> list[Square]:
        """Squares strictly between king and rook. All of them must be empty to castle."""
        low, high = sorted([self.king_from.file, self.rook_from.file])
        return [Square(file, self.king_from.rank) for file in range(low + 1, high)]

    def king_path(self) -> list[Square]:
        """
        Squares the king stands on / passes through / lands on.
        None of them may be under attack (you cannot castle out of, through, or into check).
        """
        step = 1 if self.king_to.file > self.king_from.file else -1
        return [
            Square(file, self.king_from.rank)
            for file in range(self.king_from.file, self.king_to.file + step, step)
        ]


# The moves (in classical chess) made when castling
CASTLING_RULES: dict[CastlingDirection, CastlingSquares] = {
    CastlingDirection.WHITE_KING_SIDE: CastlingSquares.from_algebraic(
        "e1", "g1", "h1", "f1"
    ),
    CastlingDirection.WHITE_QUEEN_SIDE: CastlingSquares.from_algebraic(
        "e1", "c1", "a1", "d1"
    ),
    CastlingDirection.BLACK_KING_SIDE: CastlingSquares.from_algebraic(
        "e8", "g8", "h8", "f8"
    ),
    CastlingDirection.BLACK_QUEEN_SIDE: CastlingSquares.from_algebraic(
        "e8", "c8", "a8", "d8"
    ),
}


def castling_directions(color: Color) -> list[CastlingDirection]:
    return [direction for direction in CASTLING_ORDER if direction.color == color]


def castling_from_fen(castle_fen: str) -> dict[CastlingDirection, bool]:
    """parse the part of the FEN string that encodes castling rights"""
    return {
        direction: (direction.value in castle_fen) for direction in CastlingDirection
    }


def castling_to_fen(castling_rights: dict[CastlingDirection, bool]) -> str:
    """create the part of the FEN string that encodes castling rights"""
    castling_chars = "".join(
        [direction.value for direction in CASTLING_ORDER if castling_rights[direction]]
    )
    return castling_chars or "-"


def rights_lost_by_touching(square: Square) -> list[CastlingDirection]:
    """
    Any move starting from or landing on one of these squares revokes the listed rights:

    * the king's home square: both directions for that color (king moved / castled)
    * a rook's home square: that direction (rook moved, or got captured before it ever moved)
    """
    lost: list[CastlingDirection] = []
    for direction, squares in CASTLING_RULES.items():
        if square in (squares.king_from, squares.rook_from):
            lost.append(direction)
    return lost
