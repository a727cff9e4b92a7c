"""
Type definitions used across layers
"""

from enum import StrEnum


class Status(StrEnum):
    IN_PROGRESS = "in progress"
    CHECKMATE = "checkmate"
    STALEMATE = "stalemate"
    DRAW_REPETITION = "draw by repetition"
    DRAW_FIFTY_MOVE_RULE = "draw by fifty-move rule"
    DRAW_INSUFFICIENT_MATERIAL = "draw by insufficient material"
    RESIGNED = "resigned"


# --- Boundary versions of Color and PieceType. The domain layer has its own (see chesscore/chess/pieces.py)
# --- NOTE: same names on purpose, the imports show which version is used in what part of the code


class Color(StrEnum):
    WHITE = "white"
    BLACK = "black"


class PieceType(StrEnum):
    PAWN = "pawn"
    KNIGHT = "knight"
    BISHOP = "bishop"
    ROOK = "rook"
    QUEEN = "queen"
    KING = "king"
