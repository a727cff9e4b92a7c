"""
Forsyth-Edwards Notation: the text encoding of a single position (plus the bookkeeping needed to continue the game from it).

    <placement> <side to move> <castling rights> <en passant square> <half-move clock> <fullmove number>

Only the syntax is checked here. Whether the position could occur in a game is checked by GameState.from_fen.
"""

from dataclasses import dataclass
from typing import Callable, Optional, Self

from chesscore.chess.castling import (
    CASTLING_ORDER,
    CastlingDirection,
    castling_from_fen,
    castling_to_fen,
)
from chesscore.chess.pieces import FEN_TO_PIECE, Color
from chesscore.chess.square import BOARD_DIMENSIONS, FILE_NAMES, RANK_NAMES, Square
from chesscore.core.exceptions import InvalidStateEncodingError

STARTING_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"

# Every subsequence of "KQkq" (in that order), or "-" if all rights are gone
VALID_CASTLING_ENCODINGS: list[str] = ["-"] + [
    "".join(
        direction.value
        for bit, direction in enumerate(CASTLING_ORDER)
        if mask & (1 << bit)
    )
    for mask in range(1, 2 ** len(CASTLING_ORDER))
]

COLOR_CODES: dict[str, Color] = {"w": Color.WHITE, "b": Color.BLACK}
DIGITS = "0123456789"
NO_SQUARE = "-"


# --- FIELD VALIDATION ---
def is_valid_position(position: str) -> bool:
    """Placement: 8 ranks separated by '/', each rank adding up to exactly 8 files"""
    num_files, num_ranks = BOARD_DIMENSIONS
    rank_fens = position.split("/")
    return len(rank_fens) == num_ranks and all(
        _rank_width(rank_fen) == num_files for rank_fen in rank_fens
    )


def _rank_width(rank_fen: str) -> Optional[int]:
    """Number of files a rank describes, None if it is malformed ("44", "0", unknown letters)"""
    width = 0
    previous_was_digit = False
    for character in rank_fen:
        if character in DIGITS:
            if previous_was_digit or character == "0":
                return None
            width += int(character)
            previous_was_digit = True
        elif character.lower() in FEN_TO_PIECE:
            width += 1
            previous_was_digit = False
        else:
            return None
    return width


def is_valid_color_code(color: str) -> bool:
    return color in COLOR_CODES


def is_valid_castling_rights(castling: str) -> bool:
    """KQkq, KQk, Kq, ... (always in this order) or '-' once every right has been revoked"""
    return castling in VALID_CASTLING_ENCODINGS


def is_valid_en_passant(en_passant: str) -> bool:
    return en_passant == NO_SQUARE or is_valid_square(en_passant)


def is_valid_square(square: str) -> bool:
    """a file letter followed by a rank number, both within the board"""
    return len(square) == 2 and square[0] in FILE_NAMES and square[1] in RANK_NAMES


def is_valid_move_counter(counter: str) -> bool:
    """A plain non-negative number (ASCII digits only)"""
    return counter != "" and all(character in DIGITS for character in counter)


def is_valid_fullmove_number(counter: str) -> bool:
    """The fullmove number starts at 1"""
    return is_valid_move_counter(counter) and int(counter) >= 1


# one validator per space separated field, in FEN order
FEN_FIELDS: list[tuple[str, Callable[[str], bool]]] = [
    ("piece placement", is_valid_position),
    ("side to move", is_valid_color_code),
    ("castling rights", is_valid_castling_rights),
    ("en passant square", is_valid_en_passant),
    ("half-move clock", is_valid_move_counter),
    ("fullmove number", is_valid_fullmove_number),
]


def fen_errors(fen: str) -> list[str]:
    """Describe what is wrong with a FEN string (empty list if nothing is)"""
    fields = fen.split(" ")
    if len(fields) != len(FEN_FIELDS):
        return [f"expected {len(FEN_FIELDS)} space separated fields, got {len(fields)}"]
    return [
        f"invalid {name}: {value!r}"
        for (name, is_valid), value in zip(FEN_FIELDS, fields)
        if not is_valid(value)
    ]


def is_valid_fen(fen: str) -> bool:
    return not fen_errors(fen)


@dataclass
class FENState:
    """
    Data that can be constructed from a FEN string.
    ----

    * position: placement part, kept as text (the Board parses it)
    * color_to_move: "w" or "b"
    * castling_rights: K/Q for white, k/q for black, per rook
    * en_passant_square: the square a pawn skipped over with its double step on the last ply
    * half_move_clock: half-moves since the last pawn move or capture (fifty-move rule)
    * num_turns: fullmove number, incremented after every move black makes

    ex) rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1 is the standard starting position.
    """

    position: str
    color_to_move: Color
    castling_rights: dict[CastlingDirection, bool]
    en_passant_square: Optional[Square]
    half_move_clock: int
    num_turns: int

    @classmethod
    def from_fen(cls, fen: str) -> Self:
        fen = fen.strip()
        errors = fen_errors(fen)
        if errors:
            raise InvalidStateEncodingError(
                f"Cannot interpret {fen!r} as FEN: {'; '.join(errors)}"
            )

        position, color, castling, en_passant, half_move_clock, num_turns = fen.split(" ")
        return cls(
            position=position,
            color_to_move=COLOR_CODES[color],
            castling_rights=castling_from_fen(castling),
            en_passant_square=(
                None if en_passant == NO_SQUARE else Square.from_algebraic(en_passant)
            ),
            half_move_clock=int(half_move_clock),
            num_turns=int(num_turns),
        )

    def to_fen(self) -> str:
        color = next(code for code, c in COLOR_CODES.items() if c == self.color_to_move)
        en_passant = (
            self.en_passant_square.to_algebraic()
            if self.en_passant_square is not None
            else NO_SQUARE
        )
        return " ".join(
            [
                self.position,
                color,
                castling_to_fen(self.castling_rights),
                en_passant,
                str(self.half_move_clock),
                str(self.num_turns),
            ]
        )
