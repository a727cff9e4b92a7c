"""
A square on the board

(placed in its own module as multiple other modules need to import it)
"""

from __future__ import annotations

from dataclasses import dataclass
from string import ascii_lowercase

from chesscore.core.exceptions import InvalidSquareError

# Chess board is always 8x8. Just in case we want to try some funky stuff, make it adjustable
BOARD_DIMENSIONS = (8, 8)

FILE_NAMES = ascii_lowercase[: BOARD_DIMENSIONS[0]]
RANK_NAMES = "".join(str(rank) for rank in range(1, BOARD_DIMENSIONS[1] + 1))


@dataclass(frozen=True, slots=True)
class Square:
    """
    File and rank both count from 1: a1 = (1, 1), h8 = (8, 8).

    NOTE: Constructing a Square directly does not check bounds, the movement rules step off the board and then ask `is_within_bounds()`.
    Input from outside should go through `from_algebraic()` or `from_coordinates()`.
    """

    file: int
    rank: int

    @classmethod
    def from_algebraic(cls, sq: str) -> Square:
        """Algebraic notation: 'a1' - 'h8' get converted to (1,1) - (8,8)"""
        if not isinstance(sq, str) or len(sq) != 2:
            raise InvalidSquareError(f"Cannot interpret {sq!r} as a square name.")

        file_char, rank_char = sq[0].lower(), sq[1]
        if file_char not in FILE_NAMES or rank_char not in RANK_NAMES:
            raise InvalidSquareError(f"Cannot interpret {sq!r} as a square name.")

        return cls.from_coordinates(FILE_NAMES.index(file_char) + 1, int(rank_char))

    @classmethod
    def from_coordinates(cls, file: int, rank: int) -> Square:
        square = cls(file, rank)
        if not square.is_within_bounds():
            raise InvalidSquareError(
                f"Square (file={file}, rank={rank}) is not on a {BOARD_DIMENSIONS[0]}x{BOARD_DIMENSIONS[1]} board."
            )
        return square

    def to_algebraic(self) -> str:
        return f"{chr(self.file + ord('a') - 1)}{self.rank}"

    def is_within_bounds(self) -> bool:
        return (1 <= self.file <= BOARD_DIMENSIONS[0]) and (
            1 <= self.rank <= BOARD_DIMENSIONS[1]
        )

    def offset(self, df: int, dr: int) -> Square:
        """The square reached by stepping df files and dr ranks (may fall off the board)"""
        return Square(self.file + df, self.rank + dr)

    def is_light(self) -> bool:
        """a1 is a dark square"""
        return (self.file + self.rank) % 2 == 1

    def __str__(self) -> str:
        return self.to_algebraic()


def all_squares() -> list[Square]:
    """Every square on the board, a1, b1, ..., h8"""
    return [
        Square(file, rank)
        for rank in range(1, BOARD_DIMENSIONS[1] + 1)
        for file in range(1, BOARD_DIMENSIONS[0] + 1)
    ]
