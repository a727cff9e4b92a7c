"""Unit tests for /chesscore/chess/square.py"""

from string import ascii_lowercase

import pytest

from chesscore.chess.square import BOARD_DIMENSIONS, Square, all_squares
from chesscore.core.exceptions import InvalidSquareError


@pytest.mark.parametrize(
    "file, rank, notation",
    [
        (file, rank, f"{ascii_lowercase[file - 1]}{rank}")
        for file in range(1, 9)
        for rank in range(1, 9)
    ],
)
def test_creating_from_algebraic(file: int, rank: int, notation: str) -> None:
    """Simply checks if the notation for 'a1' indeed maps to file 1, rank 1, etc."""
    square = Square.from_algebraic(notation)
    assert square.file == file
    assert square.rank == rank


@pytest.mark.parametrize(
    "file, rank, notation",
    [
        (file, rank, f"{ascii_lowercase[file - 1]}{rank}")
        for file in range(1, 9)
        for rank in range(1, 9)
    ],
)
def test_to_algebraic_notation(file: int, rank: int, notation: str) -> None:
    """Test the reverse, so the square on the 1st file and 1st rank should be denoted as a1"""
    square = Square(file, rank)
    assert square.to_algebraic() == notation


def test_upper_case_file_is_accepted() -> None:
    assert Square.from_algebraic("E4") == Square(5, 4)


@pytest.mark.parametrize(
    "notation", ["i1", "a0", "a9", "e", "e44", "", "44", "zz", "-", "a²", "e³", "b٣"]
)
def test_malformed_algebraic_raises(notation: str) -> None:
    """Anything that is not a square on the board is reported, never silently mapped somewhere"""
    with pytest.raises(InvalidSquareError):
        Square.from_algebraic(notation)


@pytest.mark.parametrize("file, rank", [(0, 1), (1, 0), (9, 4), (4, 9), (-1, -1)])
def test_from_coordinates_out_of_bounds(file: int, rank: int) -> None:
    with pytest.raises(InvalidSquareError):
        Square.from_coordinates(file, rank)


def test_square_within_bounds() -> None:
    """happy case: squares within the dimensions of the board"""
    for file in range(1, BOARD_DIMENSIONS[0] + 1):
        for rank in range(1, BOARD_DIMENSIONS[1] + 1):
            square = Square(file, rank)
            assert square.is_within_bounds()


def test_square_out_of_bounds() -> None:
    """Stepping off the board is allowed while raycasting, the square just reports it is out of bounds"""
    square = Square(BOARD_DIMENSIONS[0] + 1, BOARD_DIMENSIONS[1] + 1)
    assert not square.is_within_bounds()

    square = Square(-1, -1)
    assert not square.is_within_bounds()


def test_offset() -> None:
    assert Square.from_algebraic("e4").offset(1, 2) == Square.from_algebraic("f6")
    assert not Square.from_algebraic("h8").offset(1, 0).is_within_bounds()


def test_square_colors() -> None:
    """a1 and h8 are dark, h1 and a8 are light"""
    assert not Square.from_algebraic("a1").is_light()
    assert not Square.from_algebraic("h8").is_light()
    assert Square.from_algebraic("h1").is_light()
    assert Square.from_algebraic("a8").is_light()


def test_all_squares() -> None:
    squares = all_squares()
    assert len(squares) == 64
    assert len(set(squares)) == 64
    assert squares[0].to_algebraic() == "a1"
    assert squares[-1].to_algebraic() == "h8"
