"""unit tests for chesscore/chess/castling.py"""

import pytest

from chesscore.chess.castling import (
    CASTLING_RULES,
    CastlingDirection,
    CastlingSquares,
    Square,
    castling_directions,
    castling_from_fen,
    castling_to_fen,
    rights_lost_by_touching,
)
from chesscore.chess.pieces import Color


def test_castling_squares_creation() -> None:
    """Test one case, just to have a little contract stating: 'I want to be able to create this dataclass'"""
    castling_squares = CastlingSquares.from_algebraic("e1", "g1", "h1", "f1")
    assert castling_squares.king_from == Square.from_algebraic("e1")
    assert castling_squares.king_to == Square.from_algebraic("g1")
    assert castling_squares.rook_from == Square.from_algebraic("h1")
    assert castling_squares.rook_to == Square.from_algebraic("f1")


@pytest.mark.parametrize(
    "direction, between",
    [
        (CastlingDirection.WHITE_KING_SIDE, ["f1", "g1"]),
        (CastlingDirection.WHITE_QUEEN_SIDE, ["b1", "c1", "d1"]),
        (CastlingDirection.BLACK_KING_SIDE, ["f8", "g8"]),
        (CastlingDirection.BLACK_QUEEN_SIDE, ["b8", "c8", "d8"]),
    ],
)
def test_squares_between(direction: CastlingDirection, between: list[str]) -> None:
    squares = CASTLING_RULES[direction].squares_between()
    assert sorted(square.to_algebraic() for square in squares) == between


@pytest.mark.parametrize(
    "direction, path",
    [
        (CastlingDirection.WHITE_KING_SIDE, ["e1", "f1", "g1"]),
        (CastlingDirection.WHITE_QUEEN_SIDE, ["e1", "d1", "c1"]),
        (CastlingDirection.BLACK_KING_SIDE, ["e8", "f8", "g8"]),
        (CastlingDirection.BLACK_QUEEN_SIDE, ["e8", "d8", "c8"]),
    ],
)
def test_king_path(direction: CastlingDirection, path: list[str]) -> None:
    """NOTE: b1/b8 is not on the king's path. It has to be empty, but may be attacked."""
    squares = CASTLING_RULES[direction].king_path()
    assert [square.to_algebraic() for square in squares] == path


def test_castling_directions_per_color() -> None:
    assert castling_directions(Color.WHITE) == [
        CastlingDirection.WHITE_KING_SIDE,
        CastlingDirection.WHITE_QUEEN_SIDE,
    ]
    assert all(d.color == Color.BLACK for d in castling_directions(Color.BLACK))


def test_rights_roundtrip_through_fen() -> None:
    for encoding in ["KQkq", "Kq", "k", "-"]:
        assert castling_to_fen(castling_from_fen(encoding)) == encoding


@pytest.mark.parametrize(
    "square, lost",
    [
        ("e1", {"K", "Q"}),
        ("h1", {"K"}),
        ("a1", {"Q"}),
        ("e8", {"k", "q"}),
        ("h8", {"k"}),
        ("a8", {"q"}),
        ("d4", set()),
    ],
)
def test_rights_lost_by_touching(square: str, lost: set[str]) -> None:
    directions = rights_lost_by_touching(Square.from_algebraic(square))
    assert {direction.value for direction in directions} == lost


@pytest.mark.parametrize(
    "fen, expected_rights",
    [
        ("KQkq", {direction: True for direction in CastlingDirection}),
        (
            "Qk",
            {
                CastlingDirection.WHITE_KING_SIDE: False,
                CastlingDirection.WHITE_QUEEN_SIDE: True,
                CastlingDirection.BLACK_KING_SIDE: True,
                CastlingDirection.BLACK_QUEEN_SIDE: False,
            },
        ),
        ("-", {direction: False for direction in CastlingDirection}),
    ],
)
def test_castling_from_fen(
    fen: str, expected_rights: dict[CastlingDirection, bool]
) -> None:
    """Check encoding of castling rights is correctly decoded"""
    assert castling_from_fen(fen) == expected_rights


@pytest.mark.parametrize(
    "direction,k_from,k_to,r_from,r_to",
    [
        (CastlingDirection.WHITE_KING_SIDE, "e1", "g1", "h1", "f1"),
        (CastlingDirection.WHITE_QUEEN_SIDE, "e1", "c1", "a1", "d1"),
        (CastlingDirection.BLACK_KING_SIDE, "e8", "g8", "h8", "f8"),
        (CastlingDirection.BLACK_QUEEN_SIDE, "e8", "c8", "a8", "d8"),
    ],
)
def test_canonical_castling_rules(
    direction: CastlingDirection, k_from: str, k_to: str, r_from: str, r_to: str
) -> None:
    """Classical castling positional changes of the king and rook."""
    rule = CASTLING_RULES[direction]
    expected = CastlingSquares.from_algebraic(k_from, k_to, r_from, r_to)
    assert expected == rule
