"""Unit tests for chesscore/chess/notation.py"""

import pytest

from chesscore.chess import rules
from chesscore.chess.game_state import GameState
from chesscore.chess.moves import Move
from chesscore.chess.notation import format_move_list, from_san, parse_move, to_san
from chesscore.chess.pieces import PieceType
from chesscore.core.exceptions import IllegalMoveError

CASTLING_FEN = "r3k2r/8/8/8/8/8/8/R3K2R w KQkq - 0 1"
PROMOTION_FEN = "8/P3k3/8/8/8/8/8/4K3 w - - 0 1"
TWO_ROOKS_FEN = "4k3/8/8/8/8/8/4K3/R6R w - - 0 1"
STACKED_ROOKS_FEN = "4k3/R7/8/8/8/8/8/R3K3 w - - 0 1"
THREE_QUEENS_FEN = "7k/8/8/8/Q1Q5/8/Q7/4K3 w - - 0 1"


def after(state: GameState, *uci_moves: str) -> GameState:
    for uci in uci_moves:
        state = rules.apply(state, Move.from_uci(uci))
    return state


@pytest.mark.parametrize(
    "fen, uci, san",
    [
        (None, "e2e4", "e4"),
        (None, "g1f3", "Nf3"),
        (None, "b1c3", "Nc3"),
        (CASTLING_FEN, "e1g1", "O-O"),
        (CASTLING_FEN, "e1c1", "O-O-O"),
        (PROMOTION_FEN, "a7a8q", "a8=Q"),
        (PROMOTION_FEN, "a7a8n", "a8=N"),
        (TWO_ROOKS_FEN, "a1d1", "Rad1"),
        (TWO_ROOKS_FEN, "h1d1", "Rhd1"),
        (STACKED_ROOKS_FEN, "a1a4", "R1a4"),
        (STACKED_ROOKS_FEN, "a7a4", "R7a4"),
        (THREE_QUEENS_FEN, "a4b3", "Qa4b3"),
        (THREE_QUEENS_FEN, "c4b3", "Qcb3"),
        (THREE_QUEENS_FEN, "a2b3", "Q2b3"),
    ],
)
def test_to_san(fen: str, uci: str, san: str) -> None:
    state = GameState.from_fen(fen) if fen else GameState.starting_position()
    assert to_san(state, Move.from_uci(uci)) == san


def test_pawn_capture(starting_state: GameState) -> None:
    state = after(starting_state, "e2e4", "d7d5")
    assert to_san(state, Move.from_uci("e4d5")) == "exd5"


def test_piece_capture(starting_state: GameState) -> None:
    state = after(starting_state, "e2e4", "d7d5", "g1f3", "d5e4", "f3e5", "d8d2")
    assert to_san(state, Move.from_uci("b1d2")) == "Nxd2"
    assert to_san(state, Move.from_uci("c1d2")) == "Bxd2"


def test_check_and_mate_suffix(starting_state: GameState) -> None:
    state = after(starting_state, "e2e4", "f7f6")
    assert to_san(state, Move.from_uci("d1h5")) == "Qh5+"

    state = after(starting_state, "f2f3", "e7e5", "g2g4")
    assert to_san(state, Move.from_uci("d8h4")) == "Qh4#"


def test_to_san_of_illegal_move(starting_state: GameState) -> None:
    with pytest.raises(IllegalMoveError):
        to_san(starting_state, Move.from_uci("e2e5"))


@pytest.mark.parametrize(
    "fen, san, uci",
    [
        (None, "e4", "e2e4"),
        (None, "Nf3", "g1f3"),
        (CASTLING_FEN, "O-O", "e1g1"),
        (CASTLING_FEN, "0-0-0", "e1c1"),
        (CASTLING_FEN, "O-O-O+", "e1c1"),
        (PROMOTION_FEN, "a8=Q", "a7a8q"),
        (PROMOTION_FEN, "a8R", "a7a8r"),
        (TWO_ROOKS_FEN, "Rhd1", "h1d1"),
        (THREE_QUEENS_FEN, "Qa4b3", "a4b3"),
        (None, "Nf3!?", "g1f3"),
    ],
)
def test_from_san(fen: str, san: str, uci: str) -> None:
    state = GameState.from_fen(fen) if fen else GameState.starting_position()
    assert from_san(state, san).to_uci() == uci


def test_from_san_fills_in_the_flags() -> None:
    move = from_san(GameState.from_fen(CASTLING_FEN), "O-O")
    assert move.is_castle


@pytest.mark.parametrize(
    "fen, san",
    [
        (TWO_ROOKS_FEN, "Rd1"),  # ambiguous
        (None, "e5"),  # not reachable
        (None, "Ke2"),  # blocked
        (None, "Zz9"),  # gibberish
        (CASTLING_FEN.replace("KQkq", "kq"), "O-O"),  # no rights left
        (PROMOTION_FEN, "a8"),  # promotion piece missing
    ],
)
def test_from_san_rejects(fen: str, san: str) -> None:
    state = GameState.from_fen(fen) if fen else GameState.starting_position()
    with pytest.raises(IllegalMoveError):
        from_san(state, san)


def test_parse_move_accepts_uci_and_san(starting_state: GameState) -> None:
    assert parse_move(starting_state, "e2e4") == Move.from_uci("e2e4")
    assert parse_move(starting_state, " Nf3 ") == Move.from_uci("g1f3")
    promotion = parse_move(GameState.from_fen(PROMOTION_FEN), "a7a8q")
    assert promotion.promote_to == PieceType.QUEEN


@pytest.mark.parametrize(
    "sans, first_move_number, black_first, expected",
    [
        ([], 1, False, ""),
        (["e4"], 1, False, "1. e4"),
        (["e4", "e5", "Nf3"], 1, False, "1. e4 e5 2. Nf3"),
        (["e5", "Nf3", "Nc6"], 1, True, "1... e5 2. Nf3 Nc6"),
        (["Kd2"], 40, False, "40. Kd2"),
    ],
)
def test_format_move_list(
    sans: list[str], first_move_number: int, black_first: bool, expected: str
) -> None:
    assert format_move_list(sans, first_move_number, black_first) == expected
