"""
Standard Algebraic Notation (SAN): the notation humans use to write down games.

    Nf3, exd5, O-O, Raxd1, e8=Q#

UCI notation (see Move.from_uci) is what machines exchange. Both are accepted as input by `parse_move()`.
"""

import re

from chesscore.chess import rules
from chesscore.chess.game_state import GameState
from chesscore.chess.moves import Move
from chesscore.chess.pieces import PIECE_TO_FEN, PieceType
from chesscore.core.exceptions import IllegalMoveError

UCI_PATTERN = re.compile(r"^[a-h][1-8][a-h][1-8][nbrq]?$")
KING_SIDE_CASTLE = "O-O"
QUEEN_SIDE_CASTLE = "O-O-O"
ANNOTATION_CHARACTERS = "+#!?"


def to_san(state: GameState, move: Move) -> str:
    """SAN of a legal move, including the check (+) or checkmate (#) suffix."""
    legal = {legal_move: legal_move for legal_move in rules.legal_moves(state)}
    if move not in legal:
        raise IllegalMoveError(f"Move not allowed: {move.to_uci()}")
    move = legal[move]

    san = _san_without_suffix(state, move, list(legal))
    after = rules.apply(state, move)
    if rules.is_check(after):
        san += "#" if not rules.legal_moves(after) else "+"
    return san


def _san_without_suffix(state: GameState, move: Move, legal: list[Move]) -> str:
    if move.castling_direction is not None:
        return (
            KING_SIDE_CASTLE
            if move.castling_direction.is_king_side
            else QUEEN_SIDE_CASTLE
        )

    piece = state.board.piece(move.from_square)
    assert piece is not None
    target = move.to_square.to_algebraic()
    capture = "x" if move.is_capture else ""

    if piece.type == PieceType.PAWN:
        # pawn captures name the file the pawn came from
        origin = move.from_square.to_algebraic()[0] if move.is_capture else ""
        promotion = (
            f"={PIECE_TO_FEN[move.promote_to].upper()}" if move.promote_to else ""
        )
        return f"{origin}{capture}{target}{promotion}"

    letter = PIECE_TO_FEN[piece.type].upper()
    return f"{letter}{_disambiguation(state, move, legal)}{capture}{target}"


def _disambiguation(state: GameState, move: Move, legal: list[Move]) -> str:
    """
    If another piece of the same type can move to the same square: add the file, or the rank if the file does not tell them apart,
    or both if neither does.
    """
    piece = state.board.piece(move.from_square)
    rivals = [
        other.from_square
        for other in legal
        if other.to_square == move.to_square
        and other.from_square != move.from_square
        and state.board.piece(other.from_square) == piece
    ]
    if not rivals:
        return ""

    origin = move.from_square.to_algebraic()
    if all(rival.file != move.from_square.file for rival in rivals):
        return origin[0]
    if all(rival.rank != move.from_square.rank for rival in rivals):
        return origin[1]
    return origin


def from_san(state: GameState, san: str) -> Move:
    """Find the legal move written down in SAN. Check/mate/annotation suffixes are optional."""
    wanted = _normalise_san(san)
    legal = list(rules.legal_moves(state))
    matches = [
        move
        for move in legal
        if _normalise_san(_san_without_suffix(state, move, legal)) == wanted
    ]
    if len(matches) != 1:
        raise IllegalMoveError(f"Move not allowed: {san!r}")
    return matches[0]


def _normalise_san(san: str) -> str:
    """Strip annotations, allow zeros for castling and promotions without '='"""
    san = san.strip().rstrip(ANNOTATION_CHARACTERS)
    san = san.replace("0", "O")
    return san.replace("=", "")


def parse_move(state: GameState, text: str) -> Move:
    """Accept either UCI ("e2e4", "e7e8q") or SAN ("e4", "Nf3", "O-O")."""
    text = text.strip()
    if UCI_PATTERN.match(text):
        return Move.from_uci(text)
    return from_san(state, text)


def format_move_list(
    sans: list[str], first_move_number: int = 1, black_first: bool = False
) -> str:
    """
    Numbered move list: "1. e4 e5 2. Nf3 Nc6"

    A game starting from a position with Black to move starts as "1... e5".
    """
    parts: list[str] = []
    move_number = first_move_number
    white_to_move = not black_first
    for index, san in enumerate(sans):
        if white_to_move:
            parts.append(f"{move_number}. {san}")
        else:
            if index == 0:
                parts.append(f"{move_number}... {san}")
            else:
                parts.append(san)
            move_number += 1
        white_to_move = not white_to_move
    return " ".join(parts)
