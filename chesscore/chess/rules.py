"""
The rules engine: sole authority on which moves are legal and what a position looks like after a move.

All functions are pure: they read a GameState and (for `apply`) hand back a new one.

Legality
---
1. generate pseudo-legal moves with the movement rules of every piece (Board.generate_candidate_moves)
2. add castling and en passant moves, which need more context than the position
3. simulate every candidate on a copy of the board and drop the ones that leave your own king attacked

Attack detection (moves.is_square_attacked) looks outward from the king with the same movement vectors,
it never calls back into move generation. So there is no recursion.
"""

import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional, Union

from chesscore.chess.board import Board
from chesscore.chess.castling import (
    CASTLING_RULES,
    castling_directions,
    castling_to_fen,
    rights_lost_by_touching,
)
from chesscore.chess.game_state import GameState
from chesscore.chess.moves import (
    Move,
    en_passant_capture_square,
    en_passant_moves,
    pawn_direction,
)
from chesscore.chess.pieces import Color, Piece, PieceType
from chesscore.chess.square import Square
from chesscore.core.exceptions import IllegalMoveError, InvalidSquareError

logger = logging.getLogger(__name__)

# 50 moves by each player
FIFTY_MOVE_RULE_HALF_MOVES = 100
REPETITIONS_FOR_DRAW = 3


class Outcome(Enum):
    ONGOING = auto()
    CHECKMATE = auto()
    STALEMATE = auto()
    DRAW_FIFTY_MOVE = auto()
    DRAW_REPETITION = auto()
    DRAW_INSUFFICIENT_MATERIAL = auto()


@dataclass(frozen=True)
class GameStatus:
    """Result of `game_status()`. Only a checkmate has a winner."""

    outcome: Outcome
    winner: Optional[Color] = None

    @property
    def is_over(self) -> bool:
        return self.outcome != Outcome.ONGOING

    @property
    def is_draw(self) -> bool:
        return self.outcome in (
            Outcome.STALEMATE,
            Outcome.DRAW_FIFTY_MOVE,
            Outcome.DRAW_REPETITION,
            Outcome.DRAW_INSUFFICIENT_MATERIAL,
        )


ONGOING = GameStatus(Outcome.ONGOING)


# --- LEGAL MOVES ---
def legal_moves(state: GameState) -> set[Move]:
    """All moves for the side to move that do not leave that side's own king in check."""
    color = state.color_to_move
    candidate_moves = state.board.generate_candidate_moves(color)
    candidate_moves.extend(castling_moves(state))
    if state.en_passant_square is not None:
        candidate_moves.extend(
            en_passant_moves(state.en_passant_square, color, state.board)
        )

    return {
        move
        for move in candidate_moves
        if not is_putting_yourself_in_check(state.board, move, color)
    }


def legal_moves_from(state: GameState, square: Union[Square, str]) -> set[Move]:
    """Legal moves of the piece standing on the given square (empty set for an empty square / opponent's piece)"""
    if isinstance(square, str):
        square = Square.from_algebraic(square)
    elif not square.is_within_bounds():
        raise InvalidSquareError(f"{square!r} is not on the board.")
    return {move for move in legal_moves(state) if move.from_square == square}


def is_putting_yourself_in_check(board: Board, move: Move, color: Color) -> bool:
    """Return True if the move leaves the king of `color` attacked. The move is made on a copy, the given board is left alone."""
    simulated = board.copy()
    simulated.apply_move(move)
    return simulated.is_check(color)


def castling_moves(state: GameState) -> list[Move]:
    """
    Castling moves for the side to move
    ---

    **you are allowed to castle if**

    * Castling rights are not yet revoked (so king and rook never moved).
    * King and rook are still standing on their home squares.
    * The squares in between king and rook are empty.
    * You are not currently in check, the king does not pass through an attacked square, and does not land on one.
    """
    color = state.color_to_move
    board = state.board
    directions = [
        direction
        for direction in castling_directions(color)
        if state.has_castling_right(direction)
    ]
    # Cannot castle out of a check.
    if not directions or board.is_check(color):
        return []

    moves: list[Move] = []
    for direction in directions:
        squares = CASTLING_RULES[direction]
        if board.piece(squares.king_from) != Piece(PieceType.KING, color):
            continue
        if board.piece(squares.rook_from) != Piece(PieceType.ROOK, color):
            continue
        if board.is_any_occupied(squares.squares_between()):
            continue
        if board.is_any_under_attack(squares.king_path(), color.opponent):
            continue
        moves.append(
            Move(squares.king_from, squares.king_to, castling_direction=direction)
        )
    return moves


# --- APPLYING MOVES ---
def apply(state: GameState, move: Move) -> GameState:
    """
    Play a move and return the resulting state
    ---

    The move only needs from/to square (+ promotion piece). The flags are taken from the matching legal move.
    Raises IllegalMoveError if there is no such legal move. The given state is never changed.
    """
    legal = {legal_move: legal_move for legal_move in legal_moves(state)}
    if move not in legal:
        logger.debug("Rejected %s in %s", move.to_uci(), state.to_fen())
        raise IllegalMoveError(f"Move not allowed: {move.to_uci()}")
    return _play(state, legal[move])


def _play(state: GameState, move: Move) -> GameState:
    """Apply a move already known to be legal (with its flags filled in)."""
    color = state.color_to_move
    board = state.board.copy()
    moving_piece = board.piece(move.from_square)
    assert moving_piece is not None
    captured = board.apply_move(move)

    # castling rights: king moved / rook moved / rook got captured on its home square
    castling_rights = dict(state.castling_rights)
    for square in (move.from_square, move.to_square):
        for direction in rights_lost_by_touching(square):
            castling_rights[direction] = False

    # en passant square is set only right after a double step, and gone again one ply later
    en_passant_square = (
        move.from_square.offset(0, pawn_direction(color))
        if move.is_double_pawn_push
        else None
    )

    # move counters
    if moving_piece.type == PieceType.PAWN or captured is not None:
        half_move_clock = 0
    else:
        half_move_clock = state.half_move_clock + 1
    fullmove_number = state.fullmove_number + (1 if color == Color.BLACK else 0)

    return GameState(
        board=board,
        color_to_move=color.opponent,
        castling_rights=castling_rights,
        en_passant_square=en_passant_square,
        half_move_clock=half_move_clock,
        fullmove_number=fullmove_number,
        position_history=state.position_history + (repetition_key(state),),
    )


def captured_piece(state: GameState, move: Move) -> Optional[Piece]:
    """The piece a (legal) move takes off the board, if any."""
    legal = {legal_move: legal_move for legal_move in legal_moves(state)}
    if move not in legal:
        raise IllegalMoveError(f"Move not allowed: {move.to_uci()}")
    move = legal[move]
    if move.is_castle:
        return None
    if move.is_en_passant:
        return state.board.piece(en_passant_capture_square(move))
    return state.board.piece(move.to_square)


# --- STATUS ---
def is_check(state: GameState) -> bool:
    return state.board.is_check(state.color_to_move)


def game_status(state: GameState) -> GameStatus:
    """
    * No legal moves: checkmate if in check (the other side wins), otherwise stalemate.
    * Then the draws by rule: insufficient material, fifty-move rule, threefold repetition.
    """
    if not legal_moves(state):
        if is_check(state):
            return GameStatus(Outcome.CHECKMATE, winner=state.color_to_move.opponent)
        return GameStatus(Outcome.STALEMATE)

    if has_insufficient_material(state.board):
        return GameStatus(Outcome.DRAW_INSUFFICIENT_MATERIAL)

    if state.half_move_clock >= FIFTY_MOVE_RULE_HALF_MOVES:
        return GameStatus(Outcome.DRAW_FIFTY_MOVE)

    if repetition_count(state) >= REPETITIONS_FOR_DRAW:
        return GameStatus(Outcome.DRAW_REPETITION)

    return ONGOING


def has_insufficient_material(board: Board) -> bool:
    """
    Neither side can ever deliver mate:

    * king vs king
    * king + single knight or bishop vs king
    * kings + any number of bishops, all standing on squares of the same color
    """
    minor_pieces: list[tuple[Square, Piece]] = []
    for square, piece in board.position.items():
        if piece.type in (PieceType.PAWN, PieceType.ROOK, PieceType.QUEEN):
            return False
        if piece.type in (PieceType.KNIGHT, PieceType.BISHOP):
            minor_pieces.append((square, piece))

    if len(minor_pieces) <= 1:
        return True

    if all(piece.type == PieceType.BISHOP for _, piece in minor_pieces):
        square_colors = {square.is_light() for square, _ in minor_pieces}
        return len(square_colors) == 1
    return False


def repetition_key(state: GameState) -> str:
    """
    Two positions are the same for the repetition rule if placement, side to move and castling rights match,
    and the same en passant captures are possible. The en passant square only counts when such a capture is legal.
    """
    en_passant = "-"
    if state.en_passant_square is not None:
        captures = en_passant_moves(
            state.en_passant_square, state.color_to_move, state.board
        )
        if any(
            not is_putting_yourself_in_check(state.board, capture, state.color_to_move)
            for capture in captures
        ):
            en_passant = state.en_passant_square.to_algebraic()

    active_color = "w" if state.color_to_move == Color.WHITE else "b"
    castling = castling_to_fen(state.castling_rights)
    return f"{state.board.to_fen()} {active_color} {castling} {en_passant}"


def repetition_count(state: GameState) -> int:
    """How often the current position occurred in the game (including now)"""
    current = repetition_key(state)
    return 1 + sum(1 for key in state.position_history if key == current)


# --- PERFT ---
def perft(state: GameState, depth: int) -> int:
    """
    Count the leaf nodes of the legal move tree (standard move generator correctness test).

    NOTE: at depth 1 the moves are just counted, not played.
    """
    if depth <= 0:
        return 1

    moves = legal_moves(state)
    if depth == 1:
        return len(moves)
    return sum(perft(_play(state, move), depth - 1) for move in moves)


def divide(state: GameState, depth: int) -> dict[str, int]:
    """perft split up by first move (UCI), the usual way to hunt down a move generator bug"""
    if depth < 1:
        raise ValueError(f"divide needs a depth of at least 1, got {depth}")
    return {
        move.to_uci(): perft(_play(state, move), depth - 1)
        for move in sorted(legal_moves(state), key=lambda m: m.to_uci())
    }
