"""
Piece movement and attack detection

Key idea: Use strategy pattern to define pseudo-legal move sets for each piece type.
The same movement vectors are used (in reverse, looking outward from the target square) to decide if a square is attacked.


Legality (not leaving your own king in check, castling, en passant) is checked later by the rules engine
"""

from dataclasses import dataclass, field
from typing import Callable, Optional, Protocol, Self

from chesscore.chess.castling import CastlingDirection
from chesscore.chess.pieces import FEN_TO_PIECE, PIECE_TO_FEN, Color, Piece, PieceType
from chesscore.chess.square import BOARD_DIMENSIONS, Square
from chesscore.core.exceptions import IllegalMoveError


class Board(Protocol):
    """Just the parts the movement strategies need"""

    def piece(self, square: Square) -> Optional[Piece]: ...


Vector = tuple[int, int]

# --- MOVEMENT VECTORS (shared by movement and attack rules) ---
DIAGONALS: list[Vector] = [(1, 1), (-1, 1), (1, -1), (-1, -1)]
STRAIGHTS: list[Vector] = [(1, 0), (-1, 0), (0, 1), (0, -1)]
KNIGHT_DELTAS: list[Vector] = [
    (2, 1),
    (2, -1),
    (-2, 1),
    (-2, -1),
    (1, 2),
    (1, -2),
    (-1, 2),
    (-1, -2),
]
KING_DELTAS: list[Vector] = DIAGONALS + STRAIGHTS


@dataclass(frozen=True)
class Move:
    """
    basic definition of a move to be made
    ---

    Only from_square, to_square and promote_to identify a move. The flags are derived from the position by the move generator,
    so a bare Move parsed from UCI compares equal (and hashes equal) to the flagged Move in the legal move set.
    """

    from_square: Square
    to_square: Square
    promote_to: Optional[PieceType] = None
    is_capture: bool = field(default=False, compare=False)
    is_en_passant: bool = field(default=False, compare=False)
    castling_direction: Optional[CastlingDirection] = field(
        default=None, compare=False
    )
    is_double_pawn_push: bool = field(default=False, compare=False)

    @property
    def is_castle(self) -> bool:
        return self.castling_direction is not None

    @classmethod
    def from_uci(cls, uci: str) -> Self:
        """
        Parse long algebraic (UCI) notation: origin square, target square, optional promotion letter.
        ---

        * "e2e4": whatever stands on e2 goes to e4
        * "e7e8q": a pawn reaches e8 and becomes a queen
        * "e1g1": castling is written as the king's two-square step. Whether it is castling depends on the position, so the flags stay unset here
        """
        uci = uci.strip()
        if len(uci) not in (4, 5):
            raise IllegalMoveError(f"Cannot interpret {uci!r} as a UCI move.")

        from_sq = Square.from_algebraic(uci[:2])
        to_sq = Square.from_algebraic(uci[2:4])
        promote_to: Optional[PieceType] = None
        if len(uci) == 5:
            promotion_char = uci[4].lower()
            if FEN_TO_PIECE.get(promotion_char) not in PROMOTION_OPTIONS:
                raise IllegalMoveError(
                    f"Cannot promote to {uci[4]!r}. Pick one of {', '.join(PIECE_TO_FEN[p] for p in PROMOTION_OPTIONS)}."
                )
            promote_to = FEN_TO_PIECE[promotion_char]
        return cls(from_sq, to_sq, promote_to)

    def to_uci(self) -> str:
        """Convert into UCI notation"""
        piece_char = PIECE_TO_FEN[self.promote_to] if self.promote_to else ""
        return f"{self.from_square.to_algebraic()}{self.to_square.to_algebraic()}{piece_char}"

    def __str__(self) -> str:
        return self.to_uci()


def build_uci(
    from_square_alg: str, to_square_alg: str, promotion: Optional[str] = None
) -> str:
    """Glue the separate fields of a move request together into UCI notation"""
    promotion_char = ""
    if promotion:
        # accept both the FEN letter ("q") and the full piece name ("queen")
        name = promotion.lower()
        promotion_char = name if len(name) == 1 else PIECE_TO_FEN[PieceType[name.upper()]]
    return f"{from_square_alg.lower()}{to_square_alg.lower()}{promotion_char}"


# --- MOVEMENT RULES ---
def raycasting_move(
    square: Square, board: Board, directions: list[Vector]
) -> list[Move]:
    """
    Sliding pieces (bishop, rook, queen)
    ---
    Walk each direction square by square. Every empty square is a move, the first occupied square ends the ray
    (and is a capture when it holds an enemy piece).
    """
    piece = board.piece(square)
    assert piece is not None
    player_color = piece.color

    moves: list[Move] = []
    for df, dr in directions:
        target_square = square
        while True:
            target_square = target_square.offset(df, dr)
            if not target_square.is_within_bounds():
                break

            blocker = board.piece(target_square)
            if blocker is not None:
                if blocker.color != player_color:
                    moves.append(Move(square, target_square, is_capture=True))
                break

            moves.append(Move(square, target_square))
    return moves


def single_step_move(square: Square, board: Board, deltas: list[Vector]) -> list[Move]:
    """Kings and knights: each delta is one target, empty or enemy-occupied"""
    piece = board.piece(square)
    assert piece is not None
    player_color = piece.color

    moves: list[Move] = []
    for df, dr in deltas:
        target_square = square.offset(df, dr)
        if not target_square.is_within_bounds():
            continue

        occupant = board.piece(target_square)
        if occupant is None:
            moves.append(Move(square, target_square))
        elif occupant.color != player_color:
            moves.append(Move(square, target_square, is_capture=True))

    return moves


def pawn_direction(color: Color) -> int:
    """White moves UP the board, black moves DOWN"""
    return 1 if color == Color.WHITE else -1


def pawn_starting_rank(color: Color) -> int:
    return 2 if color == Color.WHITE else BOARD_DIMENSIONS[1] - 1


def promotion_rank(color: Color) -> int:
    return BOARD_DIMENSIONS[1] if color == Color.WHITE else 1


def candidate_pawn_moves(square: Square, board: Board) -> list[Move]:
    """
    A pawn:
    - moves by a single square forward (never captures that way).
    - It can move by two in their first move (so when on their starting rank), if both squares are empty
    - takes diagonally
    - promotes when reaching the final rank (one move per piece it may promote into)

    NOTE: En passant needs to know the previous move, so it is taken care of by the rules engine
    """
    pawn = board.piece(square)
    assert pawn is not None
    color = pawn.color
    forward = pawn_direction(color)

    moves: list[Move] = []
    one_step = square.offset(0, forward)
    if one_step.is_within_bounds() and board.piece(one_step) is None:
        moves.append(Move(square, one_step))

        two_steps = square.offset(0, 2 * forward)
        if square.rank == pawn_starting_rank(color) and board.piece(two_steps) is None:
            moves.append(Move(square, two_steps, is_double_pawn_push=True))

    # pawns take diagonally:
    for df in (-1, 1):
        target_square = square.offset(df, forward)
        if not target_square.is_within_bounds():
            continue
        occupant = board.piece(target_square)
        if occupant is not None and occupant.color != color:
            moves.append(Move(square, target_square, is_capture=True))

    # promotion rule: expand pushes / captures landing on the final rank
    expanded: list[Move] = []
    for move in moves:
        if move.to_square.rank == promotion_rank(color):
            expanded.extend(pawn_moves_w_promotion(move))
        else:
            expanded.append(move)
    return expanded


def candidate_knight_moves(square: Square, board: Board) -> list[Move]:
    """Knights always move such that |delta_rank| + |delta_file| = 3"""
    return single_step_move(square, board, KNIGHT_DELTAS)


def candidate_bishop_moves(square: Square, board: Board) -> list[Move]:
    """Bishops move diagonally: |delta_rank| = |delta_file|"""
    return raycasting_move(square, board, DIAGONALS)


def candidate_rook_moves(square: Square, board: Board) -> list[Move]:
    """Rooks move either horizontally or vertically"""
    return raycasting_move(square, board, STRAIGHTS)


def candidate_queen_moves(square: Square, board: Board) -> list[Move]:
    """Rook and bishop rays combined"""
    return raycasting_move(square, board, DIAGONALS + STRAIGHTS)


def candidate_king_moves(square: Square, board: Board) -> list[Move]:
    """
    One square in any direction.

    Castling needs the rights and the attacked squares, so the rules engine adds it.
    """
    return single_step_move(square, board, KING_DELTAS)


# -- STRATEGY PATTERN: MOVEMENT RULES ---
CandidateMovesFn = Callable[[Square, Board], list[Move]]
MOVEMENT_RULES: dict[PieceType, CandidateMovesFn] = {
    PieceType.PAWN: candidate_pawn_moves,
    PieceType.KNIGHT: candidate_knight_moves,
    PieceType.BISHOP: candidate_bishop_moves,
    PieceType.ROOK: candidate_rook_moves,
    PieceType.QUEEN: candidate_queen_moves,
    PieceType.KING: candidate_king_moves,
}


# --- CAPTURING RULES / ATTACKING RULES ---
def raycasting_attack(
    square: Square,
    by_color: Color,
    by_piece_types: tuple[PieceType, ...],
    board: Board,
    directions: list[Vector],
) -> bool:
    """
    Look outward from the target square along each direction.
    ---
    The square is attacked if the first piece met on some ray belongs to `by_color` and slides that way
    (a rook or queen on a file or rank, a bishop or queen on a diagonal).
    """
    for df, dr in directions:
        target_square = square
        while True:
            target_square = target_square.offset(df, dr)
            if not target_square.is_within_bounds():
                break

            piece_found = board.piece(target_square)
            if piece_found is not None:
                # only the first occupied square matters: anything behind it is blocked
                if piece_found.color == by_color and piece_found.type in by_piece_types:
                    return True
                break
    return False


def single_step_attack(
    square: Square,
    by_color: Color,
    by_piece_type: PieceType,
    board: Board,
    deltas: list[Vector],
) -> bool:
    """True if a `by_piece_type` of `by_color` stands one delta away from the square"""
    for df, dr in deltas:
        target_square = square.offset(df, dr)
        if not target_square.is_within_bounds():
            continue

        piece_found = board.piece(target_square)
        if piece_found == Piece(by_piece_type, by_color):
            return True

    return False


def is_attacked_by_pawn(square: Square, by_color: Color, board: Board) -> bool:
    """
    Pawns capture diagonally forward, so an attacking pawn stands diagonally *behind* the square
    as seen from its own side (one rank lower for white, one rank higher for black).
    """
    backward = -pawn_direction(by_color)
    inverse_pawn_take_deltas: list[Vector] = [(1, backward), (-1, backward)]
    return single_step_attack(
        square, by_color, PieceType.PAWN, board, inverse_pawn_take_deltas
    )


def is_attacked_by_knight(square: Square, by_color: Color, board: Board) -> bool:
    return single_step_attack(square, by_color, PieceType.KNIGHT, board, KNIGHT_DELTAS)


def is_attacked_along_diagonal(square: Square, by_color: Color, board: Board) -> bool:
    """Bishops and queens"""
    return raycasting_attack(
        square, by_color, (PieceType.BISHOP, PieceType.QUEEN), board, DIAGONALS
    )


def is_attacked_along_straight(square: Square, by_color: Color, board: Board) -> bool:
    """Rooks and queens"""
    return raycasting_attack(
        square, by_color, (PieceType.ROOK, PieceType.QUEEN), board, STRAIGHTS
    )


def is_attacked_by_king(square: Square, by_color: Color, board: Board) -> bool:
    return single_step_attack(square, by_color, PieceType.KING, board, KING_DELTAS)


# --- STRATEGY PATTERN: ATTACKING RULES ---
IsAttackedFn = Callable[[Square, Color, Board], bool]
ATTACK_RULES: list[IsAttackedFn] = [
    is_attacked_by_pawn,
    is_attacked_by_knight,
    is_attacked_along_diagonal,
    is_attacked_along_straight,
    is_attacked_by_king,
]


def is_square_attacked(square: Square, by_color: Color, board: Board) -> bool:
    """Could any piece of `by_color` capture on the square (if something stood there)?"""
    return any(rule(square, by_color, board) for rule in ATTACK_RULES)


# -- EN PASSANT MOVES ---
def en_passant_moves(
    en_passant_square: Square, color: Color, board: Board
) -> list[Move]:
    """Given a target en passant square, check the adjacent files (in the rank one up/down from the en passant square) for pawns of the correct color."""

    # NOTE: En passant square is the square the opponent's pawn skipped over, your pawn stands one rank 'behind' it
    opposite_direction = -pawn_direction(color)

    # if there is a pawn on the adjacent file: Add this move to the list
    moves: list[Move] = []
    own_pawn = Piece(PieceType.PAWN, color)
    for df in [-1, 1]:
        maybe_pawn_square = en_passant_square.offset(df, opposite_direction)
        if not maybe_pawn_square.is_within_bounds():
            continue
        if board.piece(maybe_pawn_square) == own_pawn:
            moves.append(
                Move(
                    from_square=maybe_pawn_square,
                    to_square=en_passant_square,
                    is_capture=True,
                    is_en_passant=True,
                )
            )

    return moves


def en_passant_capture_square(move: Move) -> Square:
    """The passed pawn stands on the same file as the target square, on the rank the capturing pawn started from."""
    return Square(move.to_square.file, move.from_square.rank)


# -- PAWN PROMOTION MOVES --
PROMOTION_OPTIONS: list[PieceType] = [
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.ROOK,
    PieceType.QUEEN,
]


def pawn_moves_w_promotion(pawn_move: Move) -> list[Move]:
    """Return multiple copies of the pawn move with the piece type to promote into filled in."""
    return [
        Move(
            from_square=pawn_move.from_square,
            to_square=pawn_move.to_square,
            promote_to=piece_type,
            is_capture=pawn_move.is_capture,
        )
        for piece_type in PROMOTION_OPTIONS
    ]
