"""
Everything the rules engine needs to know about a game to decide what may happen next.

A GameState is never changed after creation: the rules engine hands back a new one for every move applied.
"""

from dataclasses import dataclass, field
from typing import Optional, Self

from chesscore.chess.board import Board
from chesscore.chess.castling import CastlingDirection
from chesscore.chess.fen import STARTING_FEN, FENState
from chesscore.chess.moves import pawn_direction, promotion_rank
from chesscore.chess.pieces import Color, Piece, PieceType
from chesscore.chess.square import Square
from chesscore.core.exceptions import InvalidStateEncodingError


@dataclass(frozen=True)
class GameState:
    """
    * board: where the pieces stand
    * color_to_move: side to move
    * castling_rights: per side, per rook
    * en_passant_square: the square a pawn skipped over on the previous ply (if any)
    * half_move_clock: half-moves since the last pawn move or capture
    * fullmove_number: starts at 1, increments after Black moves
    * position_history: repetition keys of all earlier positions in this game (oldest first). Needed for threefold repetition.

    NOTE: Board is a mutable class. Nothing may change the board of an existing state: copy it first.
    """

    board: Board
    color_to_move: Color
    castling_rights: dict[CastlingDirection, bool]
    en_passant_square: Optional[Square] = None
    half_move_clock: int = 0
    fullmove_number: int = 1
    position_history: tuple[str, ...] = field(default=(), compare=False)

    def __hash__(self) -> int:
        # NOTE: board and castling rights are dicts, the FEN covers exactly the fields used for equality
        return hash(self.to_fen())

    @classmethod
    def from_fen(cls, fen: str) -> Self:
        """
        Decode a FEN string.
        ---

        On top of the syntax checks done by FENState, reject positions that cannot occur in a game:

        * not exactly one king per side
        * pawns on the first or last rank
        * the side that just moved is still in check
        * an en passant square that does not match a pawn that just made a double step
        """
        fen_state = FENState.from_fen(fen)
        board = Board.from_fen(fen_state.position)
        state = cls(
            board=board,
            color_to_move=fen_state.color_to_move,
            castling_rights=fen_state.castling_rights,
            en_passant_square=fen_state.en_passant_square,
            half_move_clock=fen_state.half_move_clock,
            fullmove_number=fen_state.num_turns,
        )
        state._validate()
        return state

    @classmethod
    def starting_position(cls) -> Self:
        return cls.from_fen(STARTING_FEN)

    def to_fen(self) -> str:
        return self.to_fen_state().to_fen()

    def to_fen_state(self) -> FENState:
        return FENState(
            position=self.board.to_fen(),
            color_to_move=self.color_to_move,
            castling_rights=dict(self.castling_rights),
            en_passant_square=self.en_passant_square,
            half_move_clock=self.half_move_clock,
            num_turns=self.fullmove_number,
        )

    def has_castling_right(self, direction: CastlingDirection) -> bool:
        return self.castling_rights.get(direction, False)

    # --- VALIDATION HELPERS ---
    def _validate(self) -> None:
        for color in Color:
            kings = self.board.locate_pieces(PieceType.KING, color)
            if len(kings) != 1:
                raise InvalidStateEncodingError(
                    f"Position needs exactly one {color.name.lower()} king, found {len(kings)}."
                )

        for color in Color:
            for square in self.board.locate_pieces(PieceType.PAWN, color):
                if square.rank in (promotion_rank(Color.WHITE), promotion_rank(Color.BLACK)):
                    raise InvalidStateEncodingError(
                        f"Pawn on {square.to_algebraic()}: pawns cannot stand on the first or last rank."
                    )

        if self.board.is_check(self.color_to_move.opponent):
            raise InvalidStateEncodingError(
                f"{self.color_to_move.opponent.name.lower()} is in check while it is {self.color_to_move.name.lower()} to move."
            )

        if self.en_passant_square is not None:
            self._validate_en_passant_square(self.en_passant_square)

    def _validate_en_passant_square(self, square: Square) -> None:
        """The pawn that just moved belongs to the opponent. It skipped over `square` and now stands one rank further."""
        mover = self.color_to_move.opponent
        forward = pawn_direction(mover)
        expected_rank = 3 if mover == Color.WHITE else 6
        pawn_square = square.offset(0, forward)
        if (
            square.rank != expected_rank
            or self.board.is_occupied(square)
            or self.board.piece(pawn_square) != Piece(PieceType.PAWN, mover)
        ):
            raise InvalidStateEncodingError(
                f"En passant square {square.to_algebraic()} does not follow a double pawn push."
            )
