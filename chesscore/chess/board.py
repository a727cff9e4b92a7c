"""The Game board implements all rules that effect the `position` (in chess: the configuration of pieces on the board)"""

from dataclasses import dataclass, field
from typing import Optional, Self

from chesscore.chess.castling import CASTLING_RULES
from chesscore.chess.moves import (
    MOVEMENT_RULES,
    CandidateMovesFn,
    Move,
    en_passant_capture_square,
    is_square_attacked,
)
from chesscore.chess.pieces import Color, Piece, PieceType
from chesscore.chess.square import BOARD_DIMENSIONS, Square
from chesscore.core.exceptions import InvalidStateEncodingError

EMPTY_SQUARE_SYMBOL = "."


@dataclass
class Board:
    """
    Only occupied squares are stored: a square missing from `position` is empty.
    """

    position: dict[Square, Piece] = field(default_factory=dict)

    @classmethod
    def from_fen(cls, fen_str: str) -> Self:
        """Construct a board using a given FEN string.

        That is, we supply the first part of the FEN string that denotes the board position
        ex. standard starting position:
        rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR
        means:
        * black pieces are on the 8th rank, starting with rook on a8, knight on b8, etc.
        * pawns cover 7th rank entirely
        * ranks 6 through 3 have 8 consecutive empty squares
        * rank 2 are the white pawns (capital letters)
        * 1st rank are the white pieces. Again, left-to-right reads a1-h1.
        """
        position: dict[Square, Piece] = {}
        fen_by_ranks = fen_str.split("/")
        if len(fen_by_ranks) != BOARD_DIMENSIONS[1]:
            raise InvalidStateEncodingError(
                f"Board placement needs {BOARD_DIMENSIONS[1]} ranks: {fen_str!r}"
            )

        for rank_idx, fen_one_rank in enumerate(fen_by_ranks):
            # FEN string is read from top rank (8th) to bottom rank (1st)
            rank = BOARD_DIMENSIONS[1] - rank_idx
            # ... but the first character is the a-file, so reads in normal direction
            file = 1
            for character in fen_one_rank:
                if character.isascii() and character.isdigit():
                    # A number denotes the amount of empty squares after each other
                    file += int(character)
                else:
                    # simple case: a letter directly denotes the piece that should be created
                    position[Square(file, rank)] = Piece.from_fen(character)
                    file += 1

            if file - 1 != BOARD_DIMENSIONS[0]:
                raise InvalidStateEncodingError(
                    f"Rank {rank} does not describe {BOARD_DIMENSIONS[0]} squares: {fen_one_rank!r}"
                )
        return cls(position)

    def to_fen(self) -> str:
        """Ranks are separated by slashes in FEN string."""
        return "/".join(
            self._rank_to_fen(rank) for rank in range(BOARD_DIMENSIONS[1], 0, -1)
        )

    def _rank_to_fen(self, rank: int) -> str:
        """FEN string of a single rank"""
        fen_characters: list[str] = []
        empty_count = 0
        for file in range(1, BOARD_DIMENSIONS[0] + 1):
            piece = self.piece(Square(file, rank))

            if piece is not None:
                if empty_count > 0:
                    fen_characters.append(str(empty_count))
                    empty_count = 0
                fen_characters.append(piece.to_fen())
            else:
                empty_count += 1

        # if the entire rank is empty, then we still place this number in the string
        if empty_count > 0:
            fen_characters.append(str(empty_count))
        return "".join(fen_characters)

    def copy(self) -> Self:
        """Pieces are immutable, so a shallow copy of the mapping is a fully independent board."""
        return type(self)(dict(self.position))

    # --- QUERIES ---
    def piece(self, square: Square) -> Optional[Piece]:
        return self.position.get(square)

    def is_occupied(self, square: Square) -> bool:
        return square in self.position

    def is_any_occupied(self, squares: list[Square]) -> bool:
        return any(self.is_occupied(square) for square in squares)

    def locate_pieces(self, piece_type: PieceType, color: Color) -> list[Square]:
        return [
            square
            for square, piece in self.position.items()
            if piece.type == piece_type and piece.color == color
        ]

    def locate_color(self, color: Color) -> list[Square]:
        return [
            square for square, piece in self.position.items() if piece.color == color
        ]

    def king_square(self, color: Color) -> Optional[Square]:
        kings = self.locate_pieces(PieceType.KING, color)
        return kings[0] if kings else None

    def is_under_attack(self, square: Square, by_color: Color) -> bool:
        return is_square_attacked(square, by_color, self)

    def is_any_under_attack(self, squares: list[Square], by_color: Color) -> bool:
        return any(self.is_under_attack(square, by_color) for square in squares)

    def is_check(self, color: Color) -> bool:
        """Is the king of the given color under attack?"""
        king = self.king_square(color)
        if king is None:
            # NOTE: only happens on hand-built test boards. No king = nothing to give check to.
            return False
        return self.is_under_attack(king, color.opponent)

    def generate_candidate_moves(self, color: Color) -> list[Move]:
        """
        Before knowing the set of legal moves, we use raycasting to find candidate moves, which will later be tested for legality
        (making sure it does not put yourself in check.)

        ---
        NOTE: En passant and castling depend on more than the position, so the rules engine adds those.
        """
        candidate_moves: list[Move] = []
        for starting_square in self.locate_color(color):
            piece_type = self.position[starting_square].type
            movement_rule: CandidateMovesFn = MOVEMENT_RULES[piece_type]
            candidate_moves.extend(movement_rule(starting_square, self))
        return candidate_moves

    # --- UPDATES ---
    def remove_piece(self, square: Square) -> Optional[Piece]:
        return self.position.pop(square, None)

    def move_piece(self, move: Move) -> None:
        """Update the position on the board (just the piece standing on from_square, see `apply_move` for the full effects)"""
        piece_that_moved = self.position.pop(move.from_square)
        self.position[move.to_square] = piece_that_moved

    def apply_move(self, move: Move) -> Optional[Piece]:
        """
        All effects of a move on the position. Returns the captured piece (if any)
        ---

        * castling: move both the king and the rook
        * en passant: the captured pawn is not standing on the target square
        * promotion: the pawn gets replaced by the chosen piece
        """
        if move.castling_direction is not None:
            squares = CASTLING_RULES[move.castling_direction]
            self.move_piece(Move(squares.king_from, squares.king_to))
            self.move_piece(Move(squares.rook_from, squares.rook_to))
            return None

        if move.is_en_passant:
            captured = self.remove_piece(en_passant_capture_square(move))
        else:
            captured = self.piece(move.to_square)

        self.move_piece(move)
        if move.promote_to is not None:
            pawn = self.position[move.to_square]
            self.position[move.to_square] = pawn.promoted_to(move.promote_to)
        return captured

    def move_pieces(self, moves: list[Move]) -> None:
        """convenience method to apply multiple moves (if you quickly want to start a board in a given position reached after some moves)"""
        for move in moves:
            self.apply_move(move)

    # --- MATERIAL ---
    def count_material(self) -> dict[Color, int]:
        """Tally the points of material each player has on the board"""
        return {color: self._count_material_player(color) for color in Color}

    def _player_pieces(self, color: Color) -> list[Piece]:
        """find all pieces of a given color"""
        return [piece for piece in self.position.values() if piece.color == color]

    def _count_material_player(self, color: Color) -> int:
        """Tally the points of material for a specific player"""
        return sum(piece.points for piece in self._player_pieces(color))

    # --- DISPLAY ---
    def render(self, perspective: Color = Color.WHITE) -> str:
        """
        Plain text diagram, one line per rank, FEN letters for the pieces and '.' for empty squares.

          8 r n b q k b n r
          ...
          1 R N B Q K B N R
            a b c d e f g h
        """
        ranks = range(BOARD_DIMENSIONS[1], 0, -1)
        files = range(1, BOARD_DIMENSIONS[0] + 1)
        if perspective == Color.BLACK:
            ranks = range(1, BOARD_DIMENSIONS[1] + 1)
            files = range(BOARD_DIMENSIONS[0], 0, -1)

        lines: list[str] = []
        for rank in ranks:
            symbols = []
            for file in files:
                piece = self.piece(Square(file, rank))
                symbols.append(piece.to_fen() if piece else EMPTY_SQUARE_SYMBOL)
            lines.append(f"{rank} {' '.join(symbols)}")
        lines.append("  " + " ".join(Square(file, 1).to_algebraic()[0] for file in files))
        return "\n".join(lines)
