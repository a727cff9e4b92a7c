"""
The Game class will be the entrypoint into the domain layer for the service layer.
It is responsible for keeping track of one game from start to finish -->
the rules engine decides what is legal, the Game remembers what happened (moves, positions, captures) and how it ended.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional, Self

from chesscore.chess import notation, rules
from chesscore.chess.fen import STARTING_FEN
from chesscore.chess.game_state import GameState
from chesscore.chess.moves import Move
from chesscore.chess.pieces import AVAILABLE_COLOR_NAMES, Color, PieceType
from chesscore.chess.rules import Outcome
from chesscore.chess.square import Square
from chesscore.core.exceptions import ChessError, GameStateError
from chesscore.core.models import GameModel
from chesscore.core.shared_types import Status

logger = logging.getLogger(__name__)

OUTCOME_TO_STATUS: dict[Outcome, Status] = {
    Outcome.ONGOING: Status.IN_PROGRESS,
    Outcome.CHECKMATE: Status.CHECKMATE,
    Outcome.STALEMATE: Status.STALEMATE,
    Outcome.DRAW_FIFTY_MOVE: Status.DRAW_FIFTY_MOVE_RULE,
    Outcome.DRAW_REPETITION: Status.DRAW_REPETITION,
    Outcome.DRAW_INSUFFICIENT_MATERIAL: Status.DRAW_INSUFFICIENT_MATERIAL,
}


@dataclass
class Game:
    # --- DOMAIN LAYER API CALLED BY SERVICE---

    starting_fen: str
    state: GameState
    moves: list[Move] = field(default_factory=list)
    san_moves: list[str] = field(default_factory=list)
    history: list[str] = field(default_factory=list)  # FEN before every move
    captured: dict[Color, list[PieceType]] = field(
        default_factory=lambda: {color: [] for color in Color}
    )
    status: Status = Status.IN_PROGRESS
    winner: Optional[Color] = None

    @classmethod
    def new_game(cls, starting_fen: Optional[str] = None) -> Self:
        """Start from the standard position, or from any (valid) FEN."""
        fen = starting_fen or STARTING_FEN
        state = GameState.from_fen(fen)
        game = cls(starting_fen=state.to_fen(), state=state)
        # a position can already be finished (e.g. supplied FEN is a checkmate)
        game._update_game_status()
        return game

    @classmethod
    def from_model(cls, model: GameModel) -> Self:
        """
        Define how to construct a Game from the information the Service layer actually has
        ---

        The moves get replayed from the starting position. That way the Game knows the captured pieces / repetitions,
        and a record that does not add up gets noticed.
        """

        # Validation
        if model.status not in [status.value for status in Status]:
            raise GameStateError(
                f"Invalid status code: {model.status!r}. \nPick one from {', '.join(status.value for status in Status)}"
            )

        game = cls.new_game(model.starting_fen)
        try:
            for move_uci in model.moves_uci:
                game.make_move(move_uci)
        except ChessError as e:
            raise GameStateError(
                f"Stored moves cannot be replayed from the starting position: {e}"
            ) from e

        if game.state.to_fen() != model.current_fen:
            raise GameStateError(
                f"Stored FEN {model.current_fen!r} does not match the replayed game {game.state.to_fen()!r}"
            )

        if model.status == Status.RESIGNED:
            if model.winner is None or model.winner.upper() not in AVAILABLE_COLOR_NAMES:
                raise GameStateError(
                    f"A resigned game needs a winner, got {model.winner!r}"
                )
            game.status = Status.RESIGNED
            game.winner = Color[model.winner.upper()]
        elif game.status != model.status:
            raise GameStateError(
                f"Stored status {model.status!r} does not match the replayed game ({game.status.value!r})"
            )
        return game

    def to_model(self) -> GameModel:
        """Encode back into a format the Service layer uses"""

        return GameModel(
            starting_fen=self.starting_fen,
            current_fen=self.state.to_fen(),
            history_fen=list(self.history),
            moves_uci=[move.to_uci() for move in self.moves],
            status=self.status.value,
            winner=self.winner.name.lower() if self.winner else None,
        )

    @property
    def is_over(self) -> bool:
        return self.status != Status.IN_PROGRESS

    @property
    def color_to_move(self) -> Color:
        return self.state.color_to_move

    @property
    def in_check(self) -> bool:
        return rules.is_check(self.state)

    @property
    def material(self) -> dict[Color, int]:
        return self.state.board.count_material()

    def legal_moves(self, square: Optional[str] = None) -> list[str]:
        """
        Service will request the set of legal moves.
        ----

        ----
        These can be used to display to the user (highlight the squares a selected piece can go to).
        Sorted, so the output is stable.
        """
        self._assert_in_progress()
        if square is None:
            moves = rules.legal_moves(self.state)
        else:
            moves = rules.legal_moves_from(self.state, Square.from_algebraic(square))
        return sorted(move.to_uci() for move in moves)

    def make_move(self, move_text: str) -> Move:
        """
        Attempt to make a move (UCI or SAN)
        -----

        1. make sure the game is still going
        2. find the legal move (raises IllegalMoveError, leaving the game untouched)
        3. update the (history of) moves, the FEN history and the captured pieces
        4. update the game status (if needed)
        """
        self._assert_in_progress()
        move = notation.parse_move(self.state, move_text)

        # Store info from before the update
        captured = rules.captured_piece(self.state, move)
        san = notation.to_san(self.state, move)
        new_state = rules.apply(self.state, move)

        self.history.append(self.state.to_fen())
        self.state = new_state
        self.moves.append(move)
        self.san_moves.append(san)
        if captured is not None:
            self.captured[captured.color].append(captured.type)

        self._update_game_status()
        logger.debug("Played %s (%s), status: %s", move.to_uci(), san, self.status)
        return move

    def resign(self, color: Color) -> None:
        """The player with the given color gives up, the opponent wins."""
        self._assert_in_progress()
        self.status = Status.RESIGNED
        self.winner = color.opponent

    def move_list(self) -> str:
        """Numbered SAN move list: '1. e4 e5 2. Nf3'"""
        initial = GameState.from_fen(self.starting_fen)
        return notation.format_move_list(
            self.san_moves,
            first_move_number=initial.fullmove_number,
            black_first=initial.color_to_move == Color.BLACK,
        )

    # -- PRIVATE HELPERS ---
    def _assert_in_progress(self) -> None:
        if self.is_over:
            raise GameStateError(f"Game is not in progress. status: {self.status}")

    def _update_game_status(self) -> None:
        """Ask the rules engine if the game ended and change the status accordingly."""
        result = rules.game_status(self.state)
        self.status = OUTCOME_TO_STATUS[result.outcome]
        self.winner = result.winner
