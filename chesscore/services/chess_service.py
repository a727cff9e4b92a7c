"""Orchestration of communication from API layer to business logic and persistence layers (and the reverse direction)."""

import logging
from typing import Optional
from uuid import UUID

from chesscore.api.models import (
    CreateGameRequest,
    DeleteGameRequest,
    GameResponse,
    GetGameRequest,
    LegalMovesRequest,
    LegalMovesResponse,
    MoveRequest,
    ResignRequest,
)
from chesscore.chess.game import Game
from chesscore.chess.moves import build_uci
from chesscore.chess.pieces import Color as DomainColor
from chesscore.core.exceptions import IllegalMoveError, RepositoryError
from chesscore.core.models import GameModel
from chesscore.core.shared_types import Color, PieceType
from chesscore.db.repository import GameRepository
from chesscore.services.session_locks import SessionLocks

logger = logging.getLogger(__name__)


class ChessService:
    """Orchestration of layers for chess game."""

    def __init__(
        self, repository: GameRepository, locks: Optional[SessionLocks] = None
    ) -> None:
        self.repo = repository
        self.locks = locks or SessionLocks()

    # -- API logic ---
    def create_new_game(self, request: CreateGameRequest) -> GameResponse:
        """Create a new game, from the standard starting position or the requested FEN."""

        new_game = Game.new_game(starting_fen=request.starting_fen)
        stored_game, game_id = self.repo.create_game(new_game.to_model())
        logger.info("Created game %s from %s", game_id, stored_game.starting_fen)
        return self._create_game_response(game_id, new_game)

    def get_game_state(self, request: GetGameRequest) -> GameResponse:
        """
        Retrieve current game state.
        ----
        Used in "polling" loop by frontend to check if the opponent moved for instance.
        """
        with self.locks.exclusive(request.game_id):
            game = Game.from_model(self._fetch_game(request.game_id))
        return self._create_game_response(request.game_id, game)

    def legal_moves(self, request: LegalMovesRequest) -> LegalMovesResponse:
        """retrieve set of legal moves (of the whole side to move, or of the piece on one square)."""

        with self.locks.exclusive(request.game_id):
            game = Game.from_model(self._fetch_game(request.game_id))

        return LegalMovesResponse(
            game_id=request.game_id,
            square=request.square,
            color=Color[game.color_to_move.name],
            legal_moves=game.legal_moves(request.square),
        )

    def make_move(self, request: MoveRequest) -> GameResponse:
        """
        Make a move attempt.
        ----
        On an illegal move the error goes back up to the caller and the stored game stays as it was.
        """
        move_text = self._move_text(request)

        with self.locks.exclusive(request.game_id):
            game = Game.from_model(self._fetch_game(request.game_id))
            try:
                game.make_move(move_text)
            except IllegalMoveError:
                logger.warning("Rejected move %r in game %s", move_text, request.game_id)
                raise
            self.repo.update_game(request.game_id, game.to_model())

        logger.info(
            "Game %s: %s played, status %s", request.game_id, move_text, game.status
        )
        return self._create_game_response(request.game_id, game)

    def resign(self, request: ResignRequest) -> GameResponse:
        """The player of the requested color gives up."""
        with self.locks.exclusive(request.game_id):
            game = Game.from_model(self._fetch_game(request.game_id))
            game.resign(DomainColor[request.color.name])
            self.repo.update_game(request.game_id, game.to_model())

        logger.info("Game %s: %s resigned", request.game_id, request.color)
        return self._create_game_response(request.game_id, game)

    def delete_game(self, request: DeleteGameRequest) -> None:
        """Handle a request to delete a Game record."""
        with self.locks.exclusive(request.game_id):
            self.repo.delete_game(request.game_id)
        self.locks.discard(request.game_id)
        logger.info("Deleted game %s", request.game_id)

    # -- Internal helpers --
    def _move_text(self, request: MoveRequest) -> str:
        """Parse data in MoveRequest to UCI notation (or pass on the SAN/UCI notation as given)"""
        if request.notation is not None:
            return request.notation

        # for the type checker: the request model guarantees both squares if no notation
        assert request.from_square is not None and request.to_square is not None
        return build_uci(
            from_square_alg=request.from_square,
            to_square_alg=request.to_square,
            promotion=request.promote_to.value if request.promote_to else None,
        )

    def _create_game_response(self, game_id: UUID, game: Game) -> GameResponse:
        """Convert the Game into a GameResponse (for game with given ID.)"""
        return GameResponse(
            game_id=game_id,
            fen_state=game.state.to_fen(),
            starting_state=game.starting_fen,
            move_history=[move.to_uci() for move in game.moves],
            san_history=list(game.san_moves),
            status=game.status,
            winner=Color[game.winner.name] if game.winner else None,
            color_to_move=Color[game.color_to_move.name],
            in_check=game.in_check,
            captured={
                color.name.lower(): [PieceType[piece_type.name] for piece_type in pieces]
                for color, pieces in game.captured.items()
            },
            material={
                color.name.lower(): points for color, points in game.material.items()
            },
        )

    def _fetch_game(self, game_id: UUID) -> GameModel:
        """Attempt to find the game in the repository and raise error if it fails."""
        game_model = self.repo.get_game(game_id)
        if game_model is None:
            raise RepositoryError(f"Game with {game_id=} not found.")
        return game_model

