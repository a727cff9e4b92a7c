"""Implementation of (Game)Repository using SQLAlchemy"""

from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import select
from sqlalchemy.orm import Session

from chesscore.core.models import GameModel
from chesscore.db.schema import DBGame


class SQLGameRepository:
    """Games stored in a relational database (one row per game, move and FEN history as JSON)"""

    def __init__(self, db_session: Session) -> None:
        self.db = db_session

    def get_game(self, game_id: UUID) -> GameModel | None:
        game_db = self._fetch_game(game_id)
        return None if game_db is None else self._to_model(game_db)

    def list_games(self, status: Optional[str] = None) -> list[tuple[UUID, GameModel]]:
        """All stored games (oldest first), optionally only those with the given status."""
        query = select(DBGame).order_by(DBGame.created_at)
        if status is not None:
            query = query.where(DBGame.status == str(status))
        return [(game_db.id, self._to_model(game_db)) for game_db in self.db.scalars(query)]

    def create_game(self, game: GameModel) -> tuple[GameModel, UUID]:
        game_db = DBGame(id=uuid4())
        self._write(game_db, game)
        self.db.add(game_db)
        self.db.commit()
        self.db.refresh(game_db)
        return self._to_model(game_db), game_db.id

    def update_game(self, game_id: UUID, game: GameModel) -> GameModel | None:
        """Overwrite the stored game. None if there is no such game."""
        game_db = self._fetch_game(game_id)
        if game_db is None:
            return None
        self._write(game_db, game)
        self.db.commit()
        self.db.refresh(game_db)
        return self._to_model(game_db)

    def delete_game(self, game_id: UUID) -> GameModel | None:
        """Remove a game's record and hand back what was stored."""
        game_db = self._fetch_game(game_id)
        if game_db is None:
            return None
        deleted = self._to_model(game_db)
        self.db.delete(game_db)
        self.db.commit()
        return deleted

    def _fetch_game(self, game_id: UUID) -> DBGame | None:
        return self.db.get(DBGame, game_id)

    @staticmethod
    def _write(game_db: DBGame, game: GameModel) -> None:
        """Copy the transport model onto the row"""
        game_db.starting_fen = game.starting_fen
        game_db.current_fen = game.current_fen
        # NOTE: always assign new lists, in-place changes of a JSON column go unnoticed
        game_db.history_fen = list(game.history_fen)
        game_db.moves_uci = list(game.moves_uci)
        game_db.status = str(game.status)
        game_db.winner = game.winner

    @staticmethod
    def _to_model(game_db: DBGame) -> GameModel:
        return GameModel(
            starting_fen=game_db.starting_fen,
            current_fen=game_db.current_fen,
            history_fen=list(game_db.history_fen),
            moves_uci=list(game_db.moves_uci),
            status=game_db.status,
            winner=game_db.winner,
        )
