"""The storage interface the service depends on (SQL in production, a dictionary in the service tests)"""

from typing import Optional, Protocol
from uuid import UUID

from chesscore.core.models import GameModel


class GameRepository(Protocol):
    """Games are stored as GameModel, keyed by a UUID the repository hands out"""

    def get_game(self, game_id: UUID) -> GameModel | None: ...

    def list_games(self, status: Optional[str] = None) -> list[tuple[UUID, GameModel]]:
        """Stored games in order of creation, optionally filtered by status."""
        ...

    def create_game(self, game: GameModel) -> tuple[GameModel, UUID]:
        """Store a new game, returning what was stored and the new ID."""
        ...

    def update_game(self, game_id: UUID, game: GameModel) -> GameModel | None:
        """Replace a stored game. None means the ID is unknown."""
        ...

    def delete_game(self, game_id: UUID) -> GameModel | None:
        """Remove a stored game. None means the ID is unknown."""
        ...
