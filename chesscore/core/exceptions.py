"""
Exceptions raised across layers.

Every error the domain can report derives from ChessError, so the service layer / CLI can catch a single base class.
"""


class ChessError(Exception):
    """Base class for all errors raised by chesscore"""


# --- RULES ENGINE / CODEC ---
class IllegalMoveError(ChessError):
    """The requested move is not in the set of legal moves for the current position."""


class InvalidSquareError(ChessError):
    """Coordinates that do not denote a square on the board."""


class InvalidStateEncodingError(ChessError):
    """A FEN string (or one of its fields) that cannot be decoded into a game state."""


# Most of the codebase talks about FEN directly
InvalidFENError = InvalidStateEncodingError


# --- GAME SESSION ---
class GameStateError(ChessError):
    """Operation not allowed given the status of the game (or the stored game is inconsistent)."""


# --- SERVICE / PERSISTENCE / BOUNDARY ---
class RepositoryError(ChessError):
    """Record could not be found / stored."""


class InvalidRequestError(ChessError):
    """Request model failed validation."""
