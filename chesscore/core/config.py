"""Runtime configuration, read from environment variables."""

import os
from dataclasses import dataclass
from typing import Self

DEFAULT_DATABASE_URL = "sqlite:///chesscore.db"
DEFAULT_LOG_LEVEL = "WARNING"


def _as_bool(value: str) -> bool:
    return value.strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    database_url: str = DEFAULT_DATABASE_URL
    sql_echo: bool = False
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls) -> Self:
        """
        * CHESSCORE_DATABASE_URL: SQLAlchemy URL of the database storing game sessions
        * CHESSCORE_SQL_ECHO: log every SQL statement (true/false)
        * CHESSCORE_LOG_LEVEL: level name passed to logging (DEBUG, INFO, ...)
        """
        return cls(
            database_url=os.getenv("CHESSCORE_DATABASE_URL", DEFAULT_DATABASE_URL),
            sql_echo=_as_bool(os.getenv("CHESSCORE_SQL_ECHO", "false")),
            log_level=os.getenv("CHESSCORE_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper(),
        )
