"""Unit tests for chesscore/db/database.py"""

from pathlib import Path
from uuid import uuid4

from sqlalchemy import inspect

from chesscore.core.config import Settings
from chesscore.db.database import build_engine, get_db, session_factory
from chesscore.db.sql_repository import SQLGameRepository


def test_build_engine_creates_tables() -> None:
    engine = build_engine(Settings(database_url="sqlite://"))
    assert "games" in inspect(engine).get_table_names()


def test_get_db_closes_the_session(tmp_path: Path) -> None:
    engine = build_engine(Settings(database_url=f"sqlite:///{tmp_path / 'games.db'}"))
    sessions = get_db(session_factory(engine))
    db = next(sessions)
    assert SQLGameRepository(db).get_game(uuid4()) is None
    assert db.in_transaction()

    sessions.close()
    assert not db.in_transaction()
