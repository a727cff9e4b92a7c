"""Generate database sessions"""

import logging
from collections.abc import Iterator
from typing import Optional

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

from chesscore.core.config import Settings
from chesscore.db.schema import Base

logger = logging.getLogger(__name__)


def build_engine(settings: Optional[Settings] = None) -> Engine:
    """Create the engine for the configured database and make sure all tables exist"""
    settings = settings or Settings.from_env()
    engine = create_engine(settings.database_url, echo=settings.sql_echo)
    Base.metadata.create_all(bind=engine)
    logger.info("Connected to database %s", engine.url.render_as_string(hide_password=True))
    return engine


def session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


def get_db(factory: sessionmaker[Session]) -> Iterator[Session]:
    db = factory()
    try:
        yield db
    finally:
        db.close()
