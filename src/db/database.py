"""Generate database session"""

from functools import lru_cache
from typing import Generator

from loguru import logger
from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

from src.core.config import Settings
from src.core.logging import configure_logging
from src.db.schema import Base


@lru_cache
def get_engine(settings: Settings) -> Engine:
    """
    One engine per Settings. Building it is the application's start-up: logging gets configured from
    the same settings, and the tables get created.
    """
    configure_logging(settings)
    engine = create_engine(settings.database_url)
    Base.metadata.create_all(bind=engine)
    logger.info(f"Database ready at {engine.url.render_as_string(hide_password=True)}")
    return engine


def get_db(settings: Settings | None = None) -> Generator[Session, None, None]:
    settings = settings or Settings.from_env()
    session_factory = sessionmaker(bind=get_engine(settings))
    db = session_factory()
    try:
        yield db
    finally:
        db.close()
