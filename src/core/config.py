"""Application settings, read from the environment."""

import os
from dataclasses import dataclass
from typing import Optional, Self

DEFAULT_DATABASE_URL = "sqlite:///chess.db"
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_LOG_ROTATION = "10 MB"
DEFAULT_LOG_RETENTION = "1 week"


@dataclass(frozen=True)
class Settings:
    """
    NOTE: frozen (and so hashable): the database layer builds one engine, and configures logging once, per Settings.
    """

    database_url: str = DEFAULT_DATABASE_URL
    log_level: str = DEFAULT_LOG_LEVEL
    log_file: Optional[str] = None
    log_rotation: str = DEFAULT_LOG_ROTATION
    log_retention: str = DEFAULT_LOG_RETENTION

    @classmethod
    def from_env(cls) -> Self:
        """Every setting can be overridden with a CHESS_* environment variable."""
        return cls(
            database_url=os.getenv("CHESS_DATABASE_URL", DEFAULT_DATABASE_URL),
            log_level=os.getenv("CHESS_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper(),
            log_file=os.getenv("CHESS_LOG_FILE") or None,
            log_rotation=os.getenv("CHESS_LOG_ROTATION", DEFAULT_LOG_ROTATION),
            log_retention=os.getenv("CHESS_LOG_RETENTION", DEFAULT_LOG_RETENTION),
        )
