"""loguru sinks of the chess backend, set up from `Settings`."""

import sys
from pathlib import Path

from loguru import logger

from src.core.config import Settings

# colour markup only goes to the terminal
CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{line}</cyan> | <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} | {message}"


def configure_logging(settings: Settings) -> list[int]:
    """
    Replace every loguru sink (the default stderr one included) with the ones the settings ask for:
    stderr always, plus a rotating file if `log_file` is set. Both only let `log_level` and up through.

    Returns the ids of the new sinks, so they can be taken off again with `logger.remove(sink_id)`.
    """
    logger.remove()
    sink_ids = [
        logger.add(sys.stderr, level=settings.log_level, format=CONSOLE_FORMAT, colorize=True)
    ]

    if settings.log_file:
        log_path = Path(settings.log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        sink_ids.append(
            logger.add(
                log_path,
                level=settings.log_level,
                format=FILE_FORMAT,
                rotation=settings.log_rotation,
                retention=settings.log_retention,
            )
        )

    logger.debug(f"Logging to {len(sink_ids)} sink(s) at level {settings.log_level}")
    return sink_ids
