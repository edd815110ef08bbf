"""
Logging setup for the converter.
Entry points call setup_logging once; library modules only get loggers.
"""
import logging
import sys

from conversor.app.config import get_settings


def setup_logging(level: int | str | None = None) -> None:
    """
    Configure logging for the application.

    Args:
        level: Level name or number. Defaults to LOG_LEVEL from settings.
    """
    if level is None:
        level = get_settings().log_level
    if isinstance(level, str):
        level = logging.getLevelName(level.strip().upper())
        if not isinstance(level, int):
            level = logging.INFO

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
    )
