"""Process-wide logging setup."""

from __future__ import annotations

import logging

from src.seabattle.core.config import LOG_LEVEL

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level_name: str = LOG_LEVEL) -> None:
    """Apply the configured level and format to the root logger."""
    level = logging.getLevelName(level_name.upper())
    if not isinstance(level, int):
        level = logging.INFO
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger("src.seabattle").setLevel(level)
    logging.getLogger(__name__).info("logging_level=%s", logging.getLevelName(level))
