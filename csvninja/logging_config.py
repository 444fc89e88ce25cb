"""Loguru setup shared by the HTTP service and the CLI."""

import logging
import sys
from typing import Optional, TextIO

from loguru import logger


LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "{message}"
)

# Uvicorn logs through the standard library; its verbosity follows LOG_LEVEL
STDLIB_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


def configure_logging(level: str = "INFO", sink: TextIO = sys.stderr) -> None:
    """Route csvninja logs to ``sink`` at ``level``.

    Uvicorn keeps its own handlers; only their level is aligned, so
    ``LOG_LEVEL=WARNING`` also silences the access log.
    """
    level = level.upper()
    logger.remove()
    logger.add(
        sink,
        level=level,
        format=LOG_FORMAT,
        backtrace=False,
        diagnose=False,
    )

    stdlib_level = logging.getLevelName(level)
    if isinstance(stdlib_level, int):
        for name in STDLIB_LOGGERS:
            logging.getLogger(name).setLevel(stdlib_level)


def get_logger(name: Optional[str] = None, **kwargs):
    """Return a logger bound with an optional module/component name."""
    if name:
        return logger.bind(module=name, **kwargs)
    return logger.bind(**kwargs)
