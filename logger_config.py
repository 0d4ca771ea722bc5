"""Logging for the employee directory service.

Every module calls ``setup_logger(__name__)`` once at import.  Records go to
stdout at INFO and, when ``EMPDIR_LOGS`` (default ``<project>/logs``) is
writable, to ``empdir_YYYY-MM-DD.log`` there at every level.  The logger's own
level comes from ``EMPDIR_LOG_LEVEL``, which defaults to DEBUG when
``EMPDIR_ENV=development``.
"""

import logging
import sys
from datetime import datetime

from config import LOG_LEVEL, LOGS_PATH

_FORMATTER = logging.Formatter(
    fmt='%(asctime)s | %(levelname)-7s | %(name)s | %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)


def _daily_file_handler() -> logging.Handler | None:
    """Handler for today's file under LOGS_PATH, or None on a read-only tree."""
    try:
        LOGS_PATH.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(
            LOGS_PATH / f"empdir_{datetime.now():%Y-%m-%d}.log", encoding='utf-8'
        )
    except OSError:
        return None
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(_FORMATTER)
    return handler


def setup_logger(name: str) -> logging.Logger:
    """Return the named logger with the directory's handlers attached.

    Repeat calls for the same name reuse the existing handlers.
    """
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, LOG_LEVEL.upper(), logging.INFO))

    if logger.handlers:
        return logger

    file_handler = _daily_file_handler()
    if file_handler is not None:
        logger.addHandler(file_handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(_FORMATTER)
    logger.addHandler(console_handler)

    return logger
