"""Logging configuration for glyphforge entry points.

Usage:
    from glyphforge.log import setup_logging

    # Warnings and errors to stderr:
    setup_logging()

    # Everything to a rotating file, nothing on the terminal:
    setup_logging(log_file="logs/glyphforge.log", debug=True, console=False)
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

DEFAULT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

# Log rotation defaults
MAX_BYTES = 5 * 1024 * 1024  # 5 MB
BACKUP_COUNT = 3


def setup_logging(
    level: int = logging.WARNING,
    log_file: Optional[str] = None,
    fmt: str = DEFAULT_FORMAT,
    max_bytes: int = MAX_BYTES,
    backup_count: int = BACKUP_COUNT,
    *,
    debug: bool = False,
    console: bool = True,
) -> None:
    """Configure the root logger.

    Call this once at the start of an entry point. Interactive sessions
    should pass console=False so log lines do not land on the frame.
    """
    if debug:
        level = logging.DEBUG

    handlers: list[logging.Handler] = []
    if console:
        handlers.append(logging.StreamHandler(sys.stderr))
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            RotatingFileHandler(
                log_file,
                maxBytes=max_bytes,
                backupCount=backup_count,
            )
        )
    if not handlers:
        handlers.append(logging.NullHandler())

    logging.basicConfig(level=level, format=fmt, handlers=handlers, force=True)

    if log_file:
        logging.getLogger(__name__).info("logging to %s", log_file)
