"""Logging setup: the ``termtile`` package logger writes to a rotating file, optionally mirrored to stderr."""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

PACKAGE_LOGGER = "termtile"

_MAX_BYTES = 1_000_000
_BACKUP_COUNT = 3
_FILE_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
_CONSOLE_FORMAT = "%(levelname)s %(name)s: %(message)s"


def parse_level(name: str, default: int = logging.INFO) -> int:
    """Map a level name such as ``"debug"`` to its number; unknown names give ``default``."""
    return logging.getLevelNamesMapping().get(name.strip().upper(), default)


def setup_logging(log_path: Path, level: str = "INFO", *, console: bool = False) -> None:
    """Attach handlers to the package logger once; later calls are no-ops.

    Args:
        log_path: Rotating log file; its directory is created if missing.
        level: Level name for the package logger.
        console: Also log to stderr.

    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    if logger.handlers:
        return

    log_path.parent.mkdir(parents=True, exist_ok=True)
    file_handler = RotatingFileHandler(log_path, maxBytes=_MAX_BYTES, backupCount=_BACKUP_COUNT)
    file_handler.setFormatter(logging.Formatter(fmt=_FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    logger.addHandler(file_handler)

    if console:
        stream_handler = logging.StreamHandler(sys.stderr)
        stream_handler.setFormatter(logging.Formatter(fmt=_CONSOLE_FORMAT))
        logger.addHandler(stream_handler)

    logger.setLevel(parse_level(level))
