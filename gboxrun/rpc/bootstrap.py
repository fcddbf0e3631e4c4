"""Logging setup for gboxrun processes.

Console output always goes to stderr: in stdio mode stdout carries the
JSON-RPC stream and must stay clean.
"""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

# Lifecycle events (bind, bind failure, stop) are logged here so they can be
# captured separately from request-level noise.
SERVER_LOGGER_NAME = "gboxrun.server"

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


def configure_logging(
    log_dir: Path | None = None,
    level: int = logging.INFO,
    console_level: int = logging.WARNING,
) -> Path | None:
    """Configure the ``gboxrun`` logger tree.

    Installs a stderr console handler and, when ``log_dir`` is given, a
    rotating ``server.log`` (5MB per file, 3 backups). Safe to call more
    than once; handlers are replaced rather than duplicated.

    Args:
        log_dir: Directory for server.log. Created if it doesn't exist.
        level: Logging level for the file handler.
        console_level: Logging level for the stderr handler.

    Returns:
        Path to the log file, or None when file logging is disabled.
    """
    root = logging.getLogger("gboxrun")
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATEFMT)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(formatter)
    root.addHandler(console_handler)

    log_file: Path | None = None
    effective_level = console_level
    if log_dir is not None:
        log_dir.mkdir(parents=True, exist_ok=True)
        log_file = log_dir / "server.log"
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=5 * 1024 * 1024,
            backupCount=3,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)
        effective_level = min(level, console_level)

    root.setLevel(effective_level)
    root.propagate = False

    if log_file is not None:
        logging.getLogger(SERVER_LOGGER_NAME).info("Server logging configured: %s", log_file)
    return log_file
