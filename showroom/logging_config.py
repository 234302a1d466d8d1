"""Logging setup for showroom entry points.

The core modules only ever call ``logging.getLogger(__name__)``; the process
that hosts them (request handler, worker, script) calls ``setup_logging()``
once at start-up.
"""

from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(log_dir: Path | None = None) -> logging.Logger:
    """Configure rotating file logging on the root logger.

    Logs are written to ``~/.showroom/logs/showroom.log`` unless ``log_dir``
    is given. Uses INFO level by default; set SHOWROOM_DEBUG=1 for DEBUG.

    Args:
        log_dir: Directory for the log file (created if missing)

    Returns:
        The ``showroom`` package logger
    """
    log_dir = log_dir or Path.home() / ".showroom" / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)
    # Owner only
    log_dir.chmod(0o700)

    log_file = log_dir / "showroom.log"
    log_level = logging.DEBUG if os.environ.get("SHOWROOM_DEBUG") else logging.INFO

    # 5 MB per file, keep 3 backups
    handler = RotatingFileHandler(
        log_file,
        maxBytes=5 * 1024 * 1024,
        backupCount=3,
        encoding="utf-8",
    )
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    # Re-running setup must not stack duplicate handlers on the same file
    for existing in list(root_logger.handlers):
        if isinstance(existing, RotatingFileHandler) and existing.baseFilename == os.path.abspath(
            log_file
        ):
            root_logger.removeHandler(existing)
            existing.close()
    root_logger.addHandler(handler)

    return logging.getLogger("showroom")


__all__ = ["LOG_FORMAT", "setup_logging"]
