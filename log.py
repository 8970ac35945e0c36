"""Application logger with a rotating file handler."""

from __future__ import annotations

import logging
import logging.handlers
from pathlib import Path
from typing import Optional

LOGGER_NAME = "study_scanner"
LOG_MAX_MB = 5
LOG_BACKUPS = 3


def setup_logger(log_dir: Optional[Path] = None, level: int = logging.DEBUG) -> logging.Logger:
    """Configure the ``study_scanner`` logger once; later calls reuse it."""
    log_dir = log_dir or Path.home() / ".study_scanner" / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    if not logger.handlers:
        handler = logging.handlers.RotatingFileHandler(
            log_dir / "scanner.log",
            maxBytes=LOG_MAX_MB * 1024 * 1024,
            backupCount=LOG_BACKUPS,
            encoding="utf-8",
        )
        formatter = logging.Formatter("%(asctime)s %(levelname)-8s %(name)s %(message)s")
        handler.setFormatter(formatter)
        logger.addHandler(handler)

        console = logging.StreamHandler()
        console.setLevel(logging.WARNING)
        console.setFormatter(formatter)
        logger.addHandler(console)

    logger.debug("Logger initialized")
    return logger
