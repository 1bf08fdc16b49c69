"""
Logging setup for vocabdeck.

Every module logs through ``logging.getLogger(__name__)``; this configures the
``vocabdeck`` parent logger once at startup.
"""

from __future__ import annotations

import logging
import logging.handlers
from pathlib import Path
from typing import Optional


def setup_logging(log_level: str = "INFO", log_dir: Optional[Path] = None) -> logging.Logger:
    """
    Configure application logging.

    Args:
        log_level: Logging level name (DEBUG, INFO, WARNING, ERROR)
        log_dir: Directory for a rotating log file; console only when None

    Returns:
        The configured ``vocabdeck`` logger
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    logger = logging.getLogger("vocabdeck")
    logger.setLevel(level)
    logger.handlers.clear()

    formatter = logging.Formatter(
        "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_dir is not None:
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            log_dir / "vocabdeck.log",
            maxBytes=5 * 1024 * 1024,
            backupCount=3,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.debug("Logging configured at %s", logging.getLevelName(level))
    return logger
