"""
Blob AutoTiles - Logging

Library modules log under the "autotiles" namespace and never configure
handlers themselves. Command-line tools call setup_logging() once.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

LOGGER_NAME = "autotiles"
LOG_FORMAT = "[%(asctime)s] - [%(name)s] - [%(levelname)s] - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def get_logger(name: str) -> logging.Logger:
    """Get a logger inside the autotiles namespace."""
    if name == LOGGER_NAME or name.startswith(LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOGGER_NAME}.{name}")


def setup_logging(
    level: int = logging.INFO, log_file: Optional[str | Path] = None
) -> logging.Logger:
    """
    Attach console (and optionally file) handlers to the package logger.

    Args:
        level: Minimum level to emit
        log_file: Optional path of a log file to write alongside the console

    Returns:
        The package logger
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    # Calling twice must not duplicate output
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(formatter)
    logger.addHandler(console)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.debug(f"Logging initialized at level {logging.getLevelName(level)}")
    return logger


logging.getLogger(LOGGER_NAME).addHandler(logging.NullHandler())
