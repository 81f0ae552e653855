"""
Logging for sigswap. Every module logs through a named child of the "sigswap" logger
"""
import logging
import sys
from pathlib import Path
from typing import Optional

__all__ = ["get_logger", "set_log_level"]

ROOT_NAME = "sigswap"
DEFAULT_FORMAT = '%(asctime)s [%(name)s] [%(levelname)s]: %(message)s'


def get_logger(name: str, log_level: str = "DEBUG", log_file: Optional[Path] = None,
               format_string: Optional[str] = None) -> logging.Logger:
    """
    Get or create a stdout logger for the given module.

    Args:
        name: Logger name (typically __name__ from calling module)
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional path to a log file which receives the same records
        format_string: Optional custom format string

    Returns:
        Configured logger instance. Calling again with the same name returns the existing logger untouched.
    """
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger

    logger.setLevel(getattr(logging, log_level.upper()))
    logger.propagate = False
    formatter = logging.Formatter(format_string or DEFAULT_FORMAT)

    console_handler = logging.StreamHandler(stream=sys.stdout)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def set_log_level(log_level: str) -> int:
    """
    Change the level of every sigswap logger created so far. Returns the number of loggers updated.
    """
    level = getattr(logging, log_level.upper())
    updated = 0
    for name, logger in logging.root.manager.loggerDict.items():
        if isinstance(logger, logging.Logger) and (name == ROOT_NAME or name.startswith(ROOT_NAME + ".")):
            logger.setLevel(level)
            updated += 1
    return updated
