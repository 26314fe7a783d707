"""
Logging configuration module for epubreader.
"""

import logging
from pathlib import Path

from .display.rich_logger import setup_rich_logger


FILE_LOG_FORMAT = "[%(asctime)s] %(levelname)-8s %(name)s: %(message)s"
FILE_DATE_FORMAT = "%d/%b/%Y %H:%M:%S"


def setup_logger(
    name: str = "epubreader",
    level: str = "INFO",
    log_file: str | Path | None = None,
) -> logging.Logger:
    """
    Set up a logger with the specified name and level.

    Args:
        name: The name of the logger
        level: The logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Write records to this file instead of the console

    Returns:
        Configured logger instance
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    if log_file is None:
        return setup_rich_logger(name, level=numeric_level)

    logger = logging.getLogger(name)
    logger.setLevel(numeric_level)

    # Remove existing handlers to avoid duplicates
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(numeric_level)
    file_handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT, datefmt=FILE_DATE_FORMAT))
    logger.addHandler(file_handler)

    return logger


def get_logger(name: str = "epubreader") -> logging.Logger:
    """
    Get an existing logger or create a new one if it doesn't exist.

    Args:
        name: The name of the logger

    Returns:
        Logger instance
    """
    return logging.getLogger(name)


def set_log_level(level: str, logger_name: str = "epubreader") -> None:
    """
    Set the log level for an existing logger.

    Args:
        level: The logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        logger_name: The name of the logger to modify
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    logger = logging.getLogger(logger_name)
    logger.setLevel(numeric_level)

    for handler in logger.handlers:
        handler.setLevel(numeric_level)


def get_valid_log_levels() -> list[str]:
    """Return a list of valid log level names."""
    return ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
