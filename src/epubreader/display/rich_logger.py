"""Rich-based logger configuration for epubreader."""

import logging

from rich.console import Console
from rich.logging import RichHandler

from .constants import LOG_FORMAT


def setup_rich_logger(
    name: str,
    level: int = logging.INFO,
    show_time: bool = True,
    show_path: bool = False,
) -> logging.Logger:
    """
    Set up a Rich-based logger writing to stderr.

    Args:
        name: Logger name
        level: Logging level (default: INFO)
        show_time: Show timestamp in logs
        show_path: Show file path in logs

    Returns:
        Configured logger instance
    """
    console = Console(stderr=True)

    rich_handler = RichHandler(
        console=console,
        show_time=show_time,
        show_path=show_path,
        rich_tracebacks=True,
        markup=False,
    )
    rich_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    rich_handler.setLevel(level)

    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.handlers.clear()  # Clear any existing handlers
    logger.addHandler(rich_handler)

    return logger
