"""
Rich-based display system for epubreader.

This module provides terminal output for the CLI using the Rich library:
metadata panels, table of contents trees and formatted messages.
"""

from .constants import EMOJI_MAP, STYLES
from .rich_display import ReaderDisplay
from .rich_logger import setup_rich_logger


__all__ = [
    "EMOJI_MAP",
    "STYLES",
    "ReaderDisplay",
    "setup_rich_logger",
]
