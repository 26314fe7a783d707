"""
epubreader CLI module.

This module provides a Click-based command-line interface for epubreader.
"""

from .commands import cli, main


__all__ = ["cli", "main"]
