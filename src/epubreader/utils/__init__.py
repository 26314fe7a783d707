"""Shared utilities for epubreader."""

from .exceptions import (
    ArchiveCorruptError,
    ArchiveError,
    EmptyInputError,
    EntryNotFoundError,
    EpubReaderError,
    InvalidStateError,
    NetworkError,
    ParsingError,
    SourceNotFoundError,
    StructureMissingError,
)


__all__ = [
    "ArchiveCorruptError",
    "ArchiveError",
    "EmptyInputError",
    "EntryNotFoundError",
    "EpubReaderError",
    "InvalidStateError",
    "NetworkError",
    "ParsingError",
    "SourceNotFoundError",
    "StructureMissingError",
]
