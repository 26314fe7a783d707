"""Data models for epubreader."""

from .book import (
    BookSummary,
    ManifestItem,
    Metadata,
    PackageDocument,
    ParsedBook,
    SpineItem,
    TocEntry,
)
from .chapter import Chapter, CoverResource, ZipCheckResult
from .config import ReaderConfig


__all__ = [
    "BookSummary",
    "Chapter",
    "CoverResource",
    "ManifestItem",
    "Metadata",
    "PackageDocument",
    "ParsedBook",
    "ReaderConfig",
    "SpineItem",
    "TocEntry",
    "ZipCheckResult",
]
