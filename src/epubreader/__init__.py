"""epubreader - parse EPUB books into metadata, chapters, a TOC and a cover."""

__version__ = "0.1.0"

from .archive import EpubArchive, check_zip_structure  # noqa: E402
from .models import (  # noqa: E402
    BookSummary,
    Chapter,
    CoverResource,
    ManifestItem,
    Metadata,
    ReaderConfig,
    SpineItem,
    TocEntry,
)
from .reader import EpubReader, NavigationCursor  # noqa: E402
from .utils.exceptions import (  # noqa: E402
    ArchiveCorruptError,
    EmptyInputError,
    EntryNotFoundError,
    EpubReaderError,
    InvalidStateError,
    ParsingError,
    StructureMissingError,
)


__all__ = [
    "ArchiveCorruptError",
    "BookSummary",
    "Chapter",
    "CoverResource",
    "EmptyInputError",
    "EntryNotFoundError",
    "EpubArchive",
    "EpubReader",
    "EpubReaderError",
    "InvalidStateError",
    "ManifestItem",
    "Metadata",
    "NavigationCursor",
    "ParsingError",
    "ReaderConfig",
    "SpineItem",
    "StructureMissingError",
    "TocEntry",
    "__version__",
    "check_zip_structure",
]
