"""Custom exception hierarchy for epubreader."""


class EpubReaderError(Exception):
    """Base exception for all epubreader errors."""


class ArchiveError(EpubReaderError):
    """Raised when the input bytes cannot be used as an EPUB archive."""


class EmptyInputError(ArchiveError):
    """Raised when the input buffer is zero bytes long."""


class ArchiveCorruptError(ArchiveError):
    """Raised when the input cannot be read as a ZIP container."""


class StructureMissingError(EpubReaderError):
    """Raised when container.xml or the package document cannot be located."""


class EntryNotFoundError(EpubReaderError):
    """Raised when a referenced path does not exist in the archive."""

    def __init__(self, path: str):
        super().__init__(f"File not found in EPUB: {path}")
        self.path = path


class ParsingError(EpubReaderError):
    """Raised when the package document is not well-formed XML."""


class InvalidStateError(EpubReaderError):
    """Raised when an operation is attempted on an empty spine or a released reader."""


class NetworkError(EpubReaderError):
    """Raised when fetching a remote EPUB fails."""


class SourceNotFoundError(NetworkError):
    """Raised when a remote EPUB location answers 404."""
