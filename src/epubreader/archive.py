"""Random-access view over an in-memory EPUB (ZIP) archive."""

import io
import logging
import zipfile
from types import TracebackType

from .models import ZipCheckResult
from .utils.exceptions import (
    ArchiveCorruptError,
    EmptyInputError,
    EntryNotFoundError,
    InvalidStateError,
)


logger = logging.getLogger(__name__)

LOCAL_FILE_HEADER_SIGNATURE = 0x04034B50
END_OF_CENTRAL_DIRECTORY_SIGNATURE = b"PK\x05\x06"
END_OF_CENTRAL_DIRECTORY_MIN_SIZE = 22


class EpubArchive:
    """Read-only access to the entries of an EPUB container.

    The whole buffer is kept in memory, but no entry is decompressed until
    :meth:`read_text` or :meth:`read_binary` asks for it.

    Example:
        with EpubArchive(data) as archive:
            xml = archive.read_text("META-INF/container.xml")
    """

    def __init__(self, data: bytes):
        """Open ``data`` as a ZIP archive.

        Args:
            data: Raw bytes of the EPUB file

        Raises:
            EmptyInputError: If ``data`` is zero bytes long
            ArchiveCorruptError: If ``data`` is not a readable ZIP archive
        """
        if not data:
            raise EmptyInputError("EPUB buffer is empty (zero bytes)")

        try:
            self._zip: zipfile.ZipFile | None = zipfile.ZipFile(io.BytesIO(data))
        except (zipfile.BadZipFile, zipfile.LargeZipFile, ValueError, OSError) as e:
            raise ArchiveCorruptError(f"Failed to parse EPUB as ZIP: {e}") from e

        self._names = [info.filename for info in self._zip.infolist() if not info.is_dir()]
        logger.debug("Opened archive: %d bytes, %d entries", len(data), len(self._names))

    def __enter__(self) -> "EpubArchive":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    @property
    def closed(self) -> bool:
        return self._zip is None

    def _handle(self) -> zipfile.ZipFile:
        if self._zip is None:
            raise InvalidStateError("Archive has been closed")
        return self._zip

    def names(self) -> list[str]:
        """Return all file entry names in archive order (directories excluded)."""
        self._handle()
        return list(self._names)

    def exists(self, path: str) -> bool:
        self._handle()
        return path in self._names

    def find(self, path: str, case_insensitive: bool = True) -> str | None:
        """Return the stored entry name matching ``path``, or None.

        An exact match always wins over a case-insensitive one.
        """
        if self.exists(path):
            return path
        if case_insensitive:
            wanted = path.lower()
            for name in self._names:
                if name.lower() == wanted:
                    return name
        return None

    def read_binary(self, path: str) -> bytes:
        """Decompress one entry.

        Raises:
            EntryNotFoundError: If ``path`` is not an entry of the archive
            ArchiveCorruptError: If the entry fails its CRC check or cannot be inflated
            InvalidStateError: If the archive has been closed
        """
        handle = self._handle()
        if path not in self._names:
            raise EntryNotFoundError(path)
        try:
            return handle.read(path)
        except ValueError as e:
            # zipfile reports reads on a handle closed mid-read as ValueError
            raise InvalidStateError(f"Archive closed while reading {path}") from e
        except (zipfile.BadZipFile, zipfile.LargeZipFile, NotImplementedError, OSError) as e:
            raise ArchiveCorruptError(f"Failed to read {path}: {e}") from e

    def read_text(self, path: str, encoding: str = "utf-8") -> str:
        """Decompress one entry and decode it as text (a BOM is dropped)."""
        data = self.read_binary(path)
        if encoding.lower().replace("-", "") == "utf8":
            encoding = "utf-8-sig"
        return data.decode(encoding, errors="replace")

    def close(self) -> None:
        """Release the archive handle. Safe to call more than once."""
        if self._zip is not None:
            self._zip.close()
            self._zip = None
            logger.debug("Archive closed")


def check_zip_structure(data: bytes) -> ZipCheckResult:
    """Inspect raw bytes for the ZIP local header and end of central directory.

    This is a quick diagnostic for files that fail to open; it does not
    validate the EPUB itself.

    Args:
        data: Raw bytes of the candidate file

    Returns:
        ZipCheckResult describing what was found
    """
    size = len(data)
    if size == 0:
        return ZipCheckResult(success=False, error="File is empty", size=0)
    if size < 4:
        return ZipCheckResult(
            success=False, error="File is too small to be a ZIP archive", size=size
        )

    signature = int.from_bytes(data[:4], "little")
    signature_hex = f"0x{signature:08x}"
    if signature != LOCAL_FILE_HEADER_SIGNATURE:
        return ZipCheckResult(
            success=False,
            error="Not a valid ZIP file (incorrect signature)",
            size=size,
            signature=signature_hex,
        )

    # The record is at least 22 bytes long and sits at the very end unless a comment follows it
    search_end = size - END_OF_CENTRAL_DIRECTORY_MIN_SIZE + len(END_OF_CENTRAL_DIRECTORY_SIGNATURE)
    offset = (
        data.rfind(END_OF_CENTRAL_DIRECTORY_SIGNATURE, 0, search_end)
        if size >= END_OF_CENTRAL_DIRECTORY_MIN_SIZE
        else -1
    )
    if offset < 0:
        return ZipCheckResult(
            success=False,
            error="End of Central Directory signature not found",
            size=size,
            signature=signature_hex,
        )

    return ZipCheckResult(
        success=True,
        size=size,
        signature=signature_hex,
        end_of_central_directory=offset,
    )
