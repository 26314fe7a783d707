"""Book-level API: load an EPUB, navigate chapters, extract the cover."""

import asyncio
import logging
from types import TracebackType

from .archive import EpubArchive
from .container import ContainerLocator
from .cover import CoverResolver
from .media import DEFAULT_MEDIA_TYPE, encode_data_uri, media_type_for
from .models import BookSummary, Chapter, CoverResource, ParsedBook, ReaderConfig
from .navigation import NavigationTreeParser
from .package import PackageDocumentParser
from .parser import ChapterTransformer
from .utils.exceptions import InvalidStateError


logger = logging.getLogger(__name__)


class NavigationCursor:
    """Current position in the spine.

    This is the only mutable state of a loaded book. Out-of-range targets are
    clamped, never rejected.
    """

    def __init__(self, length: int, number_paragraphs: bool = False):
        """Initialize the cursor at the first chapter.

        Args:
            length: Number of spine items
            number_paragraphs: Numbering option reused by next/previous
        """
        self.length = length
        self.index = 0
        self.number_paragraphs = number_paragraphs

    def _require_chapters(self) -> None:
        if self.length <= 0:
            raise InvalidStateError("Book has no chapters in its spine")

    def clamp(self, index: int) -> int:
        """Clamp ``index`` into ``[0, length - 1]``."""
        self._require_chapters()
        return max(0, min(index, self.length - 1))

    def move_to(self, index: int) -> int:
        self.index = self.clamp(index)
        return self.index

    def next_index(self) -> int | None:
        """Index after the current one, or None at the last chapter."""
        self._require_chapters()
        if self.index >= self.length - 1:
            return None
        return self.index + 1

    def previous_index(self) -> int | None:
        """Index before the current one, or None at the first chapter."""
        self._require_chapters()
        if self.index <= 0:
            return None
        return self.index - 1


class EpubReader:
    """Owns one loaded book: its archive, its parsed model and a cursor.

    Example:
        async with EpubReader() as reader:
            summary = await reader.load(data)
            chapter = await reader.go_to_chapter(0)
            cover = await reader.extract_cover()
    """

    def __init__(self, config: ReaderConfig | None = None):
        """Initialize an empty reader.

        Args:
            config: Reader configuration (defaults from the environment)
        """
        self.config = config or ReaderConfig()
        self._archive: EpubArchive | None = None
        self._book: ParsedBook | None = None
        self._cursor: NavigationCursor | None = None
        self._released = False

    async def __aenter__(self) -> "EpubReader":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.cleanup()

    def _require_loaded(self) -> tuple[EpubArchive, ParsedBook, NavigationCursor]:
        if self._released:
            raise InvalidStateError("Reader has been cleaned up")
        if self._archive is None or self._book is None or self._cursor is None:
            raise InvalidStateError("No book loaded")
        return self._archive, self._book, self._cursor

    @property
    def book(self) -> ParsedBook:
        """The parsed, read-only model of the loaded book."""
        return self._require_loaded()[1]

    @property
    def current_index(self) -> int:
        return self._require_loaded()[2].index

    async def load(self, data: bytes) -> BookSummary:
        """Open and parse an EPUB.

        Args:
            data: Raw bytes of the EPUB file

        Returns:
            Metadata, manifest size, spine length and table of contents

        Raises:
            EmptyInputError: If ``data`` is empty
            ArchiveCorruptError: If ``data`` is not a ZIP archive
            StructureMissingError: If the package document cannot be located
            ParsingError: If the package document is not well-formed
            InvalidStateError: If this reader already holds a book or was cleaned up
        """
        if self._released:
            raise InvalidStateError("Reader has been cleaned up")
        if self._book is not None:
            raise InvalidStateError("A book is already loaded; use a new reader")

        logger.debug("EPUB data received, buffer size: %d bytes", len(data))
        archive, book = await asyncio.to_thread(self._parse, data)

        self._archive = archive
        self._book = book
        self._cursor = NavigationCursor(
            book.spine_length, number_paragraphs=self.config.number_paragraphs
        )
        logger.info("EPUB loaded and parsed successfully: %r", book.metadata.title)
        return book.summary()

    def _parse(self, data: bytes) -> tuple[EpubArchive, ParsedBook]:
        archive = EpubArchive(data)
        try:
            package_path = ContainerLocator(archive).locate()
            package = PackageDocumentParser(archive, package_path).parse()
            toc = NavigationTreeParser(archive, max_depth=self.config.toc_max_depth).parse(package)
        except BaseException:
            archive.close()
            raise
        return archive, ParsedBook(package=package, toc=tuple(toc))

    async def go_to_chapter(self, index: int, number_paragraphs: bool | None = None) -> Chapter:
        """Load and transform the chapter at ``index`` (clamped into range).

        Args:
            index: Spine index; negative values mean the first chapter and values
                past the end mean the last one
            number_paragraphs: Number paragraphs; None reuses the last choice

        Raises:
            InvalidStateError: If the spine is empty or the reader is not loaded
            EntryNotFoundError: If the spine document is missing from the archive
        """
        archive, book, cursor = self._require_loaded()
        target = cursor.clamp(index)
        if number_paragraphs is None:
            number_paragraphs = cursor.number_paragraphs

        item = book.spine[target]
        markup = await asyncio.to_thread(archive.read_binary, item.href)
        content = ChapterTransformer(number_paragraphs=number_paragraphs).transform(
            markup, item.href
        )

        # Updated after the fetch: among overlapping calls the last to finish wins
        cursor.move_to(target)
        cursor.number_paragraphs = number_paragraphs
        logger.debug("Loaded chapter %d/%d: %s", target + 1, book.spine_length, item.href)

        return Chapter(index=target, href=item.href, content=content, total=book.spine_length)

    async def next_chapter(self, number_paragraphs: bool | None = None) -> Chapter | None:
        """Go to the following chapter; None when already at the last one."""
        _, _, cursor = self._require_loaded()
        index = cursor.next_index()
        if index is None:
            return None
        return await self.go_to_chapter(index, number_paragraphs)

    async def previous_chapter(self, number_paragraphs: bool | None = None) -> Chapter | None:
        """Go to the preceding chapter; None when already at the first one."""
        _, _, cursor = self._require_loaded()
        index = cursor.previous_index()
        if index is None:
            return None
        return await self.go_to_chapter(index, number_paragraphs)

    async def resolve_cover(self) -> CoverResource | None:
        """Locate and encode the cover image, or None if the book has none."""
        archive, book, _ = self._require_loaded()
        return await asyncio.to_thread(CoverResolver(book.package).resolve, archive)

    async def extract_cover(self) -> str | None:
        """Return the cover image as a data URI, or None."""
        cover = await self.resolve_cover()
        return cover.data_uri if cover is not None else None

    async def get_resource_data_uri(self, href: str) -> str:
        """Encode an archive resource (e.g. a ``data-archive-path`` image) as a data URI.

        Raises:
            EntryNotFoundError: If ``href`` is not in the archive
        """
        archive, _, _ = self._require_loaded()
        data = await asyncio.to_thread(archive.read_binary, href)
        return encode_data_uri(data, media_type_for(href) or DEFAULT_MEDIA_TYPE)

    def cleanup(self) -> None:
        """Release the archive. Safe to call more than once."""
        if self._archive is not None:
            self._archive.close()
        self._archive = None
        self._book = None
        self._cursor = None
        if not self._released:
            self._released = True
            logger.debug("Resources cleaned up")
