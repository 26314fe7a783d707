"""
Integration tests for loading and reading complete books.

These tests run the whole pipeline (archive, container, package, navigation,
transformer and cover) over in-memory EPUB files.
"""

import logging

import pytest
from bs4 import BeautifulSoup

from epubreader import EpubReader, ReaderConfig
from epubreader.utils.exceptions import StructureMissingError


def reader() -> EpubReader:
    return EpubReader(ReaderConfig(_env_file=None))


class TestReadingFlow:
    """Test a complete reading session."""

    @pytest.mark.asyncio
    async def test_two_chapter_book(self, sample_epub):
        """Test the standard two-chapter book with a nested TOC."""
        async with reader() as epub:
            summary = await epub.load(sample_epub)

            assert summary.spine_length == 2
            assert summary.manifest_count == 3
            assert len(summary.toc) == 1
            assert len(summary.toc[0].subitems) == 1

            chapter = await epub.go_to_chapter(1)
            assert chapter.href.endswith("ch2.xhtml")
            assert chapter.total == summary.spine_length

    @pytest.mark.asyncio
    async def test_every_spine_item_resolves(self, illustrated_epub):
        """Test spine idrefs point into the manifest and each chapter loads."""
        async with reader() as epub:
            await epub.load(illustrated_epub)
            book = epub.book

            for index, item in enumerate(book.spine):
                assert item.idref in book.manifest
                assert book.manifest[item.idref].href == item.href
                chapter = await epub.go_to_chapter(index)
                assert chapter.index == index

    @pytest.mark.asyncio
    async def test_toc_entries_lead_to_chapters(self, sample_epub):
        """Test TOC targets can be mapped back onto spine positions."""
        async with reader() as epub:
            summary = await epub.load(sample_epub)
            child = summary.toc[0].subitems[0]

            index = epub.book.spine_index_of(child.href)
            chapter = await epub.go_to_chapter(index)

            assert index == 1
            assert child.anchor == "start"
            assert "Chapter 2" in chapter.content

    @pytest.mark.asyncio
    async def test_images_resolve_to_archive_data(self, illustrated_epub):
        """Test placeholder images can be swapped for their real bytes."""
        async with reader() as epub:
            await epub.load(illustrated_epub)
            chapter = await epub.go_to_chapter(0, number_paragraphs=True)
            soup = BeautifulSoup(chapter.content, "lxml")

            img = soup.find("img")
            data_uri = await epub.get_resource_data_uri(img["data-archive-path"])

            assert data_uri.startswith("data:image/png;base64,")
            assert soup.find("span", class_="paragraph-number").string == "1"
            assert not soup.find("link").has_attr("href")

    @pytest.mark.asyncio
    async def test_cover_prefers_marked_item(self, illustrated_epub):
        """Test the cover-marked item wins over the first image in the manifest."""
        async with reader() as epub:
            await epub.load(illustrated_epub)
            cover = await epub.resolve_cover()

        assert cover.href == "OEBPS/images/front.jpg"


class TestDamagedBooks:
    """Test books with missing or broken structure."""

    @pytest.mark.asyncio
    async def test_missing_container_uses_single_opf(self, sample_files, epub_builder):
        """Test the load succeeds through the fallback scan."""
        files = dict(sample_files)
        del files["META-INF/container.xml"]

        async with reader() as epub:
            summary = await epub.load(epub_builder(files))

            assert summary.spine_length == 2
            assert epub.book.package.path == "OEBPS/content.opf"

    @pytest.mark.asyncio
    async def test_broken_ncx_gives_empty_toc(self, sample_files, epub_builder, caplog):
        """Test a navigation document that fails to parse does not fail the load."""
        files = dict(sample_files)
        files["OEBPS/toc.ncx"] = "<ncx><navMap><navPoint>"

        with caplog.at_level(logging.WARNING):
            async with reader() as epub:
                summary = await epub.load(epub_builder(files))

        assert summary.toc == ()
        assert summary.spine_length == 2
        assert "Error parsing TOC" in caplog.text

    @pytest.mark.asyncio
    async def test_missing_package_document(self, epub_builder):
        """Test a book with neither container.xml nor an OPF file."""
        data = epub_builder({"OEBPS/ch1.xhtml": "<html/>"})

        async with reader() as epub:
            with pytest.raises(StructureMissingError):
                await epub.load(data)

    @pytest.mark.asyncio
    async def test_mixed_case_container_path(self, sample_files, epub_builder):
        files = dict(sample_files)
        files["meta-inf/container.xml"] = files.pop("META-INF/container.xml")

        async with reader() as epub:
            summary = await epub.load(epub_builder(files))

        assert summary.metadata.title == "Test-Driven Reading"
