"""
Unit tests for the Click-based CLI.
"""

import base64

import pytest
from click.testing import CliRunner

from epubreader import __version__
from epubreader.cli.commands import check, cli, version


@pytest.fixture
def runner():
    """Create a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def book_path(tmp_path, sample_epub):
    path = tmp_path / "book.epub"
    path.write_bytes(sample_epub)
    return path


@pytest.fixture
def illustrated_path(tmp_path, illustrated_epub):
    path = tmp_path / "illustrated.epub"
    path.write_bytes(illustrated_epub)
    return path


class TestCLIBasics:
    """Test basic CLI functionality."""

    def test_cli_help(self, runner):
        """Test that --help works."""
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "Inspect and render EPUB books" in result.output

    def test_cli_no_command(self, runner):
        """Test that running CLI with no command shows help."""
        result = runner.invoke(cli, [])
        assert result.exit_code == 0
        assert "Commands:" in result.output

    def test_version_command(self, runner):
        """Test version command."""
        result = runner.invoke(version)
        assert result.exit_code == 0
        assert "epubreader" in result.output
        assert __version__ in result.output

    def test_invalid_source(self, runner, tmp_path):
        """Test a path that does not exist is rejected by Click."""
        result = runner.invoke(cli, ["info", str(tmp_path / "nothing.epub")])
        assert result.exit_code == 2
        assert "is not a file" in result.output


class TestInfoAndToc:
    """Test the info and toc commands."""

    def test_info(self, runner, book_path):
        result = runner.invoke(cli, ["info", str(book_path)])
        assert result.exit_code == 0
        assert "Test-Driven Reading" in result.output
        assert "Jane Author" in result.output

    def test_info_data_uri(self, runner, sample_epub):
        """Test a book passed inline as a data URI."""
        uri = "data:application/epub+zip;base64," + base64.b64encode(sample_epub).decode()
        result = runner.invoke(cli, ["info", uri])
        assert result.exit_code == 0
        assert "Example Press" in result.output

    def test_info_corrupt_file(self, runner, tmp_path):
        """Test a corrupt book exits with an error message."""
        path = tmp_path / "broken.epub"
        path.write_bytes(b"definitely not a zip")
        result = runner.invoke(cli, ["info", str(path)])
        assert result.exit_code == 1
        assert "Error" in result.output

    def test_toc(self, runner, book_path):
        result = runner.invoke(cli, ["toc", str(book_path)])
        assert result.exit_code == 0
        assert "Chapter 1" in result.output
        assert "Chapter 2" in result.output

    def test_toc_missing(self, runner, tmp_path, epub_builder, opf_builder):
        path = tmp_path / "flat.epub"
        path.write_bytes(epub_builder({"content.opf": opf_builder([], [])}))
        result = runner.invoke(cli, ["toc", str(path)])
        assert result.exit_code == 0
        assert "no table of contents" in result.output


class TestChapterCommand:
    """Test the chapter command."""

    def test_chapter_to_stdout(self, runner, book_path):
        result = runner.invoke(cli, ["chapter", str(book_path), "1"])
        assert result.exit_code == 0
        assert "Chapter 2/2" in result.output
        assert "<style>" in result.output

    def test_chapter_to_file(self, runner, book_path, tmp_path):
        """Test --output writes the transformed markup."""
        output = tmp_path / "ch.html"
        result = runner.invoke(
            cli, ["chapter", str(book_path), "99", "--number-paragraphs", "-o", str(output)]
        )
        assert result.exit_code == 0
        assert "Chapter 2/2" in result.output
        content = output.read_text(encoding="utf-8")
        assert content.startswith("<html")
        assert 'class="paragraph-number"' in content

    def test_chapter_of_empty_spine(self, runner, tmp_path, epub_builder, opf_builder):
        path = tmp_path / "empty.epub"
        path.write_bytes(epub_builder({"content.opf": opf_builder([], [])}))
        result = runner.invoke(cli, ["chapter", str(path), "0"])
        assert result.exit_code == 1
        assert "no chapters" in result.output


class TestCoverCommand:
    """Test the cover command."""

    def test_cover_data_uri(self, runner, illustrated_path):
        result = runner.invoke(cli, ["cover", str(illustrated_path)])
        assert result.exit_code == 0
        assert result.output.startswith("data:image/jpeg;base64,")

    def test_cover_to_file(self, runner, illustrated_path, tmp_path):
        """Test --output saves the decoded image bytes."""
        output = tmp_path / "cover.jpg"
        result = runner.invoke(cli, ["cover", str(illustrated_path), "-o", str(output)])
        assert result.exit_code == 0
        assert output.read_bytes() == b"\xff\xd8\xffcover-bytes"

    def test_no_cover(self, runner, book_path):
        result = runner.invoke(cli, ["cover", str(book_path)])
        assert result.exit_code == 1
        assert "No cover image found" in result.output


class TestCheckCommand:
    """Test the check command."""

    def test_check_valid(self, runner, book_path):
        result = runner.invoke(check, [str(book_path)])
        assert result.exit_code == 0
        assert "0x04034b50" in result.output

    def test_check_invalid(self, runner, tmp_path):
        path = tmp_path / "notes.txt"
        path.write_bytes(b"plain text notes")
        result = runner.invoke(check, [str(path)])
        assert result.exit_code == 1
        assert "incorrect signature" in result.output
