"""
Click-based CLI commands for epubreader.

This module provides a small inspection CLI on top of the reader:
- Book metadata and table of contents
- Transformed chapter markup
- Cover extraction and a quick ZIP structure check
"""

import asyncio
import sys
from pathlib import Path
from typing import NoReturn

import click
from rich.console import Console

from .. import __version__
from ..archive import check_zip_structure
from ..client import decode_data_uri, read_source
from ..display import ReaderDisplay
from ..logger import get_logger, get_valid_log_levels, setup_logger
from ..models import BookSummary, Chapter, CoverResource, ReaderConfig
from ..reader import EpubReader
from ..utils.exceptions import EpubReaderError


# Initialize Rich console for pretty output
console = Console()


class EpubSourceType(click.ParamType):
    """Custom Click type accepting a local path, an http(s) URL or a data URI."""

    name = "source"

    def convert(self, value: str, param: click.Parameter | None, ctx: click.Context | None) -> str:
        """Validate that the source can be read."""
        if value.lower().startswith(("http://", "https://", "data:")):
            return value
        if not Path(value).is_file():
            self.fail(f"{value!r} is not a file, URL or data URI", param, ctx)
        return value


EPUB_SOURCE = EpubSourceType()


def _config(ctx: click.Context) -> ReaderConfig:
    config = ctx.find_object(ReaderConfig)
    return config if config is not None else ReaderConfig()


async def _load(source: str, config: ReaderConfig) -> BookSummary:
    data = await read_source(source, config)
    async with EpubReader(config) as reader:
        return await reader.load(data)


async def _chapter(
    source: str, index: int, number_paragraphs: bool | None, config: ReaderConfig
) -> Chapter:
    data = await read_source(source, config)
    async with EpubReader(config) as reader:
        await reader.load(data)
        return await reader.go_to_chapter(index, number_paragraphs=number_paragraphs)


async def _cover(source: str, config: ReaderConfig) -> CoverResource | None:
    data = await read_source(source, config)
    async with EpubReader(config) as reader:
        await reader.load(data)
        return await reader.resolve_cover()


def _fail(display: ReaderDisplay, error: Exception) -> NoReturn:
    get_logger("epubreader.cli").debug("Command failed", exc_info=error)
    display.error(str(error))
    sys.exit(1)


@click.group(invoke_without_command=True)
@click.option(
    "--log-level",
    type=click.Choice(get_valid_log_levels(), case_sensitive=False),
    default="WARNING",
    show_default=True,
    help="Set the logging level for detailed output.",
)
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write log records to this file instead of the terminal.",
)
@click.pass_context
def cli(ctx: click.Context, log_level: str, log_file: Path | None) -> None:
    """
    epubreader - Inspect and render EPUB books from the terminal.

    \b
    Examples:
      # Show metadata
      epubreader info book.epub

      # Show the table of contents
      epubreader toc book.epub

      # Print the second chapter with numbered paragraphs
      epubreader chapter book.epub 1 --number-paragraphs

      # Save the cover image
      epubreader cover book.epub --output cover.jpg
    """
    setup_logger("epubreader", log_level, log_file=log_file)
    ctx.obj = ReaderConfig(log_level=log_level.upper(), log_file=log_file)

    # If no subcommand is given, show help
    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())
        ctx.exit()


@cli.command()
@click.argument("source", type=EPUB_SOURCE)
@click.pass_context
def info(ctx: click.Context, source: str) -> None:
    """Display book metadata."""
    display = ReaderDisplay(console)
    try:
        summary = asyncio.run(_load(source, _config(ctx)))
    except (EpubReaderError, OSError) as e:
        _fail(display, e)
    display.book_info(summary)


@cli.command()
@click.argument("source", type=EPUB_SOURCE)
@click.pass_context
def toc(ctx: click.Context, source: str) -> None:
    """Display the table of contents as a tree."""
    display = ReaderDisplay(console)
    try:
        summary = asyncio.run(_load(source, _config(ctx)))
    except (EpubReaderError, OSError) as e:
        _fail(display, e)
    display.toc(summary.metadata.title, summary.toc)


@cli.command()
@click.argument("source", type=EPUB_SOURCE)
@click.argument("index", type=int)
@click.option(
    "--number-paragraphs/--no-number-paragraphs",
    default=None,
    help="Prefix content paragraphs with their position (defaults to configuration).",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write the transformed markup to this file.",
)
@click.pass_context
def chapter(
    ctx: click.Context,
    source: str,
    index: int,
    number_paragraphs: bool | None,
    output: Path | None,
) -> None:
    """
    Print the transformed markup of the chapter at INDEX (0-based).

    Out-of-range indices are clamped to the first or last chapter.
    """
    display = ReaderDisplay(console)
    try:
        result = asyncio.run(_chapter(source, index, number_paragraphs, _config(ctx)))
    except (EpubReaderError, OSError) as e:
        _fail(display, e)

    if output is None:
        display.chapter(result)
        return

    output.write_text(result.content, encoding="utf-8")
    display.success(f"Chapter {result.index + 1}/{result.total} written to {output}")


@cli.command()
@click.argument("source", type=EPUB_SOURCE)
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Save the cover image to this file instead of printing its data URI.",
)
@click.pass_context
def cover(ctx: click.Context, source: str, output: Path | None) -> None:
    """Extract the cover image."""
    display = ReaderDisplay(console)
    try:
        resource = asyncio.run(_cover(source, _config(ctx)))
    except (EpubReaderError, OSError) as e:
        _fail(display, e)

    if resource is None:
        display.error("No cover image found")
        sys.exit(1)

    if output is None:
        click.echo(resource.data_uri)
        return

    output.write_bytes(decode_data_uri(resource.data_uri))
    display.success(f"Cover {resource.href} ({resource.media_type}) saved to {output}")


@cli.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def check(path: Path) -> None:
    """
    Check that a file has a ZIP local header and an end of central directory.

    This is a quick diagnostic for files that fail to open, not EPUB validation.
    """
    result = check_zip_structure(path.read_bytes())
    ReaderDisplay(console).check_result(str(path), result)
    if not result.success:
        sys.exit(1)


@cli.command()
def version() -> None:
    """Display the version of epubreader."""
    console.print(f"[bold cyan]epubreader[/bold cyan] version {__version__}")


# Entry point for the CLI
def main() -> None:
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
