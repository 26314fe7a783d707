"""Rich-based display system for epubreader."""

from collections.abc import Sequence

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.tree import Tree

from ..models import BookSummary, Chapter, TocEntry, ZipCheckResult
from .constants import EMOJI_MAP, STYLES


class ReaderDisplay:
    """
    Rich-based terminal output for the epubreader CLI.

    Only the CLI writes to the terminal; the reader itself just logs.
    """

    def __init__(self, console: Console | None = None, quiet: bool = False):
        """
        Initialize ReaderDisplay.

        Args:
            console: Console to print to (a new stdout console by default)
            quiet: If True, suppress all output except errors
        """
        self.console = console or Console()
        self.quiet = quiet

    def book_info(self, summary: BookSummary) -> None:
        """
        Display book metadata in a Rich Table.

        Args:
            summary: Result of loading the book
        """
        if self.quiet:
            return

        metadata = summary.metadata
        table = Table(show_header=False, box=None, padding=(0, 1))
        table.add_column("Field", style="bold cyan", no_wrap=True)
        table.add_column("Value", style="white")

        table.add_row(f"{EMOJI_MAP['book']} Title", escape(metadata.title))
        table.add_row(f"{EMOJI_MAP['author']} Author", escape(metadata.creator))
        if metadata.publisher:
            table.add_row(f"{EMOJI_MAP['publisher']} Publisher", escape(metadata.publisher))
        table.add_row(f"{EMOJI_MAP['language']} Language", escape(metadata.language))
        if metadata.identifier:
            table.add_row(f"{EMOJI_MAP['identifier']} Identifier", escape(metadata.identifier))
        table.add_row(f"{EMOJI_MAP['chapters']} Chapters", str(summary.spine_length))
        table.add_row(f"{EMOJI_MAP['toc']} Resources", str(summary.manifest_count))

        panel = Panel(
            table,
            title="[bold green]Book Information[/bold green]",
            border_style="green",
            padding=(1, 2),
        )
        self.console.print(panel)

    def toc(self, title: str, entries: Sequence[TocEntry]) -> None:
        """
        Display the table of contents as a tree.

        Args:
            title: Book title used as the tree root
            entries: Root TOC entries
        """
        if self.quiet:
            return

        if not entries:
            self.console.print(f"[{STYLES['warning']}]This book has no table of contents[/]")
            return

        root = Tree(f"[{STYLES['book_title']}]{escape(title)}[/]")
        pending = [(root, entry) for entry in reversed(entries)]
        while pending:
            parent, entry = pending.pop()
            target = entry.href + (f"#{entry.anchor}" if entry.anchor else "")
            branch = parent.add(
                f"[{STYLES['toc_label']}]{escape(entry.label or '(untitled)')}[/] "
                f"[{STYLES['toc_target']}]{escape(target)}[/]"
            )
            pending.extend((branch, child) for child in reversed(entry.subitems))

        self.console.print(root)

    def chapter(self, chapter: Chapter) -> None:
        """Print transformed chapter markup without Rich highlighting."""
        if self.quiet:
            return
        self.console.print(
            f"[{STYLES['info']}]Chapter {chapter.index + 1}/{chapter.total}:[/] "
            f"{escape(chapter.href)}",
            highlight=False,
        )
        self.console.print(chapter.content, markup=False, highlight=False, soft_wrap=True)

    def check_result(self, path: str, result: ZipCheckResult) -> None:
        """Display the outcome of the ZIP structure check."""
        table = Table(show_header=False, box=None, padding=(0, 1))
        table.add_column("Field", style="bold cyan", no_wrap=True)
        table.add_column("Value", style="white")
        table.add_row("File", escape(path))
        table.add_row("Size", f"{result.size} bytes")
        table.add_row("Signature", result.signature or "n/a")
        if result.end_of_central_directory is not None:
            table.add_row("End of central directory", f"offset {result.end_of_central_directory}")

        if result.success:
            title = f"[{STYLES['success']}]{EMOJI_MAP['success']} Looks like a ZIP/EPUB file[/]"
            border = "green"
        else:
            title = f"[{STYLES['error']}]{EMOJI_MAP['error']} {escape(result.error or '')}[/]"
            border = "red"

        self.console.print(Panel(table, title=title, border_style=border, padding=(1, 2)))

    def success(self, message: str) -> None:
        if not self.quiet:
            self.console.print(f"[{STYLES['success']}]{EMOJI_MAP['success']}[/] {escape(message)}")

    def error(self, message: str) -> None:
        self.console.print(f"[{STYLES['error']}]{EMOJI_MAP['error']} Error:[/] {escape(message)}")
