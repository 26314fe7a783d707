"""Constants for Rich display system."""

# Emoji mappings for book fields and outcomes
EMOJI_MAP = {
    "book": "📚",
    "author": "👤",
    "publisher": "🏢",
    "language": "🌐",
    "identifier": "🔖",
    "chapters": "📄",
    "toc": "🗂️",
    "cover": "🖼️",
    "success": "✓",
    "error": "✗",
}

# Rich markup styles for different message types
STYLES = {
    "info": "blue",
    "success": "bold green",
    "warning": "bold yellow",
    "error": "bold red",
    "book_title": "bold cyan",
    "toc_label": "white",
    "toc_target": "dim",
}

# Log format
LOG_FORMAT = "%(message)s"
