"""Chapter markup transformer for rendering EPUB content documents."""

import logging
from collections.abc import Callable

from ..paths import is_data_uri, is_network_url, parent_dir, resolve_href
from .tree import MarkupDocument, MarkupElement, SoupDocument


logger = logging.getLogger(__name__)

# Gray 100x100 rectangle labelled "Image"; the caller swaps in the real bytes
PLACEHOLDER_IMAGE = (
    "data:image/svg+xml;charset=utf-8,%3Csvg%20xmlns%3D%22http%3A%2F%2Fwww.w3.org%2F2000%2Fsvg"
    "%22%20width%3D%22100%22%20height%3D%22100%22%3E%3Crect%20width%3D%22100%22%20height%3D"
    "%22100%22%20fill%3D%22%23eee%22%2F%3E%3Ctext%20x%3D%2250%25%22%20y%3D%2250%25%22%20"
    "text-anchor%3D%22middle%22%20fill%3D%22%23999%22%3EImage%3C%2Ftext%3E%3C%2Fsvg%3E"
)

ORIGINAL_SRC_ATTR = "data-original-src"
ARCHIVE_PATH_ATTR = "data-archive-path"
ORIGINAL_HREF_ATTR = "data-original-href"

# Class tokens containing one of these survive; everything else is publisher styling
KEEP_CLASS_FRAGMENTS = ("chapter", "section", "title", "heading", "paragraph")

# Inline declarations that make plain text look like links
STRIPPED_STYLE_PROPERTIES = ("color", "text-decoration")

NUMBERED_PARAGRAPH_CLASS = "numbered-paragraph"
PARAGRAPH_NUMBER_CLASS = "paragraph-number"
MIN_NUMBERED_PARAGRAPH_LENGTH = 10

NUMBERING_CSS = """
    p.numbered-paragraph {
      position: relative;
      padding-left: 2.5em;
    }
    .paragraph-number {
      position: absolute;
      left: 0;
      top: 0;
      width: 2em;
      text-align: right;
      color: gray !important;
      font-size: 0.85em;
      user-select: none;
    }
"""

NORMALIZE_CSS = """
      * { color: inherit !important; text-decoration: none !important; }
      p { margin-bottom: 1em; }
      h1, h2, h3, h4, h5, h6 { margin-top: 1em; margin-bottom: 0.5em; }
      a:hover { text-decoration: none !important; }
      .paragraph-number { opacity: 0.7; }
"""


def filter_classes(class_value: str) -> str:
    """Keep only class tokens that contain one of ``KEEP_CLASS_FRAGMENTS``.

    Args:
        class_value: Space-separated class attribute value

    Returns:
        Filtered class attribute value ("" when nothing is kept)
    """
    kept = [
        token
        for token in class_value.split()
        if any(fragment in token for fragment in KEEP_CLASS_FRAGMENTS)
    ]
    return " ".join(kept)


def split_declarations(style: str) -> list[str]:
    """Split an inline style at the semicolons that end declarations.

    Semicolons inside parentheses or quotes, as in
    ``url(data:image/png;base64,...)``, belong to the value.

    Args:
        style: Inline style attribute value

    Returns:
        Stripped, non-empty declarations in source order
    """
    declarations = []
    current: list[str] = []
    depth = 0
    quote = ""
    for char in style:
        if quote:
            if char == quote:
                quote = ""
        elif char in "\"'":
            quote = char
        elif char == "(":
            depth += 1
        elif char == ")" and depth:
            depth -= 1
        elif char == ";" and not depth:
            declarations.append("".join(current))
            current = []
            continue
        current.append(char)
    declarations.append("".join(current))
    return [part.strip() for part in declarations if part.strip()]


def strip_style_properties(style: str) -> str:
    """Remove color and text-decoration declarations from an inline style.

    Longhands such as ``text-decoration-line`` go as well.

    Args:
        style: Inline style attribute value

    Returns:
        Remaining declarations joined with "; " ("" when nothing is left)
    """
    cleaned_parts = []
    for part in split_declarations(style):
        name = part.split(":", 1)[0].strip().lower()
        if name in STRIPPED_STYLE_PROPERTIES or name.startswith("text-decoration-"):
            continue
        cleaned_parts.append(part)
    return "; ".join(cleaned_parts)


class ChapterTransformer:
    """Turns raw chapter markup into markup that is safe to embed in the reader.

    The transformer works on any :class:`MarkupDocument`; by default documents
    are parsed with :class:`SoupDocument`.
    """

    def __init__(
        self,
        number_paragraphs: bool = False,
        document_factory: Callable[[str | bytes], MarkupDocument] = SoupDocument,
    ):
        """Initialize the transformer.

        Args:
            number_paragraphs: Prefix content paragraphs with their position
            document_factory: Parses markup into a MarkupDocument
        """
        self.number_paragraphs = number_paragraphs
        self.document_factory = document_factory

    def transform(self, markup: str | bytes, href: str) -> str:
        """Transform one content document.

        Args:
            markup: Raw XHTML of the chapter, as text or undecoded bytes
            href: Archive path of the chapter, used to resolve image paths

        Returns:
            Serialized ``<html>`` element of the transformed document
        """
        doc = self.document_factory(markup)
        base_dir = parent_dir(href)

        self._rewrite_images(doc, base_dir)
        self._neutralize_stylesheets(doc)
        self._strip_styling(doc)
        if self.number_paragraphs:
            self._number_paragraphs(doc)
        self._append_style(doc, NORMALIZE_CSS)

        return doc.serialize()

    def _rewrite_images(self, doc: MarkupDocument, base_dir: str) -> None:
        """Swap local image sources for the placeholder, keeping the original."""
        for img in doc.query("img"):
            src = img.get_attribute("src")
            if not src or is_network_url(src) or is_data_uri(src):
                continue
            try:
                archive_path = resolve_href(base_dir, src.split("#", 1)[0])
                img.set_attribute(ORIGINAL_SRC_ATTR, src)
                img.set_attribute(ARCHIVE_PATH_ATTR, archive_path)
                img.set_attribute("src", PLACEHOLDER_IMAGE)
            except Exception as e:  # pylint: disable=broad-except
                logger.debug("Leaving image %r untouched: %s", src, e)

    @staticmethod
    def _neutralize_stylesheets(doc: MarkupDocument) -> None:
        """Detach publisher stylesheets; the reader supplies its own styling."""
        for link in doc.query("link"):
            rel = (link.get_attribute("rel") or "").lower().split()
            href = link.get_attribute("href")
            if "stylesheet" not in rel or href is None:
                continue
            try:
                link.set_attribute(ORIGINAL_HREF_ATTR, href)
                link.remove_attribute("href")
            except Exception as e:  # pylint: disable=broad-except
                logger.debug("Leaving stylesheet %r untouched: %s", href, e)

    @staticmethod
    def _strip_styling(doc: MarkupDocument) -> None:
        """Drop link-like inline styles and non-semantic classes."""
        for element in doc.query():
            try:
                updates: dict[str, str] = {}

                style = element.get_attribute("style")
                if style is not None and element.tag_name != "a":
                    updates["style"] = strip_style_properties(style)

                classes = element.get_attribute("class")
                if classes is not None:
                    updates["class"] = filter_classes(classes)

                for name, value in updates.items():
                    if value:
                        element.set_attribute(name, value)
                    else:
                        element.remove_attribute(name)
            except Exception as e:  # pylint: disable=broad-except
                logger.debug("Leaving <%s> untouched: %s", element.tag_name, e)

    def _number_paragraphs(self, doc: MarkupDocument) -> None:
        """Prefix each content paragraph with its 1-based document position.

        Short paragraphs are not numbered but still count towards the position.
        """
        self._append_style(doc, NUMBERING_CSS)

        for position, paragraph in enumerate(doc.query("p"), start=1):
            try:
                if len(paragraph.text().strip()) < MIN_NUMBERED_PARAGRAPH_LENGTH:
                    continue
                number = doc.create_element("span", str(position))
                number.set_attribute("class", PARAGRAPH_NUMBER_CLASS)
                classes = (paragraph.get_attribute("class") or "").split()
                paragraph.insert_child(0, number)
                paragraph.set_attribute("class", " ".join([*classes, NUMBERED_PARAGRAPH_CLASS]))
            except Exception as e:  # pylint: disable=broad-except
                logger.debug("Paragraph %d left unnumbered: %s", position, e)

    @staticmethod
    def _append_style(doc: MarkupDocument, css: str) -> MarkupElement:
        style = doc.create_element("style", css)
        doc.head().append_child(style)
        return style


def transform_chapter(markup: str | bytes, href: str, number_paragraphs: bool = False) -> str:
    """Transform chapter markup with the default BeautifulSoup backing."""
    return ChapterTransformer(number_paragraphs=number_paragraphs).transform(markup, href)
