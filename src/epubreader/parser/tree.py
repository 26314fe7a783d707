"""Markup tree capabilities used by the chapter transformer.

The transformer only needs a handful of operations on a document: find
elements by tag, read and write attributes, read text, create elements and
insert them, and serialize the result. :class:`MarkupDocument` and
:class:`MarkupElement` describe that surface; :class:`SoupDocument` backs it
with BeautifulSoup and lxml.
"""

import warnings
from collections.abc import Iterator
from typing import Protocol

from bs4 import BeautifulSoup, Tag, UnicodeDammit, XMLParsedAsHTMLWarning


# Content documents are XHTML, which the HTML parser handles fine
warnings.filterwarnings("ignore", category=XMLParsedAsHTMLWarning)


class MarkupElement(Protocol):
    """One element of a markup tree."""

    @property
    def tag_name(self) -> str: ...

    def get_attribute(self, name: str) -> str | None: ...

    def set_attribute(self, name: str, value: str) -> None: ...

    def remove_attribute(self, name: str) -> None: ...

    def text(self) -> str: ...

    def children(self) -> Iterator["MarkupElement"]: ...

    def insert_child(self, index: int, child: "MarkupElement") -> None: ...

    def append_child(self, child: "MarkupElement") -> None: ...


class MarkupDocument(Protocol):
    """A parsed document that can be queried, mutated and serialized."""

    def query(self, tag: str | None = None) -> list[MarkupElement]: ...

    def create_element(self, tag: str, text: str = "") -> MarkupElement: ...

    def head(self) -> MarkupElement: ...

    def serialize(self) -> str: ...


class SoupElement:
    """:class:`MarkupElement` over a BeautifulSoup tag."""

    def __init__(self, tag: Tag):
        self.tag = tag

    @property
    def tag_name(self) -> str:
        return (self.tag.name or "").lower()

    def get_attribute(self, name: str) -> str | None:
        value = self.tag.get(name)
        if value is None:
            return None
        # Multi-valued attributes such as class and rel come back as lists
        if isinstance(value, list):
            return " ".join(value)
        return str(value)

    def set_attribute(self, name: str, value: str) -> None:
        self.tag[name] = value

    def remove_attribute(self, name: str) -> None:
        if name in self.tag.attrs:
            del self.tag[name]

    def text(self) -> str:
        return self.tag.get_text()

    def children(self) -> Iterator["SoupElement"]:
        for child in self.tag.children:
            if isinstance(child, Tag):
                yield SoupElement(child)

    def insert_child(self, index: int, child: MarkupElement) -> None:
        self.tag.insert(index, _unwrap(child))

    def append_child(self, child: MarkupElement) -> None:
        self.tag.append(_unwrap(child))


def _unwrap(element: MarkupElement) -> Tag:
    if not isinstance(element, SoupElement):
        raise TypeError(f"Cannot insert {type(element).__name__} into a BeautifulSoup tree")
    return element.tag


class SoupDocument:
    """:class:`MarkupDocument` backed by BeautifulSoup with the lxml parser."""

    def __init__(self, markup: str | bytes):
        """Parse ``markup``.

        Raw bytes are decoded from their byte order mark or declared encoding,
        so UTF-16 content documents parse like UTF-8 ones.
        """
        if isinstance(markup, bytes):
            markup = UnicodeDammit(markup, is_html=True).unicode_markup or ""
        self.soup = BeautifulSoup(markup, "lxml")

    def query(self, tag: str | None = None) -> list[MarkupElement]:
        """Return elements named ``tag`` in document order, or all elements for None."""
        found = self.soup.find_all(tag if tag is not None else True)
        return [SoupElement(element) for element in found]

    def create_element(self, tag: str, text: str = "") -> SoupElement:
        element = self.soup.new_tag(tag)
        if text:
            element.string = text
        return SoupElement(element)

    def _root(self) -> Tag:
        html = self.soup.find("html")
        if html is None:
            html = self.soup.new_tag("html")
            for node in list(self.soup.contents):
                html.append(node.extract())
            self.soup.append(html)
        return html

    def head(self) -> SoupElement:
        """Return the document head, creating it when the source has none."""
        head = self.soup.find("head")
        if head is None:
            head = self.soup.new_tag("head")
            self._root().insert(0, head)
        return SoupElement(head)

    def serialize(self) -> str:
        html = self.soup.find("html")
        return str(html) if html is not None else str(self.soup)
