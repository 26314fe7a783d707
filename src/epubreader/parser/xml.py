"""Namespace-agnostic helpers over lxml for OCF, OPF and NCX documents."""

from collections.abc import Iterator

from lxml import etree


def _parser(huge_tree: bool = False) -> etree.XMLParser:
    return etree.XMLParser(
        resolve_entities=False,
        no_network=True,
        remove_comments=True,
        remove_pis=True,
        huge_tree=huge_tree,
    )


def parse_xml(data: bytes, huge_tree: bool = False) -> etree._Element:
    """Parse an XML document and return its root element.

    Args:
        data: Raw document bytes
        huge_tree: Lift libxml2's nesting limit (256 levels) to 2048 levels

    Raises:
        etree.XMLSyntaxError: If ``data`` is not well-formed
    """
    return etree.fromstring(data, _parser(huge_tree))


def local_name(element: etree._Element) -> str:
    """Return the tag name of ``element`` without its namespace."""
    return etree.QName(element).localname


def iter_children(element: etree._Element, name: str) -> Iterator[etree._Element]:
    """Yield direct child elements called ``name``, in any namespace."""
    for child in element.iterchildren(tag=etree.Element):
        if local_name(child) == name:
            yield child


def first_child(element: etree._Element, name: str) -> etree._Element | None:
    return next(iter_children(element, name), None)


def iter_descendants(element: etree._Element, name: str) -> Iterator[etree._Element]:
    """Yield descendant elements called ``name`` in document order."""
    for node in element.iter(tag=etree.Element):
        if node is not element and local_name(node) == name:
            yield node


def first_descendant(element: etree._Element, name: str) -> etree._Element | None:
    return next(iter_descendants(element, name), None)


def element_text(element: etree._Element | None) -> str:
    """Return the stripped text content of ``element`` ("" for None)."""
    if element is None:
        return ""
    return "".join(element.itertext()).strip()
