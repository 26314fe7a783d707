"""Parse the NCX navigation document into a nested table of contents."""

import logging
from typing import Any

from lxml import etree

from .archive import EpubArchive
from .models import ManifestItem, PackageDocument, TocEntry
from .parser.xml import (
    element_text,
    first_child,
    iter_children,
    iter_descendants,
    local_name,
    parse_xml,
)
from .paths import parent_dir, resolve_href, split_fragment


logger = logging.getLogger(__name__)

NCX_MEDIA_TYPE = "application/x-dtbncx+xml"
NCX_FILENAME = "toc.ncx"
DEFAULT_MAX_DEPTH = 32


class NavigationTreeParser:
    """Builds the TOC tree from the NCX document.

    A table of contents is nice to have but never required: every failure in
    this class is logged and turned into an empty TOC.
    """

    def __init__(self, archive: EpubArchive, max_depth: int = DEFAULT_MAX_DEPTH):
        """Initialize the parser.

        Args:
            archive: Open archive holding the navigation document
            max_depth: Number of TOC levels kept; deeper entries are dropped
        """
        self.archive = archive
        self.max_depth = max_depth

    @staticmethod
    def find_navigation(package: PackageDocument) -> ManifestItem | None:
        """Return the manifest item of the NCX document, or None.

        The item named by the spine's ``toc`` attribute wins; otherwise the
        first item that looks like an NCX by name or media type.
        """
        if package.toc_id:
            item = package.manifest.get(package.toc_id)
            if item is not None and (
                item.media_type == NCX_MEDIA_TYPE or item.href.lower().endswith(".ncx")
            ):
                return item

        for item in package.manifest.values():
            if NCX_FILENAME in item.href or item.media_type == NCX_MEDIA_TYPE:
                return item
        return None

    def parse(self, package: PackageDocument) -> list[TocEntry]:
        """Parse the navigation document of ``package``.

        Returns:
            Root TOC entries, or an empty list when there is no usable NCX
        """
        try:
            item = self.find_navigation(package)
            if item is None:
                logger.warning("No TOC file found in manifest")
                return []

            # Deep NCX files must parse so the depth cap can truncate them
            root = parse_xml(self.archive.read_binary(item.href), huge_tree=True)
            toc = self._build_tree(root, parent_dir(item.href))
        except Exception as e:  # pylint: disable=broad-except
            logger.warning("Error parsing TOC, will proceed without it: %s", e)
            return []

        logger.debug("Parsed TOC successfully, entries: %d", len(toc))
        return toc

    def _build_tree(self, root: etree._Element, base_dir: str) -> list[TocEntry]:
        top_level = [
            nav_point
            for nav_point in iter_descendants(root, "navPoint")
            if local_name(nav_point.getparent()) != "navPoint"
        ]

        roots: list[dict[str, Any]] = []
        stack = [(nav_point, 0, roots) for nav_point in reversed(top_level)]
        truncated = 0

        while stack:
            nav_point, level, siblings = stack.pop()
            if level >= self.max_depth:
                truncated += 1
                continue

            node = self._read_nav_point(nav_point, base_dir, level)
            if node is None:
                continue
            siblings.append(node)

            children = list(iter_children(nav_point, "navPoint"))
            stack.extend((child, level + 1, node["subitems"]) for child in reversed(children))

        if truncated:
            logger.warning(
                "TOC is deeper than %d levels, dropped %d nested entries", self.max_depth, truncated
            )

        return [TocEntry.model_validate(node) for node in roots]

    @staticmethod
    def _read_nav_point(
        nav_point: etree._Element, base_dir: str, level: int
    ) -> dict[str, Any] | None:
        label_el = first_child(nav_point, "navLabel")
        text_el = first_child(label_el, "text") if label_el is not None else None
        label = element_text(text_el if text_el is not None else label_el)

        content_el = first_child(nav_point, "content")
        src = (content_el.get("src") or "").strip() if content_el is not None else ""

        if not label and not src:
            return None

        path, anchor = split_fragment(src)
        return {
            "label": label,
            "href": resolve_href(base_dir, path) if path else "",
            "anchor": anchor or None,
            "level": level,
            "subitems": [],
        }
