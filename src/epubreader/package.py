"""Parse the OPF package document into metadata, manifest and spine."""

import logging

from lxml import etree

from .archive import EpubArchive
from .models import ManifestItem, Metadata, PackageDocument, SpineItem
from .models.book import DEFAULT_CREATOR, DEFAULT_LANGUAGE, DEFAULT_TITLE
from .parser.xml import element_text, first_descendant, iter_children, parse_xml
from .paths import parent_dir, resolve_href
from .utils.exceptions import ParsingError, StructureMissingError


logger = logging.getLogger(__name__)

# Dublin Core element -> (Metadata field, placeholder)
METADATA_FIELDS = {
    "title": DEFAULT_TITLE,
    "creator": DEFAULT_CREATOR,
    "language": DEFAULT_LANGUAGE,
    "publisher": "",
    "identifier": "",
}


class PackageDocumentParser:
    """Parser for the OPF package document of an EPUB."""

    def __init__(self, archive: EpubArchive, package_path: str):
        """Initialize the parser.

        Args:
            archive: Open archive holding the package document
            package_path: Archive path of the OPF file
        """
        self.archive = archive
        self.package_path = package_path
        self.root_dir = parent_dir(package_path)

    def parse(self) -> PackageDocument:
        """Read and parse the package document.

        Raises:
            StructureMissingError: If the package document is not in the archive
            ParsingError: If the package document is not well-formed XML
        """
        if not self.archive.exists(self.package_path):
            raise StructureMissingError(f"Package document not found: {self.package_path}")

        data = self.archive.read_binary(self.package_path)
        try:
            root = parse_xml(data)
        except etree.XMLSyntaxError as e:
            raise ParsingError(f"Failed to parse OPF file: {e}") from e

        metadata = self._parse_metadata(root)
        manifest = self._parse_manifest(root)
        spine, toc_id = self._parse_spine(root, manifest)

        logger.info(
            "Parsed OPF %s: %r, %d spine items", self.package_path, metadata.title, len(spine)
        )
        return PackageDocument(
            path=self.package_path,
            root_dir=self.root_dir,
            metadata=metadata,
            manifest=manifest,
            spine=spine,
            toc_id=toc_id,
        )

    def resolve(self, href: str) -> str:
        """Resolve an OPF-relative href into an archive path."""
        return resolve_href(self.root_dir, href)

    @staticmethod
    def _parse_metadata(root: etree._Element) -> Metadata:
        metadata_el = first_descendant(root, "metadata")
        values: dict[str, str] = {}

        for name, placeholder in METADATA_FIELDS.items():
            element = first_descendant(metadata_el, name) if metadata_el is not None else None
            values[name] = element_text(element) or placeholder

        return Metadata(**values)

    def _parse_manifest(self, root: etree._Element) -> dict[str, ManifestItem]:
        manifest: dict[str, ManifestItem] = {}
        manifest_el = first_descendant(root, "manifest")
        if manifest_el is None:
            logger.warning("Package document has no manifest")
            return manifest

        for item in iter_children(manifest_el, "item"):
            item_id = item.get("id")
            href = item.get("href")
            if not item_id or not href:
                logger.warning("Skipping manifest item without id or href: %s", dict(item.attrib))
                continue
            if item_id in manifest:
                logger.warning("Duplicate manifest id %r, keeping the first declaration", item_id)
                continue

            manifest[item_id] = ManifestItem(
                id=item_id,
                href=self.resolve(href),
                media_type=item.get("media-type", ""),
                properties=tuple((item.get("properties") or "").split()),
            )

        return manifest

    @staticmethod
    def _parse_spine(
        root: etree._Element, manifest: dict[str, ManifestItem]
    ) -> tuple[tuple[SpineItem, ...], str | None]:
        spine_el = first_descendant(root, "spine")
        if spine_el is None:
            logger.warning("Package document has no spine")
            return (), None

        spine: list[SpineItem] = []
        for itemref in iter_children(spine_el, "itemref"):
            idref = itemref.get("idref", "")
            resource = manifest.get(idref)
            if resource is None:
                logger.debug("Skipping spine itemref with unknown idref %r", idref)
                continue
            spine.append(
                SpineItem(idref=idref, href=resource.href, media_type=resource.media_type)
            )

        return tuple(spine), spine_el.get("toc") or None
