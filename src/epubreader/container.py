"""Locate the package document (OPF) inside an EPUB archive."""

import logging

from lxml import etree

from .archive import EpubArchive
from .parser.xml import first_descendant, parse_xml
from .utils.exceptions import StructureMissingError


logger = logging.getLogger(__name__)

CONTAINER_PATH = "META-INF/container.xml"
PACKAGE_EXTENSION = ".opf"


class ContainerLocator:
    """Finds the package document path of an archive.

    The path normally comes from ``META-INF/container.xml``. Real-world files
    sometimes omit that file or store it with a different case, so when it is
    missing the archive is scanned for any ``.opf`` entry instead.
    """

    def __init__(self, archive: EpubArchive):
        self.archive = archive

    def locate(self) -> str:
        """Return the archive path of the package document.

        Raises:
            StructureMissingError: If container.xml is broken or neither it nor
                an ``.opf`` entry can be found
        """
        container_path = self.archive.find(CONTAINER_PATH)
        if container_path is None:
            logger.warning("container.xml not found in META-INF directory")
            return self._scan_for_package()

        package_path = self._parse_container(container_path)
        resolved = self.archive.find(package_path)
        if resolved is None:
            raise StructureMissingError(
                f"Package document {package_path} named in container.xml is not in the archive"
            )

        logger.debug("Found OPF file at: %s", resolved)
        return resolved

    def _parse_container(self, container_path: str) -> str:
        data = self.archive.read_binary(container_path)
        try:
            root = parse_xml(data)
        except etree.XMLSyntaxError as e:
            raise StructureMissingError(f"Failed to parse container.xml: {e}") from e

        rootfile = first_descendant(root, "rootfile")
        if rootfile is None:
            raise StructureMissingError("No rootfile element found in container.xml")

        full_path = (rootfile.get("full-path") or "").strip()
        if not full_path:
            raise StructureMissingError("No full-path attribute in rootfile element")

        return full_path.lstrip("/")

    def _scan_for_package(self) -> str:
        for name in self.archive.names():
            if name.lower().endswith(PACKAGE_EXTENSION):
                logger.warning("Using OPF file found by scanning the archive: %s", name)
                return name

        raise StructureMissingError("container.xml not found and could not locate OPF file")
