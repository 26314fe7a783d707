"""Locate and encode the cover image of a book."""

import logging

from .archive import EpubArchive
from .media import IMAGE_MEDIA_TYPES, encode_data_uri, media_type_for
from .models import CoverResource, ManifestItem, PackageDocument, SpineItem


logger = logging.getLogger(__name__)

COVER_MARKER = "cover"
COVER_IMAGE_PROPERTY = "cover-image"


class CoverResolver:
    """Picks the cover resource with a three-tier heuristic.

    1. A manifest item whose id contains "cover" or that declares the
       ``cover-image`` property.
    2. A spine item whose idref or href contains "cover".
    3. The first manifest item with an image media type.

    The first tier that matches decides; an unencodable match is not
    replaced by a later tier.
    """

    def __init__(self, package: PackageDocument):
        self.package = package

    def _from_manifest(self) -> ManifestItem | None:
        for item in self.package.manifest.values():
            if COVER_MARKER in item.id.lower() or COVER_IMAGE_PROPERTY in item.properties:
                return item
        return None

    def _from_spine(self) -> SpineItem | None:
        for item in self.package.spine:
            if COVER_MARKER in item.idref.lower() or COVER_MARKER in item.href.lower():
                return item
        return None

    def _first_image(self) -> ManifestItem | None:
        for item in self.package.manifest.values():
            if item.media_type.startswith("image/"):
                return item
        return None

    def select(self) -> str | None:
        """Return the archive path of the cover candidate, or None."""
        for tier, candidate in enumerate(
            (self._from_manifest(), self._from_spine(), self._first_image()), start=1
        ):
            if candidate is not None:
                logger.debug("Cover candidate from tier %d: %s", tier, candidate.href)
                return candidate.href
        return None

    def resolve(self, archive: EpubArchive) -> CoverResource | None:
        """Fetch and encode the selected cover.

        Returns:
            CoverResource, or None if nothing matched or the match is not an image

        Raises:
            EntryNotFoundError: If the selected path is missing from the archive
        """
        href = self.select()
        if href is None:
            logger.info("No cover image found in EPUB")
            return None

        media_type = media_type_for(href, IMAGE_MEDIA_TYPES)
        if media_type is None:
            logger.info("Cover candidate %s is not a known image type", href)
            return None

        data = archive.read_binary(href)
        logger.info("Found cover image: %s", href)
        return CoverResource(
            href=href, media_type=media_type, data_uri=encode_data_uri(data, media_type)
        )
