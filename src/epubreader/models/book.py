"""Pydantic models for the parsed book structure."""

from collections.abc import Mapping
from types import MappingProxyType

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from ..paths import split_fragment


DEFAULT_TITLE = "Untitled"
DEFAULT_CREATOR = "Unknown"
DEFAULT_LANGUAGE = "en"


class Metadata(BaseModel):
    """Book-level metadata from the package document.

    Every field falls back to a placeholder, so a package document without
    metadata still produces a usable book.
    """

    model_config = ConfigDict(frozen=True)

    title: str = DEFAULT_TITLE
    creator: str = DEFAULT_CREATOR
    language: str = DEFAULT_LANGUAGE
    publisher: str = ""
    identifier: str = ""


class ManifestItem(BaseModel):
    """Resource declared in the manifest."""

    model_config = ConfigDict(frozen=True)

    id: str
    href: str = Field(..., description="Archive-absolute path")
    media_type: str = ""
    properties: tuple[str, ...] = ()


class SpineItem(BaseModel):
    """Entry of the reading order, backed by a manifest item."""

    model_config = ConfigDict(frozen=True)

    idref: str
    href: str
    media_type: str = ""


class TocEntry(BaseModel):
    """Single entry in the table of contents."""

    model_config = ConfigDict(frozen=True)

    label: str
    href: str
    anchor: str | None = None
    level: int = Field(default=0, ge=0)
    subitems: tuple["TocEntry", ...] = ()


TocEntry.model_rebuild()


class PackageDocument(BaseModel):
    """Parsed OPF: metadata, manifest and spine."""

    model_config = ConfigDict(frozen=True)

    path: str = Field(..., description="Archive path of the package document")
    root_dir: str = Field(default="", description="Directory hrefs are resolved against")
    metadata: Metadata = Field(default_factory=Metadata)
    manifest: Mapping[str, ManifestItem] = Field(default_factory=dict, validate_default=True)
    spine: tuple[SpineItem, ...] = ()
    toc_id: str | None = Field(default=None, description="Manifest id named by spine@toc")

    @field_validator("manifest", mode="after")
    @classmethod
    def _freeze_manifest(cls, value: Mapping[str, ManifestItem]) -> Mapping[str, ManifestItem]:
        # Read-only view over a private copy
        return MappingProxyType(dict(value))

    @field_serializer("manifest")
    def _serialize_manifest(self, value: Mapping[str, ManifestItem]) -> dict[str, ManifestItem]:
        return dict(value)


class ParsedBook(BaseModel):
    """Read-only model of a loaded book."""

    model_config = ConfigDict(frozen=True)

    package: PackageDocument
    toc: tuple[TocEntry, ...] = ()

    @property
    def metadata(self) -> Metadata:
        return self.package.metadata

    @property
    def manifest(self) -> Mapping[str, ManifestItem]:
        return self.package.manifest

    @property
    def spine(self) -> tuple[SpineItem, ...]:
        return self.package.spine

    @property
    def spine_length(self) -> int:
        return len(self.package.spine)

    def spine_index_of(self, href: str) -> int:
        """Return the spine index of the document at ``href``, or -1.

        A fragment in ``href`` is ignored.
        """
        path, _ = split_fragment(href)
        for index, item in enumerate(self.package.spine):
            if item.href == path:
                return index
        return -1

    def summary(self) -> "BookSummary":
        return BookSummary(
            metadata=self.metadata,
            manifest_count=len(self.manifest),
            spine_length=self.spine_length,
            toc=self.toc,
        )


class BookSummary(BaseModel):
    """Result of loading a book."""

    model_config = ConfigDict(frozen=True)

    metadata: Metadata
    manifest_count: int = Field(..., ge=0)
    spine_length: int = Field(..., ge=0)
    toc: tuple[TocEntry, ...] = ()
