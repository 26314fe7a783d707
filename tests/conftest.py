"""Shared pytest fixtures and configuration for epubreader tests."""

import io
import zipfile
from collections.abc import Callable

import pytest


CONTAINER_TEMPLATE = """<?xml version="1.0" encoding="UTF-8"?>
<container version="1.0" xmlns="urn:oasis:names:tc:opendocument:xmlns:container">
  <rootfiles>
    <rootfile full-path="{path}" media-type="application/oebps-package+xml"/>
  </rootfiles>
</container>
"""

OPF_TEMPLATE = """<?xml version="1.0" encoding="UTF-8"?>
<package xmlns="http://www.idpf.org/2007/opf" version="2.0" unique-identifier="bookid">
  <metadata xmlns:dc="http://purl.org/dc/elements/1.1/">
{metadata}
  </metadata>
  <manifest>
{manifest}
  </manifest>
  <spine{toc_attr}>
{spine}
  </spine>
</package>
"""

NCX_TEMPLATE = """<?xml version="1.0" encoding="UTF-8"?>
<ncx xmlns="http://www.daisy.org/z3986/2005/ncx/" version="2005-1">
  <head><meta name="dtb:uid" content="urn:uuid:1234"/></head>
  <docTitle><text>Test Book</text></docTitle>
  <navMap>
{nav_points}
  </navMap>
</ncx>
"""

CHAPTER_TEMPLATE = """<?xml version="1.0" encoding="UTF-8"?>
<!DOCTYPE html>
<html xmlns="http://www.w3.org/1999/xhtml">
<head>
  <title>{title}</title>
  <link rel="stylesheet" type="text/css" href="../styles/book.css"/>
</head>
<body>
  <h1 class="chapter-title calibre1">{title}</h1>
{body}
</body>
</html>
"""

DEFAULT_METADATA = {
    "title": "Test-Driven Reading",
    "creator": "Jane Author",
    "language": "en-GB",
    "publisher": "Example Press",
    "identifier": "urn:isbn:9780000000001",
}


def build_epub(files: dict[str, str | bytes], include_mimetype: bool = True) -> bytes:
    """Zip ``files`` into an in-memory EPUB."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as epub:
        if include_mimetype:
            epub.writestr("mimetype", "application/epub+zip", compress_type=zipfile.ZIP_STORED)
        for name, content in files.items():
            epub.writestr(name, content, compress_type=zipfile.ZIP_DEFLATED)
    return buffer.getvalue()


def make_container(path: str = "OEBPS/content.opf") -> str:
    return CONTAINER_TEMPLATE.format(path=path)


def make_opf(
    manifest: list[tuple[str, str, str] | tuple[str, str, str, str]],
    spine: list[str],
    metadata: dict[str, str] | None = None,
    toc: str | None = None,
) -> str:
    """Render an OPF document.

    Args:
        manifest: (id, href, media-type[, properties]) tuples
        spine: idrefs in reading order
        metadata: Dublin Core element -> text (DEFAULT_METADATA when None)
        toc: Value of the spine toc attribute
    """
    metadata = DEFAULT_METADATA if metadata is None else metadata
    metadata_xml = "\n".join(
        f"    <dc:{name}>{value}</dc:{name}>" for name, value in metadata.items()
    )
    items = []
    for entry in manifest:
        properties = f' properties="{entry[3]}"' if len(entry) > 3 else ""
        items.append(
            f'    <item id="{entry[0]}" href="{entry[1]}" media-type="{entry[2]}"{properties}/>'
        )
    spine_xml = "\n".join(f'    <itemref idref="{idref}"/>' for idref in spine)
    return OPF_TEMPLATE.format(
        metadata=metadata_xml,
        manifest="\n".join(items),
        spine=spine_xml,
        toc_attr=f' toc="{toc}"' if toc else "",
    )


def nav_point(label: str, src: str, children: str = "", point_id: str = "np") -> str:
    return (
        f'<navPoint id="{point_id}"><navLabel><text>{label}</text></navLabel>'
        f'<content src="{src}"/>{children}</navPoint>'
    )


def make_ncx(nav_points: str) -> str:
    return NCX_TEMPLATE.format(nav_points=nav_points)


def make_chapter(title: str, body: str = "<p>Some chapter text for the reader.</p>") -> str:
    return CHAPTER_TEMPLATE.format(title=title, body=body)


@pytest.fixture
def epub_builder() -> Callable[..., bytes]:
    """Build an EPUB from a path -> content mapping."""
    return build_epub


@pytest.fixture
def opf_builder() -> Callable[..., str]:
    return make_opf


@pytest.fixture
def ncx_builder() -> Callable[..., str]:
    return make_ncx


@pytest.fixture
def nav_point_builder() -> Callable[..., str]:
    return nav_point


@pytest.fixture
def chapter_builder() -> Callable[..., str]:
    return make_chapter


@pytest.fixture
def sample_files() -> dict[str, str | bytes]:
    """Two chapters, an NCX with one root entry and one child."""
    ncx = make_ncx(
        nav_point(
            "Chapter 1",
            "ch1.xhtml",
            children=nav_point("Chapter 2", "ch2.xhtml#start", point_id="np2"),
            point_id="np1",
        )
    )
    return {
        "META-INF/container.xml": make_container(),
        "OEBPS/content.opf": make_opf(
            manifest=[
                ("ch1", "ch1.xhtml", "application/xhtml+xml"),
                ("ch2", "ch2.xhtml", "application/xhtml+xml"),
                ("ncx", "toc.ncx", "application/x-dtbncx+xml"),
            ],
            spine=["ch1", "ch2"],
            toc="ncx",
        ),
        "OEBPS/toc.ncx": ncx,
        "OEBPS/ch1.xhtml": make_chapter("Chapter 1"),
        "OEBPS/ch2.xhtml": make_chapter("Chapter 2"),
    }


@pytest.fixture
def sample_epub(sample_files) -> bytes:
    """The sample book as EPUB bytes."""
    return build_epub(sample_files)


@pytest.fixture
def illustrated_files(sample_files) -> dict[str, str | bytes]:
    """The sample book plus images, a stylesheet and a chapter that uses them."""
    files = dict(sample_files)
    files["OEBPS/content.opf"] = make_opf(
        manifest=[
            ("ch1", "text/ch1.xhtml", "application/xhtml+xml"),
            ("ch2", "text/ch2.xhtml", "application/xhtml+xml"),
            ("fig1", "images/fig1.png", "image/png"),
            ("cover-image", "images/front.jpg", "image/jpeg"),
            ("css", "styles/book.css", "text/css"),
            ("ncx", "toc.ncx", "application/x-dtbncx+xml"),
        ],
        spine=["ch1", "ch2"],
        toc="ncx",
    )
    del files["OEBPS/ch1.xhtml"]
    del files["OEBPS/ch2.xhtml"]
    files["OEBPS/text/ch1.xhtml"] = make_chapter(
        "Chapter 1",
        '<p>A figure follows in this paragraph.</p><img src="../images/fig1.png" alt="Figure"/>',
    )
    files["OEBPS/text/ch2.xhtml"] = make_chapter("Chapter 2")
    files["OEBPS/images/fig1.png"] = b"\x89PNG\r\n\x1a\nfigure"
    files["OEBPS/images/front.jpg"] = b"\xff\xd8\xffcover-bytes"
    files["OEBPS/styles/book.css"] = "p { color: blue; }"
    return files


@pytest.fixture
def illustrated_epub(illustrated_files) -> bytes:
    return build_epub(illustrated_files)


def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line("markers", "integration: marks tests as integration tests")
    config.addinivalue_line("markers", "unit: marks tests as unit tests")


def pytest_collection_modifyitems(config, items):
    """Auto-mark tests based on location."""
    for item in items:
        # Auto-mark integration tests
        if "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
        # Auto-mark unit tests
        elif "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
