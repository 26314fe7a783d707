"""Media type lookup and data URI encoding for archive resources."""

import base64
import posixpath


IMAGE_MEDIA_TYPES = {
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "png": "image/png",
    "gif": "image/gif",
    "svg": "image/svg+xml",
    "webp": "image/webp",
}

RESOURCE_MEDIA_TYPES = {
    **IMAGE_MEDIA_TYPES,
    "html": "text/html",
    "htm": "text/html",
    "xhtml": "application/xhtml+xml",
    "css": "text/css",
    "js": "text/javascript",
}

DEFAULT_MEDIA_TYPE = "application/octet-stream"


def extension_of(path: str) -> str:
    """Return the lower-cased file extension of ``path`` without the dot."""
    return posixpath.splitext(path)[1][1:].lower()


def media_type_for(path: str, table: dict[str, str] = RESOURCE_MEDIA_TYPES) -> str | None:
    """Look up the media type for ``path`` by extension, or None if unknown."""
    return table.get(extension_of(path))


def encode_data_uri(data: bytes, media_type: str) -> str:
    """Encode bytes as a self-contained base64 data URI."""
    payload = base64.b64encode(data).decode("ascii")
    return f"data:{media_type};base64,{payload}"
