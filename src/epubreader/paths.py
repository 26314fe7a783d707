"""Archive path helpers.

Every href stored in the parsed model is archive-absolute: it is joined to the
directory of the document that declared it, normalized, and percent-decoded
so it can be used directly as a ZIP entry name.
"""

import posixpath
from urllib.parse import unquote, urlparse


def parent_dir(path: str) -> str:
    """Return the directory part of an archive path, without trailing slash."""
    return posixpath.dirname(path)


def resolve_href(base_dir: str, href: str) -> str:
    """Resolve ``href`` against ``base_dir`` into an archive-absolute path.

    Args:
        base_dir: Directory of the declaring document ("" for the archive root)
        href: Document-relative reference, without fragment

    Returns:
        Normalized archive path (no leading slash, no ``..`` segments)
    """
    href = unquote(href)
    if href.startswith("/"):
        joined = href.lstrip("/")
    else:
        joined = posixpath.join(base_dir, href) if base_dir else href

    normalized = posixpath.normpath(joined)
    # normpath keeps leading ".." that escape the root; an archive has no parent
    while normalized.startswith("../"):
        normalized = normalized[3:]
    if normalized in {".", ".."}:
        return ""
    return normalized


def split_fragment(target: str) -> tuple[str, str | None]:
    """Split ``path#fragment`` at the first ``#``.

    Returns:
        Tuple of (path, fragment) where fragment is None when absent
    """
    if "#" not in target:
        return target, None
    path, fragment = target.split("#", 1)
    return path, fragment


def is_network_url(url: str) -> bool:
    """Check if a reference points outside the archive (http, https or ``//host``)."""
    parsed = urlparse(url)
    return parsed.scheme in {"http", "https"} or bool(parsed.netloc)


def is_data_uri(url: str) -> bool:
    """Check if a reference is an embedded ``data:`` URI."""
    return url.strip().lower().startswith("data:")
