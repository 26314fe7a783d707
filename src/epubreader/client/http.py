"""Async HTTP client and source helpers for retrieving EPUB bytes."""

import asyncio
import base64
from pathlib import Path
from typing import Any
from urllib.parse import unquote_to_bytes

import httpx
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from ..models import ReaderConfig
from ..utils.exceptions import EpubReaderError, NetworkError, SourceNotFoundError


class EpubClient:
    """Async HTTP client for downloading EPUB files.

    Example:
        async with EpubClient(config) as client:
            data = await client.download("https://example.com/book.epub")
    """

    def __init__(self, config: ReaderConfig):
        """Initialize the async HTTP client.

        Args:
            config: Application configuration
        """
        self._config = config
        self._client = httpx.AsyncClient(
            timeout=config.timeout,
            follow_redirects=True,
            headers={
                "User-Agent": config.user_agent,
                "Accept": "application/epub+zip, application/octet-stream",
            },
        )

    async def __aenter__(self) -> "EpubClient":
        """Async context manager entry."""
        return self

    async def __aexit__(self, *args: Any) -> None:
        """Async context manager exit."""
        await self.close()

    async def close(self) -> None:
        """Close the HTTP client and cleanup resources."""
        await self._client.aclose()

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        retry=retry_if_exception_type((httpx.NetworkError, httpx.TimeoutException)),
    )
    async def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        """Make an HTTP request with retry logic.

        Args:
            method: HTTP method (GET, HEAD, ...)
            url: Request URL
            **kwargs: Additional arguments for httpx request

        Returns:
            HTTP response

        Raises:
            SourceNotFoundError: On 404 Not Found
            NetworkError: On other HTTP errors
        """
        try:
            response = await self._client.request(method, url, **kwargs)

            if response.status_code == 404:
                raise SourceNotFoundError(f"EPUB not found: {url}")

            response.raise_for_status()

            return response

        except SourceNotFoundError:
            raise
        except httpx.HTTPStatusError as e:
            raise NetworkError(
                f"Failed to fetch EPUB: {e.response.status_code} {e.response.reason_phrase}"
            ) from e
        except (httpx.NetworkError, httpx.TimeoutException):
            # These will be retried by tenacity
            raise
        except Exception as e:
            raise NetworkError(f"Unexpected error: {e}") from e

    async def download(self, url: str) -> bytes:
        """Download an EPUB file.

        Args:
            url: Location of the EPUB

        Returns:
            Raw EPUB bytes

        Raises:
            SourceNotFoundError: If the server answers 404
            NetworkError: On download errors
        """
        try:
            response = await self._request("GET", url)
        except (httpx.NetworkError, httpx.TimeoutException) as e:
            raise NetworkError(f"Failed to fetch EPUB: {e}") from e
        return response.content


def decode_data_uri(uri: str) -> bytes:
    """Decode a ``data:`` URI (base64 or percent-encoded) into bytes.

    Raises:
        EpubReaderError: If ``uri`` is not a valid data URI
    """
    header, sep, payload = uri.partition(",")
    if not sep or not header.lower().startswith("data:"):
        raise EpubReaderError("Invalid data URI")

    if header.lower().endswith(";base64"):
        try:
            return base64.b64decode(payload, validate=False)
        except ValueError as e:
            raise EpubReaderError(f"Invalid base64 payload in data URI: {e}") from e
    return unquote_to_bytes(payload)


async def read_source(source: str | Path, config: ReaderConfig | None = None) -> bytes:
    """Return the bytes of an EPUB given a URL, a data URI or a local path.

    Args:
        source: ``http(s)://`` URL, ``data:`` URI or filesystem path
        config: Configuration for remote fetches

    Raises:
        NetworkError: If a remote fetch fails
        FileNotFoundError: If a local path does not exist
    """
    text = str(source)
    lowered = text.lower()

    if lowered.startswith(("http://", "https://")):
        async with EpubClient(config or ReaderConfig()) as client:
            return await client.download(text)

    if lowered.startswith("data:"):
        return decode_data_uri(text)

    return await asyncio.to_thread(Path(source).read_bytes)
