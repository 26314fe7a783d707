"""Retrieval of EPUB bytes from remote and local sources."""

from .http import EpubClient, decode_data_uri, read_source


__all__ = ["EpubClient", "decode_data_uri", "read_source"]
