"""Markup parsing and transformation for epubreader."""

from .html import PLACEHOLDER_IMAGE, ChapterTransformer, transform_chapter
from .tree import MarkupDocument, MarkupElement, SoupDocument


__all__ = [
    "PLACEHOLDER_IMAGE",
    "ChapterTransformer",
    "MarkupDocument",
    "MarkupElement",
    "SoupDocument",
    "transform_chapter",
]
