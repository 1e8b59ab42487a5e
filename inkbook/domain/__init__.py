"""Domain layer for chapter content representation."""

from .content import (
    MarkupFormat,
    MarkupText,
    TextSegment,
    ImageSegment,
    ChapterSegment,
    ImageSizeClass,
    ImageClassification,
    coerce_text,
)

__all__ = [
    "MarkupFormat",
    "MarkupText",
    "TextSegment",
    "ImageSegment",
    "ChapterSegment",
    "ImageSizeClass",
    "ImageClassification",
    "coerce_text",
]
