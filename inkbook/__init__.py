"""inkbook - content transformation for AI-assisted book authoring."""

from .domain import (
    ImageClassification,
    ImageSegment,
    ImageSizeClass,
    MarkupFormat,
    MarkupText,
    TextSegment,
)
from .services import (
    classify_and_size,
    format_chapter_content,
    html_to_markdown,
    markdown_to_html,
)

__all__ = [
    "ImageClassification",
    "ImageSegment",
    "ImageSizeClass",
    "MarkupFormat",
    "MarkupText",
    "TextSegment",
    "classify_and_size",
    "format_chapter_content",
    "html_to_markdown",
    "markdown_to_html",
]
