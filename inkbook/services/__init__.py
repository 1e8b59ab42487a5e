"""Service layer for content transformation.

Provides markup conversion, chapter formatting, image classification,
styling, and rendering services.
"""

from .markup_service import MarkupConverter, html_to_markdown, markdown_to_html
from .image_service import ImageClassifier, classify_and_size, is_diagram
from .content_service import ContentService, format_chapter_content
from .styling_service import (
    StylingService,
    cleanup_html_content,
    count_words,
    styled_markdown_to_html,
)
from .render_service import RenderService

__all__ = [
    "MarkupConverter",
    "html_to_markdown",
    "markdown_to_html",
    "ImageClassifier",
    "classify_and_size",
    "is_diagram",
    "ContentService",
    "format_chapter_content",
    "StylingService",
    "cleanup_html_content",
    "count_words",
    "styled_markdown_to_html",
    "RenderService",
]
