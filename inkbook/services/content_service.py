"""Chapter content formatting service.

Turns raw generated chapter text into an HTML fragment. The work runs
as an ordered pipeline of small stages:

    strip_artifacts -> segment -> render_text / render_image -> join

Each stage is a public method so it can be exercised on its own.
"""

import html
import logging
import re

from ..config import InkbookConfig
from ..domain import ChapterSegment, ImageSegment, TextSegment, coerce_text

logger = logging.getLogger(__name__)


FIGURE_TEMPLATE = (
    '<figure class="image-figure">'
    '<div class="image-container">'
    '<img src="{src}" alt="{alt}" loading="lazy" />'
    "</div>"
    "<figcaption>{caption}</figcaption>"
    "</figure>"
)

# Image syntax characters escaped inside a figure
SRC_ESCAPES = str.maketrans({"[": "%5B", "]": "%5D", "(": "%28", ")": "%29"})
TEXT_ESCAPES = str.maketrans({"!": "&#33;", "[": "&#91;", "]": "&#93;"})


class ContentService:
    """Service for formatting generated chapter content.

    Implements artifact stripping, image segmentation, and paragraph
    and figure rendering. Never raises for string input: missing
    images are dropped and unknown markup passes through as text.
    """

    # Pattern for markdown images: ![alt](url)
    IMAGE_PATTERN = InkbookConfig.IMAGE_PATTERN

    # Serialized objects leaked by the upstream generator
    ARTIFACT_PATTERN = InkbookConfig.ARTIFACT_PATTERN

    # Blank-line paragraph boundary
    PARAGRAPH_BREAK = re.compile(r"\n[ \t]*\n")

    # Fragment that is already an HTML block
    BLOCK_START = re.compile(
        r"^<(?:%s)\b" % "|".join(InkbookConfig.BLOCK_TAGS), re.IGNORECASE
    )

    def format_chapter_content(self, raw_text: object) -> str:
        """Format raw chapter text as an HTML fragment.

        Args:
            raw_text: Chapter text as produced by the generator.

        Returns:
            Paragraphs and figures joined by newlines, in document
            order. Empty input gives an empty string.
        """
        text = coerce_text(raw_text)
        if not text.strip():
            return ""

        text = self.strip_artifacts(text)
        fragments: list[str] = []

        for segment in self.segment(text):
            if isinstance(segment, ImageSegment):
                figure = self.render_image(segment)
                if figure:
                    fragments.append(figure)
            else:
                rendered = self.render_text(segment)
                if rendered:
                    fragments.append(rendered)

        return "\n".join(fragments)

    def strip_artifacts(self, text: str) -> str:
        """Remove serialized generator artifacts from the text.

        Runs until no artifact is left, since removing one can join the
        text around it into another.
        """
        while True:
            stripped, count = self.ARTIFACT_PATTERN.subn("", text)
            if not count:
                return stripped
            logger.debug("Stripped %d generator artifact(s)", count)
            text = stripped

    def segment(self, text: str) -> list[ChapterSegment]:
        """Split text into text and image segments, in document order.

        Args:
            text: Chapter text with artifacts already removed.

        Returns:
            List of TextSegment and ImageSegment values. Text runs that
            are only whitespace are omitted.
        """
        parts = self.IMAGE_PATTERN.split(text)
        segments: list[ChapterSegment] = []

        # A capturing split yields text, alt, url, text, alt, url, ..., text
        for index in range(0, len(parts), 3):
            if parts[index].strip():
                segments.append(TextSegment(content=parts[index]))
            if index + 2 < len(parts):
                segments.append(ImageSegment(alt_text=parts[index + 1], url=parts[index + 2]))

        return segments

    def render_text(self, segment: TextSegment) -> str:
        """Render a text run as paragraphs, one per blank-line block."""
        blocks = []
        for fragment in self.PARAGRAPH_BREAK.split(segment.content):
            fragment = fragment.strip()
            if not fragment:
                continue
            if self.BLOCK_START.match(fragment):
                blocks.append(fragment)
            else:
                blocks.append(f"<p>{fragment}</p>")
        return "\n".join(blocks)

    def render_image(self, segment: ImageSegment) -> str:
        """Render an image segment as a figure.

        Returns:
            The figure HTML, or an empty string when the URL is missing
            or a placeholder.
        """
        if not segment.is_renderable:
            logger.debug("Dropping image %r with unusable url %r", segment.alt_text, segment.url)
            return ""

        return FIGURE_TEMPLATE.format(
            src=html.escape(segment.url.strip()).translate(SRC_ESCAPES),
            alt=html.escape(segment.alt_text).translate(TEXT_ESCAPES),
            caption=html.escape(segment.alt_text, quote=False).translate(TEXT_ESCAPES),
        )

    def extract_images(self, raw_text: object) -> list[ImageSegment]:
        """Extract the renderable images of a chapter, in order."""
        text = self.strip_artifacts(coerce_text(raw_text))
        return [
            segment
            for segment in self.segment(text)
            if isinstance(segment, ImageSegment) and segment.is_renderable
        ]


_default_service = ContentService()


def format_chapter_content(raw_text: object) -> str:
    """Format raw chapter text using the default content service."""
    return _default_service.format_chapter_content(raw_text)
