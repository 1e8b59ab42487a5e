"""Styling and cleanup helpers for editor content.

Produces the class-decorated HTML used by the WYSIWYG preview, repairs
emphasis markers mangled by the generator, and cleans up HTML coming
back from the editor before it is saved.
"""

import logging
import re

from bs4 import BeautifulSoup
from bs4.builder import ParserRejectedMarkup

from ..config import InkbookConfig
from ..domain import coerce_text
from .markup_service import MarkupConverter

logger = logging.getLogger(__name__)


# "**the **heart" / "** the**" and the single-asterisk equivalents
BOLD_TRAILING_SPACE = re.compile(r"\*\*(?=\S)([^*\n]*?\S)\s+\*\*")
BOLD_LEADING_SPACE = re.compile(r"\*\*\s+(\S[^*\n]*?\S|\S)\*\*")
ITALIC_TRAILING_SPACE = re.compile(r"(?<!\*)\*(?=\S)([^*\n]*?\S)\s+\*(?!\*)")
ITALIC_LEADING_SPACE = re.compile(r"(?<!\*)\*\s+(\S[^*\n]*?\S|\S)\*(?!\*)")

CLEANUP_EMPTY_TAGS = ("h1", "h2", "h3", "p", "span", "div")


class StylingService:
    """Service for styled previews and editor HTML cleanup."""

    def __init__(
        self,
        converter: MarkupConverter | None = None,
        config: type[InkbookConfig] = InkbookConfig,
    ) -> None:
        self._converter = converter or MarkupConverter()
        self._config = config

    def normalize_emphasis_spacing(self, markdown_text: object) -> str:
        """Move whitespace trapped inside emphasis markers outside them.

        "**the **heart" becomes "**the** heart".
        """
        text = coerce_text(markdown_text)
        text = BOLD_TRAILING_SPACE.sub(r"**\1** ", text)
        text = BOLD_LEADING_SPACE.sub(r" **\1**", text)
        text = ITALIC_TRAILING_SPACE.sub(r"*\1* ", text)
        return ITALIC_LEADING_SPACE.sub(r" *\1*", text)

    def styled_markdown_to_html(self, markdown_text: object) -> str:
        """Convert Markdown to HTML carrying the preview's style classes.

        Args:
            markdown_text: Markdown content.

        Returns:
            HTML with a class attribute on every styled element.
        """
        text = coerce_text(markdown_text)
        if not text.strip():
            return ""

        html_text = self._converter.markdown_to_html(self.normalize_emphasis_spacing(text))
        soup = BeautifulSoup(html_text, "html.parser")
        for tag_name, css_class in self._config.STYLE_CLASSES.items():
            for element in soup.find_all(tag_name):
                element["class"] = css_class
        return str(soup)

    def cleanup_html_content(self, html_content: object) -> str:
        """Clean up HTML returned by the editor.

        - Unwraps spans that set an inline font-family, keeping their text
        - Removes empty headings, paragraphs, spans and divs
        - Keeps only the first non-empty h1

        Args:
            html_content: Editor HTML.

        Returns:
            The cleaned HTML, or the input unchanged if it cannot be
            parsed.
        """
        html_content = coerce_text(html_content)
        if not html_content:
            return ""

        try:
            soup = BeautifulSoup(html_content, "html.parser")
        except ParserRejectedMarkup as e:
            logger.warning("Leaving HTML uncleaned, parse failed: %s", e)
            return html_content

        # Innermost spans first, so nested font spans collapse fully
        font_spans = [
            span
            for span in soup.find_all("span", style=True)
            if "font-family" in span["style"]
        ]
        for span in reversed(font_spans):
            span.unwrap()

        for tag_name in CLEANUP_EMPTY_TAGS:
            for element in soup.find_all(tag_name):
                if not element.contents:
                    element.decompose()

        found_heading = False
        for heading in soup.find_all("h1"):
            if not heading.get_text().strip() or found_heading:
                heading.decompose()
            else:
                found_heading = True

        return str(soup)

    def count_words(self, text: object) -> int:
        """Count whitespace-delimited words."""
        return len(coerce_text(text).split())


_default_service = StylingService()


def styled_markdown_to_html(markdown_text: object) -> str:
    """Convert Markdown to styled preview HTML."""
    return _default_service.styled_markdown_to_html(markdown_text)


def cleanup_html_content(html_content: object) -> str:
    """Clean up editor HTML before saving."""
    return _default_service.cleanup_html_content(html_content)


def count_words(text: object) -> int:
    """Count whitespace-delimited words."""
    return _default_service.count_words(text)
