"""Render service implementation.

Acts as the rendering surface for chapter content: formats raw chapter
text, sizes each figure image by its alt text, and wraps the result in
a standalone preview document. Markdown storage content is rendered
with the markdown library.
"""

import html
import logging

import markdown
from bs4 import BeautifulSoup

from ..config import InkbookConfig
from ..domain import coerce_text
from .content_service import ContentService
from .image_service import ImageClassifier, get_default_classifier

logger = logging.getLogger(__name__)


# HTML template for chapter previews
HTML_TEMPLATE = """<!DOCTYPE html>
<html lang="{lang}">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{title}</title>
    <style>
        body {{
            font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
            line-height: 1.6;
            max-width: 800px;
            margin: 0 auto;
            padding: 2rem;
            color: #333;
        }}
        h1, h2, h3, h4 {{ color: #2c3e50; }}
        .image-figure {{ margin: 1.5rem auto; text-align: center; }}
        .image-container img {{ max-width: 100%; height: auto; border-radius: 4px; }}
        figcaption {{ font-size: 0.9em; color: #666; margin-top: 0.5rem; }}
    </style>
</head>
<body>
    <article>
        <h1>{title}</h1>
        {content}
    </article>
</body>
</html>"""


class RenderService:
    """Service for rendering chapter content for display.

    Images are sized here rather than in the formatter: each <img> is
    classified by its alt text and given width, height and a
    data-size-class attribute.
    """

    def __init__(
        self,
        content_service: ContentService | None = None,
        classifier: ImageClassifier | None = None,
        config: type[InkbookConfig] = InkbookConfig,
    ) -> None:
        """Initialize the render service with its collaborators.

        Args:
            content_service: Formatter for raw chapter text.
            classifier: Image classifier used to size figures.
            config: Configuration holding markdown settings.
        """
        self._content_service = content_service or ContentService()
        self._classifier = classifier or get_default_classifier()
        self._config = config
        self._md = markdown.Markdown(
            extensions=list(config.MARKDOWN_EXTENSIONS),
            output_format="html",
        )

    def apply_image_sizes(self, fragment: str) -> str:
        """Set display dimensions on every image in an HTML fragment.

        Args:
            fragment: HTML as produced by the content formatter.

        Returns:
            The fragment with sized images.
        """
        if "<img" not in fragment:
            return fragment

        soup = BeautifulSoup(fragment, "html.parser")
        for img in soup.find_all("img"):
            size_class, width, height = self._classifier.classify_and_size(img.get("alt", ""))
            img["width"] = str(width)
            img["height"] = str(height)
            img["data-size-class"] = size_class.value.lower()
        return str(soup)

    def render_chapter(self, raw_text: object) -> str:
        """Format raw chapter text and size its images.

        Returns:
            The HTML fragment (body content only).
        """
        fragment = self._content_service.format_chapter_content(raw_text)
        return self.apply_image_sizes(fragment)

    def render_chapter_document(
        self,
        title: object,
        raw_text: object,
        lang: str = "en",
    ) -> str:
        """Render a chapter as a complete HTML document.

        Args:
            title: Chapter title, shown as the page heading.
            raw_text: Raw generated chapter text.
            lang: Document language code.

        Returns:
            Complete HTML document string.
        """
        return HTML_TEMPLATE.format(
            lang=html.escape(lang),
            title=html.escape(coerce_text(title).strip() or "Untitled chapter"),
            content=self.render_chapter(raw_text),
        )

    def render_markdown(self, markdown_text: object) -> str:
        """Render Markdown storage content to HTML for preview."""
        text = coerce_text(markdown_text)
        if not text.strip():
            return ""

        # Reset markdown processor state
        self._md.reset()
        return self._md.convert(text)
