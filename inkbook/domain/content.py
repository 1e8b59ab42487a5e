"""Domain models for chapter content.

Provides tagged values for markup text, chapter segments, and image
size classification. All values are transient: created, transformed,
and discarded within a single render or save.
"""

from dataclasses import dataclass
from enum import Enum
from typing import NamedTuple, Union

from ..config import InkbookConfig


class MarkupFormat(str, Enum):
    """Representation a piece of markup text is written in."""

    HTML = "html"
    MARKDOWN = "markdown"


@dataclass(frozen=True)
class MarkupText:
    """A string tagged with its markup format.

    The text is never validated as well-formed.
    """

    text: str
    format: MarkupFormat

    @classmethod
    def html(cls, value: object) -> "MarkupText":
        return cls(coerce_text(value), MarkupFormat.HTML)

    @classmethod
    def markdown(cls, value: object) -> "MarkupText":
        return cls(coerce_text(value), MarkupFormat.MARKDOWN)


@dataclass(frozen=True)
class TextSegment:
    """A run of chapter prose, to be split into paragraphs."""

    content: str


@dataclass(frozen=True)
class ImageSegment:
    """An image reference extracted from ![alt](url) syntax."""

    alt_text: str
    url: str

    @property
    def is_renderable(self) -> bool:
        """Check whether the URL is present and not a placeholder."""
        url = self.url.strip()
        return bool(url) and "undefined" not in url


ChapterSegment = Union[TextSegment, ImageSegment]


class ImageSizeClass(str, Enum):
    """Semantic size category of an embedded image."""

    STANDARD = "STANDARD"
    PORTRAIT = "PORTRAIT"
    LANDSCAPE = "LANDSCAPE"
    DIAGRAM = "DIAGRAM"
    FLOWCHART = "FLOWCHART"
    ARCHITECTURE = "ARCHITECTURE"
    SEQUENCE = "SEQUENCE"

    @property
    def size(self) -> tuple[int, int]:
        """Display size as (width, height) in pixels."""
        return InkbookConfig.get_image_size(self.value)

    @property
    def is_diagram(self) -> bool:
        return self.value not in InkbookConfig.PHOTO_SIZE_CLASSES


class ImageClassification(NamedTuple):
    """Result of classifying an image: category plus display size."""

    size_class: ImageSizeClass
    width: int
    height: int

    @classmethod
    def for_class(cls, size_class: ImageSizeClass) -> "ImageClassification":
        width, height = size_class.size
        return cls(size_class, width, height)


def coerce_text(value: object) -> str:
    """Convert any incoming content value to a newline-normalized string.

    None becomes the empty string, bytes are decoded as UTF-8 with
    replacement characters, and anything else goes through str().
    """
    if value is None:
        return ""
    if isinstance(value, bytes):
        text = value.decode("utf-8", errors="replace")
    elif isinstance(value, str):
        text = value
    else:
        text = str(value)
    return text.replace("\r\n", "\n").replace("\r", "\n")
