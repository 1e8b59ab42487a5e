"""Tests for the content domain models."""

from inkbook.domain import (
    ImageClassification,
    ImageSegment,
    ImageSizeClass,
    MarkupFormat,
    MarkupText,
    coerce_text,
)


class TestCoerceText:
    """Tests for boundary coercion of incoming content."""

    def test_none_is_empty(self):
        assert coerce_text(None) == ""

    def test_bytes_are_decoded(self):
        """UTF-8 bytes decode; invalid bytes are replaced, not raised."""
        assert coerce_text("café".encode("utf-8")) == "café"
        assert coerce_text(b"bad \xff byte") == "bad \ufffd byte"

    def test_line_endings_are_normalized(self):
        assert coerce_text("a\r\nb\rc") == "a\nb\nc"

    def test_other_objects_use_str(self):
        assert coerce_text(42) == "42"


class TestImageSegment:
    """Tests for image renderability."""

    def test_renderable(self):
        assert ImageSegment("cat", "http://a/b.png").is_renderable is True

    def test_placeholder_url(self):
        assert ImageSegment("cat", "undefined").is_renderable is False
        assert ImageSegment("cat", "http://cdn/undefined/x.png").is_renderable is False

    def test_blank_url(self):
        assert ImageSegment("cat", "").is_renderable is False
        assert ImageSegment("cat", "   ").is_renderable is False


class TestImageSizeClass:
    """Tests for size classes."""

    def test_sizes(self):
        """Every class maps to its fixed pixel size."""
        assert ImageSizeClass.STANDARD.size == (300, 225)
        assert ImageSizeClass.PORTRAIT.size == (225, 300)
        assert ImageSizeClass.LANDSCAPE.size == (400, 225)
        assert ImageSizeClass.DIAGRAM.size == (500, 350)
        assert ImageSizeClass.FLOWCHART.size == (550, 400)
        assert ImageSizeClass.ARCHITECTURE.size == (600, 450)
        assert ImageSizeClass.SEQUENCE.size == (500, 400)

    def test_is_diagram(self):
        assert ImageSizeClass.SEQUENCE.is_diagram is True
        assert ImageSizeClass.PORTRAIT.is_diagram is False

    def test_classification_for_class(self):
        result = ImageClassification.for_class(ImageSizeClass.ARCHITECTURE)
        assert result == (ImageSizeClass.ARCHITECTURE, 600, 450)
        assert result.width == 600


class TestMarkupText:
    """Tests for tagged markup text."""

    def test_constructors(self):
        assert MarkupText.html(None) == MarkupText("", MarkupFormat.HTML)
        assert MarkupText.markdown("a\r\nb").text == "a\nb"
