"""Tests for the render service (chapter previews)."""

import random
from unittest.mock import Mock

import pytest

from inkbook.services.image_service import ImageClassifier
from inkbook.services.render_service import RenderService


@pytest.fixture
def render_service():
    """Create a RenderService with a seeded classifier."""
    return RenderService(classifier=ImageClassifier(rng=random.Random(5)))


class TestImageSizing:
    """Tests for sizing figure images."""

    def test_flowchart_size(self, render_service):
        """Flowchart images get the flowchart dimensions."""
        html = render_service.render_chapter("![Login flowchart](http://x/f.png)")
        assert 'width="550"' in html
        assert 'height="400"' in html
        assert 'data-size-class="flowchart"' in html

    def test_photo_size_comes_from_generator(self):
        """Photos are sized by the classifier's generator."""
        rng = Mock()
        rng.choice.return_value = "LANDSCAPE"
        service = RenderService(classifier=ImageClassifier(rng=rng))

        html = service.render_chapter("Text.\n\n![A quiet beach](http://x/b.png)")

        assert html.startswith("<p>Text.</p>")
        assert 'width="400"' in html
        assert 'height="225"' in html
        assert 'data-size-class="landscape"' in html

    def test_fragment_without_images_is_unchanged(self, render_service):
        """Fragments with no images pass through."""
        fragment = "<p>Para one.</p>\n<p>Para two.</p>"
        assert render_service.apply_image_sizes(fragment) == fragment

    def test_dropped_images_are_not_sized(self, render_service):
        """Placeholder images never reach the sizing step."""
        assert render_service.render_chapter("![x](undefined)") == ""


class TestDocuments:
    """Tests for full preview documents."""

    def test_document(self, render_service):
        """The document wraps the chapter with an escaped title."""
        html = render_service.render_chapter_document("Chapter & Verse", "Hello.")
        assert html.startswith("<!DOCTYPE html>")
        assert "<title>Chapter &amp; Verse</title>" in html
        assert "<p>Hello.</p>" in html

    def test_untitled_document(self, render_service):
        """A blank title falls back to a placeholder."""
        html = render_service.render_chapter_document("", "")
        assert "<title>Untitled chapter</title>" in html

    def test_language(self, render_service):
        """The lang attribute is set from the argument."""
        html = render_service.render_chapter_document("T", "x", lang="fr")
        assert '<html lang="fr">' in html


class TestMarkdownRendering:
    """Tests for rendering Markdown storage content."""

    def test_render_markdown(self, render_service):
        """Headings and tables render through the markdown library."""
        html = render_service.render_markdown("# Hi\n\n| a | b |\n|---|---|\n| 1 | 2 |\n")
        assert "<h1>Hi</h1>" in html
        assert "<table>" in html

    def test_repeated_renders_are_independent(self, render_service):
        """Processor state is reset between renders."""
        render_service.render_markdown("Text[^1]\n\n[^1]: A note.")
        html = render_service.render_markdown("Plain.")
        assert html == "<p>Plain.</p>"

    def test_empty(self, render_service):
        """Empty input gives an empty string."""
        assert render_service.render_markdown("") == ""
