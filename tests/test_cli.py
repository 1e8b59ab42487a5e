"""Tests for the inkbook command-line interface."""

import pytest
from click.testing import CliRunner

from inkbook.cli import cli


@pytest.fixture
def runner():
    """Create a Click test runner."""
    return CliRunner()


class TestConversionCommands:
    """Tests for the conversion commands."""

    def test_to_markdown_from_stdin(self, runner):
        """HTML on stdin becomes Markdown on stdout."""
        result = runner.invoke(cli, ["to-markdown"], input="<h1>Title</h1><p><em>x</em></p>")
        assert result.exit_code == 0
        assert result.output == "# Title\n\n*x*\n"

    def test_to_html_from_file(self, runner, tmp_path):
        """Markdown read from a file becomes HTML."""
        source = tmp_path / "chapter.md"
        source.write_text("- a\n- b\n", encoding="utf-8")

        result = runner.invoke(cli, ["to-html", str(source)])

        assert result.exit_code == 0
        assert result.output == "<ul><li>a</li><li>b</li></ul>\n"

    def test_format_chapter(self, runner):
        """Raw chapter text becomes paragraphs."""
        result = runner.invoke(cli, ["format-chapter", "-"], input="Para one.\n\nPara two.")
        assert result.exit_code == 0
        assert result.output == "<p>Para one.</p>\n<p>Para two.</p>\n"

    def test_styled_html(self, runner):
        """Styled output carries presentation classes."""
        result = runner.invoke(cli, ["styled-html"], input="# Title")
        assert result.exit_code == 0
        assert 'class="text-3xl font-bold mb-5 text-gray-900"' in result.output

    def test_cleanup(self, runner):
        """Duplicate headings are removed."""
        result = runner.invoke(cli, ["cleanup"], input="<h1>A</h1><h1>B</h1>")
        assert result.exit_code == 0
        assert result.output == "<h1>A</h1>\n"

    def test_words(self, runner):
        """Words are counted."""
        result = runner.invoke(cli, ["words"], input="one two three")
        assert result.exit_code == 0
        assert result.output.strip() == "3"

    def test_missing_file(self, runner, tmp_path):
        """Unreadable input is reported as an error."""
        result = runner.invoke(cli, ["to-html", str(tmp_path / "missing.md")])
        assert result.exit_code != 0
        assert "Cannot read" in result.output


class TestPreviewCommand:
    """Tests for the preview command."""

    def test_preview_to_stdout(self, runner):
        """The preview document is printed."""
        result = runner.invoke(
            cli,
            ["preview", "--title", "One", "--seed", "3"],
            input="![Deploy flowchart](http://x/f.png)",
        )
        assert result.exit_code == 0
        assert "<title>One</title>" in result.output
        assert 'width="550"' in result.output

    def test_preview_to_file(self, runner, tmp_path):
        """--output writes the document to a file."""
        output = tmp_path / "preview.html"

        result = runner.invoke(cli, ["preview", "-o", str(output)], input="Hello.")

        assert result.exit_code == 0
        assert "Wrote preview" in result.output
        assert output.read_text(encoding="utf-8").startswith("<!DOCTYPE html>")


class TestClassifyCommand:
    """Tests for the classify command."""

    def test_classify_table(self, runner):
        """Classes and sizes are shown in a table."""
        result = runner.invoke(cli, ["classify", "system architecture flowchart"])
        assert result.exit_code == 0
        assert "FLOWCHART" in result.output
        assert "550" in result.output
        assert "400" in result.output

    def test_classify_requires_alt_text(self, runner):
        """At least one alt text is required."""
        result = runner.invoke(cli, ["classify"])
        assert result.exit_code != 0
