"""Command-line interface for inkbook.

Provides a Click-based CLI over the content transformation services.
Every command reads SOURCE (a file path, or '-' / nothing for stdin)
and writes its result to stdout.
"""

import logging
import random
import sys
from importlib.metadata import version as get_version
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from .config import InkbookConfig
from .domain import coerce_text
from .services import (
    ContentService,
    ImageClassifier,
    MarkupConverter,
    RenderService,
    StylingService,
)

# Get version from package metadata
try:
    __version__ = get_version("inkbook")
except Exception:
    __version__ = "0.0.0"  # Fallback version


# Context keys
CONVERTER_KEY = "converter"
CONTENT_SERVICE_KEY = "content_service"
STYLING_SERVICE_KEY = "styling_service"

SOURCE_ARGUMENT = click.argument(
    "source",
    type=click.Path(dir_okay=False, allow_dash=True),
    default="-",
    required=False,
)


def read_source(source: str) -> str:
    """Read command input from a file path or stdin.

    Args:
        source: A file path, or '-' for stdin.

    Returns:
        The decoded, newline-normalized text.
    """
    if source == "-":
        return coerce_text(click.get_binary_stream("stdin").read())
    try:
        return coerce_text(Path(source).read_bytes())
    except OSError as e:
        raise click.ClickException(f"Cannot read {source}: {e.strerror or e}")


def _configure_logging(verbose: bool) -> None:
    level = "DEBUG" if verbose else InkbookConfig.get_log_level()
    logging.basicConfig(
        level=level,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Log debug output to stderr.")
@click.version_option(version=__version__, prog_name="inkbook")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """inkbook - Convert and format book chapter content.

    Converts between editor HTML and Markdown, formats generated
    chapter text into HTML, and classifies chapter images.
    """
    _configure_logging(verbose)
    ctx.ensure_object(dict)
    converter = MarkupConverter()
    ctx.obj[CONVERTER_KEY] = converter
    ctx.obj[CONTENT_SERVICE_KEY] = ContentService()
    ctx.obj[STYLING_SERVICE_KEY] = StylingService(converter)


@cli.command("to-markdown")
@SOURCE_ARGUMENT
@click.pass_context
def to_markdown(ctx: click.Context, source: str) -> None:
    """Convert editor HTML to Markdown."""
    click.echo(ctx.obj[CONVERTER_KEY].html_to_markdown(read_source(source)))


@cli.command("to-html")
@SOURCE_ARGUMENT
@click.pass_context
def to_html(ctx: click.Context, source: str) -> None:
    """Convert Markdown to editor HTML."""
    click.echo(ctx.obj[CONVERTER_KEY].markdown_to_html(read_source(source)))


@cli.command("format-chapter")
@SOURCE_ARGUMENT
@click.pass_context
def format_chapter(ctx: click.Context, source: str) -> None:
    """Format raw generated chapter text as an HTML fragment.

    Generator artifacts are stripped and images with a missing or
    placeholder URL are dropped.
    """
    click.echo(ctx.obj[CONTENT_SERVICE_KEY].format_chapter_content(read_source(source)))


@cli.command("styled-html")
@SOURCE_ARGUMENT
@click.pass_context
def styled_html(ctx: click.Context, source: str) -> None:
    """Convert Markdown to HTML with preview style classes."""
    click.echo(ctx.obj[STYLING_SERVICE_KEY].styled_markdown_to_html(read_source(source)))


@cli.command()
@SOURCE_ARGUMENT
@click.pass_context
def cleanup(ctx: click.Context, source: str) -> None:
    """Clean up editor HTML (font spans, empty elements, extra h1s)."""
    click.echo(ctx.obj[STYLING_SERVICE_KEY].cleanup_html_content(read_source(source)))


@cli.command()
@SOURCE_ARGUMENT
@click.pass_context
def words(ctx: click.Context, source: str) -> None:
    """Count the words in SOURCE."""
    click.echo(ctx.obj[STYLING_SERVICE_KEY].count_words(read_source(source)))


@cli.command()
@SOURCE_ARGUMENT
@click.option("--title", "-t", default="Untitled chapter", help="Chapter title.")
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False),
    help="Output file for the HTML document (default: stdout).",
)
@click.option("--seed", type=int, default=None, help="Seed for photo image sizes.")
@click.pass_context
def preview(
    ctx: click.Context,
    source: str,
    title: str,
    output: str | None,
    seed: int | None,
) -> None:
    """Render raw chapter text as a standalone HTML preview.

    Figure images are sized from their alt text.
    """
    classifier = ImageClassifier(rng=random.Random(seed)) if seed is not None else None
    render_service = RenderService(ctx.obj[CONTENT_SERVICE_KEY], classifier)
    document = render_service.render_chapter_document(title, read_source(source))

    if output:
        try:
            Path(output).write_text(document, encoding="utf-8")
        except OSError as e:
            raise click.ClickException(f"Cannot write {output}: {e.strerror or e}")
        click.echo(f"Wrote preview to {output}")
    else:
        click.echo(document)


@cli.command()
@click.argument("alt_texts", nargs=-1, required=True)
@click.option("--seed", type=int, default=None, help="Seed for photo image sizes.")
def classify(alt_texts: tuple[str, ...], seed: int | None) -> None:
    """Classify images by ALT_TEXTS and show their display sizes."""
    rng = random.Random(seed) if seed is not None else None
    classifier = ImageClassifier(rng=rng)

    table = Table(title="Image sizes")
    table.add_column("Alt text")
    table.add_column("Class", style="bold")
    table.add_column("Width", justify="right")
    table.add_column("Height", justify="right")

    for alt_text in alt_texts:
        size_class, width, height = classifier.classify_and_size(alt_text)
        table.add_row(alt_text, size_class.value, str(width), str(height))

    Console().print(table)


def main() -> None:
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
