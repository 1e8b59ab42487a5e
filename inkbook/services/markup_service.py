"""Markup conversion service.

Bridges the rich-text editor's HTML and the Markdown storage format.
Only a small construct set survives a round trip (headings, emphasis,
lists, links, paragraphs); every other tag is stripped down to its
text. Neither direction raises for any input.
"""

import html
import logging
import re

from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.element import Comment, Declaration, Doctype, ProcessingInstruction

from ..config import InkbookConfig
from ..domain import MarkupFormat, MarkupText, coerce_text

logger = logging.getLogger(__name__)


HEADING_LEVELS = {"h1": 1, "h2": 2, "h3": 3, "h4": 4}

# Inline tags and the Markdown marker wrapped around their text
INLINE_MARKERS = {
    "strong": "**",
    "b": "**",
    "em": "*",
    "i": "*",
    "u": "_",
    "s": "~~",
    "strike": "~~",
    "del": "~~",
}

# Elements whose content never reaches the output
DROPPED_TAGS = {"script", "style", "template", "head"}

# Unsupported tags that still separate their text from neighbours
SEPARATING_TAGS = {
    "div", "blockquote", "section", "article", "header", "footer",
    "figure", "figcaption", "table", "tr", "pre", "h5", "h6",
}

# Containers where whitespace-only text is layout, not content
CONTAINER_TAGS = {"[document]", "html", "body", "ul", "ol", "table", "tbody", "thead", "tr"}

# Wrapper tags that are stripped routinely and not worth a debug line
PLAIN_TAGS = {"span", "html", "body", "tbody", "thead", "td", "th", "li", "sup", "sub", "code"}

SKIPPED_STRINGS = (Comment, Declaration, Doctype, ProcessingInstruction)

HEADING_RE = re.compile(r"^(#{1,4}) (.*)$")
BULLET_RE = re.compile(r"^([ \t]*)- (.*)$")
ORDERED_RE = re.compile(r"^([ \t]*)\d+[.)] (.*)$")
RULE_RE = re.compile(r"^\s*(?:-{3,}|\*{3,})\s*$")
BLOCK_LINE_RE = re.compile(
    r"^\s*<(?:%s)\b" % "|".join(InkbookConfig.BLOCK_TAGS), re.IGNORECASE
)
LIST_LINE_RE = re.compile(r"^\s+(?:-|\d+\.) ")

# [text](href), but not the image form ![alt](src)
LINK_RE = re.compile(r"(?<!!)\[([^\]]*)\]\(([^)\s]*)\)")
LINK_TOKEN_RE = re.compile(r"\x00(\d+)\x00")

BOLD_RE = re.compile(r"\*\*(?=\S)(.+?)(?<=\S)\*\*(?!\*)")
STRIKE_RE = re.compile(r"~~(?=\S)(.+?)(?<=\S)~~")
ITALIC_RE = re.compile(r"(?<!\*)\*(?=\S)(.+?)(?<=\S)\*(?!\*)")
UNDERLINE_RE = re.compile(r"(?<!\w)_(?=\S)(.+?)(?<=\S)_(?!\w)")
# Literal <u> tags, the form used when an underline touches a word
UNDERLINE_TAG_RE = re.compile(r"&lt;u&gt;(.+?)&lt;/u&gt;")

# Placeholder around underlined text until its neighbours are known
UNDERLINE_MARK = "\x01"
UNDERLINE_MARK_RE = re.compile(r"\x01(.+?)\x01", re.DOTALL)

# Indentation of one nesting level in list lines
LIST_INDENT = 2


class _BlockWriter:
    """Accumulates HTML blocks while tracking the stack of open lists.

    Each open list is a ``[tag, items]`` pair; a nested list is closed
    into the last item of the list below it.
    """

    def __init__(self) -> None:
        self.blocks: list[str] = []
        self._lists: list[list] = []

    def add_item(self, list_tag: str, item_html: str, depth: int = 0) -> None:
        # A list can only open one level below the innermost open list
        depth = min(depth, len(self._lists))
        while len(self._lists) > depth + 1:
            self._close_innermost()
        if len(self._lists) == depth + 1 and self._lists[-1][0] != list_tag:
            self._close_innermost()
        if len(self._lists) == depth:
            self._lists.append([list_tag, []])
        self._lists[-1][1].append(item_html)

    def add_block(self, block_html: str) -> None:
        self.close_list()
        self.blocks.append(block_html)

    def close_list(self) -> None:
        while self._lists:
            self._close_innermost()

    def _close_innermost(self) -> None:
        list_tag, items = self._lists.pop()
        list_html = "<{0}>{1}</{0}>".format(
            list_tag, "".join(f"<li>{item}</li>" for item in items)
        )
        if self._lists:
            self._lists[-1][1][-1] += list_html
        else:
            self.blocks.append(list_html)

    def render(self) -> str:
        self.close_list()
        return "\n".join(self.blocks)


class MarkupConverter:
    """Converts between editor HTML and Markdown.

    Recognized constructs:
    - Headings (h1-h4)
    - Bold, italic, underline, and strikethrough spans
    - Unordered and ordered lists
    - Links
    - Paragraphs and horizontal rules
    """

    def convert(self, markup: MarkupText) -> MarkupText:
        """Convert tagged markup into the other representation."""
        if markup.format is MarkupFormat.HTML:
            return MarkupText.markdown(self.html_to_markdown(markup.text))
        return MarkupText.html(self.markdown_to_html(markup.text))

    # -- HTML to Markdown -------------------------------------------------

    def html_to_markdown(self, html_text: object) -> str:
        """Convert editor HTML to Markdown.

        Unknown tags are removed and their text kept. Ordered lists are
        renumbered from 1 within each list. Paragraph lines that would
        read back as a heading, list item, rule or HTML block are
        backslash-escaped. Markup nested too deeply to walk is reduced
        to its text.

        Args:
            html_text: The HTML emitted by the editor.

        Returns:
            Trimmed Markdown text.
        """
        html_text = coerce_text(html_text)
        if not html_text.strip():
            return ""

        soup = BeautifulSoup(html_text, "html.parser")
        try:
            markdown_text = self._render_children(soup)
        except RecursionError:
            logger.warning("HTML is nested too deeply to convert; keeping its text only")
            return _collapse(soup.get_text(" ").replace(UNDERLINE_MARK, ""))

        markdown_text = UNDERLINE_MARK_RE.sub(_resolve_underline, markdown_text)
        return self._tidy(markdown_text)

    def _render_children(self, node: Tag) -> str:
        return "".join(self._render_node(child) for child in node.children)

    def _render_node(self, node) -> str:
        if isinstance(node, NavigableString):
            if isinstance(node, SKIPPED_STRINGS):
                return ""
            text = str(node).replace(UNDERLINE_MARK, "")
            if not text.strip() and node.parent is not None and node.parent.name in CONTAINER_TAGS:
                return ""
            return re.sub(r"\s+", " ", text)

        if not isinstance(node, Tag):
            return ""

        name = node.name
        if name in DROPPED_TAGS:
            return ""
        if name in HEADING_LEVELS:
            text = _collapse(self._render_children(node))
            if not text:
                return ""
            return f"\n\n{'#' * HEADING_LEVELS[name]} {text}\n\n"
        if name in INLINE_MARKERS:
            return self._render_span(node, INLINE_MARKERS[name])
        if name in ("ul", "ol"):
            lines = self._list_lines(node, depth=0)
            return "\n\n" + "\n".join(lines) + "\n\n" if lines else ""
        if name == "a":
            return self._render_link(node)
        if name == "p":
            text = self._paragraph_text(node)
            return f"\n\n{text}\n\n" if text else ""
        if name == "br":
            return "\n"
        if name == "hr":
            return "\n\n---\n\n"
        if name in SEPARATING_TAGS:
            return f"\n\n{self._render_children(node)}\n\n"
        if name not in PLAIN_TAGS:
            logger.debug("Stripping unsupported <%s> tag", name)
        return self._render_children(node)

    def _render_span(self, node: Tag, marker: str) -> str:
        inner = self._render_children(node)
        if marker == "_":
            # Underline is resolved once its neighbours are known
            marker = UNDERLINE_MARK
            inner = inner.replace(UNDERLINE_MARK, "")
        core = inner.strip()
        if not core:
            return " " if inner else ""
        # Keep surrounding whitespace outside the markers: "**the** heart"
        lead = inner[: len(inner) - len(inner.lstrip())]
        trail = inner[len(inner.rstrip()):]
        return f"{lead}{marker}{core}{marker}{trail}"

    def _render_link(self, node: Tag) -> str:
        text = _collapse(self._render_children(node))
        href = node.get("href")
        if not href:
            return text
        if not text:
            return ""
        href = href.strip().replace(" ", "%20").replace("(", "%28").replace(")", "%29")
        return f"[{text}]({href})"

    def _paragraph_text(self, node: Tag) -> str:
        lines = (_collapse(line) for line in self._render_children(node).split("\n"))
        return "\n".join(_escape_block_syntax(line) for line in lines).strip()

    def _list_lines(self, node: Tag, depth: int) -> list[str]:
        ordered = node.name == "ol"
        number = 0
        lines: list[str] = []

        for item in node.find_all("li", recursive=False):
            nested = [
                child
                for child in item.children
                if isinstance(child, Tag) and child.name in ("ul", "ol")
            ]
            nested_ids = {id(child) for child in nested}
            text = _collapse(
                "".join(
                    self._render_node(child)
                    for child in item.children
                    if id(child) not in nested_ids
                )
            )
            if text:
                # Quill 2 renders every list as <ol> and tags items instead
                kind = item.get("data-list")
                if kind == "ordered" or (kind is None and ordered):
                    number += 1
                    prefix = f"{number}."
                else:
                    prefix = "-"
                lines.append(f"{' ' * LIST_INDENT * depth}{prefix} {text}")
            for sublist in nested:
                lines.extend(self._list_lines(sublist, depth + 1))

        return lines

    def _tidy(self, markdown_text: str) -> str:
        lines = []
        for line in markdown_text.split("\n"):
            line = line.rstrip()
            if not LIST_LINE_RE.match(line):
                line = line.lstrip()
            lines.append(line)
        text = re.sub(r"\n{3,}", "\n\n", "\n".join(lines))
        return text.strip()

    # -- Markdown to HTML -------------------------------------------------

    def markdown_to_html(self, markdown_text: object) -> str:
        """Convert Markdown to editor HTML.

        Consecutive list lines share one list element, and list lines
        indented by two spaces per level nest inside the item above them.
        Lines that already start with a block-level tag are passed through
        untouched; a backslash before block syntax keeps the line a
        paragraph. Any other non-blank line becomes a paragraph.

        Args:
            markdown_text: The Markdown to convert.

        Returns:
            HTML blocks separated by newlines.
        """
        markdown_text = coerce_text(markdown_text)
        writer = _BlockWriter()

        for line in markdown_text.split("\n"):
            if not line.strip():
                writer.close_list()
                continue

            if line.startswith("\\") and _is_block_syntax(line[1:]):
                writer.add_block(f"<p>{self.render_inline(line[1:].strip())}</p>")
                continue

            if RULE_RE.match(line):
                writer.add_block("<hr>")
                continue

            match = BULLET_RE.match(line) or ORDERED_RE.match(line)
            if match:
                list_tag = "ul" if match.re is BULLET_RE else "ol"
                depth = len(match.group(1).expandtabs(4)) // LIST_INDENT
                writer.add_item(list_tag, self.render_inline(match.group(2).strip()), depth)
                continue

            match = HEADING_RE.match(line)
            if match:
                level = len(match.group(1))
                writer.add_block(f"<h{level}>{self.render_inline(match.group(2).strip())}</h{level}>")
                continue

            if BLOCK_LINE_RE.match(line):
                writer.add_block(line.strip())
                continue

            writer.add_block(f"<p>{self.render_inline(line.strip())}</p>")

        return writer.render()

    def render_inline(self, text: str) -> str:
        """Render inline Markdown spans (links and emphasis) as HTML.

        Links are swapped for placeholder tokens while emphasis is
        applied, so underscores and asterisks inside URLs are untouched.
        """
        links: list[str] = []

        def protect_link(match: re.Match) -> str:
            label = self._render_emphasis(html.escape(match.group(1), quote=False))
            href = html.escape(match.group(2))
            links.append(f'<a href="{href}">{label}</a>')
            return f"\x00{len(links) - 1}\x00"

        def restore_link(match: re.Match) -> str:
            return links[int(match.group(1))]

        text = LINK_RE.sub(protect_link, text.replace("\x00", ""))
        text = self._render_emphasis(html.escape(text, quote=False))
        return LINK_TOKEN_RE.sub(restore_link, text)

    def _render_emphasis(self, text: str) -> str:
        text = BOLD_RE.sub(r"<strong>\1</strong>", text)
        text = STRIKE_RE.sub(r"<s>\1</s>", text)
        text = ITALIC_RE.sub(r"<em>\1</em>", text)
        text = UNDERLINE_RE.sub(r"<u>\1</u>", text)
        return UNDERLINE_TAG_RE.sub(r"<u>\1</u>", text)


def _collapse(text: str) -> str:
    """Collapse whitespace runs to single spaces and trim."""
    return " ".join(text.split())


def _is_block_syntax(line: str) -> bool:
    """Whether a line would be read back as something other than text."""
    return line.startswith("\\") or any(
        pattern.match(line)
        for pattern in (HEADING_RE, BULLET_RE, ORDERED_RE, RULE_RE, BLOCK_LINE_RE)
    )


def _escape_block_syntax(line: str) -> str:
    return "\\" + line if _is_block_syntax(line) else line


def _resolve_underline(match: re.Match) -> str:
    # _x_ only reads back as underline between non-word characters
    text = match.string
    before = text[match.start() - 1] if match.start() > 0 else ""
    after = text[match.end()] if match.end() < len(text) else ""
    if any(char == UNDERLINE_MARK or char.isalnum() or char == "_" for char in before + after):
        return f"<u>{match.group(1)}</u>"
    return f"_{match.group(1)}_"


_default_converter = MarkupConverter()


def html_to_markdown(html_text: object) -> str:
    """Convert editor HTML to Markdown using the default converter."""
    return _default_converter.html_to_markdown(html_text)


def markdown_to_html(markdown_text: object) -> str:
    """Convert Markdown to editor HTML using the default converter."""
    return _default_converter.markdown_to_html(markdown_text)
