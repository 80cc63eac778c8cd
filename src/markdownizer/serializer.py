"""Render the Markdown document model to text."""

import logging
import re
from typing import Iterable, Optional, Sequence

from .ast import (
    Block,
    BlockQuote,
    Code,
    CodeBlock,
    Document,
    Emphasis,
    Heading,
    HtmlBlock,
    HtmlInline,
    Image,
    Inline,
    LineBreak,
    Link,
    List,
    ListItem,
    Paragraph,
    Strong,
    Table,
    Text,
    ThematicBreak,
    inlines_text_len,
)
from .models.options import CodeBlockStyle, HeadingStyle, Options

logger = logging.getLogger(__name__)

_EXTRA_NEWLINES_RE = re.compile(r"\n{3,}")
_BACKTICK_RUN_RE = re.compile(r"`+")
_LINE_END_RE = re.compile(r"[ \t]*\n[ \t]*")
_ALT_ESCAPE_RE = re.compile(r"([\[\]])")

MIN_COLUMN_WIDTH = 3


def fence_for(code: str, fence: str) -> str:
    """Lengthen ``fence`` past any run of its character that opens a line of ``code``."""
    char = fence[0]
    longest = 0
    for line in code.split("\n"):
        stripped = line.lstrip(" ")
        longest = max(longest, len(stripped) - len(stripped.lstrip(char)))
    if longest >= len(fence):
        return char * (longest + 1)
    return fence


def code_span(code: str) -> str:
    """
    Wrap inline code in a backtick run longer than any run inside it.

    A padding space is added on both sides when the code starts or ends
    with a backtick or a space.
    """
    if not code:
        return ""
    longest = max((len(run) for run in _BACKTICK_RUN_RE.findall(code)), default=0)
    ticks = "`" * (longest + 1)
    pad = " " if code[0] in "` " or code[-1] in "` " else ""
    return f"{ticks}{pad}{code}{pad}{ticks}"


def delimit(inner: str, delimiter: str) -> str:
    """Wrap text in emphasis delimiters; blank text renders as nothing."""
    core = inner.strip()
    if not core:
        return ""
    # delimiters must hug the text, so flanking whitespace moves outside
    leading = inner[: len(inner) - len(inner.lstrip())]
    trailing = inner[len(inner.rstrip()) :]
    return f"{leading}{delimiter}{core}{delimiter}{trailing}"


def join_inline(parts: Iterable[str]) -> str:
    """
    Concatenate rendered inline pieces.

    A space at the start of a piece is dropped when the text before it
    already ends in one, so whitespace moved out of emphasis delimiters is
    not doubled. Hard line breaks keep their trailing spaces.
    """
    output = ""
    for part in parts:
        if output.endswith(" ") and part.startswith(" ") and not part.lstrip(" ").startswith("\n"):
            part = part.lstrip(" ")
        output += part
    return output


def single_line(text: str) -> str:
    """Fold line breaks into single spaces, for ATX headings and table cells."""
    return _LINE_END_RE.sub(" ", text)


def table_cell_text(text: str) -> str:
    """Render cell content on one line with pipes escaped."""
    return single_line(text).strip().replace("|", "\\|")


def escape_alt(alt: str) -> str:
    return _ALT_ESCAPE_RE.sub(r"\\\1", alt)


def title_suffix(title: Optional[str]) -> str:
    if title is None:
        return ""
    escaped = title.replace('"', '\\"')
    return f' "{escaped}"'


class MarkdownSerializer:
    """
    Deterministic Markdown renderer.

    Every block renders followed by a blank line; the final output has runs
    of three or more newlines collapsed to two and no leading or trailing
    newlines.

    Example:
        serializer = MarkdownSerializer(Options(heading_style="atx"))
        serializer.serialize(Heading(3, [Text("Section")]))  # "### Section"
    """

    def __init__(self, options: Optional[Options] = None):
        self.options = options or Options()

    def serialize(self, block: Block) -> str:
        """
        Render a block tree.

        Args:
            block: Root block (usually a Document)

        Returns:
            Markdown text
        """
        output = self._block(block)
        output = _EXTRA_NEWLINES_RE.sub("\n\n", output)
        result = output.strip("\n")
        logger.debug(f"Serialized {type(block).__name__} to {len(result)} chars")
        return result

    # --- blocks -----------------------------------------------------------

    def _block(self, block: Block) -> str:
        if isinstance(block, Document):
            return self._blocks(block.children)
        if isinstance(block, Paragraph):
            text = self.inlines(block.content)
            return f"{text}\n\n" if text.strip() else ""
        if isinstance(block, Heading):
            return self._heading(block)
        if isinstance(block, BlockQuote):
            return self._blockquote(block)
        if isinstance(block, List):
            return self._list(block)
        if isinstance(block, CodeBlock):
            return self._code_block(block)
        if isinstance(block, ThematicBreak):
            return f"{self.options.hr}\n\n"
        if isinstance(block, Table):
            return self._table(block)
        if isinstance(block, HtmlBlock):
            return f"{block.raw}\n\n"
        raise TypeError(f"Not a block node: {block!r}")

    def _blocks(self, blocks: Sequence[Block]) -> str:
        return "".join(self._block(block) for block in blocks if not block.is_blank())

    def _heading(self, heading: Heading) -> str:
        text = self.inlines(heading.content)
        if not text.strip():
            return ""
        if self.options.heading_style == HeadingStyle.SETEXT and heading.level <= 2:
            underline = "=" if heading.level == 1 else "-"
            return f"{text}\n{underline * len(text)}\n\n"
        return f"{'#' * heading.level} {single_line(text).strip()}\n\n"

    def _blockquote(self, quote: BlockQuote) -> str:
        content = self._blocks(quote.children).rstrip()
        if not content:
            return ""
        lines = [f"> {line}" if line else ">" for line in content.split("\n")]
        return "\n".join(lines) + "\n\n"

    def _list(self, block: List) -> str:
        lines: list[str] = []
        for i, item in enumerate(block.items):
            if block.ordered:
                prefix = f"{block.start + i}.  "
            else:
                prefix = f"{self.options.bullet_list_marker}   "
            content = self._list_item(item).strip("\n").rstrip()
            first, *rest = content.split("\n")
            lines.append(prefix + first if first else prefix.rstrip())
            # continuation lines align under the first content column
            indent = " " * len(prefix)
            lines.extend(indent + line if line else "" for line in rest)
        return "\n".join(lines) + "\n\n"

    def _list_item(self, item: ListItem) -> str:
        parts: list[str] = []
        last = len(item.content) - 1
        for i, block in enumerate(item.content):
            if isinstance(block, Paragraph):
                parts.append(self.inlines(block.content))
                if i < last:
                    next_is_list = isinstance(item.content[i + 1], List)
                    parts.append("\n" if next_is_list else "\n\n")
            else:
                parts.append(self._block(block))
        return "".join(parts)

    def _code_block(self, block: CodeBlock) -> str:
        code = block.code[:-1] if block.code.endswith("\n") else block.code
        if block.fenced or self.options.code_block_style == CodeBlockStyle.FENCED:
            fence = fence_for(code, self.options.fence)
            return f"{fence}{block.language or ''}\n{code}\n{fence}\n\n"
        indented = "\n".join(f"    {line}" for line in code.split("\n"))
        return f"{indented}\n\n"

    def _table(self, table: Table) -> str:
        if not table.headers:
            return ""
        widths = [inlines_text_len(cell) for cell in table.headers]
        for row in table.rows:
            for i, cell in enumerate(row[: len(widths)]):
                widths[i] = max(widths[i], inlines_text_len(cell))
        widths = [max(width, MIN_COLUMN_WIDTH) for width in widths]

        lines = [self._table_row(table.headers, widths)]
        lines.append("|" + "".join(f" {'-' * width} |" for width in widths))
        lines.extend(self._table_row(row, widths) for row in table.rows)
        return "\n".join(lines) + "\n\n"

    def _table_row(self, cells: Sequence[Sequence[Inline]], widths: Sequence[int]) -> str:
        row = "|"
        for i, cell in enumerate(cells):
            text = table_cell_text(self.inlines(cell))
            width = widths[i] if i < len(widths) else MIN_COLUMN_WIDTH
            row += f" {text}{' ' * max(width - len(text), 0)} |"
        return row

    # --- inlines ----------------------------------------------------------

    def inlines(self, inlines: Sequence[Inline]) -> str:
        return join_inline(self.inline(inline) for inline in inlines)

    def inline(self, inline: Inline) -> str:
        if isinstance(inline, Text):
            return inline.text
        if isinstance(inline, Strong):
            return delimit(self.inlines(inline.content), self.options.strong_delimiter)
        if isinstance(inline, Emphasis):
            return delimit(self.inlines(inline.content), self.options.em_delimiter)
        if isinstance(inline, Code):
            return code_span(inline.code)
        if isinstance(inline, Link):
            text = self.inlines(inline.content)
            return f"[{text}]({inline.url}{title_suffix(inline.title)})"
        if isinstance(inline, Image):
            return f"![{escape_alt(inline.alt)}]({inline.url}{title_suffix(inline.title)})"
        if isinstance(inline, LineBreak):
            return "  \n"
        if isinstance(inline, HtmlInline):
            return inline.raw
        raise TypeError(f"Not an inline node: {inline!r}")


def serialize(block: Block, options: Optional[Options] = None) -> str:
    """Render a block tree with a one-off ``MarkdownSerializer``."""
    return MarkdownSerializer(options).serialize(block)
