"""
Per-element accumulation shared by the tree and streaming converters.

Both converters walk the document depth-first and drive the same three
steps for every element: ``open_child`` when it starts, ``add_text`` /
``attach`` for its content, and ``finalize`` when it ends. The tree
converter does this recursively, the streaming converter with an explicit
stack. Because every classification decision lives here, both converters
produce the same AST for the same document.

What an element becomes depends on its tag kind and on where it sits,
i.e. the role of its parent frame:

    parent collects blocks    p/h1-h6/pre collect inlines and become blocks,
                              inline tags join the parent's inline run,
                              unknown tags without block content too
    parent collects inlines   every element contributes inlines
    parent is ul/ol           only li children count
    parent is table/section   only sections and rows count
    parent is tr              only th/td count
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Sequence, Union

from ..ast import (
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
    inlines_are_blank,
)
from ..models.options import CodeBlockStyle, Options
from .node import render_end_tag, render_start_tag, render_text
from .protocols import ElementView
from .tags import INLINE_KINDS, VERBATIM_TAGS, VOID_ELEMENTS, TagKind, classify, heading_level
from .text import (
    clean_attribute,
    collapse_whitespace,
    escape_markdown,
    inlines_to_text,
    language_from_class,
    parse_start,
    trim_inlines,
)

logger = logging.getLogger(__name__)

# Attributes any finalization step reads.
CAPTURED_ATTRS = ("href", "src", "alt", "title", "start", "class")


class Role(str, Enum):
    """How a frame collects its content."""

    ROOT = "root"
    BLOCK = "block"
    INLINE_BLOCK = "inline_block"
    INLINE = "inline"
    LIST = "list"
    LIST_ITEM = "list_item"
    TABLE = "table"
    TABLE_SECTION = "table_section"
    TABLE_ROW = "table_row"
    RAW = "raw"
    DISCARD = "discard"


BLOCK_ROLES = frozenset({Role.ROOT, Role.BLOCK, Role.LIST_ITEM})
INLINE_ROLES = frozenset({Role.INLINE_BLOCK, Role.INLINE})


# --- table parts ----------------------------------------------------------


@dataclass
class TableCell:
    content: list[Inline]
    header: bool = False


@dataclass
class TableRow:
    cells: list[TableCell] = field(default_factory=list)

    def has_header_cell(self) -> bool:
        return any(cell.header for cell in self.cells)

    def contents(self) -> list[list[Inline]]:
        return [cell.content for cell in self.cells]


@dataclass
class TableSection:
    tag: str
    rows: list[TableRow] = field(default_factory=list)


@dataclass
class InlineRun:
    """Inline content of a transparent element, spliced into the parent's run."""

    inlines: list[Inline]


Result = Union[Block, Inline, InlineRun, ListItem, TableCell, TableRow, TableSection]


# --- role resolution ------------------------------------------------------


def role_for(kind: TagKind, parent: Role) -> Role:
    """
    Decide how an element of ``kind`` collects content under a ``parent`` frame.

    Void elements never get a frame, and children of raw frames stay raw,
    so neither is handled here.
    """
    if kind == TagKind.ELIDED or parent == Role.DISCARD:
        return Role.DISCARD

    if parent == Role.LIST:
        return Role.LIST_ITEM if kind == TagKind.LIST_ITEM else Role.DISCARD
    if parent == Role.TABLE:
        if kind == TagKind.TABLE_SECTION:
            return Role.TABLE_SECTION
        return Role.TABLE_ROW if kind == TagKind.TABLE_ROW else Role.DISCARD
    if parent == Role.TABLE_SECTION:
        return Role.TABLE_ROW if kind == TagKind.TABLE_ROW else Role.DISCARD
    if parent == Role.TABLE_ROW:
        return Role.INLINE_BLOCK if kind == TagKind.TABLE_CELL else Role.DISCARD

    if parent in INLINE_ROLES:
        return Role.INLINE

    if kind in INLINE_KINDS:
        return Role.INLINE
    if kind in (TagKind.PARAGRAPH, TagKind.HEADING, TagKind.CODE_BLOCK):
        return Role.INLINE_BLOCK
    if kind == TagKind.LIST:
        return Role.LIST
    if kind == TagKind.TABLE:
        return Role.TABLE
    # blockquote, containers, unknown tags and stray li/table parts
    return Role.BLOCK


def matches_filter(filters: Sequence[Any], element: ElementView, options: Options) -> bool:
    """
    Check an element against keep/remove filters.

    Filters are tag names or objects with a ``matches(element, options)``
    method (see ``markdownizer.rules.Filter``).
    """
    tag = element.tag_name
    for f in filters:
        if isinstance(f, str):
            if f.lower() == tag:
                return True
        elif f.matches(element, options):
            return True
    return False


# --- builders -------------------------------------------------------------


def make_paragraph(inlines: Sequence[Inline]) -> Optional[Paragraph]:
    content = trim_inlines(inlines)
    if inlines_are_blank(content):
        return None
    return Paragraph(content)


def make_link(inlines: list[Inline], attrs: dict[str, str]) -> Optional[Inline]:
    href = clean_attribute(attrs.get("href"))
    title = attrs.get("title") or None
    if not href and title is None:
        # not a hyperlink: keep the content if there is exactly one inline
        return inlines[0] if len(inlines) == 1 else None
    return Link(inlines, href, title)


def make_image(attrs: dict[str, str]) -> Optional[Image]:
    src = clean_attribute(attrs.get("src"))
    if not src:
        return None
    return Image(attrs.get("alt") or "", src, attrs.get("title") or None)


def merge_inlines(inlines: list[Inline]) -> Optional[Inline]:
    """Collapse an inline container that has no Markdown equivalent."""
    if not inlines:
        return None
    if len(inlines) == 1:
        return inlines[0]
    return Text(inlines_to_text(inlines))


def make_table(header: Optional[TableRow], rows: list[TableRow]) -> Optional[Table]:
    if header is None:
        if not rows:
            return None
        header, rows = rows[0], rows[1:]
    return Table(header.contents(), [row.contents() for row in rows])


def void_result(kind: TagKind, attrs: dict[str, str]) -> Optional[Result]:
    if kind == TagKind.LINE_BREAK:
        return LineBreak()
    if kind == TagKind.THEMATIC_BREAK:
        return ThematicBreak()
    if kind == TagKind.IMAGE:
        return make_image(attrs)
    return None


def capture_attrs(element: ElementView) -> dict[str, str]:
    attrs = {}
    for name in CAPTURED_ATTRS:
        value = element.attr(name)
        if value is not None:
            attrs[name] = value
    return attrs


# --- frames ---------------------------------------------------------------


class ElementFrame:
    """
    Partial content of one open element.

    Attributes:
        tag: Lowercase tag name ("" for the root frame)
        kind: Classification of the tag
        role: How this frame collects content
        verbatim: Text is taken as-is (inside pre or code)
    """

    def __init__(
        self,
        tag: str,
        kind: TagKind,
        role: Role,
        attrs: Optional[dict[str, str]] = None,
        verbatim: bool = False,
        raw: Optional[list[str]] = None,
        raw_block: bool = False,
    ):
        self.tag = tag
        self.kind = kind
        self.role = role
        self.attrs = attrs or {}
        self.verbatim = verbatim

        self.inlines: list[Inline] = []
        self.blocks: list[Block] = []
        self.items: list[ListItem] = []
        self.header: Optional[TableRow] = None
        self.rows: list[TableRow] = []
        self.cells: list[TableCell] = []
        self.code_class: Optional[str] = None

        # kept elements share one markup buffer with their descendants
        self.raw: list[str] = raw if raw is not None else []
        self.raw_root = False
        self.raw_block = raw_block

    @classmethod
    def root(cls) -> "ElementFrame":
        return cls("", TagKind.CONTAINER, Role.ROOT)

    def __repr__(self) -> str:
        return f"ElementFrame(<{self.tag}>, {self.role.value})"

    # -- opening ------------------------------------------------------------

    def open_child(
        self,
        element: ElementView,
        options: Options,
        keep: Sequence[Any] = (),
        remove: Sequence[Any] = (),
    ) -> Optional["ElementFrame"]:
        """
        Start a child element.

        Void elements are complete as soon as they open: their result is
        attached here and None is returned. Otherwise the new frame is
        returned and must later be finalized and attached to this frame.
        """
        tag = element.tag_name
        kind = classify(tag)
        void = tag in VOID_ELEMENTS

        if self.role == Role.RAW:
            self.raw.append(render_start_tag(tag, element.attributes()))
            if void:
                return None
            return ElementFrame(tag, kind, Role.RAW, raw=self.raw)

        if self.role == Role.DISCARD:
            return None if void else ElementFrame(tag, kind, Role.DISCARD)

        if keep and matches_filter(keep, element, options):
            raw_block = self.role in BLOCK_ROLES and kind not in INLINE_KINDS
            start = render_start_tag(tag, element.attributes())
            if void:
                self.attach(HtmlBlock(start) if raw_block else HtmlInline(start))
                return None
            frame = ElementFrame(tag, kind, Role.RAW, raw=[start], raw_block=raw_block)
            frame.raw_root = True
            return frame

        if remove and matches_filter(remove, element, options):
            return None if void else ElementFrame(tag, kind, Role.DISCARD)

        attrs = capture_attrs(element)
        if void:
            self.attach(void_result(kind, attrs))
            return None

        if kind == TagKind.CODE and self.kind == TagKind.CODE_BLOCK and self.code_class is None:
            self.code_class = attrs.get("class", "")

        return ElementFrame(
            tag,
            kind,
            role_for(kind, self.role),
            attrs,
            verbatim=self.verbatim or tag in VERBATIM_TAGS,
        )

    # -- content ------------------------------------------------------------

    def add_text(self, text: str) -> None:
        if self.role == Role.RAW:
            self.raw.append(render_text(text))
            return
        if self.role not in BLOCK_ROLES and self.role not in INLINE_ROLES:
            return
        if self.verbatim:
            if text:
                self.inlines.append(Text(text))
            return
        collapsed = collapse_whitespace(text)
        if collapsed:
            self.inlines.append(Text(escape_markdown(collapsed)))

    def attach(self, result: Optional[Result]) -> None:
        """Add a finished child result to this frame."""
        if result is None:
            return
        role = self.role

        if isinstance(result, InlineRun):
            if role in BLOCK_ROLES or role in INLINE_ROLES:
                self.inlines.extend(result.inlines)
            return

        if role in BLOCK_ROLES:
            if isinstance(result, Inline):
                self.inlines.append(result)
            elif isinstance(result, Document):
                for child in result.children:
                    self._add_block(child)
            elif isinstance(result, Block):
                self._add_block(result)
        elif role in INLINE_ROLES:
            if isinstance(result, Inline):
                self.inlines.append(result)
            elif isinstance(result, ThematicBreak) and not self.verbatim:
                self._break_inline_run(result)
            else:
                logger.debug(f"Dropping {type(result).__name__} inside <{self.tag}>")
        elif role == Role.LIST:
            if isinstance(result, ListItem):
                self.items.append(result)
        elif role == Role.TABLE:
            if isinstance(result, TableSection):
                self._add_section(result)
            elif isinstance(result, TableRow) and result.cells:
                if self.header is None and result.has_header_cell():
                    self.header = result
                else:
                    self.rows.append(result)
        elif role == Role.TABLE_SECTION:
            if isinstance(result, TableRow):
                self.rows.append(result)
        elif role == Role.TABLE_ROW:
            if isinstance(result, TableCell):
                self.cells.append(result)

    def _add_block(self, block: Block) -> None:
        self._flush_inlines()
        if not block.is_blank():
            self.blocks.append(block)

    def _break_inline_run(self, rule: ThematicBreak) -> None:
        # a paragraph splits around the rule; other inline runs keep a word gap
        if self.kind == TagKind.PARAGRAPH and self.role == Role.INLINE_BLOCK:
            self._flush_inlines()
            self.blocks.append(rule)
        else:
            self.inlines.append(Text(" "))

    def _flush_inlines(self) -> None:
        if self.inlines:
            paragraph = make_paragraph(self.inlines)
            self.inlines = []
            if paragraph is not None:
                self.blocks.append(paragraph)

    def _add_section(self, section: TableSection) -> None:
        rows = [row for row in section.rows if row.cells]
        if section.tag == "thead":
            if self.header is None and rows:
                self.header = rows[0]
        else:
            self.rows.extend(rows)

    # -- closing ------------------------------------------------------------

    def finalize(self, options: Options) -> Optional[Result]:
        """Turn the accumulated content into this element's result."""
        role = self.role

        if role == Role.RAW:
            if self.tag not in VOID_ELEMENTS:
                self.raw.append(render_end_tag(self.tag))
            if not self.raw_root:
                return None
            markup = "".join(self.raw)
            return HtmlBlock(markup) if self.raw_block else HtmlInline(markup)

        if role == Role.DISCARD:
            return None

        if role == Role.ROOT:
            return self.finish_document()

        if role == Role.BLOCK:
            if self.kind == TagKind.UNKNOWN and not self.blocks:
                return InlineRun(self.inlines) if self.inlines else None
            self._flush_inlines()
            if self.kind == TagKind.BLOCKQUOTE:
                return BlockQuote(self.blocks) if self.blocks else None
            if not self.blocks:
                return None
            if len(self.blocks) == 1:
                return self.blocks[0]
            return Document(self.blocks)

        if role == Role.LIST_ITEM:
            self._flush_inlines()
            # an empty item still takes a number
            return ListItem(self.blocks or [Paragraph([])])

        if role == Role.LIST:
            if not self.items:
                return None
            ordered = self.tag == "ol"
            start = parse_start(self.attrs.get("start")) if ordered else 1
            return List(ordered=ordered, start=start, items=self.items)

        if role == Role.TABLE:
            return make_table(self.header, self.rows)
        if role == Role.TABLE_SECTION:
            return TableSection(self.tag, self.rows)
        if role == Role.TABLE_ROW:
            return TableRow(self.cells)

        if role == Role.INLINE_BLOCK:
            return self._finalize_inline_block(options)
        return self._finalize_inline()

    def finish_document(self) -> Document:
        """Close the root frame: pending inlines become the last paragraph."""
        self._flush_inlines()
        return Document(self.blocks)

    def _finalize_inline_block(self, options: Options) -> Optional[Result]:
        kind = self.kind
        if self.blocks:
            # a paragraph split by thematic breaks
            self._flush_inlines()
            return self.blocks[0] if len(self.blocks) == 1 else Document(self.blocks)
        if kind == TagKind.TABLE_CELL:
            return TableCell(trim_inlines(self.inlines), header=self.tag == "th")
        if kind == TagKind.CODE_BLOCK:
            language = language_from_class(self.code_class) or language_from_class(
                self.attrs.get("class")
            )
            return CodeBlock(
                language=language,
                code=inlines_to_text(self.inlines),
                fenced=options.code_block_style == CodeBlockStyle.FENCED,
            )
        content = trim_inlines(self.inlines)
        if inlines_are_blank(content):
            return None
        if kind == TagKind.HEADING:
            return Heading(heading_level(self.tag), content)
        return Paragraph(content)

    def _finalize_inline(self) -> Optional[Inline]:
        kind = self.kind
        if kind == TagKind.STRONG:
            return Strong(self.inlines) if self.inlines else None
        if kind == TagKind.EMPHASIS:
            return Emphasis(self.inlines) if self.inlines else None
        if kind == TagKind.CODE:
            return Code(inlines_to_text(self.inlines))
        if kind == TagKind.LINK:
            return make_link(self.inlines, self.attrs)
        return merge_inlines(self.inlines)

