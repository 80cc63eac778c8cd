"""Tag classification table shared by the tree and streaming converters."""

from enum import Enum


class TagKind(str, Enum):
    """What an element means for the Markdown document model."""

    PARAGRAPH = "paragraph"
    HEADING = "heading"
    BLOCKQUOTE = "blockquote"
    LIST = "list"
    LIST_ITEM = "list_item"
    CODE_BLOCK = "code_block"
    THEMATIC_BREAK = "thematic_break"
    TABLE = "table"
    TABLE_SECTION = "table_section"
    TABLE_ROW = "table_row"
    TABLE_CELL = "table_cell"
    CONTAINER = "container"
    STRONG = "strong"
    EMPHASIS = "emphasis"
    CODE = "code"
    LINK = "link"
    IMAGE = "image"
    LINE_BREAK = "line_break"
    INLINE_CONTAINER = "inline_container"
    ELIDED = "elided"
    UNKNOWN = "unknown"


TAG_KINDS: dict[str, TagKind] = {
    "p": TagKind.PARAGRAPH,
    **{f"h{level}": TagKind.HEADING for level in range(1, 7)},
    "blockquote": TagKind.BLOCKQUOTE,
    "ul": TagKind.LIST,
    "ol": TagKind.LIST,
    "li": TagKind.LIST_ITEM,
    "pre": TagKind.CODE_BLOCK,
    "hr": TagKind.THEMATIC_BREAK,
    "table": TagKind.TABLE,
    "thead": TagKind.TABLE_SECTION,
    "tbody": TagKind.TABLE_SECTION,
    "tfoot": TagKind.TABLE_SECTION,
    "tr": TagKind.TABLE_ROW,
    "th": TagKind.TABLE_CELL,
    "td": TagKind.TABLE_CELL,
    **{
        tag: TagKind.CONTAINER
        for tag in (
            "div",
            "section",
            "article",
            "main",
            "aside",
            "header",
            "footer",
            "nav",
            "figure",
            "figcaption",
            "address",
            "form",
            "fieldset",
        )
    },
    "strong": TagKind.STRONG,
    "b": TagKind.STRONG,
    "em": TagKind.EMPHASIS,
    "i": TagKind.EMPHASIS,
    "code": TagKind.CODE,
    "a": TagKind.LINK,
    "img": TagKind.IMAGE,
    "br": TagKind.LINE_BREAK,
    **{
        tag: TagKind.INLINE_CONTAINER
        for tag in ("span", "small", "mark", "abbr", "cite", "q", "sub", "sup", "time")
    },
    "script": TagKind.ELIDED,
    "style": TagKind.ELIDED,
    "noscript": TagKind.ELIDED,
    "template": TagKind.ELIDED,
    "head": TagKind.ELIDED,
}

# Elements that produce inline nodes wherever they appear.
INLINE_KINDS = frozenset(
    {
        TagKind.STRONG,
        TagKind.EMPHASIS,
        TagKind.CODE,
        TagKind.LINK,
        TagKind.IMAGE,
        TagKind.LINE_BREAK,
        TagKind.INLINE_CONTAINER,
    }
)

# Elements that never have content or a close tag.
VOID_ELEMENTS = frozenset(
    {
        "area",
        "base",
        "br",
        "col",
        "command",
        "embed",
        "hr",
        "img",
        "input",
        "keygen",
        "link",
        "meta",
        "param",
        "source",
        "track",
        "wbr",
    }
)

# Element content whose text is taken verbatim.
VERBATIM_TAGS = frozenset({"pre", "code"})


def classify(tag: str) -> TagKind:
    """Look up the kind of a tag name (case-insensitive)."""
    return TAG_KINDS.get(tag.lower(), TagKind.UNKNOWN)


def heading_level(tag: str) -> int:
    return int(tag[1])


def is_block_tag(tag: str) -> bool:
    """Whether a tag is a known block-level element."""
    kind = classify(tag)
    return kind not in INLINE_KINDS and kind not in (TagKind.UNKNOWN, TagKind.ELIDED)


def elided_tags() -> list[str]:
    return sorted(tag for tag, kind in TAG_KINDS.items() if kind == TagKind.ELIDED)
