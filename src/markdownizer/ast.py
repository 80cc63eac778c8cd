"""Markdown document model.

The model is a strict tree: every node owns its children and nothing points
back up. Converters build it bottom-up once per conversion and the serializer
reads it without mutating it.

Example:
    doc = Document([
        Heading(1, [Text("Title")]),
        Paragraph([Text("Hello "), Strong([Text("World")])]),
    ])
"""

from dataclasses import dataclass, field
from typing import Optional, Sequence, Union


class Block:
    """Base class for block-level nodes."""

    def is_blank(self) -> bool:
        raise NotImplementedError


class Inline:
    """Base class for inline nodes."""

    def is_blank(self) -> bool:
        raise NotImplementedError

    def text_len(self) -> int:
        """Visible length used for table column sizing, markup included."""
        raise NotImplementedError


# --- Inline nodes ---------------------------------------------------------


@dataclass(frozen=True)
class Text(Inline):
    text: str

    def is_blank(self) -> bool:
        return not self.text.strip()

    def text_len(self) -> int:
        return len(self.text)


@dataclass(frozen=True)
class Strong(Inline):
    content: list[Inline] = field(default_factory=list)

    def is_blank(self) -> bool:
        return inlines_are_blank(self.content)

    def text_len(self) -> int:
        return inlines_text_len(self.content) + 4


@dataclass(frozen=True)
class Emphasis(Inline):
    content: list[Inline] = field(default_factory=list)

    def is_blank(self) -> bool:
        return inlines_are_blank(self.content)

    def text_len(self) -> int:
        return inlines_text_len(self.content) + 4


@dataclass(frozen=True)
class Code(Inline):
    code: str

    def is_blank(self) -> bool:
        return not self.code.strip()

    def text_len(self) -> int:
        return len(self.code) + 2


@dataclass(frozen=True)
class Link(Inline):
    content: list[Inline]
    url: str
    title: Optional[str] = None

    def is_blank(self) -> bool:
        return inlines_are_blank(self.content)

    def text_len(self) -> int:
        return inlines_text_len(self.content) + 4


@dataclass(frozen=True)
class Image(Inline):
    alt: str
    url: str
    title: Optional[str] = None

    def is_blank(self) -> bool:
        return False

    def text_len(self) -> int:
        return len(self.alt) + 5


@dataclass(frozen=True)
class LineBreak(Inline):
    def is_blank(self) -> bool:
        return True

    def text_len(self) -> int:
        return 0


@dataclass(frozen=True)
class HtmlInline(Inline):
    raw: str

    def is_blank(self) -> bool:
        return not self.raw.strip()

    def text_len(self) -> int:
        return len(self.raw)


# --- Block nodes ----------------------------------------------------------


@dataclass(frozen=True)
class Document(Block):
    """Synthetic wrapper; flattened away when it holds a single child."""

    children: list[Block] = field(default_factory=list)

    def is_blank(self) -> bool:
        return all(child.is_blank() for child in self.children)


@dataclass(frozen=True)
class Heading(Block):
    level: int
    content: list[Inline] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not 1 <= self.level <= 6:
            raise ValueError(f"Heading level must be between 1 and 6, got {self.level}")

    def is_blank(self) -> bool:
        return inlines_are_blank(self.content)


@dataclass(frozen=True)
class Paragraph(Block):
    content: list[Inline] = field(default_factory=list)

    def is_blank(self) -> bool:
        return inlines_are_blank(self.content)


@dataclass(frozen=True)
class BlockQuote(Block):
    children: list[Block] = field(default_factory=list)

    def is_blank(self) -> bool:
        return all(child.is_blank() for child in self.children)


@dataclass(frozen=True)
class ListItem:
    """One list entry; its body is one or more blocks."""

    content: list[Block] = field(default_factory=list)

    @classmethod
    def from_inlines(cls, inlines: Sequence[Inline]) -> "ListItem":
        return cls([Paragraph(list(inlines))])

    def is_blank(self) -> bool:
        return all(block.is_blank() for block in self.content)


@dataclass(frozen=True)
class List(Block):
    ordered: bool = False
    start: int = 1
    items: list[ListItem] = field(default_factory=list)

    def is_blank(self) -> bool:
        return all(item.is_blank() for item in self.items)


@dataclass(frozen=True)
class CodeBlock(Block):
    language: Optional[str]
    code: str
    fenced: bool = False

    def is_blank(self) -> bool:
        return not self.code.strip()


@dataclass(frozen=True)
class ThematicBreak(Block):
    def is_blank(self) -> bool:
        return False


@dataclass(frozen=True)
class Table(Block):
    """Pipe table; the header count defines the column count."""

    headers: list[list[Inline]] = field(default_factory=list)
    rows: list[list[list[Inline]]] = field(default_factory=list)

    def is_blank(self) -> bool:
        return all(inlines_are_blank(cell) for cell in self.headers) and all(
            inlines_are_blank(cell) for row in self.rows for cell in row
        )


@dataclass(frozen=True)
class HtmlBlock(Block):
    raw: str

    def is_blank(self) -> bool:
        return not self.raw.strip()


Node = Union[Block, Inline, ListItem]


def is_blank(node: Node) -> bool:
    """
    Check whether a node renders to nothing but whitespace.

    Containers are blank when all their children are blank; ``Image`` and
    ``ThematicBreak`` never are.
    """
    return node.is_blank()


def text_len(inline: Inline) -> int:
    return inline.text_len()


def inlines_text_len(inlines: Sequence[Inline]) -> int:
    return sum(inline.text_len() for inline in inlines)


def inlines_are_blank(inlines: Sequence[Inline]) -> bool:
    return all(inline.is_blank() for inline in inlines)


def flatten_document(block: Block) -> Block:
    """Unwrap ``Document`` nodes that hold exactly one child."""
    while isinstance(block, Document) and len(block.children) == 1:
        block = block.children[0]
    return block
