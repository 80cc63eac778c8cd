"""
markdownizer - Convert HTML to Markdown through a typed document model.

Usage:
    from markdownizer import MarkdownService, Options

    service = MarkdownService(Options(heading_style="atx"))
    markdown = service.turndown("<h1>Title</h1><p>Hello <b>World</b></p>")

    # incremental input, no tree is built
    markdown = service.turndown_stream(chunks)
"""

__version__ = "1.0.0"

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
    is_blank,
    text_len,
)
from .conversion import (
    Node,
    NodeType,
    SoupNode,
    StreamingConverter,
    TreeConverter,
    convert,
    parse_html,
    process,
)
from .errors import ConfigError, HtmlParseError, MarkdownizerError
from .models.events import EventType, ParseEvent
from .models.options import (
    CodeBlockStyle,
    HeadingStyle,
    LinkReferenceStyle,
    LinkStyle,
    Options,
)
from .rules import Filter, Rule, Rules
from .serializer import MarkdownSerializer, serialize
from .service import MarkdownService

__all__ = [
    "__version__",
    # Service
    "MarkdownService",
    # Options
    "Options",
    "HeadingStyle",
    "CodeBlockStyle",
    "LinkStyle",
    "LinkReferenceStyle",
    # Document model
    "Block",
    "Inline",
    "Document",
    "Heading",
    "Paragraph",
    "BlockQuote",
    "List",
    "ListItem",
    "CodeBlock",
    "ThematicBreak",
    "Table",
    "HtmlBlock",
    "Text",
    "Strong",
    "Emphasis",
    "Code",
    "Link",
    "Image",
    "LineBreak",
    "HtmlInline",
    "is_blank",
    "text_len",
    # Conversion
    "TreeConverter",
    "convert",
    "StreamingConverter",
    "process",
    "Node",
    "NodeType",
    "SoupNode",
    "parse_html",
    "EventType",
    "ParseEvent",
    # Rules
    "Filter",
    "Rule",
    "Rules",
    # Serialization
    "MarkdownSerializer",
    "serialize",
    # Errors
    "MarkdownizerError",
    "HtmlParseError",
    "ConfigError",
]
