"""HTML to Markdown AST conversion (tree and streaming front-ends)."""

from .frames import ElementFrame, Role, role_for
from .node import Node, NodeType, SoupNode, outer_html, parse_html
from .protocols import ElementView, NodeView
from .streaming import StreamingConverter, process
from .tags import TAG_KINDS, TagKind, classify
from .text import escape_markdown
from .tokenizer import HtmlEventReader, iter_events
from .tree import TreeConverter, convert

__all__ = [
    # Protocols
    "ElementView",
    "NodeView",
    # Input trees
    "Node",
    "NodeType",
    "SoupNode",
    "parse_html",
    "outer_html",
    # Classification
    "TagKind",
    "TAG_KINDS",
    "classify",
    "Role",
    "role_for",
    "ElementFrame",
    # Converters
    "TreeConverter",
    "convert",
    "StreamingConverter",
    "process",
    "HtmlEventReader",
    "iter_events",
    # Text
    "escape_markdown",
]
