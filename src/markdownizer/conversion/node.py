"""Materialized document trees: CDP-style nodes and BeautifulSoup adapters."""

import html
import logging
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Iterable, Iterator, Optional, Union

from bs4 import BeautifulSoup, Tag
from bs4.element import (
    CData,
    Comment,
    Declaration,
    Doctype,
    NavigableString,
    PageElement,
    ProcessingInstruction,
)

from ..errors import HtmlParseError
from .protocols import NodeView
from .tags import VOID_ELEMENTS

logger = logging.getLogger(__name__)


class NodeType(IntEnum):
    """DOM ``nodeType`` values. Anything unlisted maps to OTHER and is ignored."""

    OTHER = 0
    ELEMENT = 1
    TEXT = 3
    COMMENT = 8
    DOCUMENT = 9
    DOCUMENT_FRAGMENT = 11

    @classmethod
    def _missing_(cls, value: object) -> "NodeType":
        return cls.OTHER


@dataclass
class Node:
    """
    A DOM node following the Chrome DevTools Protocol ``DOM.Node`` shape.

    Element names are stored uppercase (``"DIV"``) and attributes as a flat
    ``[name, value, name, value, ...]`` list, exactly as CDP reports them.

    Example:
        p = Node.element("p")
        p.add_child(Node.text("Hello World"))
        p.attr("class")  # None
    """

    node_type: NodeType
    node_name: str
    node_value: Optional[str] = None
    attribute_list: list[str] = field(default_factory=list)
    child_nodes: list["Node"] = field(default_factory=list)

    @classmethod
    def element(
        cls,
        tag: str,
        attrs: Optional[Union[dict[str, str], list[tuple[str, str]]]] = None,
        children: Optional[list["Node"]] = None,
    ) -> "Node":
        pairs = attrs.items() if isinstance(attrs, dict) else (attrs or [])
        flat: list[str] = []
        for name, value in pairs:
            flat.extend([name, value])
        return cls(NodeType.ELEMENT, tag.upper(), None, flat, list(children or []))

    @classmethod
    def text(cls, value: str) -> "Node":
        return cls(NodeType.TEXT, "#text", value)

    @classmethod
    def comment(cls, value: str) -> "Node":
        return cls(NodeType.COMMENT, "#comment", value)

    @classmethod
    def document(cls, children: Optional[list["Node"]] = None) -> "Node":
        return cls(NodeType.DOCUMENT, "#document", None, [], list(children or []))

    @classmethod
    def fragment(cls, children: Optional[list["Node"]] = None) -> "Node":
        return cls(NodeType.DOCUMENT_FRAGMENT, "#document-fragment", None, [], list(children or []))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Node":
        """
        Build a node tree from CDP ``DOM.Node`` JSON.

        Args:
            data: Mapping with ``nodeType``, ``nodeName`` and optional
                ``nodeValue``, ``attributes`` and ``children``

        Returns:
            Root Node
        """
        node_type = NodeType(int(data.get("nodeType", NodeType.ELEMENT)))
        value = data.get("nodeValue")
        return cls(
            node_type=node_type,
            node_name=str(data.get("nodeName", "")),
            node_value=value if node_type in (NodeType.TEXT, NodeType.COMMENT) else None,
            attribute_list=[str(a) for a in data.get("attributes") or []],
            child_nodes=[cls.from_dict(child) for child in data.get("children") or []],
        )

    def add_child(self, child: "Node") -> "Node":
        self.child_nodes.append(child)
        return self

    def is_element(self) -> bool:
        return self.node_type == NodeType.ELEMENT

    @property
    def tag_name(self) -> str:
        return self.node_name.lower() if self.is_element() else ""

    def attributes(self) -> list[tuple[str, str]]:
        flat = self.attribute_list
        return [(flat[i].lower(), flat[i + 1]) for i in range(0, len(flat) - 1, 2)]

    def attr(self, name: str) -> Optional[str]:
        name = name.lower()
        for key, value in self.attributes():
            if key == name:
                return value
        return None

    def children(self) -> Iterator["Node"]:
        return iter(self.child_nodes)

    def text_content(self) -> str:
        if self.node_type == NodeType.TEXT:
            return self.node_value or ""
        return "".join(
            child.text_content()
            for child in self.child_nodes
            if child.node_type in (NodeType.TEXT, NodeType.ELEMENT, NodeType.DOCUMENT_FRAGMENT)
        )


class SoupNode:
    """
    ``NodeView`` over a BeautifulSoup tree.

    Nodes are wrapped lazily, so converting a soup never copies it.

    Example:
        soup = BeautifulSoup("<p>Hi</p>", "html.parser")
        root = SoupNode(soup)
        [child.tag_name for child in root.children()]  # ["p"]
    """

    __slots__ = ("_element",)

    def __init__(self, element: PageElement):
        self._element = element

    @property
    def element(self) -> PageElement:
        return self._element

    @property
    def node_type(self) -> NodeType:
        el = self._element
        if isinstance(el, BeautifulSoup):
            return NodeType.DOCUMENT
        if isinstance(el, Tag):
            return NodeType.ELEMENT
        if isinstance(el, Comment):
            return NodeType.COMMENT
        if isinstance(el, (Doctype, Declaration, ProcessingInstruction)):
            return NodeType.OTHER
        if isinstance(el, (CData, NavigableString)):
            return NodeType.TEXT
        return NodeType.OTHER

    def is_element(self) -> bool:
        return self.node_type == NodeType.ELEMENT

    @property
    def tag_name(self) -> str:
        if self.is_element():
            return str(self._element.name).lower()
        return ""

    @property
    def node_value(self) -> Optional[str]:
        if self.node_type in (NodeType.TEXT, NodeType.COMMENT):
            return str(self._element)
        return None

    def attributes(self) -> list[tuple[str, str]]:
        if not isinstance(self._element, Tag):
            return []
        pairs = []
        for name, value in self._element.attrs.items():
            # multi-valued attributes such as class come back as lists
            if isinstance(value, (list, tuple)):
                value = " ".join(value)
            pairs.append((str(name).lower(), "" if value is None else str(value)))
        return pairs

    def attr(self, name: str) -> Optional[str]:
        name = name.lower()
        for key, value in self.attributes():
            if key == name:
                return value
        return None

    def children(self) -> Iterator["SoupNode"]:
        if isinstance(self._element, Tag):
            return (SoupNode(child) for child in self._element.children)
        return iter(())

    def text_content(self) -> str:
        if isinstance(self._element, Tag):
            return self._element.get_text()
        if self.node_type == NodeType.TEXT:
            return str(self._element)
        return ""

    def __repr__(self) -> str:
        return f"SoupNode({self.node_type.name}, {self.tag_name or self.node_value!r})"


def parse_html(markup: Union[str, bytes]) -> SoupNode:
    """
    Parse HTML with BeautifulSoup's ``html.parser`` builder.

    Args:
        markup: HTML document or fragment

    Returns:
        SoupNode wrapping the parsed document

    Raises:
        HtmlParseError: If the input is not markup or the parser fails
    """
    if not isinstance(markup, (str, bytes)):
        raise HtmlParseError(f"Expected str or bytes, got {type(markup).__name__}")
    try:
        soup = BeautifulSoup(markup, "html.parser", multi_valued_attributes=None)
    except Exception as e:
        raise HtmlParseError(f"Failed to parse HTML: {e}") from e
    return SoupNode(soup)


# --- raw markup rendering -------------------------------------------------


def render_start_tag(tag: str, attrs: Iterable[tuple[str, str]]) -> str:
    parts = [tag]
    for name, value in attrs:
        parts.append(f'{name}="{html.escape(value, quote=True)}"')
    return "<" + " ".join(parts) + ">"


def render_end_tag(tag: str) -> str:
    return f"</{tag}>"


def render_text(text: str) -> str:
    return html.escape(text, quote=False)


def outer_html(node: NodeView) -> str:
    """
    Re-render a node as HTML.

    The output depends only on tag names, attributes and text, so a tree
    and the event stream of the same document render identically.
    """
    node_type = node.node_type
    if node_type == NodeType.TEXT:
        return render_text(node.node_value or "")
    if node_type == NodeType.ELEMENT:
        tag = node.tag_name
        start = render_start_tag(tag, node.attributes())
        if tag in VOID_ELEMENTS:
            return start
        inner = "".join(outer_html(child) for child in node.children())
        return start + inner + render_end_tag(tag)
    if node_type in (NodeType.DOCUMENT, NodeType.DOCUMENT_FRAGMENT):
        return "".join(outer_html(child) for child in node.children())
    return ""
