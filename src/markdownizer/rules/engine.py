"""Text-rule conversion: HTML tree straight to Markdown text."""

import logging
import re
from typing import Any, Optional

from ..conversion.node import NodeType, outer_html
from ..conversion.protocols import NodeView
from ..conversion.tags import elided_tags, is_block_tag
from ..conversion.text import collapse_whitespace, escape_markdown
from ..models.options import Options
from ..serializer import join_inline
from .commonmark import commonmark_rules
from .rule import Filter, Rule

logger = logging.getLogger(__name__)

_EXTRA_NEWLINES_RE = re.compile(r"\n{3,}")


class NodeRef:
    """
    A tree node seen from inside the document.

    Wraps a ``NodeView`` together with its parent and position, which the
    built-in rules need (list numbering, code inside pre, table headers).

    Attributes:
        node: The wrapped node
        parent: Enclosing NodeRef, None at the conversion root
        path: Child indexes from the conversion root; identifies the node
        index: Position among the parent's element children
        type_index: Position among the parent's element children of the same tag
    """

    __slots__ = ("node", "parent", "path", "index", "type_index")

    def __init__(
        self,
        node: NodeView,
        parent: Optional["NodeRef"] = None,
        path: tuple[int, ...] = (),
        index: int = 0,
        type_index: int = 0,
    ):
        self.node = node
        self.parent = parent
        self.path = path
        self.index = index
        self.type_index = type_index

    @property
    def tag_name(self) -> str:
        return self.node.tag_name

    @property
    def node_type(self) -> int:
        return self.node.node_type

    @property
    def node_value(self) -> Optional[str]:
        return self.node.node_value

    @property
    def parent_tag(self) -> Optional[str]:
        return self.parent.tag_name if self.parent is not None else None

    def is_element(self) -> bool:
        return self.node.node_type == NodeType.ELEMENT

    def attr(self, name: str) -> Optional[str]:
        return self.node.attr(name)

    def attributes(self) -> list[tuple[str, str]]:
        return self.node.attributes()

    def children(self) -> list["NodeRef"]:
        refs = []
        element_count = 0
        per_tag: dict[str, int] = {}
        for position, child in enumerate(self.node.children()):
            if child.node_type == NodeType.ELEMENT:
                tag = child.tag_name
                ref = NodeRef(child, self, self.path + (position,), element_count, per_tag.get(tag, 0))
                element_count += 1
                per_tag[tag] = per_tag.get(tag, 0) + 1
            else:
                ref = NodeRef(child, self, self.path + (position,))
            refs.append(ref)
        return refs

    def element_children(self) -> list["NodeRef"]:
        return [child for child in self.children() if child.is_element()]

    def text_content(self) -> str:
        return self.node.text_content()

    def outer_html(self) -> str:
        return outer_html(self.node)

    def __repr__(self) -> str:
        return f"NodeRef(<{self.tag_name}>, path={self.path})"


class Rules:
    """
    Ordered rule lookup.

    Custom rules are checked first in insertion order, then the built-in
    CommonMark rules. Keep and remove filters only apply to elements no rule
    matches, and keep wins over remove. ``script``, ``style``, ``noscript``,
    ``template`` and ``head`` are removed by default.
    """

    def __init__(self) -> None:
        self._custom: dict[str, Rule] = {}
        self._builtin: dict[str, Rule] = commonmark_rules()
        self._keep: list[Filter] = []
        self._remove: list[Filter] = [Filter.tags(*elided_tags())]

    @property
    def custom_rules(self) -> dict[str, Rule]:
        return dict(self._custom)

    @property
    def builtin_rules(self) -> dict[str, Rule]:
        return dict(self._builtin)

    def add(self, key: str, rule: Rule) -> None:
        self._custom[key] = rule

    def keep(self, value: Any) -> None:
        self._keep.append(Filter.coerce(value))

    def remove(self, value: Any) -> None:
        self._remove.append(Filter.coerce(value))

    @property
    def keep_filters(self) -> list[Filter]:
        return list(self._keep)

    @property
    def remove_filters(self) -> list[Filter]:
        return list(self._remove)

    def for_node(self, node: NodeRef, options: Options) -> Optional[Rule]:
        """Find the first custom or built-in rule matching the node."""
        for rule in self._custom.values():
            if rule.matches(node, options):
                return rule
        for rule in self._builtin.values():
            if rule.matches(node, options):
                return rule
        return None

    def should_keep(self, node: NodeRef, options: Options) -> bool:
        if self.for_node(node, options) is not None:
            return False
        return any(f.matches(node, options) for f in self._keep)

    def should_remove(self, node: NodeRef, options: Options) -> bool:
        if self.for_node(node, options) is not None:
            return False
        if any(f.matches(node, options) for f in self._keep):
            return False
        return any(f.matches(node, options) for f in self._remove)


class RuleConverter:
    """
    Convert a tree by applying rules bottom-up, without building an AST.

    Each element's children are converted first; the matching rule then
    turns that text into the element's Markdown. Elements no rule matches
    are kept as HTML, removed, or replaced by their children's text.

    Example:
        rules = Rules()
        rules.add("strike", Rule.for_tags(["del", "s"], lambda n, c, o: f"~~{c}~~"))
        RuleConverter(rules).convert(parse_html("<p><del>old</del></p>"))  # "~~old~~"
    """

    def __init__(self, rules: Optional[Rules] = None, options: Optional[Options] = None):
        self.rules = rules or Rules()
        self.options = options or Options()

    def convert(self, root: NodeView) -> str:
        ref = NodeRef(root)
        if ref.is_element():
            output = self._element(ref)
        elif ref.node_type == NodeType.TEXT:
            output = escape_markdown(collapse_whitespace(ref.node_value or ""))
        else:
            output = self._children(ref)
        output = _EXTRA_NEWLINES_RE.sub("\n\n", output)
        return output.strip("\n")

    def _element(self, node: NodeRef) -> str:
        rule = self.rules.for_node(node, self.options)
        if rule is not None:
            return rule.replace(node, self._children(node), self.options)
        if self.rules.should_keep(node, self.options):
            return node.outer_html()
        if self.rules.should_remove(node, self.options):
            return ""
        return self._children(node)

    def _children(self, node: NodeRef) -> str:
        children = node.children()
        parts = []
        for i, child in enumerate(children):
            if child.node_type == NodeType.TEXT:
                value = child.node_value or ""
                if not value.strip() and _at_block_boundary(children, i):
                    continue
                parts.append(escape_markdown(collapse_whitespace(value)))
            elif child.is_element():
                parts.append(self._element(child))
        return join_inline(parts)


def _at_block_boundary(siblings: list[NodeRef], i: int) -> bool:
    """Whitespace next to a block element or at a container edge is layout, not content."""
    neighbors = (
        siblings[i - 1] if i > 0 else None,
        siblings[i + 1] if i + 1 < len(siblings) else None,
    )
    for sibling in neighbors:
        if sibling is None or (sibling.is_element() and is_block_tag(sibling.tag_name)):
            return True
    return False
