"""Tree converter: materialized node tree to Markdown AST."""

import logging
from typing import Any, Optional, Sequence

from ..ast import Block, flatten_document
from ..models.options import Options
from .frames import ElementFrame
from .node import NodeType
from .protocols import NodeView

logger = logging.getLogger(__name__)


class TreeConverter:
    """
    Convert an already-parsed node tree into the document model.

    The converter is stateless between calls and never mutates its input,
    so one instance can convert many trees, from several threads.

    Example:
        converter = TreeConverter(Options(heading_style="atx"))
        block = converter.convert(parse_html("<h1>Title</h1>"))
    """

    def __init__(
        self,
        options: Optional[Options] = None,
        keep: Sequence[Any] = (),
        remove: Sequence[Any] = (),
    ):
        """
        Initialize the converter.

        Args:
            options: Rendering options (defaults apply when None)
            keep: Filters whose elements are preserved as raw HTML
            remove: Filters whose elements are dropped with their content
        """
        self.options = options or Options()
        self.keep = list(keep)
        self.remove = list(remove)

    def convert(self, root: NodeView) -> Block:
        """
        Convert a document, fragment, element or text node.

        Args:
            root: Root of the tree to convert

        Returns:
            The converted block, with single-child Documents flattened
        """
        frame = ElementFrame.root()
        self._visit(root, frame)
        block = flatten_document(frame.finish_document())
        logger.debug(f"Converted tree to {type(block).__name__}")
        return block

    def _visit(self, node: NodeView, parent: ElementFrame) -> None:
        node_type = node.node_type
        if node_type == NodeType.TEXT:
            parent.add_text(node.node_value or "")
        elif node_type == NodeType.ELEMENT:
            frame = parent.open_child(node, self.options, self.keep, self.remove)
            if frame is None:
                return
            for child in node.children():
                self._visit(child, frame)
            parent.attach(frame.finalize(self.options))
        elif node_type in (NodeType.DOCUMENT, NodeType.DOCUMENT_FRAGMENT):
            for child in node.children():
                self._visit(child, parent)


def convert(
    root: NodeView,
    options: Optional[Options] = None,
    keep: Sequence[Any] = (),
    remove: Sequence[Any] = (),
) -> Block:
    """Convert a node tree with a one-off ``TreeConverter``."""
    return TreeConverter(options, keep, remove).convert(root)
