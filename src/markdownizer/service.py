"""High-level conversion service."""

import logging
from typing import Any, Callable, Iterable, Optional, Union

from .ast import Block, Document
from .conversion.node import parse_html
from .conversion.protocols import NodeView
from .conversion.streaming import StreamingConverter
from .conversion.text import escape_markdown
from .conversion.tokenizer import iter_events
from .conversion.tree import TreeConverter
from .errors import HtmlParseError
from .models.events import ParseEvent
from .models.options import Options
from .rules import Filter, Rule, RuleConverter, Rules
from .serializer import MarkdownSerializer

logger = logging.getLogger(__name__)

Plugin = Callable[["MarkdownService"], Any]


class MarkdownService:
    """
    Convert HTML to Markdown through any of the three conversion paths.

    ``turndown`` parses the whole document and uses the tree converter,
    ``turndown_stream`` tokenizes chunks incrementally and never builds a
    tree, and ``turndown_rules`` applies text rules directly. Keep and remove
    filters apply to all three paths; custom rules only to the rule path.

    Configuration methods return the service so calls can be chained.

    Example:
        service = MarkdownService(heading_style="atx").keep("iframe")
        markdown = service.turndown("<h1>Title</h1><p>Hello <b>World</b></p>")
    """

    def __init__(self, options: Optional[Options] = None, **overrides: Any):
        """
        Initialize the service.

        Args:
            options: Base options (defaults when None)
            **overrides: Option fields to replace, e.g. ``heading_style="atx"``
        """
        options = options or Options()
        self._options = options.with_overrides(**overrides) if overrides else options
        self._rules = Rules()
        self._keep: list[Filter] = []
        self._remove: list[Filter] = []

    @property
    def options(self) -> Options:
        return self._options

    @property
    def rules(self) -> Rules:
        return self._rules

    def configure(self, **changes: Any) -> "MarkdownService":
        """Replace option fields; validation errors propagate."""
        self._options = self._options.with_overrides(**changes)
        return self

    # --- extension --------------------------------------------------------

    def add_rule(self, key: str, rule: Rule) -> "MarkdownService":
        """Register a rule for ``turndown_rules``, checked before the built-ins."""
        self._rules.add(key, rule)
        return self

    def keep(self, value: Any) -> "MarkdownService":
        """Preserve matching elements as raw HTML (tag name, tag names, predicate or Filter)."""
        f = Filter.coerce(value)
        self._keep.append(f)
        self._rules.keep(f)
        return self

    def remove(self, value: Any) -> "MarkdownService":
        """Drop matching elements together with their content."""
        f = Filter.coerce(value)
        self._remove.append(f)
        self._rules.remove(f)
        return self

    def use(self, plugin: Union[Plugin, Iterable[Plugin]]) -> "MarkdownService":
        """Apply a plugin (a callable receiving the service) or a list of plugins."""
        plugins = [plugin] if callable(plugin) else list(plugin)
        for p in plugins:
            p(self)
        return self

    def escape(self, text: str) -> str:
        return escape_markdown(text)

    # --- conversion -------------------------------------------------------

    def to_ast(self, html: Union[str, bytes], strict: bool = True) -> Block:
        """
        Parse HTML and convert it to the document model.

        Args:
            html: HTML document or fragment
            strict: Raise on parse failure instead of returning an empty Document

        Returns:
            Converted block

        Raises:
            HtmlParseError: If parsing fails and ``strict`` is set
        """
        try:
            root = parse_html(html)
        except HtmlParseError as e:
            if strict:
                raise
            logger.warning(f"Parse failed, returning empty document: {e}")
            return Document([])
        return self._tree_converter().convert(root)

    def turndown(self, html: Union[str, bytes], strict: bool = True) -> str:
        """
        Convert HTML to Markdown through the tree converter.

        Args:
            html: HTML document or fragment
            strict: Raise on parse failure instead of returning ""

        Returns:
            Markdown text
        """
        return self.serialize(self.to_ast(html, strict=strict))

    def turndown_stream(self, chunks: Union[str, Iterable[str]], strict: bool = True) -> str:
        """
        Convert HTML chunks to Markdown without materializing a tree.

        Args:
            chunks: Markup pieces in document order
            strict: Raise on tokenizer failure instead of keeping the partial result

        Returns:
            Markdown text
        """
        converter = self._streaming_converter()
        try:
            converter.feed(iter_events(chunks))
        except HtmlParseError as e:
            if strict:
                raise
            logger.warning(f"Tokenizing failed, keeping partial document: {e}")
        return self.serialize(converter.finish())

    def turndown_rules(self, html: Union[str, bytes], strict: bool = True) -> str:
        """Convert HTML to Markdown by applying text rules directly."""
        try:
            root = parse_html(html)
        except HtmlParseError as e:
            if strict:
                raise
            logger.warning(f"Parse failed, returning empty output: {e}")
            return ""
        return RuleConverter(self._rules, self._options).convert(root)

    def convert_node(self, node: NodeView) -> str:
        """Convert an already-parsed tree (``Node``, ``SoupNode``, ...)."""
        return self.serialize(self._tree_converter().convert(node))

    def convert_events(self, events: Iterable[ParseEvent]) -> str:
        """Convert a ready-made event sequence."""
        return self.serialize(self._streaming_converter().feed(events).finish())

    def serialize(self, block: Block) -> str:
        markdown = MarkdownSerializer(self._options).serialize(block)
        logger.debug(f"Rendered {len(markdown)} chars of Markdown")
        return markdown

    def _tree_converter(self) -> TreeConverter:
        return TreeConverter(self._options, self._keep, self._remove)

    def _streaming_converter(self) -> StreamingConverter:
        return StreamingConverter(self._options, self._keep, self._remove)
