"""Protocol definitions for conversion input."""

from typing import Iterable, Optional, Protocol, runtime_checkable


@runtime_checkable
class ElementView(Protocol):
    """
    Minimal read-only view of an element.

    This is what keep/remove filter predicates receive. Tree nodes, rule
    engine node references and open-tag events all provide it.
    """

    @property
    def tag_name(self) -> str:
        """Lowercase tag name ("" for non-elements)."""
        ...

    def attr(self, name: str) -> Optional[str]:
        """Attribute value by case-insensitive name, None when absent."""
        ...

    def attributes(self) -> list[tuple[str, str]]:
        """All attributes in source order, names lowercased."""
        ...


@runtime_checkable
class NodeView(ElementView, Protocol):
    """
    Read-only node of a materialized, already-parsed document tree.

    Implementations wrap whatever the upstream parser produced (CDP JSON,
    BeautifulSoup, ...). The tree converter and the rule engine only use
    this surface.
    """

    @property
    def node_type(self) -> "NodeTypeLike":
        ...

    @property
    def node_value(self) -> Optional[str]:
        """Text of text nodes, None otherwise."""
        ...

    def children(self) -> Iterable["NodeView"]:
        ...

    def text_content(self) -> str:
        """Concatenated text of all descendant text nodes."""
        ...


NodeTypeLike = int
