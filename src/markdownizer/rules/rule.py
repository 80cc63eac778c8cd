"""Filter and Rule types for the text-rule conversion path."""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Iterable, Optional

from ..conversion.protocols import ElementView
from ..models.options import Options

if TYPE_CHECKING:
    from .engine import NodeRef

# predicate(tag, element, options)
Predicate = Callable[[str, ElementView, Options], bool]
# replacement(node, content, options)
Replacement = Callable[["NodeRef", str, Options], str]


@dataclass(frozen=True)
class Filter:
    """
    Decide which elements a rule, keep or remove entry applies to.

    A filter matches a set of tag names or, when ``predicate`` is given,
    whatever the predicate accepts.

    Example:
        Filter.tag("p")
        Filter.tags("em", "i")
        Filter.where(lambda tag, el, opts: tag == "a" and el.attr("href") is not None)
    """

    names: frozenset[str] = frozenset()
    predicate: Optional[Predicate] = None

    @classmethod
    def tag(cls, name: str) -> "Filter":
        return cls(names=frozenset({name.lower()}))

    @classmethod
    def tags(cls, *names: str) -> "Filter":
        return cls(names=frozenset(name.lower() for name in names))

    @classmethod
    def where(cls, predicate: Predicate) -> "Filter":
        return cls(predicate=predicate)

    @classmethod
    def coerce(cls, value: Any) -> "Filter":
        """
        Build a filter from a tag name, an iterable of tag names or a predicate.

        Raises:
            TypeError: If the value cannot describe a filter
        """
        if isinstance(value, Filter):
            return value
        if isinstance(value, str):
            return cls.tag(value)
        if callable(value):
            return cls.where(value)
        if isinstance(value, Iterable):
            return cls.tags(*value)
        raise TypeError(f"Cannot build a Filter from {type(value).__name__}")

    def matches(self, element: ElementView, options: Options) -> bool:
        tag = element.tag_name.lower()
        if self.predicate is not None:
            return bool(self.predicate(tag, element, options))
        return tag in self.names


@dataclass(frozen=True)
class Rule:
    """A filter plus the function producing the matched element's Markdown."""

    filter: Filter
    replacement: Replacement

    @classmethod
    def for_tag(cls, tag: str, replacement: Replacement) -> "Rule":
        return cls(Filter.tag(tag), replacement)

    @classmethod
    def for_tags(cls, tags: Iterable[str], replacement: Replacement) -> "Rule":
        return cls(Filter.tags(*tags), replacement)

    def matches(self, element: ElementView, options: Options) -> bool:
        return self.filter.matches(element, options)

    def replace(self, node: "NodeRef", content: str, options: Options) -> str:
        return self.replacement(node, content, options)
