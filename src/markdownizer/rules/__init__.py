"""Rule engine: direct tag-to-text conversion."""

from .commonmark import commonmark_rules
from .engine import NodeRef, RuleConverter, Rules
from .rule import Filter, Predicate, Replacement, Rule

__all__ = [
    "Filter",
    "Predicate",
    "Replacement",
    "Rule",
    "Rules",
    "NodeRef",
    "RuleConverter",
    "commonmark_rules",
]
