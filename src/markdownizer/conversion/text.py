"""Text utilities shared by every conversion path."""

import re
from typing import Optional, Sequence

from ..ast import (
    Code,
    Emphasis,
    HtmlInline,
    Image,
    Inline,
    LineBreak,
    Link,
    Strong,
    Text,
)

# HTML whitespace only; U+00A0 (&nbsp;) is content.
_WHITESPACE_RE = re.compile(r"[ \t\n\r\f]+")

# Applied in order. Anchored rules only fire at the start of a text chunk,
# where the character could open a block construct.
_ESCAPES: list[tuple[re.Pattern[str], str]] = [
    (re.compile(r"\\"), r"\\\\"),
    (re.compile(r"\*"), r"\\*"),
    (re.compile(r"^(\s*)-"), r"\1\\-"),
    (re.compile(r"^(\s*)\+ "), r"\1\\+ "),
    (re.compile(r"^(\s*)(=+)"), r"\1\\\2"),
    (re.compile(r"^(\s*)(#{1,6}) "), r"\1\\\2 "),
    (re.compile(r"`"), r"\\`"),
    (re.compile(r"^(\s*)~~~"), r"\1\\~~~"),
    (re.compile(r"\["), r"\\["),
    (re.compile(r"\]"), r"\\]"),
    (re.compile(r"^(\s*)>"), r"\1\\>"),
    (re.compile(r"_"), r"\\_"),
    (re.compile(r"^(\s*)(\d+)\. "), r"\1\2\\. "),
]


def collapse_whitespace(text: str) -> str:
    """Replace every run of HTML whitespace with a single space."""
    return _WHITESPACE_RE.sub(" ", text)


def escape_markdown(text: str) -> str:
    """
    Escape characters that Markdown would otherwise interpret.

    Inline markers are escaped everywhere; block markers (list bullets,
    heading hashes, quote markers, setext underlines, ordered list numbers)
    only at the start of the text.

    Args:
        text: Plain text

    Returns:
        Text safe to embed in Markdown
    """
    for pattern, replacement in _ESCAPES:
        text = pattern.sub(replacement, text)
    return text


def inline_to_text(inline: Inline) -> str:
    """Flatten an inline node to its plain text, dropping markup."""
    if isinstance(inline, Text):
        return inline.text
    if isinstance(inline, (Strong, Emphasis)):
        return "".join(inline_to_text(i) for i in inline.content)
    if isinstance(inline, Code):
        return inline.code
    if isinstance(inline, Link):
        return "".join(inline_to_text(i) for i in inline.content)
    if isinstance(inline, Image):
        return inline.alt
    if isinstance(inline, LineBreak):
        return "\n"
    if isinstance(inline, HtmlInline):
        return inline.raw
    return ""


def inlines_to_text(inlines: Sequence[Inline]) -> str:
    return "".join(inline_to_text(i) for i in inlines)


def trim_inlines(inlines: Sequence[Inline]) -> list[Inline]:
    """Strip leading and trailing whitespace from the outer text nodes of a run."""
    result = list(inlines)

    while result and isinstance(result[0], Text):
        stripped = result[0].text.lstrip()
        if stripped:
            result[0] = Text(stripped)
            break
        result.pop(0)

    while result and isinstance(result[-1], Text):
        stripped = result[-1].text.rstrip()
        if stripped:
            result[-1] = Text(stripped)
            break
        result.pop()

    return result


def language_from_class(class_attr: Optional[str]) -> Optional[str]:
    """Extract ``rust`` from a class list such as ``"hljs language-rust"``."""
    if not class_attr:
        return None
    for name in class_attr.split():
        if name.startswith("language-") and len(name) > len("language-"):
            return name[len("language-") :]
    return None


def parse_start(value: Optional[str]) -> int:
    """Parse an ``ol`` start attribute; anything but a non-negative integer means 1."""
    if value is None:
        return 1
    value = value.strip()
    if value.isascii() and value.isdigit():
        return int(value)
    return 1


def clean_attribute(value: Optional[str]) -> str:
    return value.strip() if value else ""
