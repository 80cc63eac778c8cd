"""Event types for the streaming conversion API."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class EventType(str, Enum):
    """Structural events produced by a tokenizer, in document order."""

    OPEN_TAG = "open_tag"
    TEXT = "text"
    CLOSE_TAG = "close_tag"


@dataclass(frozen=True)
class ParseEvent:
    """
    One structural event of a depth-first document walk.

    Tag names are lowercased and attribute names are lowercased on
    construction, so consumers never need to normalize them.

    Example:
        events = [
            ParseEvent.open_tag("a", {"href": "https://example.com"}),
            ParseEvent.text_chunk("Example"),
            ParseEvent.close_tag("a"),
        ]
        for event in events:
            if event.type == EventType.OPEN_TAG:
                print(f"<{event.name}>")
    """

    type: EventType
    name: Optional[str] = None
    attrs: dict[str, str] = field(default_factory=dict)
    text: Optional[str] = None

    @classmethod
    def open_tag(cls, name: str, attrs: Optional[dict[str, Optional[str]]] = None) -> "ParseEvent":
        normalized = {k.lower(): ("" if v is None else v) for k, v in (attrs or {}).items()}
        return cls(type=EventType.OPEN_TAG, name=name.lower(), attrs=normalized)

    @classmethod
    def text_chunk(cls, text: str) -> "ParseEvent":
        return cls(type=EventType.TEXT, text=text)

    @classmethod
    def close_tag(cls, name: str) -> "ParseEvent":
        return cls(type=EventType.CLOSE_TAG, name=name.lower())

    @property
    def tag_name(self) -> str:
        return self.name or ""

    def attr(self, name: str) -> Optional[str]:
        """Look up an attribute of an open-tag event (case-insensitive)."""
        return self.attrs.get(name.lower())

    def attributes(self) -> list[tuple[str, str]]:
        return list(self.attrs.items())
