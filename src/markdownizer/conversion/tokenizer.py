"""Incremental HTML tokenizer producing streaming parse events."""

import logging
from html.parser import HTMLParser
from typing import Iterable, Iterator, Optional

from ..errors import HtmlParseError
from ..models.events import ParseEvent
from .tags import VOID_ELEMENTS

logger = logging.getLogger(__name__)


class HtmlEventReader(HTMLParser):
    """
    Turn HTML chunks into ``ParseEvent``s as they arrive.

    Adjacent character data is coalesced into one text event, which is only
    emitted once the next tag (or the end of input) is seen, so the way the
    input is split into chunks never changes the events.

    Void elements produce an open event and no close event; ``<x/>`` on any
    other tag produces both. Comments and declarations produce nothing.

    Example:
        reader = HtmlEventReader()
        events = reader.feed("<p>Hello <b>Wor")
        events += reader.feed("ld</b></p>")
        events += reader.close()
    """

    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self._events: list[ParseEvent] = []
        self._text: list[str] = []

    def feed(self, data: str) -> list[ParseEvent]:  # type: ignore[override]
        """
        Consume a chunk of markup.

        Args:
            data: Next chunk of the document

        Returns:
            Events completed by this chunk

        Raises:
            HtmlParseError: If the chunk is not text or cannot be tokenized
        """
        if not isinstance(data, str):
            raise HtmlParseError(f"Expected str chunk, got {type(data).__name__}")
        try:
            super().feed(data)
        except Exception as e:
            raise HtmlParseError(f"Failed to tokenize HTML: {e}") from e
        return self._drain()

    def close(self) -> list[ParseEvent]:  # type: ignore[override]
        """Flush buffered input and return the remaining events."""
        try:
            super().close()
        except Exception as e:
            raise HtmlParseError(f"Failed to tokenize HTML: {e}") from e
        self._flush_text()
        return self._drain()

    def _drain(self) -> list[ParseEvent]:
        events, self._events = self._events, []
        return events

    def _flush_text(self) -> None:
        if self._text:
            self._events.append(ParseEvent.text_chunk("".join(self._text)))
            self._text = []

    # --- HTMLParser callbacks --------------------------------------------

    def handle_starttag(self, tag: str, attrs: list[tuple[str, Optional[str]]]) -> None:
        self._flush_text()
        self._events.append(ParseEvent.open_tag(tag, dict(attrs)))

    def handle_startendtag(self, tag: str, attrs: list[tuple[str, Optional[str]]]) -> None:
        self.handle_starttag(tag, attrs)
        if tag.lower() not in VOID_ELEMENTS:
            self._events.append(ParseEvent.close_tag(tag))

    def handle_endtag(self, tag: str) -> None:
        self._flush_text()
        if tag.lower() in VOID_ELEMENTS:
            logger.debug(f"Ignoring close tag of void element </{tag}>")
            return
        self._events.append(ParseEvent.close_tag(tag))

    def handle_data(self, data: str) -> None:
        self._text.append(data)

    def handle_comment(self, data: str) -> None:
        self._flush_text()

    def handle_decl(self, decl: str) -> None:
        self._flush_text()

    def handle_pi(self, data: str) -> None:
        self._flush_text()


def iter_events(chunks: Iterable[str]) -> Iterator[ParseEvent]:
    """
    Tokenize an iterable of HTML chunks lazily.

    Args:
        chunks: Markup pieces in document order (a plain string is one chunk)

    Yields:
        ParseEvent objects in document order
    """
    if isinstance(chunks, str):
        chunks = [chunks]
    reader = HtmlEventReader()
    for chunk in chunks:
        yield from reader.feed(chunk)
    yield from reader.close()
