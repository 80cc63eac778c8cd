"""Streaming converter: open/text/close events to Markdown AST."""

import logging
from typing import Any, Iterable, Optional, Sequence

from ..ast import Block, flatten_document
from ..models.events import EventType, ParseEvent
from ..models.options import Options
from .frames import ElementFrame

logger = logging.getLogger(__name__)


class StreamingConverter:
    """
    Build the document model from structural events without a tree.

    The converter keeps one frame per open element on an explicit stack.
    ``open`` pushes a frame, ``text`` feeds the top frame and ``close`` pops
    the frame, finalizes it and attaches the result to the new top. Nothing
    ever looks at siblings or ancestors beyond the top of the stack.

    Unbalanced input degrades gracefully: a close tag that matches no open
    element is ignored, one that matches a deeper element closes everything
    above it first, and ``finish`` closes whatever is still open.

    A converter instance belongs to one conversion at a time; ``finish``
    resets it for the next document.

    Example:
        converter = StreamingConverter()
        converter.open("p")
        converter.text("Hello ")
        converter.open("strong")
        converter.text("World")
        converter.close("strong")
        converter.close("p")
        block = converter.finish()
    """

    def __init__(
        self,
        options: Optional[Options] = None,
        keep: Sequence[Any] = (),
        remove: Sequence[Any] = (),
    ):
        self.options = options or Options()
        self.keep = list(keep)
        self.remove = list(remove)
        self._stack: list[ElementFrame] = [ElementFrame.root()]

    @property
    def depth(self) -> int:
        """Number of currently open elements."""
        return len(self._stack) - 1

    def open(self, name: str, attrs: Optional[dict[str, Optional[str]]] = None) -> None:
        self.handle(ParseEvent.open_tag(name, attrs))

    def text(self, chunk: str) -> None:
        self.handle(ParseEvent.text_chunk(chunk))

    def close(self, name: str) -> None:
        self.handle(ParseEvent.close_tag(name))

    def handle(self, event: ParseEvent) -> None:
        """Apply one event to the stack."""
        if event.type == EventType.OPEN_TAG:
            frame = self._stack[-1].open_child(event, self.options, self.keep, self.remove)
            if frame is not None:
                self._stack.append(frame)
        elif event.type == EventType.TEXT:
            self._stack[-1].add_text(event.text or "")
        elif event.type == EventType.CLOSE_TAG:
            self._close(event.tag_name)

    def feed(self, events: Iterable[ParseEvent]) -> "StreamingConverter":
        for event in events:
            self.handle(event)
        return self

    def finish(self) -> Block:
        """
        End the stream and return the converted document.

        Elements still open are closed implicitly, innermost first.

        Returns:
            The converted block, with single-child Documents flattened
        """
        if self.depth:
            logger.debug(f"Stream ended with {self.depth} open element(s), closing them")
        while len(self._stack) > 1:
            self._pop()
        root = self._stack[0]
        self._stack = [ElementFrame.root()]
        return flatten_document(root.finish_document())

    def _close(self, name: str) -> None:
        index = len(self._stack) - 1
        while index > 0 and self._stack[index].tag != name:
            index -= 1
        if index == 0:
            logger.debug(f"Ignoring stray close tag </{name}>")
            return
        while len(self._stack) > index + 1:
            logger.debug(f"Implicitly closing <{self._stack[-1].tag}> at </{name}>")
            self._pop()
        self._pop()

    def _pop(self) -> None:
        frame = self._stack.pop()
        self._stack[-1].attach(frame.finalize(self.options))


def process(
    events: Iterable[ParseEvent],
    options: Optional[Options] = None,
    keep: Sequence[Any] = (),
    remove: Sequence[Any] = (),
) -> Block:
    """Convert a complete event sequence with a one-off ``StreamingConverter``."""
    return StreamingConverter(options, keep, remove).feed(events).finish()
