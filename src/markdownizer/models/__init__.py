"""Markdownizer option and event models."""

from .events import EventType, ParseEvent
from .options import (
    CodeBlockStyle,
    HeadingStyle,
    LinkReferenceStyle,
    LinkStyle,
    Options,
)

__all__ = [
    # Options
    "Options",
    "HeadingStyle",
    "CodeBlockStyle",
    "LinkStyle",
    "LinkReferenceStyle",
    # Events
    "EventType",
    "ParseEvent",
]
