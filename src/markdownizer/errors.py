"""Exceptions raised by markdownizer."""


class MarkdownizerError(Exception):
    """Base class for all markdownizer errors."""


class HtmlParseError(MarkdownizerError):
    """The upstream HTML parser rejected the input."""


class ConfigError(MarkdownizerError):
    """Options could not be loaded or validated."""
