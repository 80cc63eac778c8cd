"""Tests for the MarkdownService facade."""

import pytest
from pydantic import ValidationError

from markdownizer import MarkdownService, Options
from markdownizer.ast import Document, Heading, Paragraph, Text
from markdownizer.conversion import Node
from markdownizer.errors import HtmlParseError
from markdownizer.models.events import ParseEvent


class TestConversion:
    """Tests for the conversion entry points."""

    def test_turndown(self):
        """Test the tree path end to end."""
        service = MarkdownService()
        assert service.turndown("<h1>Title</h1><p>Hello <b>World</b></p>") == "Title\n=====\n\nHello **World**"

    def test_turndown_bytes(self):
        """Test that byte input is accepted."""
        assert MarkdownService().turndown(b"<p>bytes</p>") == "bytes"

    def test_turndown_stream(self):
        """Test the streaming path with several chunks."""
        service = MarkdownService()
        assert service.turndown_stream(["<p>Hel", "lo</p><p>Wor", "ld</p>"]) == "Hello\n\nWorld"

    def test_to_ast(self):
        """Test that the document model is returned without rendering."""
        assert MarkdownService().to_ast("<h2>Sub</h2>") == Heading(2, [Text("Sub")])

    def test_convert_node(self):
        """Test conversion of an existing node tree."""
        root = Node.document([Node.element("p", children=[Node.text("x")])])
        assert MarkdownService().convert_node(root) == "x"

    def test_convert_events(self):
        """Test conversion of ready-made events."""
        events = [ParseEvent.open_tag("em"), ParseEvent.text_chunk("x"), ParseEvent.close_tag("em")]
        assert MarkdownService().convert_events(events) == "_x_"

    def test_serialize(self):
        """Test serialization with the service options."""
        service = MarkdownService(heading_style="atx")
        assert service.serialize(Heading(1, [Text("T")])) == "# T"

    def test_escape(self):
        """Test the public escape helper."""
        assert MarkdownService().escape("*a* [b]") == "\\*a\\* \\[b\\]"


class TestStrictMode:
    """Tests for parse failure handling."""

    def test_strict_raises(self):
        """Test that parse failures raise by default."""
        with pytest.raises(HtmlParseError):
            MarkdownService().turndown(None)  # type: ignore[arg-type]

    def test_lenient_returns_empty(self):
        """Test that lenient conversion degrades to empty output."""
        service = MarkdownService()
        assert service.to_ast(None, strict=False) == Document([])  # type: ignore[arg-type]
        assert service.turndown(None, strict=False) == ""  # type: ignore[arg-type]
        assert service.turndown_rules(None, strict=False) == ""  # type: ignore[arg-type]

    def test_lenient_stream_keeps_partial_result(self):
        """Test that a bad chunk keeps what was converted before it."""
        service = MarkdownService()
        chunks = ["<p>kept</p>", b"<p>bad</p>"]
        assert service.turndown_stream(chunks, strict=False) == "kept"  # type: ignore[list-item]
        with pytest.raises(HtmlParseError):
            service.turndown_stream(chunks)  # type: ignore[arg-type]


class TestConfiguration:
    """Tests for option and extension handling."""

    def test_overrides_in_constructor(self):
        """Test keyword overrides on top of base options."""
        service = MarkdownService(Options(bullet_list_marker="-"), heading_style="atx")
        assert service.options.heading_style == "atx"
        assert service.options.bullet_list_marker == "-"

    def test_invalid_override(self):
        """Test that invalid option values are rejected."""
        with pytest.raises(ValidationError):
            MarkdownService(bullet_list_marker="x")

    def test_configure(self):
        """Test replacing options on an existing service."""
        service = MarkdownService()
        assert service.configure(heading_style="atx") is service
        assert service.turndown("<h1>T</h1>") == "# T"

    def test_chaining(self):
        """Test that extension methods return the service."""
        service = MarkdownService()
        assert service.keep("iframe").remove("nav").use(lambda s: None) is service

    def test_keep_and_remove_apply_to_tree_path(self):
        """Test filters in the tree and stream paths."""
        service = MarkdownService().keep("iframe").remove("nav")
        html = '<nav><p>menu</p></nav><iframe src="x"></iframe>'
        assert service.turndown(html) == '<iframe src="x"></iframe>'
        assert service.turndown_stream(html) == '<iframe src="x"></iframe>'

    def test_use_plugin(self):
        """Test that plugins receive the service."""

        def strikethrough(service):
            service.keep("del")

        service = MarkdownService().use(strikethrough)
        assert service.turndown("<p>a <del>b</del></p>") == "a <del>b</del>"

    def test_use_plugin_list(self):
        """Test applying several plugins at once."""
        seen = []
        MarkdownService().use([lambda s: seen.append(1), lambda s: seen.append(2)])
        assert seen == [1, 2]

    def test_to_ast_paragraph(self):
        """Test to_ast for plain text."""
        assert MarkdownService().to_ast("hi") == Paragraph([Text("hi")])
