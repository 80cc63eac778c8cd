"""Tests for the streaming converter."""

from markdownizer.ast import (
    CodeBlock,
    Document,
    Emphasis,
    HtmlBlock,
    Image,
    LineBreak,
    List,
    ListItem,
    Paragraph,
    Strong,
    Table,
    Text,
    ThematicBreak,
)
from markdownizer.conversion import StreamingConverter, iter_events, process
from markdownizer.models.events import ParseEvent
from markdownizer.serializer import serialize


class TestEvents:
    """Tests for basic open/text/close handling."""

    def test_paragraph(self):
        """Test a paragraph built from three events."""
        converter = StreamingConverter()
        converter.open("p")
        converter.text("Hello World")
        converter.close("p")
        assert converter.finish() == Paragraph([Text("Hello World")])

    def test_nested_inline(self):
        """Test strong text inside a paragraph."""
        converter = StreamingConverter()
        converter.open("p")
        converter.text("Hello ")
        converter.open("strong")
        converter.text("World")
        converter.close("strong")
        converter.close("p")
        assert converter.finish() == Paragraph([Text("Hello "), Strong([Text("World")])])

    def test_depth(self):
        """Test the open element count."""
        converter = StreamingConverter()
        assert converter.depth == 0
        converter.open("div")
        converter.open("p")
        assert converter.depth == 2
        converter.close("p")
        assert converter.depth == 1

    def test_text_split_across_events(self):
        """Test that consecutive text events join into one paragraph."""
        converter = StreamingConverter()
        converter.open("p")
        converter.text("Hel")
        converter.text("lo")
        converter.close("p")
        assert serialize(converter.finish()) == "Hello"

    def test_inlines_at_root(self):
        """Test that root-level inlines become a paragraph."""
        converter = StreamingConverter()
        converter.text("a")
        converter.open("em")
        converter.text("b")
        converter.close("em")
        assert converter.finish() == Paragraph([Text("a"), Emphasis([Text("b")])])

    def test_trailing_inline_after_block(self):
        """Test that inline content after a block gets its own paragraph."""
        converter = StreamingConverter()
        converter.open("p")
        converter.text("a")
        converter.close("p")
        converter.text("tail")
        assert converter.finish() == Document([Paragraph([Text("a")]), Paragraph([Text("tail")])])

    def test_whitespace_only_stream(self):
        """Test that whitespace alone converts to an empty document."""
        converter = StreamingConverter()
        converter.text("   \n ")
        assert converter.finish() == Document([])

    def test_handle_and_feed(self):
        """Test the event-object entry points."""
        events = [ParseEvent.open_tag("h2"), ParseEvent.text_chunk("Sub"), ParseEvent.close_tag("h2")]
        converter = StreamingConverter()
        for event in events:
            converter.handle(event)
        assert serialize(converter.finish()) == "Sub\n---"
        assert serialize(StreamingConverter().feed(events).finish()) == "Sub\n---"


class TestVoidElements:
    """Tests for elements without close tags."""

    def test_line_break(self):
        """Test that br is complete on open."""
        converter = StreamingConverter()
        converter.open("p")
        converter.text("a")
        converter.open("br")
        assert converter.depth == 1
        converter.text("b")
        converter.close("p")
        assert converter.finish() == Paragraph([Text("a"), LineBreak(), Text("b")])

    def test_thematic_break(self):
        """Test hr at the root."""
        converter = StreamingConverter()
        converter.open("hr")
        assert converter.finish() == ThematicBreak()

    def test_unknown_tag_joins_inline_run(self):
        """Test that an unknown tag inside a list item stays in the item's sentence."""
        converter = StreamingConverter()
        converter.open("ul")
        converter.open("li")
        converter.text("Press ")
        converter.open("kbd")
        converter.text("Ctrl")
        converter.close("kbd")
        converter.text(" now")
        converter.close("li")
        converter.close("ul")
        paragraph = Paragraph([Text("Press "), Text("Ctrl"), Text(" now")])
        assert converter.finish() == List(ordered=False, start=1, items=[ListItem([paragraph])])

    def test_thematic_break_inside_paragraph(self):
        """Test that hr splits the open paragraph."""
        converter = StreamingConverter()
        converter.open("p")
        converter.text("a")
        converter.open("hr")
        converter.text("b")
        converter.close("p")
        expected = Document([Paragraph([Text("a")]), ThematicBreak(), Paragraph([Text("b")])])
        assert converter.finish() == expected

    def test_image(self):
        """Test img attributes."""
        converter = StreamingConverter()
        converter.open("img", {"src": "x.png", "alt": "A"})
        assert converter.finish() == Paragraph([Image("A", "x.png")])


class TestUnbalancedInput:
    """Tests for recovery from partial and malformed streams."""

    def test_finish_closes_open_elements(self):
        """Test that finish returns content of unclosed elements."""
        converter = StreamingConverter()
        converter.open("p")
        converter.text("unfinished")
        assert converter.finish() == Paragraph([Text("unfinished")])

    def test_partial_list(self):
        """Test a list cut off inside an item."""
        converter = StreamingConverter()
        converter.open("ul")
        converter.open("li")
        converter.text("a")
        assert converter.finish() == List(items=[ListItem([Paragraph([Text("a")])])])

    def test_stray_close_ignored(self):
        """Test that a close tag with no open element is ignored."""
        converter = StreamingConverter()
        converter.close("div")
        converter.open("p")
        converter.text("x")
        converter.close("span")
        converter.close("p")
        assert converter.depth == 0
        assert converter.finish() == Paragraph([Text("x")])

    def test_close_pops_intervening_elements(self):
        """Test that closing an outer element closes the inner ones first."""
        converter = StreamingConverter()
        converter.open("div")
        converter.open("p")
        converter.text("x")
        converter.close("div")
        assert converter.depth == 0
        assert converter.finish() == Paragraph([Text("x")])

    def test_finish_resets(self):
        """Test that a converter can be reused after finish."""
        converter = StreamingConverter()
        converter.open("p")
        converter.text("first")
        converter.finish()
        assert converter.depth == 0
        converter.open("p")
        converter.text("second")
        converter.close("p")
        assert converter.finish() == Paragraph([Text("second")])


class TestContent:
    """Tests for content handling during streaming."""

    def test_verbatim_code(self):
        """Test that pre/code text is kept as-is."""
        converter = StreamingConverter()
        converter.open("pre")
        converter.open("code")
        converter.text("a  b\n")
        converter.close("code")
        converter.close("pre")
        assert converter.finish() == CodeBlock(None, "a  b\n", fenced=False)

    def test_elided_content_ignored(self):
        """Test that script content never reaches the output."""
        converter = StreamingConverter()
        converter.open("script")
        converter.text("alert(1)")
        converter.close("script")
        converter.open("p")
        converter.text("x")
        assert converter.finish() == Paragraph([Text("x")])

    def test_keep(self):
        """Test that kept elements are re-rendered as HTML."""
        converter = StreamingConverter(keep=["iframe"])
        converter.open("iframe", {"src": "x"})
        converter.text("fallback")
        converter.close("iframe")
        assert converter.finish() == HtmlBlock('<iframe src="x">fallback</iframe>')

    def test_remove(self):
        """Test that removed elements drop everything inside."""
        converter = StreamingConverter(remove=["nav"])
        converter.open("nav")
        converter.open("ul")
        converter.open("li")
        converter.text("menu")
        converter.close("nav")
        converter.open("p")
        converter.text("body")
        converter.close("p")
        assert converter.finish() == Paragraph([Text("body")])

    def test_table(self):
        """Test a table assembled from tokenized markup."""
        html = "<table><tr><th>A</th></tr><tr><td>1</td></tr></table>"
        block = process(iter_events(html))
        assert block == Table(headers=[[Text("A")]], rows=[[[Text("1")]]])

    def test_process(self):
        """Test the one-shot helper."""
        events = iter_events("<ol><li>x</li></ol>")
        assert serialize(process(events)) == "1.  x"
