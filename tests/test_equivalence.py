"""Tests that the tree and streaming paths agree."""

import pytest

from markdownizer import MarkdownService
from markdownizer.conversion import convert, iter_events, parse_html, process

CORPUS = [
    "<p>Hello <strong>World</strong></p>",
    "<h1>Title</h1><h2>Sub</h2><h3>Small</h3>",
    "<p>Some <em>emphasis</em> and <b>bold</b> and <code>code</code>.</p>",
    '<p><a href="https://example.com" title="Ex">Example</a></p>',
    '<p><img src="a.png" alt="An image"></p>',
    "<ul><li>One</li><li>Two<ul><li>Nested</li></ul></li></ul>",
    '<ol start="5"><li>Five</li><li>Six</li></ol>',
    '<pre><code class="language-python">def f():\n    return 1\n</code></pre>',
    "<blockquote><p>Quoted</p><p>Twice</p></blockquote>",
    (
        "<table><thead><tr><th>A</th><th>B</th></tr></thead>"
        "<tbody><tr><td>1</td><td>2</td></tr></tbody></table>"
    ),
    "<div><p>a</p>text<span>more</span><hr><p>b<br>c</p></div>",
    "<article><section><p>deep</p></section></article>",
    "<p>1. escaped * chars _ here</p>",
    "<p>a<script>bad()</script>b</p>",
    "<!DOCTYPE html><html><head><title>T</title></head><body><p>x</p></body></html>",
    "<p>Tom &amp; Jerry</p>",
    "<p>a<!-- note -->b</p>",
    "<ul>\n  <li>spaced</li>\n  <li>items</li>\n</ul>\n",
    '<div><iframe src="https://example.com/embed"></iframe><p>after</p></div>',
    "<ul><li>Press <kbd>Ctrl</kbd> now</li></ul>",
    "<div>This is <del>old</del> text</div>",
    "<p>a<hr>b</p>",
    '<p><a href="">x</a></p>',
]

# Inputs on which the rule engine and the AST paths render the same text.
RULE_AGREEMENT = [
    "<ul><li>Press <kbd>Ctrl</kbd> now</li></ul>",
    "<div>This is <del>old</del> text</div>",
    "<div><font>big <b>bold</b></font> end</div>",
    "<p>a<hr>b</p>",
    '<p><a href="">x</a></p>',
    "<p>Hello <b> World</b></p>",
    '<p><img src="x.png" alt="a]b"></p>',
]


def chunked(html, size):
    return [html[i : i + size] for i in range(0, len(html), size)]


class TestPathEquivalence:
    """Tests for identical output from tree and stream conversion."""

    @pytest.mark.parametrize("html", CORPUS)
    def test_same_ast(self, html):
        """Test that both converters build the same AST."""
        assert convert(parse_html(html)) == process(iter_events(html))

    @pytest.mark.parametrize("html", CORPUS)
    def test_same_markdown_any_chunking(self, html):
        """Test that streamed output matches the tree output for any chunk size."""
        service = MarkdownService()
        expected = service.turndown(html)
        assert service.turndown_stream(html) == expected
        for size in (1, 5, 13):
            assert service.turndown_stream(chunked(html, size)) == expected

    @pytest.mark.parametrize("html", CORPUS)
    def test_same_markdown_with_filters(self, html):
        """Test agreement when keep and remove filters are active."""
        service = MarkdownService(heading_style="atx", code_block_style="fenced")
        service.keep("iframe").remove(["blockquote", "table"])
        assert service.turndown_stream(chunked(html, 4)) == service.turndown(html)


class TestRuleAgreement:
    """Tests for agreement between the rule engine and the AST paths."""

    @pytest.mark.parametrize("html", RULE_AGREEMENT)
    def test_same_text(self, html):
        """Test that rule-based and AST-based conversion give the same Markdown."""
        service = MarkdownService()
        assert service.turndown_rules(html) == service.turndown(html)
        assert service.turndown_stream(html) == service.turndown(html)
