"""Built-in CommonMark rules (plus a basic pipe table)."""

import re
from typing import TYPE_CHECKING, Optional

from ..conversion.text import clean_attribute, language_from_class, parse_start
from ..models.options import CodeBlockStyle, HeadingStyle, LinkStyle, Options
from ..serializer import (
    code_span,
    delimit,
    escape_alt,
    fence_for,
    single_line,
    table_cell_text,
    title_suffix,
)
from .rule import Filter, Rule

if TYPE_CHECKING:
    from .engine import NodeRef

_EXTRA_NEWLINES_RE = re.compile(r"\n{3,}")


def paragraph(node: "NodeRef", content: str, options: Options) -> str:
    return f"\n\n{content.strip()}\n\n"


def line_break(node: "NodeRef", content: str, options: Options) -> str:
    return "  \n"


def heading(node: "NodeRef", content: str, options: Options) -> str:
    level = int(node.tag_name[1])
    content = content.strip()
    if not content:
        return ""
    if options.heading_style == HeadingStyle.SETEXT and level <= 2:
        underline = "=" if level == 1 else "-"
        return f"\n\n{content}\n{underline * len(content)}\n\n"
    return f"\n\n{'#' * level} {single_line(content)}\n\n"


def blockquote(node: "NodeRef", content: str, options: Options) -> str:
    content = content.strip()
    if not content:
        return ""
    lines = [f"> {line}" if line else ">" for line in content.split("\n")]
    return "\n\n" + "\n".join(lines) + "\n\n"


def list_block(node: "NodeRef", content: str, options: Options) -> str:
    content = content.strip("\n")
    if node.parent_tag == "li":
        return f"\n{content}"
    return f"\n\n{content}\n\n"


def list_item(node: "NodeRef", content: str, options: Options) -> str:
    parent = node.parent
    if parent is not None and parent.tag_name == "ol":
        prefix = f"{parse_start(parent.attr('start')) + node.type_index}.  "
    else:
        prefix = f"{options.bullet_list_marker}   "
    content = _EXTRA_NEWLINES_RE.sub("\n\n", content.strip())
    first, *rest = content.split("\n")
    indent = " " * len(prefix)
    lines = [prefix + first if first else prefix.rstrip()]
    lines.extend(indent + line if line else "" for line in rest)
    return "\n".join(lines) + "\n"


def _code_text(node: "NodeRef") -> tuple[str, Optional[str]]:
    code = node.text_content()
    if code.endswith("\n"):
        code = code[:-1]
    language = None
    for child in node.element_children():
        if child.tag_name == "code":
            language = language_from_class(child.attr("class"))
            break
    return code, language or language_from_class(node.attr("class"))


def indented_code_block(node: "NodeRef", content: str, options: Options) -> str:
    code, _ = _code_text(node)
    if not code.strip():
        return ""
    indented = "\n".join(f"    {line}" for line in code.split("\n"))
    return f"\n\n{indented}\n\n"


def fenced_code_block(node: "NodeRef", content: str, options: Options) -> str:
    code, language = _code_text(node)
    if not code.strip():
        return ""
    fence = fence_for(code, options.fence)
    return f"\n\n{fence}{language or ''}\n{code}\n{fence}\n\n"


def horizontal_rule(node: "NodeRef", content: str, options: Options) -> str:
    return f"\n\n{options.hr}\n\n"


def link(node: "NodeRef", content: str, options: Options) -> str:
    href = clean_attribute(node.attr("href"))
    title = node.attr("title") or None
    if not href and title is None:
        return content
    # referenced links render inline until reference blocks are supported
    return f"[{content}]({href}{title_suffix(title)})"


def emphasis(node: "NodeRef", content: str, options: Options) -> str:
    return delimit(content, options.em_delimiter)


def strong(node: "NodeRef", content: str, options: Options) -> str:
    return delimit(content, options.strong_delimiter)


def code(node: "NodeRef", content: str, options: Options) -> str:
    return code_span(node.text_content())


def image(node: "NodeRef", content: str, options: Options) -> str:
    src = clean_attribute(node.attr("src"))
    if not src:
        return ""
    alt = clean_attribute(node.attr("alt"))
    return f"![{escape_alt(alt)}]({src}{title_suffix(node.attr('title') or None)})"


def table(node: "NodeRef", content: str, options: Options) -> str:
    content = content.strip()
    if not content:
        return ""
    return f"\n\n{content}\n\n"


def table_row(node: "NodeRef", content: str, options: Options) -> str:
    row = content.strip()
    if not row:
        return ""
    if _is_header_row(node):
        cells = [c for c in node.element_children() if c.tag_name in ("th", "td")]
        separator = "| " + " | ".join("---" for _ in cells) + " |"
        return f"{row}\n{separator}\n"
    return f"{row}\n"


def table_cell(node: "NodeRef", content: str, options: Options) -> str:
    prefix = "| " if node.index == 0 else " "
    text = table_cell_text(content)
    return f"{prefix}{text} |"


def _is_header_row(row: "NodeRef") -> bool:
    """The first thead row, or the table's first row when it has no thead."""
    parent = row.parent
    if parent is None:
        return False
    if parent.tag_name == "thead":
        return row.type_index == 0
    table_ref = parent if parent.tag_name == "table" else parent.parent
    if table_ref is None or table_ref.tag_name != "table":
        return False
    children = table_ref.element_children()
    if any(child.tag_name == "thead" for child in children):
        return False
    for child in children:
        if child.tag_name == "tr":
            return child.path == row.path
        if child.tag_name in ("tbody", "tfoot"):
            rows = [r for r in child.element_children() if r.tag_name == "tr"]
            if rows:
                return rows[0].path == row.path
    return False


def _is_code_block(style: CodeBlockStyle):
    def predicate(tag: str, element, options: Options) -> bool:
        return tag == "pre" and options.code_block_style == style

    return predicate


def _is_link(style: LinkStyle):
    def predicate(tag: str, element, options: Options) -> bool:
        return tag == "a" and element.attr("href") is not None and options.link_style == style

    return predicate


def _is_inline_code(tag: str, element, options: Options) -> bool:
    parent_tag = getattr(element, "parent_tag", None)
    return tag == "code" and parent_tag != "pre"


def commonmark_rules() -> dict[str, Rule]:
    """Built-in rules in lookup order, keyed by name."""
    return {
        "paragraph": Rule.for_tag("p", paragraph),
        "lineBreak": Rule.for_tag("br", line_break),
        "heading": Rule.for_tags(["h1", "h2", "h3", "h4", "h5", "h6"], heading),
        "blockquote": Rule.for_tag("blockquote", blockquote),
        "list": Rule.for_tags(["ul", "ol"], list_block),
        "listItem": Rule.for_tag("li", list_item),
        "indentedCodeBlock": Rule(Filter.where(_is_code_block(CodeBlockStyle.INDENTED)), indented_code_block),
        "fencedCodeBlock": Rule(Filter.where(_is_code_block(CodeBlockStyle.FENCED)), fenced_code_block),
        "horizontalRule": Rule.for_tag("hr", horizontal_rule),
        "inlineLink": Rule(Filter.where(_is_link(LinkStyle.INLINED)), link),
        "referenceLink": Rule(Filter.where(_is_link(LinkStyle.REFERENCED)), link),
        "emphasis": Rule.for_tags(["em", "i"], emphasis),
        "strong": Rule.for_tags(["strong", "b"], strong),
        "code": Rule(Filter.where(_is_inline_code), code),
        "image": Rule.for_tag("img", image),
        "table": Rule.for_tag("table", table),
        "tableRow": Rule.for_tag("tr", table_row),
        "tableCell": Rule.for_tags(["th", "td"], table_cell),
    }
