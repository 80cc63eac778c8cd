"""Command-line interface for markdownizer."""

import argparse
import sys
from pathlib import Path
from typing import Iterator, Optional, TextIO

from pydantic import ValidationError
from rich.console import Console

from . import __version__
from .config import load_options
from .errors import MarkdownizerError
from .logging_config import level_for, setup_logging
from .models.options import (
    CodeBlockStyle,
    HeadingStyle,
    LinkReferenceStyle,
    LinkStyle,
    Options,
)
from .service import MarkdownService

# argparse dest -> Options field
OPTION_FLAGS = (
    "heading_style",
    "hr",
    "bullet_list_marker",
    "code_block_style",
    "fence",
    "em_delimiter",
    "strong_delimiter",
    "link_style",
    "link_reference_style",
)


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser for CLI."""
    parser = argparse.ArgumentParser(
        prog="markdownizer",
        description="Convert HTML to Markdown",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Convert a file to stdout
  markdownizer page.html

  # Read stdin, write a file, ATX headings and fenced code
  cat page.html | markdownizer -o page.md --heading-style atx --code-block-style fenced

  # Stream a large document without building a tree
  markdownizer big.html --mode stream

  # Keep iframes as HTML, drop navigation
  markdownizer page.html --keep iframe --remove nav
        """,
    )

    parser.add_argument(
        "input",
        nargs="?",
        default="-",
        help="HTML file to convert ('-' or omitted reads stdin)",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    parser.add_argument(
        "--output",
        "-o",
        type=Path,
        default=None,
        help="Write Markdown to this file (default: stdout)",
    )

    parser.add_argument(
        "--mode",
        "-m",
        choices=["tree", "stream", "rules"],
        default="tree",
        help="Conversion path (default: tree)",
    )

    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=None,
        metavar="FILE",
        help="YAML or JSON file with rendering options",
    )

    parser.add_argument(
        "--chunk-size",
        type=int,
        default=65536,
        metavar="BYTES",
        help="Read size for --mode stream (default: 65536)",
    )

    # Rendering options; flags override the config file
    options_group = parser.add_argument_group("rendering options")
    options_group.add_argument(
        "--heading-style",
        choices=[s.value for s in HeadingStyle],
        help="setext (default) or atx headings",
    )
    options_group.add_argument("--hr", help="Thematic break string (default: '* * *')")
    options_group.add_argument(
        "--bullet-list-marker",
        choices=["*", "-", "+"],
        help="Unordered list marker (default: *)",
    )
    options_group.add_argument(
        "--code-block-style",
        choices=[s.value for s in CodeBlockStyle],
        help="indented (default) or fenced code blocks",
    )
    options_group.add_argument("--fence", help="Fence for fenced code blocks (default: ```)")
    options_group.add_argument(
        "--em-delimiter",
        choices=["_", "*"],
        help="Emphasis delimiter (default: _)",
    )
    options_group.add_argument(
        "--strong-delimiter",
        choices=["**", "__"],
        help="Strong delimiter (default: **)",
    )
    options_group.add_argument(
        "--link-style",
        choices=[s.value for s in LinkStyle],
        help="inlined (default) or referenced links",
    )
    options_group.add_argument(
        "--link-reference-style",
        choices=[s.value for s in LinkReferenceStyle],
        help="Reference label style for referenced links",
    )

    # Element filters
    filter_group = parser.add_argument_group("element filters")
    filter_group.add_argument(
        "--keep",
        action="append",
        default=[],
        metavar="TAG",
        help="Keep elements with this tag as raw HTML (repeatable)",
    )
    filter_group.add_argument(
        "--remove",
        action="append",
        default=[],
        metavar="TAG",
        help="Drop elements with this tag and their content (repeatable)",
    )

    # Output control
    output_group = parser.add_argument_group("output control")
    output_group.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Verbose output",
    )
    output_group.add_argument(
        "--quiet",
        "-q",
        action="store_true",
        help="Suppress output",
    )

    return parser


def build_options(args: argparse.Namespace) -> Options:
    """
    Combine the config file (if any) with command-line overrides.

    Raises:
        ConfigError: If the config file cannot be loaded
        ValidationError: If an override is invalid
    """
    options = load_options(args.config) if args.config else Options()
    overrides = {name: getattr(args, name) for name in OPTION_FLAGS if getattr(args, name) is not None}
    return options.with_overrides(**overrides) if overrides else options


def _read_chunks(stream: TextIO, size: int) -> Iterator[str]:
    while True:
        chunk = stream.read(size)
        if not chunk:
            return
        yield chunk


def run_conversion(args: argparse.Namespace) -> int:
    """Run a conversion with the given arguments."""
    console = Console(stderr=True)

    setup_logging(level_for(args.verbose, args.quiet))

    try:
        options = build_options(args)
    except (MarkdownizerError, ValidationError) as e:
        console.print(f"[red]Configuration error:[/red] {e}")
        return 1

    service = MarkdownService(options)
    for tag in args.keep:
        service.keep(tag)
    for tag in args.remove:
        service.remove(tag)

    from_stdin = args.input == "-"
    if not from_stdin and not Path(args.input).is_file():
        console.print(f"[red]Error:[/red] Input file not found: {args.input}")
        return 1

    stream = sys.stdin if from_stdin else open(args.input, encoding="utf-8")
    try:
        if args.mode == "stream":
            markdown = service.turndown_stream(_read_chunks(stream, args.chunk_size))
        elif args.mode == "rules":
            markdown = service.turndown_rules(stream.read())
        else:
            markdown = service.turndown(stream.read())
    except MarkdownizerError as e:
        console.print(f"[red]Error:[/red] {e}")
        return 1
    except UnicodeDecodeError as e:
        console.print(f"[red]Error:[/red] Input is not valid UTF-8: {e}")
        return 1
    finally:
        if not from_stdin:
            stream.close()

    if args.output:
        args.output.write_text(markdown + "\n", encoding="utf-8")
        if not args.quiet:
            console.print(f"[green]Wrote[/green] {args.output} ({len(markdown)} chars)")
    else:
        sys.stdout.write(markdown + "\n")
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)
    return run_conversion(args)


if __name__ == "__main__":
    sys.exit(main())
