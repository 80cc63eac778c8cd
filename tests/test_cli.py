"""Tests for the command-line interface."""

import io
import logging
import sys

import pytest

from markdownizer.cli import build_options, create_parser, main
from markdownizer.logging_config import level_for, setup_logging


@pytest.fixture
def html_file(tmp_path):
    path = tmp_path / "page.html"
    path.write_text("<h1>Title</h1><p>Hello <b>World</b></p><nav>menu</nav>", encoding="utf-8")
    return path


class TestMain:
    """Tests for the markdownizer entry point."""

    def test_convert_to_stdout(self, html_file, capsys):
        """Test converting a file to stdout."""
        assert main([str(html_file)]) == 0
        assert capsys.readouterr().out == "Title\n=====\n\nHello **World**\n\nmenu\n"

    def test_convert_to_file(self, html_file, tmp_path):
        """Test writing the output to a file."""
        output = tmp_path / "page.md"
        assert main([str(html_file), "-o", str(output), "-q"]) == 0
        assert output.read_text(encoding="utf-8").startswith("Title\n=====")

    @pytest.mark.parametrize("mode", ["tree", "stream", "rules"])
    def test_modes_agree(self, html_file, capsys, mode):
        """Test that every conversion mode gives the same output here."""
        assert main([str(html_file), "--mode", mode, "--chunk-size", "5", "--heading-style", "atx"]) == 0
        assert capsys.readouterr().out == "# Title\n\nHello **World**\n\nmenu\n"

    def test_remove_flag(self, html_file, capsys):
        """Test the --remove filter."""
        assert main([str(html_file), "--remove", "nav"]) == 0
        assert "menu" not in capsys.readouterr().out

    def test_keep_flag(self, html_file, capsys):
        """Test the --keep filter."""
        assert main([str(html_file), "--keep", "nav"]) == 0
        assert "<nav>menu</nav>" in capsys.readouterr().out

    def test_stdin(self, monkeypatch, capsys):
        """Test reading HTML from stdin."""
        monkeypatch.setattr(sys, "stdin", io.StringIO("<p>from stdin</p>"))
        assert main([]) == 0
        assert capsys.readouterr().out == "from stdin\n"

    def test_missing_input(self, tmp_path):
        """Test that a missing input file fails."""
        assert main([str(tmp_path / "missing.html")]) == 1

    @pytest.mark.parametrize("mode", ["tree", "stream", "rules"])
    def test_invalid_utf8_file(self, tmp_path, mode):
        """Test that undecodable input fails cleanly in every mode."""
        path = tmp_path / "bad.html"
        path.write_bytes(b"<p>\xff\xfe</p>")
        assert main([str(path), "--mode", mode]) == 1

    def test_invalid_utf8_stdin(self, monkeypatch):
        """Test that undecodable stdin fails cleanly."""
        stdin = io.TextIOWrapper(io.BytesIO(b"<p>\xff</p>"), encoding="utf-8")
        monkeypatch.setattr(sys, "stdin", stdin)
        assert main([]) == 1

    def test_config_file(self, html_file, tmp_path, capsys):
        """Test options loaded from a config file."""
        config = tmp_path / "options.json"
        config.write_text('{"headingStyle": "atx"}')
        assert main([str(html_file), "-c", str(config)]) == 0
        assert capsys.readouterr().out.startswith("# Title")

    def test_invalid_config(self, html_file, tmp_path):
        """Test that an invalid config file fails."""
        config = tmp_path / "options.json"
        config.write_text('{"bulletListMarker": "x"}')
        assert main([str(html_file), "-c", str(config)]) == 1


class TestBuildOptions:
    """Tests for combining config files and flags."""

    def test_flags_override_config(self, tmp_path):
        """Test that command-line flags win over the config file."""
        config = tmp_path / "options.json"
        config.write_text('{"headingStyle": "atx", "hr": "---"}')
        args = create_parser().parse_args(["-c", str(config), "--hr", "___"])
        options = build_options(args)
        assert options.heading_style == "atx"
        assert options.hr == "___"

    def test_no_flags(self):
        """Test that defaults are used without flags or config."""
        args = create_parser().parse_args([])
        assert build_options(args).hr == "* * *"


class TestSetupLogging:
    """Tests for logging setup."""

    def test_level_and_stream(self):
        """Test that the package logger writes to the given stream."""
        stream = io.StringIO()
        logger = setup_logging("DEBUG", stream=stream, force=True, format_string="%(levelname)s %(message)s")
        logging.getLogger("markdownizer.test").debug("hello")
        assert logger.level == logging.DEBUG
        assert stream.getvalue() == "DEBUG hello\n"
        setup_logging("WARNING", force=True)

    def test_level_for_flags(self):
        """Test mapping of verbosity flags to levels."""
        assert level_for() == "WARNING"
        assert level_for(verbose=True) == "DEBUG"
        assert level_for(verbose=True, quiet=True) == "ERROR"
