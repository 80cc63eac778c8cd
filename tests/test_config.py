"""Tests for Options and option loading."""

import json

import pytest
from pydantic import ValidationError

from markdownizer.config import load_options, options_from_mapping
from markdownizer.errors import ConfigError
from markdownizer.models.options import CodeBlockStyle, HeadingStyle, LinkStyle, Options


class TestOptions:
    """Tests for the Options model."""

    def test_defaults(self):
        """Test the default rendering options."""
        options = Options()
        assert options.heading_style == HeadingStyle.SETEXT
        assert options.hr == "* * *"
        assert options.bullet_list_marker == "*"
        assert options.code_block_style == CodeBlockStyle.INDENTED
        assert options.fence == "```"
        assert options.em_delimiter == "_"
        assert options.strong_delimiter == "**"
        assert options.link_style == LinkStyle.INLINED

    def test_enum_values_case_insensitive(self):
        """Test that enum options accept any case."""
        assert Options(heading_style="ATX").heading_style == HeadingStyle.ATX

    @pytest.mark.parametrize(
        "field,value",
        [
            ("bullet_list_marker", "x"),
            ("em_delimiter", "**"),
            ("strong_delimiter", "*"),
            ("fence", "``"),
            ("hr", "  "),
            ("heading_style", "underline"),
        ],
    )
    def test_invalid_values(self, field, value):
        """Test that invalid option values are rejected."""
        with pytest.raises(ValidationError):
            Options(**{field: value})

    def test_unknown_field_rejected(self):
        """Test that typos in option names are errors."""
        with pytest.raises(ValidationError):
            Options(heading="atx")

    def test_frozen(self):
        """Test that options cannot be mutated."""
        options = Options()
        with pytest.raises(ValidationError):
            options.hr = "---"

    def test_with_overrides(self):
        """Test deriving a variant leaves the original unchanged."""
        base = Options()
        variant = base.with_overrides(fence="~~~", code_block_style="fenced")
        assert variant.fence == "~~~"
        assert variant.code_block_style == CodeBlockStyle.FENCED
        assert base.fence == "```"


class TestOptionsFromMapping:
    """Tests for options_from_mapping."""

    def test_snake_case(self):
        """Test snake_case keys."""
        assert options_from_mapping({"heading_style": "atx"}).heading_style == HeadingStyle.ATX

    def test_camel_and_kebab_case(self):
        """Test camelCase and kebab-case keys."""
        options = options_from_mapping({"bulletListMarker": "-", "code-block-style": "fenced"})
        assert options.bullet_list_marker == "-"
        assert options.code_block_style == CodeBlockStyle.FENCED

    def test_options_section(self):
        """Test options nested under an 'options' key."""
        assert options_from_mapping({"options": {"hr": "---"}}).hr == "---"
        assert options_from_mapping({"options": None}) == Options()

    def test_invalid_values(self):
        """Test that validation failures become ConfigError."""
        with pytest.raises(ConfigError):
            options_from_mapping({"emDelimiter": "~"})
        with pytest.raises(ConfigError):
            options_from_mapping({"unknown": 1})

    def test_not_a_mapping(self):
        """Test that non-mappings are rejected."""
        with pytest.raises(ConfigError):
            options_from_mapping(["heading_style"])  # type: ignore[arg-type]


class TestLoadOptions:
    """Tests for load_options."""

    def test_yaml(self, tmp_path):
        """Test loading a YAML config."""
        path = tmp_path / "options.yaml"
        path.write_text("headingStyle: atx\ncodeBlockStyle: fenced\nfence: '~~~'\n")
        options = load_options(path)
        assert options.heading_style == HeadingStyle.ATX
        assert options.code_block_style == CodeBlockStyle.FENCED
        assert options.fence == "~~~"

    def test_json(self, tmp_path):
        """Test loading a JSON config."""
        path = tmp_path / "options.json"
        path.write_text(json.dumps({"options": {"bullet_list_marker": "+"}}))
        assert load_options(str(path)).bullet_list_marker == "+"

    def test_empty_yaml_gives_defaults(self, tmp_path):
        """Test that an empty file means default options."""
        path = tmp_path / "empty.yml"
        path.write_text("")
        assert load_options(path) == Options()

    def test_missing_file(self, tmp_path):
        """Test that a missing file raises ConfigError."""
        with pytest.raises(ConfigError, match="not found"):
            load_options(tmp_path / "missing.yaml")

    def test_unsupported_format(self, tmp_path):
        """Test that unknown extensions raise ConfigError."""
        path = tmp_path / "options.toml"
        path.write_text("hr = '---'")
        with pytest.raises(ConfigError, match="Unsupported"):
            load_options(path)

    def test_malformed_file(self, tmp_path):
        """Test that syntax errors raise ConfigError."""
        path = tmp_path / "options.json"
        path.write_text("{not json")
        with pytest.raises(ConfigError):
            load_options(path)

    def test_invalid_values_in_file(self, tmp_path):
        """Test that invalid values raise ConfigError."""
        path = tmp_path / "options.yaml"
        path.write_text("bulletListMarker: x\n")
        with pytest.raises(ConfigError):
            load_options(path)
