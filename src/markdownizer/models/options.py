"""Pydantic option models for Markdown rendering."""

import re
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator


class HeadingStyle(str, Enum):
    """Heading rendering styles. Setext only covers levels 1 and 2."""

    SETEXT = "setext"
    ATX = "atx"


class CodeBlockStyle(str, Enum):
    """Code block rendering styles."""

    INDENTED = "indented"
    FENCED = "fenced"


class LinkStyle(str, Enum):
    """Link rendering styles."""

    INLINED = "inlined"
    REFERENCED = "referenced"


class LinkReferenceStyle(str, Enum):
    """Reference label styles for referenced links (accepted, not yet rendered)."""

    FULL = "full"
    COLLAPSED = "collapsed"
    SHORTCUT = "shortcut"


_FENCE_RE = re.compile(r"^(`{3,}|~{3,})$")


class Options(BaseModel):
    """
    Rendering options for a single conversion.

    Instances are immutable; use ``with_overrides`` to derive a variant.

    Example:
        options = Options(heading_style="atx", code_block_style="fenced")
        wide = options.with_overrides(bullet_list_marker="-")
    """

    heading_style: HeadingStyle = Field(HeadingStyle.SETEXT, description="setext or atx headings")
    hr: str = Field("* * *", description="Literal thematic break string")
    bullet_list_marker: str = Field("*", description="Marker for unordered list items")
    code_block_style: CodeBlockStyle = Field(CodeBlockStyle.INDENTED, description="indented or fenced code")
    fence: str = Field("```", description="Fence string for fenced code blocks")
    em_delimiter: str = Field("_", description="Emphasis delimiter character")
    strong_delimiter: str = Field("**", description="Strong emphasis delimiter string")
    link_style: LinkStyle = Field(LinkStyle.INLINED, description="inlined or referenced links")
    link_reference_style: LinkReferenceStyle = Field(
        LinkReferenceStyle.FULL,
        description="Reference label style for referenced links",
    )

    model_config = {"extra": "forbid", "frozen": True}

    @field_validator(
        "heading_style",
        "code_block_style",
        "link_style",
        "link_reference_style",
        mode="before",
    )
    @classmethod
    def _normalize_enum(cls, v: Any) -> Any:
        if isinstance(v, str) and not isinstance(v, Enum):
            return v.strip().lower()
        return v

    @field_validator("hr")
    @classmethod
    def _check_hr(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("hr must not be blank")
        return v

    @field_validator("bullet_list_marker")
    @classmethod
    def _check_bullet(cls, v: str) -> str:
        if v not in ("*", "-", "+"):
            raise ValueError(f"bullet_list_marker must be one of '*', '-', '+', got {v!r}")
        return v

    @field_validator("em_delimiter")
    @classmethod
    def _check_em(cls, v: str) -> str:
        if v not in ("_", "*"):
            raise ValueError(f"em_delimiter must be '_' or '*', got {v!r}")
        return v

    @field_validator("strong_delimiter")
    @classmethod
    def _check_strong(cls, v: str) -> str:
        if v not in ("**", "__"):
            raise ValueError(f"strong_delimiter must be '**' or '__', got {v!r}")
        return v

    @field_validator("fence")
    @classmethod
    def _check_fence(cls, v: str) -> str:
        if not _FENCE_RE.match(v):
            raise ValueError(f"fence must be three or more backticks or tildes, got {v!r}")
        return v

    def with_overrides(self, **changes: Any) -> "Options":
        """
        Build a new validated Options with some fields replaced.

        Args:
            **changes: Field values to replace

        Returns:
            New Options instance
        """
        data = self.model_dump()
        data.update(changes)
        return Options(**data)
