"""Core intermediate representation (IR) for parsed documents."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal, Protocol

ElementType = Literal["heading", "paragraph", "image", "list", "table"]

PLACEHOLDER_RE = re.compile(r"\[IMAGE_PLACEHOLDER_(\d+)\]")

HEADING_STYLES = {
    1: "title",
    2: "subtitle",
    3: "subheading",
    4: "minor-heading",
    5: "caption",
    6: "caption",
}


def image_placeholder(index: int) -> str:
    return f"[IMAGE_PLACEHOLDER_{index}]"


def heading_style(level: int) -> str:
    return HEADING_STYLES.get(level, "body")


@dataclass(slots=True)
class DocumentElement:
    type: ElementType
    content: str
    level: int | None = None
    style: str | None = None


@dataclass(slots=True)
class ImageElement:
    url: str
    alt: str = ""
    position: int = 0
    blob: bytes | None = None
    media_type: str | None = None


@dataclass(slots=True)
class Citation:
    original: str
    harvard: str
    position: int


@dataclass(slots=True)
class DocumentStructure:
    title: str | None = None
    content: list[DocumentElement] = field(default_factory=list)
    images: list[ImageElement] = field(default_factory=list)
    citations: list[Citation] = field(default_factory=list)

    def headings(self) -> list[DocumentElement]:
        return [el for el in self.content if el.type == "heading"]


@dataclass(slots=True)
class ParsedContent:
    """Parser output before citations are merged in.

    ``source_text`` is the text citation extraction runs over: the Markdown
    source itself, or the HTML produced from a Word file.
    """

    content: list[DocumentElement] = field(default_factory=list)
    images: list[ImageElement] = field(default_factory=list)
    source_text: str = ""
    title: str | None = None


def first_title(content: list[DocumentElement]) -> str | None:
    for element in content:
        if element.type == "heading" and element.level == 1 and element.content.strip():
            return element.content.strip()
    return None


class Parser(Protocol):
    def parse(self, input_path: Path) -> ParsedContent:  # pragma: no cover - structural protocol
        """Parse an input document into ParsedContent."""

    def parse_bytes(self, data: bytes) -> ParsedContent:  # pragma: no cover - structural protocol
        """Parse raw file bytes into ParsedContent."""
