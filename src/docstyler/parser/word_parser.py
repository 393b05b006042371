"""Word parser: infer headings from font-size statistics of converted HTML."""

from __future__ import annotations

import logging
import re
from pathlib import Path

from bs4 import BeautifulSoup, Tag

from .base import DocumentElement, ImageElement, ParsedContent, first_title, image_placeholder
from .docx_html import docx_to_html

LOG = logging.getLogger(__name__)

DEFAULT_FONT_SIZE = "16px"

# Pixel deltas above the body baseline. Empirical and tunable.
TITLE_DELTA = 8
SUBTITLE_DELTA = 4
SUBHEADING_DELTA = 2

_FONT_SIZE_RE = re.compile(r"(?:^|;)\s*font-size\s*:\s*([^;]+)", re.IGNORECASE)
_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")


class WordParser:
    """Parse a .docx file into ParsedContent."""

    def parse(self, input_path: Path) -> ParsedContent:
        return self.parse_bytes(Path(input_path).read_bytes())

    def parse_bytes(self, data: bytes) -> ParsedContent:
        return self.parse_html(docx_to_html(data))

    def parse_html(self, html: str) -> ParsedContent:
        soup = BeautifulSoup(html, "html.parser")
        counts = count_font_sizes(element_font_size(el) for el in soup.find_all(True))
        common = most_common_size(counts)
        LOG.debug("Font-size histogram %s, body baseline %s px", counts, common)

        root = soup.body if soup.body is not None else soup
        content: list[DocumentElement] = []
        images: list[ImageElement] = []

        for index, element in enumerate(child for child in root.children if isinstance(child, Tag)):
            if element.name == "img":
                images.append(ImageElement(url=element.get("src", ""), alt=element.get("alt") or "", position=index))
                content.append(DocumentElement(type="image", content=image_placeholder(len(images) - 1)))
                continue
            if element.name == "table":
                content.append(DocumentElement(type="table", content=_table_text(element)))
                continue
            if element.name in ("ul", "ol"):
                items = [li.get_text().strip() for li in element.find_all("li", recursive=False)]
                content.append(
                    DocumentElement(
                        type="list",
                        content="\n".join(item for item in items if item),
                        style="ordered" if element.name == "ol" else "bullet",
                    )
                )
                continue

            level, style = classify_font_size(element_font_size(element), common)
            content.append(
                DocumentElement(
                    type="heading" if level else "paragraph",
                    content=element.get_text(),
                    level=level,
                    style=style,
                )
            )

        return ParsedContent(content=content, images=images, source_text=html, title=first_title(content))


def element_font_size(element: Tag) -> str:
    """Literal inline ``font-size`` of *element*; inherited sizes are not resolved."""
    m = _FONT_SIZE_RE.search(element.get("style") or "")
    if m:
        return m.group(1).strip()
    return DEFAULT_FONT_SIZE


def count_font_sizes(sizes) -> dict[str, int]:
    counts: dict[str, int] = {}
    for size in sizes:
        counts[size] = counts.get(size, 0) + 1
    return counts


def most_common_size(counts: dict[str, int]) -> int | None:
    """Pixel value of the most frequent size; the first key seen wins a tie."""
    if not counts:
        return parse_px(DEFAULT_FONT_SIZE)
    return parse_px(max(counts, key=counts.__getitem__))


def parse_px(value: str) -> int | None:
    """Integer prefix of a CSS length (``"12.5px"`` -> 12), ``None`` if there is none."""
    m = _LEADING_INT_RE.match(value)
    return int(m.group(1)) if m else None


def classify_font_size(size: str, common: int | None) -> tuple[int | None, str]:
    """Return ``(heading level or None, style)`` for an element of *size*."""
    px = parse_px(size)
    if px is None or common is None:
        return None, "body"
    if px > common + TITLE_DELTA:
        return 1, "title"
    if px > common + SUBTITLE_DELTA:
        return 2, "subtitle"
    if px > common + SUBHEADING_DELTA:
        return 3, "subheading"
    return None, "body"


def _table_text(table: Tag) -> str:
    """``| a | b |`` line per row."""
    rows = []
    for tr in table.find_all("tr"):
        cells = [cell.get_text().strip() for cell in tr.find_all(["td", "th"])]
        rows.append("| " + " | ".join(cells) + " |")
    return "\n".join(rows)
