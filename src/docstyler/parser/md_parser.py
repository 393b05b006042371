"""Markdown parser built on the markdown-it token stream."""

from __future__ import annotations

import logging
import re
from pathlib import Path

from markdown_it import MarkdownIt

from .base import DocumentElement, ImageElement, ParsedContent, first_title, heading_style, image_placeholder

LOG = logging.getLogger(__name__)

_IMAGE_RE = re.compile(r"!\[([^\]]*)\]\(([^)]+)\)")


class MarkdownParser:
    """Parse a Markdown file into ParsedContent."""

    def __init__(self) -> None:
        self._md = MarkdownIt("commonmark").enable("table")

    def parse(self, input_path: Path) -> ParsedContent:
        return self.parse_bytes(Path(input_path).read_bytes())

    def parse_bytes(self, data: bytes) -> ParsedContent:
        try:
            text = data.decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            LOG.warning("Markdown input is not valid UTF-8, replacing bad bytes: %s", exc)
            text = data.decode("utf-8-sig", errors="replace")
        return self.parse_text(text)

    def parse_text(self, text: str) -> ParsedContent:
        tokens = self._md.parse(text)

        content: list[DocumentElement] = []
        images: list[ImageElement] = []

        # position counts block tokens, not blocks; it is only an ordering hint.
        position = 0
        while position < len(tokens):
            token = tokens[position]
            following = tokens[position + 1] if position + 1 < len(tokens) else None

            if token.type == "heading_open":
                level = int(token.tag[1:])
                content.append(
                    DocumentElement(
                        type="heading",
                        content=following.content if following is not None else "",
                        level=level,
                        style=heading_style(level),
                    )
                )
            elif token.type in ("bullet_list_open", "ordered_list_open"):
                end = _closing_index(tokens, position)
                items = [
                    t.content.replace("\n", " ") for t in tokens[position:end] if t.type == "inline" and t.content
                ]
                if items:
                    content.append(
                        DocumentElement(
                            type="list",
                            content=_extract_images("\n".join(items), images, position),
                            style="ordered" if token.type == "ordered_list_open" else "bullet",
                        )
                    )
                position = end + 1
                continue
            elif token.type == "table_open":
                end = _closing_index(tokens, position)
                rows = _table_rows(tokens[position:end])
                content.append(DocumentElement(type="table", content=_extract_images(rows, images, position)))
                position = end + 1
                continue
            elif token.type == "paragraph_open":
                raw = following.content if following is not None else ""
                if raw:
                    content.append(DocumentElement(type="paragraph", content=_extract_images(raw, images, position)))
            position += 1

        LOG.debug("Markdown: %d token(s), %d element(s), %d image(s)", len(tokens), len(content), len(images))
        return ParsedContent(content=content, images=images, source_text=text, title=first_title(content))


def _closing_index(tokens, start: int) -> int:
    """Index of the token closing the block opened at *start*."""
    opener = tokens[start]
    closer = opener.type.replace("_open", "_close")
    for index in range(start + 1, len(tokens)):
        if tokens[index].type == closer and tokens[index].level == opener.level:
            return index
    return len(tokens) - 1


def _table_rows(tokens) -> str:
    """Table tokens as ``| a | b |`` lines, header row first."""
    rows: list[list[str]] = []
    for token in tokens:
        if token.type == "tr_open":
            rows.append([])
        elif token.type == "inline" and rows:
            rows[-1].append(token.content)
    return "\n".join("| " + " | ".join(cells) + " |" for cells in rows)


def _extract_images(text: str, images: list[ImageElement], position: int) -> str:
    """Replace ``![alt](url)`` links with placeholders, appending to *images*."""

    def _replace(m: re.Match[str]) -> str:
        images.append(ImageElement(url=m.group(2), alt=m.group(1), position=position))
        return image_placeholder(len(images) - 1)

    return _IMAGE_RE.sub(_replace, text)
