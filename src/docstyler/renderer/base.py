"""Helpers shared by the output backends."""

from __future__ import annotations

import base64
import binascii
import html
import mimetypes
import re
from dataclasses import dataclass
from typing import Iterator

from docstyler.errors import ConfigError
from docstyler.parser.base import PLACEHOLDER_RE, Citation, ImageElement

OUTPUT_FORMATS = ("pdf", "docx")

MEDIA_TYPES = {
    "pdf": "application/pdf",
    "docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
}

_UNSAFE_FILENAME_RE = re.compile(r'[\\/:*?"<>|\x00-\x1f]+')
_LENGTH_RE = re.compile(r"^\s*([0-9]*\.?[0-9]+)\s*(cm|mm|in|pt|px)?\s*$", re.IGNORECASE)
_POINTS_PER_UNIT = {"cm": 72 / 2.54, "mm": 72 / 25.4, "in": 72.0, "pt": 1.0, "px": 0.75}


@dataclass(slots=True)
class RenderedDocument:
    data: bytes
    filename: str
    media_type: str


def output_filename(title: str | None, output_format: str) -> str:
    stem = _UNSAFE_FILENAME_RE.sub("_", (title or "").strip()).strip(". ") or "Document"
    return f"{stem}.{output_format}"


def length_to_points(value: str) -> float:
    """Convert a CSS length such as ``"2.54cm"`` into PDF points. Bare numbers are cm."""
    m = _LENGTH_RE.match(value)
    if not m:
        raise ConfigError(f"Unsupported length: {value!r}")
    unit = (m.group(2) or "cm").lower()
    return float(m.group(1)) * _POINTS_PER_UNIT[unit]


def apply_citations(text: str, citations: list[Citation]) -> str:
    """Replace each citation's original text with its Harvard form, in list order.

    Citations scanned from HTML source carry entity-escaped text, so the
    unescaped form is replaced too.
    """
    for citation in citations:
        if citation.original == citation.harvard:
            continue
        text = text.replace(citation.original, citation.harvard)
        unescaped = html.unescape(citation.original)
        if unescaped != citation.original:
            text = text.replace(unescaped, html.unescape(citation.harvard))
    return text


def iter_segments(text: str, images: list[ImageElement]) -> Iterator[tuple[str, str | ImageElement]]:
    """Split *text* into ``("text", str)`` and ``("image", ImageElement)`` pieces.

    Placeholders whose index has no image stay in the text verbatim.
    """
    pos = 0
    for m in PLACEHOLDER_RE.finditer(text):
        index = int(m.group(1))
        if index >= len(images):
            continue
        if m.start() > pos:
            yield ("text", text[pos:m.start()])
        yield ("image", images[index])
        pos = m.end()
    if pos < len(text):
        yield ("text", text[pos:])


def image_source(image: ImageElement, *, allow_remote: bool = True) -> str | None:
    """Best ``src`` for *image*: embedded blob, data URL, or (optionally) the remote URL."""
    if image.blob:
        media_type = image.media_type or mimetypes.guess_type(image.url)[0] or "image/png"
        return f"data:{media_type};base64,{base64.b64encode(image.blob).decode('ascii')}"
    if image.url.startswith("data:"):
        return image.url
    if allow_remote and image.url:
        return image.url
    return None


def image_bytes(image: ImageElement) -> bytes | None:
    """Raw image payload from the blob or a base64 data URL."""
    if image.blob:
        return image.blob
    if image.url.startswith("data:") and ";base64," in image.url:
        try:
            return base64.b64decode(image.url.split(",", 1)[1])
        except binascii.Error:
            return None
    return None
