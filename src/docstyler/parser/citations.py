"""Parenthetical citation detection and Harvard normalisation."""

from __future__ import annotations

import logging
import re

from .base import Citation

LOG = logging.getLogger(__name__)

# Leftmost, non-overlapping parenthesised spans that contain a four-digit run.
_CITATION_RE = re.compile(r"\([^)]*\d{4}[^)]*\)")
_YEAR_RE = re.compile(r"\d{4}")


def extract_citations(text: str) -> list[Citation]:
    """Return every citation-like span in *text*, in scan order."""
    citations = [
        Citation(original=m.group(0), harvard=convert_to_harvard(m.group(0)), position=m.start())
        for m in _CITATION_RE.finditer(text)
    ]
    LOG.debug("Found %d citation(s)", len(citations))
    return citations


def convert_to_harvard(citation: str) -> str:
    """Normalise ``(Author, ..., Year, ...)`` to ``(Author, Year)``.

    Spans that do not split into an author and a year are returned unchanged,
    so the conversion is a no-op on text that is already in Harvard form.
    """
    cleaned = citation.replace("(", "").replace(")", "")
    parts = [part.strip() for part in cleaned.split(",")]

    if len(parts) >= 2:
        author = parts[0]
        year = next((part for part in parts if _YEAR_RE.search(part)), None)
        if year is not None:
            return f"({author}, {year})"

    LOG.debug("Citation left as-is: %s", citation)
    return citation
