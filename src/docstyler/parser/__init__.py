"""Parser package."""

from .base import Citation, DocumentElement, DocumentStructure, ImageElement, ParsedContent
from .citations import convert_to_harvard, extract_citations
from .md_parser import MarkdownParser
from .word_parser import WordParser

__all__ = [
    "Citation",
    "DocumentElement",
    "DocumentStructure",
    "ImageElement",
    "ParsedContent",
    "MarkdownParser",
    "WordParser",
    "convert_to_harvard",
    "extract_citations",
]
