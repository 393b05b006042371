"""Renderer package."""

from .base import RenderedDocument
from .docx_renderer import DocxRenderer
from .html_renderer import HTMLRenderer
from .pdf_renderer import PDFRenderer

__all__ = ["RenderedDocument", "DocxRenderer", "HTMLRenderer", "PDFRenderer"]
