"""DOCX backend built with python-docx."""

from __future__ import annotations

import io
import logging

from docx import Document
from docx.enum.text import WD_ALIGN_PARAGRAPH, WD_BREAK
from docx.image.exceptions import UnrecognizedImageError
from docx.shared import Pt, RGBColor

from docstyler.layout import LayoutConfig
from docstyler.parser.base import Citation, DocumentElement, DocumentStructure, ImageElement

from .base import MEDIA_TYPES, RenderedDocument, apply_citations, image_bytes, iter_segments, length_to_points, output_filename
from .html_renderer import build_toc

LOG = logging.getLogger(__name__)

# Matches the h1/h2/h3+ sizes of the HTML stylesheet (24/20/16 px).
_HEADING_SIZES_PT = {1: 18, 2: 15, 3: 12}


class DocxRenderer:
    """Render the IR into a Word document styled after a LayoutConfig."""

    def render(
        self,
        document: DocumentStructure,
        layout: LayoutConfig,
        *,
        table_of_contents: bool = False,
        harvard_citations: bool = False,
    ) -> RenderedDocument:
        doc = Document()
        self._apply_page_setup(doc, layout, document.title)

        if table_of_contents:
            self._add_toc(doc, document, layout)

        citations = document.citations if harvard_citations else []
        for element in document.content:
            self._add_element(doc, element, document.images, citations, layout)

        buffer = io.BytesIO()
        doc.save(buffer)
        return RenderedDocument(
            data=buffer.getvalue(),
            filename=output_filename(document.title, "docx"),
            media_type=MEDIA_TYPES["docx"],
        )

    def _apply_page_setup(self, doc, layout: LayoutConfig, title: str | None) -> None:
        margin = Pt(length_to_points(layout.page_layout.margins))
        for section in doc.sections:
            section.top_margin = margin
            section.bottom_margin = margin
            section.left_margin = margin
            section.right_margin = margin
            if layout.page_layout.header_footer and title:
                footer = section.footer.paragraphs[0]
                footer.text = title
                footer.alignment = WD_ALIGN_PARAGRAPH.CENTER

        normal = doc.styles["Normal"]
        normal.font.name = _primary_font(layout.fonts.body)
        normal.font.color.rgb = _rgb(layout.colors.text)
        normal.paragraph_format.line_spacing = layout.spacing.line_height
        # Stylesheet spacing is in CSS px; Word wants points.
        normal.paragraph_format.space_after = Pt(layout.spacing.paragraph_spacing * 0.75)

    def _add_toc(self, doc, document: DocumentStructure, layout: LayoutConfig) -> None:
        heading = doc.add_paragraph()
        heading.alignment = WD_ALIGN_PARAGRAPH.CENTER
        self._style_run(heading.add_run("Table of Contents"), layout, level=2)

        for entry in build_toc(document):
            para = doc.add_paragraph()
            para.paragraph_format.left_indent = Pt(15 * (entry.level - 1))
            run = para.add_run(f"{entry.title}\t{entry.index}")
            run.bold = entry.level == 1

        doc.add_paragraph().add_run().add_break(WD_BREAK.PAGE)

    def _add_element(
        self,
        doc,
        element: DocumentElement,
        images: list[ImageElement],
        citations: list[Citation],
        layout: LayoutConfig,
    ) -> None:
        if element.type == "heading":
            level = max(1, min(6, element.level or 1))
            para = doc.add_heading(level=level)
            self._style_run(para.add_run(element.content), layout, level=level)
            para.paragraph_format.space_before = Pt(layout.spacing.section_spacing * 0.75 if level <= 2 else 0)
            return

        if element.type == "list":
            for line in element.content.splitlines():
                if line.strip():
                    para = doc.add_paragraph(style="List Number" if element.style == "ordered" else "List Bullet")
                    self._add_inline(para, apply_citations(line.strip(), citations), images, layout)
            return

        if element.type == "table":
            rows = [line.strip().strip("|").split("|") for line in element.content.splitlines() if line.strip()]
            if rows:
                table = doc.add_table(rows=len(rows), cols=max(len(row) for row in rows))
                for r, row in enumerate(rows):
                    for c, cell in enumerate(row):
                        self._add_inline(table.cell(r, c).paragraphs[0], cell.strip(), images, layout)
            return

        text = apply_citations(element.content, citations) if element.type == "paragraph" else element.content
        para = doc.add_paragraph()
        if element.type == "image":
            para.alignment = WD_ALIGN_PARAGRAPH.CENTER
        else:
            para.alignment = WD_ALIGN_PARAGRAPH.JUSTIFY
        self._add_inline(para, text, images, layout)

    def _add_inline(self, para, text: str, images: list[ImageElement], layout: LayoutConfig) -> None:
        for kind, value in iter_segments(text, images):
            if kind == "text":
                para.add_run(value)
            else:
                self._add_picture(para, value, layout)

    def _add_picture(self, para, image: ImageElement, layout: LayoutConfig) -> None:
        payload = image_bytes(image)
        if payload is not None:
            try:
                shape = para.add_run().add_picture(io.BytesIO(payload))
            except UnrecognizedImageError:
                LOG.warning("Unsupported image format for %s; using alt text", image.url[:80])
            else:
                _fit_width(shape, layout)
                return
        run = para.add_run(f"[{image.alt or 'image'}]")
        run.italic = True

    def _style_run(self, run, layout: LayoutConfig, *, level: int) -> None:
        run.font.name = _primary_font(layout.fonts.title if level == 1 else layout.fonts.heading)
        run.font.size = Pt(_HEADING_SIZES_PT.get(level, 12))
        run.font.bold = True
        run.font.color.rgb = _rgb(layout.colors.primary if level <= 2 else layout.colors.secondary)


def _fit_width(shape, layout: LayoutConfig) -> None:
    # A4 width is 595pt.
    available = Pt(595 - 2 * length_to_points(layout.page_layout.margins))
    if shape.width > available:
        ratio = available / shape.width
        shape.width = int(available)
        shape.height = int(shape.height * ratio)


def _primary_font(family: str) -> str:
    """First family of a CSS font stack (``"Arial, sans-serif"`` -> ``"Arial"``)."""
    return family.split(",")[0].strip().strip("\"'")


def _rgb(value: str) -> RGBColor:
    value = value.lstrip("#")
    if len(value) != 6:
        return RGBColor(0, 0, 0)
    return RGBColor.from_string(value.upper())
