"""PDF backend: lay out the rendered HTML with PyMuPDF's Story engine."""

from __future__ import annotations

import io
import logging

from docstyler.errors import ConfigError
from docstyler.layout import LayoutConfig, generate_css
from docstyler.parser.base import DocumentStructure

from .base import MEDIA_TYPES, RenderedDocument, length_to_points, output_filename
from .html_renderer import HTMLRenderer

try:  # pragma: no cover - optional import guard for environments without pymupdf
    import fitz  # type: ignore
except ImportError:  # pragma: no cover
    fitz = None

LOG = logging.getLogger(__name__)

_MIN_FRAME_PT = 72.0


class PDFRenderer:
    """Render the IR to an A4 PDF."""

    def __init__(self, html_renderer: HTMLRenderer | None = None) -> None:
        # MuPDF cannot fetch URLs; undownloaded remote images fall back to alt text.
        self._html = html_renderer or HTMLRenderer(remote_images=False)

    def render(
        self,
        document: DocumentStructure,
        layout: LayoutConfig,
        *,
        table_of_contents: bool = False,
        harvard_citations: bool = False,
    ) -> RenderedDocument:
        if fitz is None:
            raise RuntimeError("pymupdf is required for PDF output")

        html_text = self._html.render(
            document,
            layout,
            table_of_contents=table_of_contents,
            harvard_citations=harvard_citations,
        )

        mediabox = fitz.paper_rect("a4")
        margin = length_to_points(layout.page_layout.margins)
        where = mediabox + (margin, margin, -margin, -margin)
        if where.is_empty or where.width < _MIN_FRAME_PT or where.height < _MIN_FRAME_PT:
            raise ConfigError(f"Page margin {layout.page_layout.margins!r} leaves no room for content")

        story = fitz.Story(html=html_text, user_css=generate_css(layout))
        buffer = io.BytesIO()
        writer = fitz.DocumentWriter(buffer)
        pages = 0
        more = True
        while more:
            device = writer.begin_page(mediabox)
            more, _ = story.place(where)
            story.draw(device)
            writer.end_page()
            pages += 1
        writer.close()
        LOG.info("Laid out %d PDF page(s)", pages)

        data = buffer.getvalue()
        if layout.page_layout.header_footer:
            data = _stamp_footer(data, document.title or "", layout, margin)

        return RenderedDocument(
            data=data,
            filename=output_filename(document.title, "pdf"),
            media_type=MEDIA_TYPES["pdf"],
        )


def _stamp_footer(data: bytes, title: str, layout: LayoutConfig, margin: float) -> bytes:
    color = _hex_to_rgb(layout.colors.secondary)
    with fitz.open(stream=data, filetype="pdf") as doc:
        for page in doc:
            baseline = page.rect.height - margin / 2
            if title:
                page.insert_text(fitz.Point(margin, baseline), title, fontsize=8, color=color)
            label = str(page.number + 1)
            page.insert_text(fitz.Point(page.rect.width - margin - 4 * len(label), baseline), label, fontsize=8, color=color)
        return doc.tobytes()


def _hex_to_rgb(value: str) -> tuple[float, float, float]:
    value = value.lstrip("#")
    if len(value) != 6:
        return (0.0, 0.0, 0.0)
    return tuple(int(value[i:i + 2], 16) / 255 for i in (0, 2, 4))  # type: ignore[return-value]
