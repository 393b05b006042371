"""Convert a .docx archive into flat HTML with literal inline font sizes."""

from __future__ import annotations

import base64
import html
import logging
import re
from io import BytesIO
from typing import Any, Iterable
from zipfile import BadZipFile

from docx import Document
from docx.opc.exceptions import PackageNotFoundError
from docx.oxml.ns import qn
from docx.oxml.table import CT_Tbl
from docx.oxml.text.paragraph import CT_P
from docx.table import Table
from docx.text.paragraph import Paragraph

from docstyler.errors import UnsupportedInput

LOG = logging.getLogger(__name__)

_HEADING_STYLE_RE = re.compile(r"^Heading ([1-6])$")


def docx_to_html(data: bytes) -> str:
    """Render the body of a Word document as a sequence of top-level HTML blocks.

    Each paragraph carries ``style="font-size:Npx"`` when Word records an
    explicit size for it (largest run size, else the paragraph style chain).
    Embedded pictures follow their paragraph as top-level ``<img>`` elements
    with base64 data URLs.
    """
    try:
        document = Document(BytesIO(data))
    except (PackageNotFoundError, BadZipFile, KeyError, ValueError) as exc:
        raise UnsupportedInput(f"Input is not a valid Word document: {exc}") from exc

    parts: list[str] = []
    for kind, block in _iter_block_items(document):
        if kind == "table":
            parts.append(_render_table(block))
            continue

        text = block.text
        if text.strip():
            parts.append(_render_paragraph(block, text))
        parts.extend(_render_pictures(block, document))

    LOG.debug("Converted Word document into %d HTML block(s)", len(parts))
    return "\n".join(parts)


def _iter_block_items(document: Any) -> Iterable[tuple[str, Any]]:
    for child in document.element.body.iterchildren():
        if isinstance(child, CT_P):
            yield ("paragraph", Paragraph(child, document))
        elif isinstance(child, CT_Tbl):
            yield ("table", Table(child, document))


def _render_paragraph(paragraph: Paragraph, text: str) -> str:
    tag = "p"
    style_name = paragraph.style.name if paragraph.style is not None else ""
    m = _HEADING_STYLE_RE.match(style_name or "")
    if m:
        tag = f"h{m.group(1)}"

    size_pt = _paragraph_font_size(paragraph)
    style_attr = f' style="font-size:{round(size_pt * 96 / 72)}px"' if size_pt else ""
    return f"<{tag}{style_attr}>{html.escape(text, quote=False)}</{tag}>"


def _paragraph_font_size(paragraph: Paragraph) -> float | None:
    run_sizes = [run.font.size.pt for run in paragraph.runs if run.text.strip() and run.font.size is not None]
    if run_sizes:
        return max(run_sizes)

    style = paragraph.style
    while style is not None:
        if style.font.size is not None:
            return style.font.size.pt
        style = style.base_style
    return None


def _render_table(table: Table) -> str:
    rows = []
    for row in table.rows:
        cells = "".join(f"<td>{html.escape(cell.text, quote=False)}</td>" for cell in row.cells)
        rows.append(f"<tr>{cells}</tr>")
    return f"<table>{''.join(rows)}</table>"


def _render_pictures(paragraph: Paragraph, document: Any) -> list[str]:
    images: list[str] = []
    for drawing in paragraph._p.iter(qn("w:drawing")):
        doc_pr = next(drawing.iter(qn("wp:docPr")), None)
        alt = (doc_pr.get("descr") or "") if doc_pr is not None else ""

        for blip in drawing.iter(qn("a:blip")):
            rel_id = blip.get(qn("r:embed"))
            part = document.part.related_parts.get(rel_id) if rel_id else None
            if part is None:
                LOG.debug("Skipping picture with unresolved relationship %r", rel_id)
                continue
            data = base64.b64encode(part.blob).decode("ascii")
            src = f"data:{part.content_type};base64,{data}"
            images.append(f'<img src="{src}" alt="{html.escape(alt)}">')
    return images
