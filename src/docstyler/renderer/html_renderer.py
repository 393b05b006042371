"""Render the document IR into a styled, self-contained HTML page."""

from __future__ import annotations

import html
from dataclasses import dataclass
from pathlib import Path

from jinja2 import Environment, FileSystemLoader

from docstyler.layout import LayoutConfig, generate_css
from docstyler.parser.base import Citation, DocumentElement, DocumentStructure, ImageElement

from .base import apply_citations, image_source, iter_segments


@dataclass(slots=True)
class TocEntry:
    level: int
    title: str
    index: int


class HTMLRenderer:
    """Render the IR through the document template.

    With ``remote_images=False`` images that are neither downloaded nor data
    URLs render as their alt text, for backends that cannot fetch URLs.
    """

    def __init__(self, template_path: Path | None = None, *, remote_images: bool = True) -> None:
        if template_path is None:
            template_path = Path(__file__).resolve().parent.parent / "template" / "document.html"

        loader = FileSystemLoader(str(template_path.parent))
        self._env = Environment(loader=loader, autoescape=True, trim_blocks=True, lstrip_blocks=True)
        self._template_name = template_path.name
        self.remote_images = remote_images

    def render(
        self,
        document: DocumentStructure,
        layout: LayoutConfig,
        *,
        table_of_contents: bool = False,
        harvard_citations: bool = False,
    ) -> str:
        citations = document.citations if harvard_citations else []
        blocks = [self._render_element(el, document.images, citations) for el in document.content]

        toc_items = build_toc(document) if table_of_contents else []

        template = self._env.get_template(self._template_name)
        return template.render(
            page_title=document.title or "Document",
            css=generate_css(layout),
            toc_items=toc_items,
            blocks=[block for block in blocks if block],
        )

    def _render_element(
        self,
        element: DocumentElement,
        images: list[ImageElement],
        citations: list[Citation],
    ) -> str:
        if element.type == "heading":
            level = max(1, min(6, element.level or 1))
            return f"<h{level}>{html.escape(element.content)}</h{level}>"

        if element.type == "paragraph":
            text = apply_citations(element.content, citations)
            return f"<p>{self._render_inline(text, images)}</p>"

        if element.type == "image":
            return f'<div class="figure">{self._render_inline(element.content, images)}</div>'

        if element.type == "list":
            items = "".join(
                f"<li>{self._render_inline(apply_citations(line.strip(), citations), images)}</li>"
                for line in element.content.splitlines()
                if line.strip()
            )
            tag = "ol" if element.style == "ordered" else "ul"
            return f"<{tag}>{items}</{tag}>"

        if element.type == "table":
            rows = []
            for line in element.content.splitlines():
                if not line.strip():
                    continue
                cells = "".join(
                    f"<td>{self._render_inline(cell.strip(), images)}</td>"
                    for cell in line.strip().strip("|").split("|")
                )
                rows.append(f"<tr>{cells}</tr>")
            return f"<table>{''.join(rows)}</table>"

        return ""

    def _render_inline(self, text: str, images: list[ImageElement]) -> str:
        parts: list[str] = []
        for kind, value in iter_segments(text, images):
            if kind == "text":
                parts.append(html.escape(value))
            else:
                parts.append(self._render_image(value))
        return "".join(parts)

    def _render_image(self, image: ImageElement) -> str:
        src = image_source(image, allow_remote=self.remote_images)
        if src is None:
            return f'<span class="image-missing">[{html.escape(image.alt or "image")}]</span>'
        return f'<img src="{html.escape(src)}" alt="{html.escape(image.alt)}" />'


def build_toc(document: DocumentStructure) -> list[TocEntry]:
    """One entry per heading, numbered sequentially (not by page)."""
    return [
        TocEntry(level=max(1, min(3, heading.level or 1)), title=heading.content, index=idx + 1)
        for idx, heading in enumerate(document.headings())
    ]
