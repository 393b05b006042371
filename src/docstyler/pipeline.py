"""End-to-end processing: parse, assemble, fetch images, render, review."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from docstyler.config import Settings, load_settings
from docstyler.errors import ConfigError
from docstyler.images import download_images
from docstyler.layout import LayoutOverrides, resolve_layout
from docstyler.parser.base import Citation, DocumentStructure, ParsedContent, Parser
from docstyler.parser.citations import extract_citations
from docstyler.parser.md_parser import MarkdownParser
from docstyler.parser.word_parser import WordParser
from docstyler.renderer.base import OUTPUT_FORMATS, RenderedDocument
from docstyler.renderer.docx_renderer import DocxRenderer
from docstyler.renderer.pdf_renderer import PDFRenderer
from docstyler.review import AIReviewer, AIReviewResult

LOG = logging.getLogger(__name__)


@dataclass(slots=True)
class ProcessingOptions:
    table_of_contents: bool = False
    harvard_citations: bool = False
    download_images: bool = True
    ai_review: bool = False
    margin: float | None = None
    font_family: str | None = None

    def layout_overrides(self) -> LayoutOverrides:
        return LayoutOverrides(
            margin=f"{self.margin:g}cm" if self.margin is not None else None,
            font_family=self.font_family or None,
        )


@dataclass(slots=True)
class ProcessingResult:
    document: DocumentStructure
    output: RenderedDocument
    ai_review_results: list[AIReviewResult] = field(default_factory=list)


def detect_input_type(filename: str) -> str:
    """``"md"`` for ``.md`` (any case); every other name is treated as ``"docx"``."""
    return "md" if filename.lower().endswith(".md") else "docx"


def select_parser(filename: str) -> Parser:
    if detect_input_type(filename) == "md":
        return MarkdownParser()
    return WordParser()


def assemble_document(parsed: ParsedContent, citations: list[Citation]) -> DocumentStructure:
    return DocumentStructure(
        title=parsed.title,
        content=parsed.content,
        images=parsed.images,
        citations=citations,
    )


def process_bytes(data: bytes, filename: str) -> DocumentStructure:
    """Parse *data* (named *filename*) into the document IR."""
    parser = select_parser(filename)
    LOG.info("Analyzing document structure of %s (%s)", filename, detect_input_type(filename))
    parsed = parser.parse_bytes(data)
    citations = extract_citations(parsed.source_text)
    return assemble_document(parsed, citations)


def process_file(input_path: Path) -> DocumentStructure:
    input_path = Path(input_path)
    return process_bytes(input_path.read_bytes(), input_path.name)


def render_document(
    document: DocumentStructure,
    style: str,
    output_format: str,
    options: ProcessingOptions,
) -> RenderedDocument:
    if output_format not in OUTPUT_FORMATS:
        raise ConfigError(f"Unknown output format: {output_format!r} (expected pdf or docx)")

    layout = resolve_layout(style, options.layout_overrides())
    renderer = PDFRenderer() if output_format == "pdf" else DocxRenderer()
    LOG.info("Applying %s layout and rendering %s", style, output_format.upper())
    return renderer.render(
        document,
        layout,
        table_of_contents=options.table_of_contents,
        harvard_citations=options.harvard_citations,
    )


def convert(
    input_path: Path,
    *,
    style: str = "modern",
    output_format: str = "pdf",
    options: ProcessingOptions | None = None,
    settings: Settings | None = None,
    reviewer: AIReviewer | None = None,
) -> ProcessingResult:
    """Run the whole pipeline for one file and return the rendered artifact."""
    options = options or ProcessingOptions()
    settings = settings or load_settings()

    # Resolve early so a bad style fails before any parsing work.
    resolve_layout(style, options.layout_overrides())

    document = process_file(input_path)

    if options.download_images and document.images:
        LOG.info("Downloading %d linked image(s)", len(document.images))
        document.images = download_images(
            document.images,
            max_workers=settings.image_workers,
            timeout_s=settings.image_timeout_s,
        )

    output = render_document(document, style, output_format, options)

    review_results: list[AIReviewResult] = []
    if options.ai_review:
        LOG.info("Running AI quality review")
        pdf_bytes = output.data if output_format == "pdf" else render_document(document, style, "pdf", options).data
        reviewer = reviewer or AIReviewer(settings)
        review_results = reviewer.review_pdf(pdf_bytes)

    return ProcessingResult(document=document, output=output, ai_review_results=review_results)
