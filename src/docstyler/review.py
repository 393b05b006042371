"""Optional AI visual review of rendered pages."""

from __future__ import annotations

import base64
import logging
import re
from dataclasses import dataclass, field

from openai import OpenAI

from docstyler.config import Settings
from docstyler.errors import PartialDegradation

try:  # pragma: no cover - optional import guard for environments without pymupdf
    import fitz  # type: ignore
except ImportError:  # pragma: no cover
    fitz = None

LOG = logging.getLogger(__name__)

REVIEW_PROMPT = """\
Analyze this document page screenshot for formatting quality and adherence to professional document standards.

Please evaluate:
1. Typography consistency and hierarchy
2. Spacing and alignment
3. Image placement and sizing
4. Overall layout quality
5. Citation formatting
6. Table of contents accuracy (if present)

Provide specific issues found and suggestions for improvement.
Rate the overall quality from 1-10.
"""

_ISSUE_KEYWORDS = ("issue", "problem", "inconsistent", "poor", "incorrect")
_SUGGESTION_KEYWORDS = ("suggest", "recommend", "improve", "consider", "should")
_SCORE_RE = re.compile(r"(\d+)/10|(\d+) out of 10|score.*?(\d+)", re.IGNORECASE)

DEFAULT_SCORE = 7


@dataclass(slots=True)
class AIReviewResult:
    page: int
    issues: list[str] = field(default_factory=list)
    suggestions: list[str] = field(default_factory=list)
    score: int = DEFAULT_SCORE


def degraded_result(page: int) -> AIReviewResult:
    return AIReviewResult(
        page=page,
        issues=["AI review unavailable"],
        suggestions=["Manual review recommended"],
        score=DEFAULT_SCORE,
    )


class AIReviewer:
    """Score rendered pages with an OpenAI-compatible vision model."""

    def __init__(self, settings: Settings, client: OpenAI | None = None) -> None:
        self._settings = settings
        self._client = client
        if self._client is None and settings.api_key:
            self._client = OpenAI(api_key=settings.api_key, base_url=settings.base_url)

    def review_pdf(self, pdf_bytes: bytes, *, max_pages: int | None = None) -> list[AIReviewResult]:
        if self._client is None:
            LOG.warning("OPENAI_API_KEY not configured; skipping AI review")
            return []
        try:
            pages = capture_pages(pdf_bytes, max_pages=max_pages)
        except PartialDegradation as exc:
            LOG.warning("Could not rasterize pages for review: %s", exc)
            return []
        return [self.review_page(png, page_number) for page_number, png in enumerate(pages, start=1)]

    def review_page(self, png_bytes: bytes, page_number: int) -> AIReviewResult:
        if self._client is None:
            return degraded_result(page_number)

        data_url = f"data:image/png;base64,{base64.b64encode(png_bytes).decode('ascii')}"
        try:
            resp = self._client.chat.completions.create(
                model=self._settings.review_model,
                messages=[
                    {
                        "role": "user",
                        "content": [
                            {"type": "text", "text": REVIEW_PROMPT},
                            {"type": "image_url", "image_url": {"url": data_url}},
                        ],
                    }
                ],
                max_tokens=500,
                timeout=self._settings.review_timeout_s,
            )
            analysis = (resp.choices[0].message.content or "").strip()
        except Exception as exc:  # noqa: BLE001 - any client failure degrades the page
            LOG.warning("AI review failed for page %d: %s", page_number, exc)
            return degraded_result(page_number)

        return AIReviewResult(
            page=page_number,
            issues=extract_sentences(analysis, _ISSUE_KEYWORDS),
            suggestions=extract_sentences(analysis, _SUGGESTION_KEYWORDS),
            score=extract_score(analysis),
        )


def capture_pages(pdf_bytes: bytes, *, dpi: int = 96, max_pages: int | None = None) -> list[bytes]:
    """Rasterize PDF pages to PNG bytes."""
    if fitz is None:
        raise PartialDegradation("pymupdf is required to rasterize pages")
    try:
        doc = fitz.open(stream=pdf_bytes, filetype="pdf")
    except (fitz.FileDataError, RuntimeError) as exc:
        raise PartialDegradation(str(exc)) from exc

    with doc:
        count = len(doc) if max_pages is None else min(len(doc), max_pages)
        return [doc[i].get_pixmap(dpi=dpi).tobytes("png") for i in range(count)]


def extract_sentences(analysis: str, keywords: tuple[str, ...], limit: int = 3) -> list[str]:
    sentences = [s.strip() for s in analysis.split(".") if s.strip()]
    return [s for s in sentences if any(k in s.lower() for k in keywords)][:limit]


def extract_score(analysis: str) -> int:
    m = _SCORE_RE.search(analysis)
    if not m:
        return DEFAULT_SCORE
    score = int(m.group(1) or m.group(2) or m.group(3))
    return max(1, min(10, score))
