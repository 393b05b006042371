"""Tests for the Markdown parser.

Covers:
- Heading levels and style tags
- Paragraph extraction
- Image links replaced by placeholders (global, discovery-ordered indices)
- Token-based position hints
- Lists and tables as single elements
- Title inference and UTF-8 handling
"""

from __future__ import annotations

import re
from pathlib import Path

from docstyler.parser.md_parser import MarkdownParser


def _parse(md: str):
    return MarkdownParser().parse_text(md)


# ---------------------------------------------------------------------------
# Headings
# ---------------------------------------------------------------------------

def test_heading_levels_and_styles() -> None:
    md = """\
# Title
## Subtitle
### Sub
#### Minor
##### Five
###### Six
"""
    parsed = _parse(md)
    headings = [(el.level, el.content, el.style) for el in parsed.content]
    assert headings == [
        (1, "Title", "title"),
        (2, "Subtitle", "subtitle"),
        (3, "Sub", "subheading"),
        (4, "Minor", "minor-heading"),
        (5, "Five", "caption"),
        (6, "Six", "caption"),
    ]
    assert all(el.type == "heading" for el in parsed.content)


def test_title_is_first_level_one_heading() -> None:
    parsed = _parse("## Intro\n\nText.\n\n# Real Title\n\n# Second\n")
    assert parsed.title == "Real Title"


def test_no_title_without_level_one_heading() -> None:
    assert _parse("## Only a subtitle\n").title is None


# ---------------------------------------------------------------------------
# Paragraphs
# ---------------------------------------------------------------------------

def test_paragraphs_in_reading_order() -> None:
    md = """\
# Heading

First paragraph
continues here.

Second paragraph.
"""
    parsed = _parse(md)
    assert [el.type for el in parsed.content] == ["heading", "paragraph", "paragraph"]
    assert parsed.content[1].content == "First paragraph\ncontinues here."
    assert parsed.content[2].content == "Second paragraph."
    assert parsed.content[1].level is None


def test_paragraph_keeps_inline_markup() -> None:
    parsed = _parse("Some **bold** and a [link](http://x).\n")
    assert parsed.content[0].content == "Some **bold** and a [link](http://x)."


def test_source_text_is_raw_markdown() -> None:
    md = "# T\n\nSee (Smith, 2019).\n"
    assert _parse(md).source_text == md


# ---------------------------------------------------------------------------
# Images
# ---------------------------------------------------------------------------

def test_images_become_placeholders() -> None:
    md = """\
Intro ![first](a.png) and ![second](https://example.com/b.jpg).

![third](c.gif)
"""
    parsed = _parse(md)
    assert parsed.content[0].content == "Intro [IMAGE_PLACEHOLDER_0] and [IMAGE_PLACEHOLDER_1]."
    assert parsed.content[1].content == "[IMAGE_PLACEHOLDER_2]"

    assert [(img.url, img.alt) for img in parsed.images] == [
        ("a.png", "first"),
        ("https://example.com/b.jpg", "second"),
        ("c.gif", "third"),
    ]
    assert all(img.blob is None for img in parsed.images)


def test_every_placeholder_resolves() -> None:
    md = "\n\n".join(f"Para {i} ![img{i}](img{i}.png) ![again](x{i}.png)" for i in range(5))
    parsed = _parse(md)

    assert len(parsed.images) == 10
    indices = [
        int(m.group(1))
        for el in parsed.content
        for m in re.finditer(r"IMAGE_PLACEHOLDER_(\d+)", el.content)
    ]
    assert sorted(indices) == list(range(10))
    assert all(0 <= i < len(parsed.images) for i in indices)


def test_duplicate_images_get_distinct_indices() -> None:
    parsed = _parse("![a](same.png) ![a](same.png)\n")
    assert parsed.content[0].content == "[IMAGE_PLACEHOLDER_0] [IMAGE_PLACEHOLDER_1]"
    assert len(parsed.images) == 2


def test_image_position_counts_tokens() -> None:
    md = """\
# T

![a](a.png)

![b](b.png)
"""
    parsed = _parse(md)
    # heading_open, inline, heading_close -> first paragraph_open is token 3.
    assert [img.position for img in parsed.images] == [3, 6]


def test_heading_images_are_not_extracted() -> None:
    parsed = _parse("# Logo ![x](x.png)\n")
    assert parsed.images == []
    assert parsed.content[0].content == "Logo ![x](x.png)"


# ---------------------------------------------------------------------------
# Lists and tables
# ---------------------------------------------------------------------------

def test_table_and_list_become_single_elements() -> None:
    parsed = _parse("Intro.\n\n| A | B |\n|---|---|\n| 1 | 2 |\n\n- item one\n- item two\n")

    assert [(el.type, el.content) for el in parsed.content] == [
        ("paragraph", "Intro."),
        ("table", "| A | B |\n| 1 | 2 |"),
        ("list", "item one\nitem two"),
    ]
    assert parsed.content[2].style == "bullet"


def test_ordered_and_nested_lists() -> None:
    parsed = _parse("1. first\n2. second\n   - nested\n\nAfter.\n")

    assert parsed.content[0].type == "list"
    assert parsed.content[0].style == "ordered"
    assert parsed.content[0].content == "first\nsecond\nnested"
    assert parsed.content[1].content == "After."


def test_list_and_table_images_share_global_indices() -> None:
    md = """\
Lead ![a](a.png)

- see ![b](b.png)

| Fig | Note |
|---|---|
| ![c](c.png) | ok |
"""
    parsed = _parse(md)

    assert [img.url for img in parsed.images] == ["a.png", "b.png", "c.png"]
    assert parsed.content[1].content == "see [IMAGE_PLACEHOLDER_1]"
    assert parsed.content[2].content == "| Fig | Note |\n| [IMAGE_PLACEHOLDER_2] | ok |"


# ---------------------------------------------------------------------------
# Files and bytes
# ---------------------------------------------------------------------------

def test_parse_file(tmp_path: Path) -> None:
    p = tmp_path / "doc.md"
    p.write_text("# Hello\n\nWorld\n", encoding="utf-8")

    parsed = MarkdownParser().parse(p)
    assert parsed.title == "Hello"
    assert parsed.content[1].content == "World"


def test_parse_bytes_strips_bom() -> None:
    parsed = MarkdownParser().parse_bytes(b"\xef\xbb\xbf# Titel\n")
    assert parsed.content[0].content == "Titel"


def test_invalid_utf8_is_replaced(caplog) -> None:
    parsed = MarkdownParser().parse_bytes(b"# Bad \xff bytes\n")
    assert parsed.content[0].content == "Bad \ufffd bytes"
    assert "not valid UTF-8" in caplog.text
