"""Named layout presets and their resolution into a per-render LayoutConfig."""

from __future__ import annotations

import copy
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType

from jinja2 import Environment, FileSystemLoader

from docstyler.errors import ConfigError

LAYOUT_STYLES = ("business", "academic", "novel", "modern", "classic")


@dataclass(slots=True)
class FontConfig:
    title: str
    heading: str
    body: str


@dataclass(slots=True)
class SpacingConfig:
    line_height: float
    paragraph_spacing: int
    section_spacing: int


@dataclass(slots=True)
class ColorConfig:
    primary: str
    secondary: str
    text: str


@dataclass(slots=True)
class PageLayout:
    margins: str
    columns: int = 1
    header_footer: bool = True


@dataclass(slots=True)
class LayoutConfig:
    fonts: FontConfig
    spacing: SpacingConfig
    colors: ColorConfig
    page_layout: PageLayout


@dataclass(slots=True)
class LayoutOverrides:
    margin: str | None = None
    font_family: str | None = None


def _preset(font: str, spacing: tuple[float, int, int], colors: tuple[str, str, str], margins: str, header_footer: bool) -> LayoutConfig:
    return LayoutConfig(
        fonts=FontConfig(title=font, heading=font, body=font),
        spacing=SpacingConfig(*spacing),
        colors=ColorConfig(*colors),
        page_layout=PageLayout(margins=margins, columns=1, header_footer=header_footer),
    )


LAYOUT_PRESETS = MappingProxyType(
    {
        "business": _preset("Arial, sans-serif", (1.4, 12, 24), ("#2563eb", "#64748b", "#1e293b"), "2.5cm", True),
        "academic": _preset("Times New Roman, serif", (2.0, 0, 18), ("#000000", "#333333", "#000000"), "2.54cm", True),
        "novel": _preset("Garamond, serif", (1.6, 0, 36), ("#2d1810", "#5d4e37", "#2d1810"), "3cm", False),
        "modern": _preset(
            "Helvetica Neue, sans-serif", (1.5, 16, 32), ("#6366f1", "#8b5cf6", "#374151"), "2cm", True
        ),
        "classic": _preset("Georgia, serif", (1.6, 14, 28), ("#8b4513", "#a0522d", "#2f1b14"), "2.5cm", True),
    }
)


def resolve_layout(style_name: str, overrides: LayoutOverrides | None = None) -> LayoutConfig:
    """Return an independent copy of the *style_name* preset with overrides applied."""
    try:
        preset = LAYOUT_PRESETS[style_name]
    except KeyError:
        raise ConfigError(
            f"Unknown layout style: {style_name!r} (expected one of {', '.join(LAYOUT_STYLES)})"
        ) from None

    config = copy.deepcopy(preset)
    if overrides is None:
        return config

    if overrides.margin:
        config.page_layout.margins = overrides.margin
    if overrides.font_family:
        config.fonts.title = overrides.font_family
        config.fonts.heading = overrides.font_family
        config.fonts.body = overrides.font_family
    return config


_TEMPLATE_DIR = Path(__file__).resolve().parent / "template"
_css_env = Environment(loader=FileSystemLoader(str(_TEMPLATE_DIR)), autoescape=False, trim_blocks=True, lstrip_blocks=True)


def generate_css(config: LayoutConfig) -> str:
    """Render the document stylesheet for *config*."""
    return _css_env.get_template("layout.css").render(config=config)
