from __future__ import annotations

import pytest

from docstyler.errors import ConfigError
from docstyler.layout import LAYOUT_PRESETS, LAYOUT_STYLES, LayoutOverrides, generate_css, resolve_layout


def test_academic_defaults() -> None:
    config = resolve_layout("academic")
    assert config.spacing.line_height == 2.0
    assert config.page_layout.margins == "2.54cm"
    assert config.fonts.body == "Times New Roman, serif"


def test_margin_override_leaves_preset_untouched() -> None:
    config = resolve_layout("academic", LayoutOverrides(margin="3cm"))
    assert config.spacing.line_height == 2.0
    assert config.page_layout.margins == "3cm"

    assert LAYOUT_PRESETS["academic"].page_layout.margins == "2.54cm"
    assert resolve_layout("academic").page_layout.margins == "2.54cm"


def test_font_family_override_replaces_all_roles() -> None:
    config = resolve_layout("business", LayoutOverrides(font_family="Inter"))
    assert (config.fonts.title, config.fonts.heading, config.fonts.body) == ("Inter", "Inter", "Inter")
    assert LAYOUT_PRESETS["business"].fonts.body == "Arial, sans-serif"


def test_resolved_configs_are_independent() -> None:
    first = resolve_layout("novel")
    first.colors.primary = "#ffffff"
    assert resolve_layout("novel").colors.primary == "#2d1810"


def test_unknown_style_raises() -> None:
    with pytest.raises(ConfigError):
        resolve_layout("gothic")


def test_registry_is_read_only() -> None:
    with pytest.raises(TypeError):
        LAYOUT_PRESETS["gothic"] = LAYOUT_PRESETS["modern"]  # type: ignore[index]


def test_all_styles_resolve() -> None:
    assert set(LAYOUT_STYLES) == set(LAYOUT_PRESETS)
    assert resolve_layout("novel").page_layout.header_footer is False
    assert resolve_layout("modern").spacing.paragraph_spacing == 16


def test_generate_css_uses_config_values() -> None:
    css = generate_css(resolve_layout("classic", LayoutOverrides(margin="1in")))
    assert "margin: 1in;" in css
    assert "font-family: Georgia, serif;" in css
    assert "line-height: 1.6;" in css
    assert "color: #8b4513;" in css
