"""Theme resolution: palettes, typography scales, capabilities and style sheets.

Layout code never compares theme names. Anything a diagram needs to branch on
is exposed as a :class:`ThemeCapabilities` flag resolved here once per render.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from enum import Enum
from types import MappingProxyType
from typing import Mapping

from graphinate.colors import NAMED_COLORS, closest_name, rgb_triplet

logger = logging.getLogger(__name__)

DEFAULT_THEME_ID = "default"
TEXT_ROLES = ("title", "heading", "body", "caption", "label", "axis", "emphasis")
SET_CLASSES = ("set-a", "set-b", "set-c", "set-d", "set-e")

_SANS = "Arial, sans-serif"
_HELVETICA = '"Helvetica Neue", Arial, sans-serif'
_MONO = '"Courier Prime", "Courier New", Monaco, Consolas, monospace'


class ConnectorStyle(str, Enum):
    BRACKET = "bracket"
    ARROW = "arrow"


@dataclass(frozen=True)
class TextStyle:
    font_family: str = _SANS
    font_size: float = 14.0
    font_weight: str = "normal"
    text_anchor: str = "middle"
    fill: str = "#333333"
    line_height: float = 1.2
    letter_spacing: float = 0.0

    def to_css(self) -> str:
        parts = [
            f"font-family: {self.font_family}",
            f"font-size: {self.font_size:g}px",
            f"font-weight: {self.font_weight}",
            f"text-anchor: {self.text_anchor}",
            f"fill: {self.fill}",
        ]
        if self.letter_spacing:
            parts.append(f"letter-spacing: {self.letter_spacing:g}px")
        return "; ".join(parts) + ";"


@dataclass(frozen=True)
class Palette:
    primary: str
    secondary: str
    accent: str
    background: str
    text: str

    def series(self) -> tuple[str, ...]:
        """Colour cycle for sets and plot lines."""
        return (
            self.primary,
            self.secondary,
            self.accent,
            NAMED_COLORS["purple"],
            NAMED_COLORS["yellow"],
        )


@dataclass(frozen=True)
class ThemeCapabilities:
    organic_circle_layout: bool = False
    organic_paths: bool = False
    connector_style: ConnectorStyle = ConnectorStyle.BRACKET
    textures: bool = False
    watermark: str | None = None


@dataclass(frozen=True)
class Theme:
    id: str
    description: str
    palette: Palette
    typography: Mapping[str, TextStyle]
    capabilities: ThemeCapabilities
    shape_rules: Mapping[str, str]
    style_sheet: str

    def class_style(self, css_class: str) -> TextStyle:
        """Text style the style sheet applies to ``css_class``."""
        return class_text_style(self.typography, css_class)


def _typography(
    family: str,
    text: str,
    title_weight: str = "bold",
    label_fill: str | None = None,
    caption_fill: str = "#ffffff",
    spacing: float = 0.0,
    scale: float = 1.0,
) -> Mapping[str, TextStyle]:
    def style(size: float, weight: str, anchor: str = "middle", fill: str = text) -> TextStyle:
        return TextStyle(
            font_family=family,
            font_size=round(size * scale, 1),
            font_weight=weight,
            text_anchor=anchor,
            fill=fill,
            letter_spacing=spacing,
        )

    return MappingProxyType(
        {
            "title": style(20, title_weight),
            "heading": style(16, "bold"),
            "body": style(14, "normal"),
            "caption": style(11, "bold", fill=caption_fill),
            "label": style(14, "normal" if label_fill is None else "bold", fill=label_fill or text),
            "axis": style(14, "bold"),
            "emphasis": style(16, "bold"),
        }
    )


def _shape_rules(palette: Palette, stroke_width: int, badge_radius: int) -> dict[str, str]:
    """Non-text class rules; text roles are appended from the typography scale."""
    ink = palette.text
    rules = {
        "venn-circle": f"stroke-width: {stroke_width}; fill-opacity: 0.4;",
        "intersection-badge": f"fill: {ink}; stroke: {ink}; stroke-width: 1; rx: {badge_radius}; ry: {badge_radius};",
        "connector-line": f"stroke: {ink}; stroke-width: {stroke_width}; fill: none;",
        "axis-line": f"stroke: {ink}; stroke-width: 2; fill: none;",
        "grid-line": "stroke: #e0e0e0; stroke-width: 1; fill: none;",
        "plot-line": f"stroke: {ink}; stroke-width: {stroke_width}; fill: none;",
        "plot-line.dotted": "stroke-dasharray: 4,4;",
        "plot-line.dashed": "stroke-dasharray: 8,4;",
        "plot-line.dash-dot": "stroke-dasharray: 8,4,2,4;",
        "marker": f"fill: {palette.primary}; stroke: {ink}; stroke-width: 1;",
        "caption-box": f"fill: {ink}; stroke: {ink}; stroke-width: 1; rx: {badge_radius}; ry: {badge_radius};",
        "caption-connector": f"stroke: {ink}; stroke-width: 1; fill: none;",
        "legend-box": f"fill: {palette.background}; stroke: {ink}; stroke-width: 1; fill-opacity: 0.9;",
        "flowchart-shape": "stroke-width: 2;",
        "diamond-shape": "stroke-linejoin: round;",
        "rectangle-shape": "stroke-linejoin: round;",
        "circle-shape": "stroke-linejoin: round;",
        "connection-line": f"stroke: {ink}; stroke-width: 2; fill: none;",
        "arrowhead": f"fill: {ink}; stroke: none;",
    }
    for css_class, color in zip(SET_CLASSES, palette.series()):
        rules[f"venn-circle.{css_class}"] = f"fill: rgba({rgb_triplet(color)}, 0.4); stroke: {color};"
    return rules


_TEXT_CLASS_ROLES = {
    "chart-title": "title",
    "set-label": "label",
    "intersection-label": "caption",
    "axis-label": "axis",
    "caption-text": "caption",
    "legend-text": "body",
    "node-text": "label",
    "connection-label": "body",
    "flowchart-caption": "heading",
    "flowchart-subtitle": "body",
    "watermark": "body",
}


# Classes whose anchor differs from their role's.
_TEXT_CLASS_ANCHORS = {"legend-text": "start", "watermark": "end"}


def class_text_style(typography: Mapping[str, TextStyle], css_class: str) -> TextStyle:
    style = typography[_TEXT_CLASS_ROLES.get(css_class, "body")]
    anchor = _TEXT_CLASS_ANCHORS.get(css_class)
    return replace(style, text_anchor=anchor) if anchor else style


def build_style_sheet(typography: Mapping[str, TextStyle], shape_rules: Mapping[str, str]) -> str:
    lines = [f".{css_class} {{ {class_text_style(typography, css_class).to_css()} }}" for css_class in _TEXT_CLASS_ROLES]
    lines.extend(f".{css_class} {{ {rule} }}" for css_class, rule in shape_rules.items())
    return "\n".join(lines)


def _make_theme(
    theme_id: str,
    description: str,
    palette: Palette,
    typography: Mapping[str, TextStyle],
    capabilities: ThemeCapabilities,
    stroke_width: int,
    badge_radius: int,
) -> Theme:
    shape_rules = MappingProxyType(_shape_rules(palette, stroke_width, badge_radius))
    return Theme(
        id=theme_id,
        description=description,
        palette=palette,
        typography=typography,
        capabilities=capabilities,
        shape_rules=shape_rules,
        style_sheet=build_style_sheet(typography, shape_rules),
    )


def _default_theme() -> Theme:
    palette = Palette(
        primary="#3498db",
        secondary="#e74c3c",
        accent="#2ecc71",
        background="#ffffff",
        text="#333333",
    )
    return _make_theme(
        DEFAULT_THEME_ID,
        "Basic styling with standard colors",
        palette,
        _typography(_SANS, palette.text),
        ThemeCapabilities(),
        stroke_width=2,
        badge_radius=4,
    )


def _rp_theme() -> Theme:
    palette = Palette(
        primary="#3498db",
        secondary="#e74c3c",
        accent="#2ecc71",
        background="#ffffff",
        text="#2c3e50",
    )
    return _make_theme(
        "rp",
        "Clean, professional styling for technical documentation",
        palette,
        _typography(_HELVETICA, palette.text, title_weight="300", scale=1.1),
        ThemeCapabilities(connector_style=ConnectorStyle.ARROW),
        stroke_width=3,
        badge_radius=6,
    )


def _robotpony_theme() -> Theme:
    palette = Palette(
        primary="#9fb665",
        secondary="#c8986b",
        accent="#7ba23f",
        background="#d4c5a9",
        text="#333333",
    )
    return _make_theme(
        "robotpony",
        "Comic-style theme with vintage textures and bold typography",
        palette,
        _typography(_MONO, palette.text, label_fill="#ffffff", spacing=1.0),
        ThemeCapabilities(
            organic_circle_layout=True,
            organic_paths=True,
            textures=True,
            watermark="ROBOTPONY.CA",
        ),
        stroke_width=2,
        badge_radius=8,
    )


_THEME_FACTORIES = MappingProxyType(
    {
        DEFAULT_THEME_ID: _default_theme,
        "rp": _rp_theme,
        "robotpony": _robotpony_theme,
    }
)


def available_themes() -> list[str]:
    return list(_THEME_FACTORIES)


def resolve_theme(theme_id: str | None) -> Theme:
    """Return the theme for an id, falling back to the default theme."""
    key = (theme_id or DEFAULT_THEME_ID).strip().lower()
    factory = _THEME_FACTORIES.get(key)
    if factory is None:
        suggestion = closest_name(key, available_themes())
        hint = f" Did you mean '{suggestion}'?" if suggestion else ""
        logger.warning("Unknown theme '%s'; using '%s'.%s", theme_id, DEFAULT_THEME_ID, hint)
        factory = _THEME_FACTORIES[DEFAULT_THEME_ID]
    return factory()
