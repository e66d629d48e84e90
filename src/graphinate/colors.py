"""Colour names, parsing and WCAG contrast helpers."""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

import numpy as np

logger = logging.getLogger(__name__)

BLACK = "#000000"
WHITE = "#ffffff"
AA_CONTRAST = 4.5
AAA_CONTRAST = 7.0
MAX_SUGGESTION_DISTANCE = 2

NAMED_COLORS: Mapping[str, str] = MappingProxyType(
    {
        "olive": "#9fb665",
        "orange": "#c8986b",
        "beige": "#d4c5a9",
        "blue": "#3498db",
        "red": "#e74c3c",
        "green": "#2ecc71",
        "purple": "#9b59b6",
        "yellow": "#f1c40f",
        "gray": "#95a5a6",
        "grey": "#95a5a6",
        "black": "#2c3e50",
        "white": "#ffffff",
    }
)

_HEX_RE = re.compile(r"^#?([0-9a-f]{3}|[0-9a-f]{6})$", re.IGNORECASE)
_CSS_FUNCTION_RE = re.compile(r"^(rgb|rgba|hsl|hsla|url)\(", re.IGNORECASE)


@dataclass(frozen=True)
class ColorResolution:
    value: str
    hint: str | None = None


def edit_distance(source: str, target: str) -> int:
    """Levenshtein distance, one numpy row per source character."""
    if not source or not target:
        return len(source) + len(target)
    chars = np.array(list(target))
    offsets = np.arange(len(target) + 1)
    row = offsets.copy()
    for i, char in enumerate(source, start=1):
        best = np.empty_like(row)
        best[0] = i
        best[1:] = np.minimum(row[1:] + 1, row[:-1] + (chars != char))
        # Insertions chain along the row: row[j] = min over k <= j of best[k] + (j - k).
        row = np.minimum.accumulate(best - offsets) + offsets
    return int(row[-1])


def closest_name(value: str, candidates: list[str], max_distance: int = MAX_SUGGESTION_DISTANCE) -> str | None:
    """Return the candidate nearest to value by edit distance, if close enough."""
    lowered = value.strip().lower()
    best: tuple[int, str] | None = None
    for candidate in candidates:
        distance = edit_distance(lowered, candidate.lower())
        if distance <= max_distance and (best is None or distance < best[0]):
            best = (distance, candidate)
    return best[1] if best else None


def suggest_color_name(value: str) -> str | None:
    return closest_name(value, sorted(NAMED_COLORS))


def is_color_literal(value: str) -> bool:
    text = value.strip()
    return bool(_HEX_RE.match(text) and text.startswith("#")) or bool(_CSS_FUNCTION_RE.match(text))


def resolve_color(value: str) -> ColorResolution:
    """Map a colour name to hex; literals pass through unchanged.

    Unknown names are passed through as well (they may be valid CSS keywords);
    the returned hint carries a suggestion when a known name is close.
    """
    text = str(value).strip()
    if is_color_literal(text):
        return ColorResolution(value=text)
    mapped = NAMED_COLORS.get(text.lower())
    if mapped is not None:
        return ColorResolution(value=mapped)
    suggestion = suggest_color_name(text)
    hint = f"Did you mean '{suggestion}'?" if suggestion else None
    logger.debug("Unrecognised colour name %r passed through", text)
    return ColorResolution(value=text, hint=hint)


def hex_to_rgb(color: str) -> tuple[int, int, int] | None:
    match = _HEX_RE.match(color.strip())
    if not match:
        return None
    digits = match.group(1)
    if len(digits) == 3:
        digits = "".join(ch * 2 for ch in digits)
    return (int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16))


def rgb_triplet(color: str) -> str:
    """Comma-separated channels for use inside CSS rgba()."""
    rgb = hex_to_rgb(color)
    if rgb is None:
        return "0, 0, 0"
    return f"{rgb[0]}, {rgb[1]}, {rgb[2]}"


def _linear_channel(value: int) -> float:
    c = value / 255
    return c / 12.92 if c <= 0.03928 else ((c + 0.055) / 1.055) ** 2.4


def relative_luminance(color: str) -> float:
    rgb = hex_to_rgb(color)
    if rgb is None:
        return 0.0
    r, g, b = (_linear_channel(channel) for channel in rgb)
    return 0.2126 * r + 0.7152 * g + 0.0722 * b


def contrast_ratio(foreground: str, background: str) -> float:
    fg = relative_luminance(foreground)
    bg = relative_luminance(background)
    return (max(fg, bg) + 0.05) / (min(fg, bg) + 0.05)


def contrast_level(ratio: float) -> str:
    if ratio >= AAA_CONTRAST:
        return "AAA"
    if ratio >= AA_CONTRAST:
        return "AA"
    if ratio >= 3.0:
        return "A"
    return "FAIL"


def accessible_foreground(background: str) -> str:
    """Pick black or white text for a background, preferring black at AA."""
    dark = contrast_ratio(BLACK, background)
    light = contrast_ratio(WHITE, background)
    if dark >= AA_CONTRAST:
        return BLACK
    if light >= AA_CONTRAST:
        return WHITE
    return BLACK if dark > light else WHITE
