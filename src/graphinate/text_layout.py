from __future__ import annotations

import math
import re
from dataclasses import dataclass, replace
from typing import Sequence

from graphinate.themes import TextStyle

CHAR_WIDTH_RATIO = 0.6
DEFAULT_WRAP_CHARS = 12
MAX_PROBES = 8
PROBE_BASE_DISTANCE = 20.0
PROBE_STEP = 10.0

# Words keep a trailing hyphen so "long-term" can break after the hyphen.
_TOKEN_RE = re.compile(r"[^\s-]+-?|-|\s+")


@dataclass(frozen=True)
class Bounds:
    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def overlaps(self, other: "Bounds") -> bool:
        return (
            self.x < other.right
            and other.x < self.right
            and self.y < other.bottom
            and other.y < self.bottom
        )


@dataclass(frozen=True)
class TextElement:
    text: str
    x: float
    y: float
    style: TextStyle
    element_id: str | None = None


def measure_bounds(text: str, style: TextStyle, x: float, y: float) -> Bounds:
    """Approximate on-canvas box of a text anchored at (x, y)."""
    lines = text.split("\n")
    char_width = style.font_size * CHAR_WIDTH_RATIO
    line_height = style.font_size * style.line_height
    width = max(len(line) for line in lines) * char_width
    height = len(lines) * line_height
    if style.text_anchor == "middle":
        left = x - width / 2
    elif style.text_anchor == "end":
        left = x - width
    else:
        left = x
    return Bounds(x=left, y=y - height / 2, width=width, height=height)


def wrap(text: str, max_chars: int = DEFAULT_WRAP_CHARS) -> str:
    """Greedy word wrap; explicit line breaks are left untouched."""
    if len(text) <= max_chars or "\n" in text:
        return text

    lines: list[str] = []
    current = ""
    for token in _TOKEN_RE.findall(text):
        if token.isspace():
            if current:
                current += token
            continue
        if current.strip() and len(current + token) > max_chars:
            lines.append(current.strip())
            current = token
        else:
            current += token
    if current.strip():
        lines.append(current.strip())
    return "\n".join(lines) if lines else text


def _probe(element: TextElement, attempt: int) -> tuple[float, float]:
    angle = attempt * 2 * math.pi / MAX_PROBES
    distance = PROBE_BASE_DISTANCE + attempt * PROBE_STEP
    return (element.x + math.cos(angle) * distance, element.y + math.sin(angle) * distance)


def resolve_collisions(elements: Sequence[TextElement]) -> list[TextElement]:
    """Nudge labels so they do not overlap labels placed before them.

    Elements are placed in input order. Each tries its own position, then up
    to eight probes on a widening ring. If every probe collides the last one
    is kept, so the result may still overlap.
    """
    placed: list[TextElement] = []
    placed_bounds: list[Bounds] = []
    for element in elements:
        x, y = element.x, element.y
        bounds = measure_bounds(element.text, element.style, x, y)
        attempt = 0
        while any(bounds.overlaps(other) for other in placed_bounds) and attempt < MAX_PROBES:
            x, y = _probe(element, attempt)
            bounds = measure_bounds(element.text, element.style, x, y)
            attempt += 1
        placed.append(replace(element, x=x, y=y))
        placed_bounds.append(bounds)
    return placed
