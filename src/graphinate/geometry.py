"""Pure layout math for the three diagram families.

Nothing here touches SVG; templates turn these results into elements.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Sequence

from graphinate.config import RenderConfig
from graphinate.models import (
    FlowNode,
    LayoutNode,
    NodeDiagramData,
    NodeShape,
    Point,
    SetEntry,
)
from graphinate.text_layout import Bounds
from graphinate.themes import ThemeCapabilities

logger = logging.getLogger(__name__)

# Node sizing
NODE_CHAR_WIDTH = 8
NODE_LINE_HEIGHT = 16
NODE_PADDING_X = 40
NODE_PADDING_Y = 20
DIAMOND_MIN = (120.0, 80.0)
RECTANGLE_MIN = (100.0, 40.0)
STACK_TOP = 100.0
STACK_SPACING = 120.0

ARROW_LENGTH = 8.0
ARROW_ANGLE = math.pi / 6

# Hand-tuned (dx, dy, radius scale) per set, in units of offset / radius.
_ORGANIC_THREE = (
    (0.05, -1.05, 1.0),
    (-1.1, 0.8, 0.92),
    (0.95, 0.9, 0.85),
)

BRACKET_GAP = 16.0
BRACKET_ARM = 10.0
BADGE_DROP = 40.0
BADGE_OFFSET = 12.0
DEFAULT_SET_SIZE = 100.0


@dataclass(frozen=True)
class CircleLayout:
    index: int
    name: str
    cx: float
    cy: float
    r: float

    @property
    def bottom(self) -> float:
        return self.cy + self.r

    def contains(self, x: float, y: float) -> bool:
        return math.hypot(x - self.cx, y - self.cy) < self.r


def _set_size(entry: SetEntry) -> float:
    return DEFAULT_SET_SIZE if entry.size is None else max(float(entry.size), 0.0)


def _size_ratio(smaller: float, larger: float) -> float:
    return smaller / larger if larger > 0 else 1.0


def _two_set_layout(
    sets: Sequence[SetEntry], cx: float, cy: float, radius: float, offset: float, threshold: float
) -> list[CircleLayout]:
    sizes = [_set_size(entry) for entry in sets]
    larger = 0 if sizes[0] >= sizes[1] else 1
    smaller = 1 - larger
    ratio = _size_ratio(sizes[smaller], sizes[larger])
    if ratio < threshold:
        small_r = radius * ratio
        shift = (radius - small_r) / 2
        placed = {
            larger: CircleLayout(larger, sets[larger].name, cx, cy, radius),
            smaller: CircleLayout(smaller, sets[smaller].name, cx + shift, cy, small_r),
        }
        return [placed[0], placed[1]]
    return [
        CircleLayout(0, sets[0].name, cx - offset, cy, radius),
        CircleLayout(1, sets[1].name, cx + offset, cy, radius),
    ]


def _ring_layout(
    sets: Sequence[SetEntry], cx: float, cy: float, radius: float, offset: float
) -> list[CircleLayout]:
    count = len(sets)
    circles = []
    for index, entry in enumerate(sets):
        angle = -math.pi / 2 + index * 2 * math.pi / count
        circles.append(
            CircleLayout(
                index,
                entry.name,
                cx + math.cos(angle) * offset,
                cy + math.sin(angle) * offset,
                radius,
            )
        )
    return circles


def _organic_three_layout(
    sets: Sequence[SetEntry], cx: float, cy: float, radius: float, offset: float
) -> list[CircleLayout]:
    return [
        CircleLayout(index, entry.name, cx + dx * offset, cy + dy * offset, radius * scale)
        for index, (entry, (dx, dy, scale)) in enumerate(zip(sets, _ORGANIC_THREE))
    ]


def is_nested(sets: Sequence[SetEntry], threshold: float) -> bool:
    if len(sets) != 2:
        return False
    sizes = sorted(_set_size(entry) for entry in sets)
    return _size_ratio(sizes[0], sizes[1]) < threshold


def layout_sets(
    sets: Sequence[SetEntry],
    canvas: tuple[int, int],
    capabilities: ThemeCapabilities,
    config: RenderConfig,
) -> list[CircleLayout]:
    """Place one circle per set, returned in input order."""
    width, height = canvas
    cx, cy = width / 2, height / 2
    radius = min(width, height) * config.venn_radius_fraction
    offset = radius * config.venn_offset_fraction
    if len(sets) < 2:
        return [CircleLayout(i, entry.name, cx, cy, radius) for i, entry in enumerate(sets)]
    if len(sets) == 2:
        return _two_set_layout(sets, cx, cy, radius, offset, config.nested_ratio_threshold)
    if len(sets) == 3 and capabilities.organic_circle_layout:
        return _organic_three_layout(sets, cx, cy, radius, offset)
    return _ring_layout(sets, cx, cy, radius, offset)


def set_label_position(circle: CircleLayout, center: Point) -> Point:
    """Circle centre pushed away from the diagram centre by half a radius."""
    dx = circle.cx - center[0]
    dy = circle.cy - center[1]
    dist = math.hypot(dx, dy)
    if dist < 1e-6:
        return (circle.cx, circle.cy)
    return (circle.cx + dx / dist * circle.r * 0.5, circle.cy + dy / dist * circle.r * 0.5)


def intersection_anchor(members: Sequence[CircleLayout]) -> Point:
    return (
        sum(circle.cx for circle in members) / len(members),
        sum(circle.cy for circle in members) / len(members),
    )


@dataclass(frozen=True)
class BracketConnector:
    bracket: tuple[Point, Point, Point, Point]
    stem_start: Point
    stem_end: Point
    badge_center: Point


@dataclass(frozen=True)
class ArrowConnector:
    tip: Point
    badge_center: Point

    def line_from(self, badge: Point) -> tuple[Point, Point, tuple[Point, Point, Point]]:
        """Line start, tip and arrowhead for a badge centred at badge."""
        start = (badge[0] - BADGE_OFFSET, badge[1] - BADGE_OFFSET)
        return start, self.tip, arrowhead(self.tip, start)


def bracket_connector(members: Sequence[CircleLayout]) -> BracketConnector:
    """Inverted-U bracket under the member circles with a stem down to the badge."""
    left = min(circle.cx for circle in members)
    right = max(circle.cx for circle in members)
    bar_y = max(circle.bottom for circle in members) + BRACKET_GAP
    mid_x = (left + right) / 2
    bracket = (
        (left, bar_y + BRACKET_ARM),
        (left, bar_y),
        (right, bar_y),
        (right, bar_y + BRACKET_ARM),
    )
    stem_end = (mid_x, bar_y + BADGE_DROP)
    return BracketConnector(
        bracket=bracket,
        stem_start=(mid_x, bar_y),
        stem_end=stem_end,
        badge_center=(mid_x, stem_end[1] + 12),
    )


def arrow_connector(members: Sequence[CircleLayout]) -> ArrowConnector:
    """Diagonal line from a badge below-right of the overlap into the overlap."""
    tip = intersection_anchor(members)
    reach = max(circle.r for circle in members) * 1.3
    start = (tip[0] + reach, tip[1] + reach)
    return ArrowConnector(tip=tip, badge_center=(start[0] + BADGE_OFFSET, start[1] + BADGE_OFFSET))


def arrowhead(tip: Point, source: Point, length: float = ARROW_LENGTH) -> tuple[Point, Point, Point]:
    """Triangle at tip; back vertices are the line direction rotated +/-30 degrees."""
    angle = math.atan2(tip[1] - source[1], tip[0] - source[0])
    back_a = (
        tip[0] - length * math.cos(angle - ARROW_ANGLE),
        tip[1] - length * math.sin(angle - ARROW_ANGLE),
    )
    back_b = (
        tip[0] - length * math.cos(angle + ARROW_ANGLE),
        tip[1] - length * math.sin(angle + ARROW_ANGLE),
    )
    return (tip, back_a, back_b)


def normalize_shape(shape: str | None) -> str:
    value = str(shape or "").strip().lower()
    if value == "oval":
        value = NodeShape.CIRCLE.value
    if value not in {item.value for item in NodeShape}:
        if value:
            logger.debug("Unknown node shape %r, using rectangle", shape)
        return NodeShape.RECTANGLE.value
    return value


def node_dimensions(text: str, shape: str) -> tuple[float, float]:
    lines = text.split("\n")
    longest = max(len(line) for line in lines)
    width = float(longest * NODE_CHAR_WIDTH + NODE_PADDING_X)
    height = float(len(lines) * NODE_LINE_HEIGHT + NODE_PADDING_Y)
    if shape == NodeShape.DIAMOND.value:
        return max(width, DIAMOND_MIN[0]), max(height, DIAMOND_MIN[1])
    if shape == NodeShape.CIRCLE.value:
        size = max(width, height)
        return size, size
    return max(width, RECTANGLE_MIN[0]), max(height, RECTANGLE_MIN[1])


def layout_nodes(
    data: NodeDiagramData, canvas: tuple[int, int], default_color: dict[str, str]
) -> list[LayoutNode]:
    """Size every node from its text and stack unplaced ones vertically."""
    center_x = canvas[0] / 2
    layout: list[LayoutNode] = []
    for index, node in enumerate(data.nodes):
        layout.append(_layout_node(node, index, center_x, default_color))
    return layout


def _layout_node(node: FlowNode, index: int, center_x: float, default_color: dict[str, str]) -> LayoutNode:
    shape = normalize_shape(node.shape)
    width, height = node_dimensions(node.text, shape)
    return LayoutNode(
        id=node.id,
        shape=shape,
        text=node.text,
        color=node.color or default_color[shape],
        x=float(node.x) if node.x is not None else center_x,
        y=float(node.y) if node.y is not None else STACK_TOP + index * STACK_SPACING,
        width=width,
        height=height,
    )


def connection_point(node: LayoutNode, target: LayoutNode) -> Point:
    """Where an edge from node towards target leaves node's outline."""
    dx = target.x - node.x
    dy = target.y - node.y
    if node.shape == NodeShape.CIRCLE.value:
        angle = math.atan2(dy, dx)
        radius = min(node.width, node.height) / 2
        return (node.x + math.cos(angle) * radius, node.y + math.sin(angle) * radius)
    half_w = node.width / 2
    half_h = node.height / 2
    if abs(dx) > abs(dy):
        return (node.x + (half_w if dx > 0 else -half_w), node.y)
    return (node.x, node.y + (half_h if dy > 0 else -half_h))


@dataclass(frozen=True)
class Margins:
    top: float = 60.0
    right: float = 80.0
    bottom: float = 80.0
    left: float = 80.0


LEGEND_ROW_HEIGHT = 18.0
LEGEND_PADDING = 12.0
LEGEND_SWATCH = 24.0
LEGEND_POSITIONS = ("top-left", "top-right", "bottom-left", "bottom-right")
GRID_STEPS = 10
CAPTION_CHAR_WIDTH = 7
CAPTION_PADDING = 16
CAPTION_HEIGHT = 18.0
CAPTION_GAP = 20.0


@dataclass(frozen=True)
class PlotFrame:
    """Plot rectangle inside the canvas plus the data ranges mapped onto it."""

    width: float
    height: float
    x_range: tuple[float, float]
    y_range: tuple[float, float]
    margins: Margins = Margins()

    @property
    def plot_width(self) -> float:
        return self.width - self.margins.left - self.margins.right

    @property
    def plot_height(self) -> float:
        return self.height - self.margins.top - self.margins.bottom

    @property
    def origin(self) -> Point:
        return (self.margins.left, self.margins.top + self.plot_height)

    @property
    def top(self) -> float:
        return self.margins.top

    @property
    def right(self) -> float:
        return self.margins.left + self.plot_width

    def to_pixel(self, x: float, y: float) -> Point:
        x_min, x_max = self.x_range
        y_min, y_max = self.y_range
        ox, oy = self.origin
        return (
            ox + (x - x_min) / (x_max - x_min) * self.plot_width,
            oy - (y - y_min) / (y_max - y_min) * self.plot_height,
        )

    def grid_lines(self) -> tuple[list[tuple[Point, Point]], list[tuple[Point, Point]]]:
        """Interior vertical and horizontal grid segments at tenths of each axis."""
        ox, oy = self.origin
        vertical = []
        horizontal = []
        for step in range(1, GRID_STEPS):
            x = ox + step * self.plot_width / GRID_STEPS
            vertical.append(((x, self.top), (x, oy)))
            y = self.top + step * self.plot_height / GRID_STEPS
            horizontal.append(((ox, y), (self.right, y)))
        return vertical, horizontal

    def legend_box(self, entries: int, label_width: float, position: str) -> Bounds:
        width = LEGEND_SWATCH + label_width + LEGEND_PADDING * 3
        height = entries * LEGEND_ROW_HEIGHT + LEGEND_PADDING
        if position not in LEGEND_POSITIONS:
            logger.debug("Unknown legend position %r, using top-right", position)
            position = "top-right"
        inset = 10.0
        x = self.margins.left + inset if position.endswith("left") else self.right - width - inset
        y = self.top + inset if position.startswith("top") else self.origin[1] - height - inset
        return Bounds(x=x, y=y, width=width, height=height)

    def caption_box(self, text: str, point: Point) -> Bounds:
        """Box beside the captioned point, flipped to stay inside the plot."""
        box_w = len(text) * CAPTION_CHAR_WIDTH + CAPTION_PADDING
        box_h = CAPTION_HEIGHT
        px, py = point
        x = px + CAPTION_GAP
        y = py - box_h / 2
        if x + box_w > self.right:
            x = px - box_w - CAPTION_GAP
        if y < self.top:
            y = py + CAPTION_GAP
        if y + box_h > self.origin[1]:
            y = py - box_h - CAPTION_GAP
        return Bounds(x=x, y=y, width=box_w, height=box_h)
