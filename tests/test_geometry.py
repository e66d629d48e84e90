from __future__ import annotations

import math

import pytest

from graphinate.config import RenderConfig
from graphinate.geometry import (
    PlotFrame,
    arrowhead,
    bracket_connector,
    connection_point,
    is_nested,
    layout_nodes,
    layout_sets,
    node_dimensions,
    normalize_shape,
    set_label_position,
)
from graphinate.models import FlowNode, NodeDiagramData, SetEntry
from graphinate.themes import ThemeCapabilities

CANVAS = (1200, 900)
CONFIG = RenderConfig()
COLORS = {"diamond": "#e74c3c", "rectangle": "#3498db", "circle": "#3498db"}


def test_two_equal_sets_sit_side_by_side() -> None:
    circles = layout_sets([SetEntry("A"), SetEntry("B")], CANVAS, ThemeCapabilities(), CONFIG)
    radius = 900 * 0.2
    offset = radius * 0.7
    assert circles[0].r == circles[1].r == pytest.approx(radius)
    assert circles[1].cx - circles[0].cx == pytest.approx(2 * offset)
    assert circles[0].cy == circles[1].cy == pytest.approx(450)


def test_unequal_sets_are_nested() -> None:
    sets = [SetEntry("Big", size=100), SetEntry("Small", size=50)]
    assert is_nested(sets, CONFIG.nested_ratio_threshold)
    big, small = layout_sets(sets, CANVAS, ThemeCapabilities(), CONFIG)
    assert small.r < big.r
    assert big.contains(small.cx, small.cy)
    assert (big.cx, big.cy) == (600, 450)


def test_zero_size_set_is_not_drawn_at_full_size() -> None:
    sets = [SetEntry("A", size=100), SetEntry("B", size=0)]
    assert is_nested(sets, CONFIG.nested_ratio_threshold)
    big, small = layout_sets(sets, CANVAS, ThemeCapabilities(), CONFIG)
    assert small.r < big.r


def test_nested_threshold_is_configurable() -> None:
    sets = [SetEntry("Big", size=100), SetEntry("Small", size=50)]
    config = RenderConfig(nested_ratio_threshold=0.4)
    circles = layout_sets(sets, CANVAS, ThemeCapabilities(), config)
    assert circles[0].r == circles[1].r


def test_three_sets_symmetric_unless_organic() -> None:
    sets = [SetEntry("A"), SetEntry("B"), SetEntry("C")]
    symmetric = layout_sets(sets, CANVAS, ThemeCapabilities(), CONFIG)
    assert len({round(circle.r, 6) for circle in symmetric}) == 1
    distances = {round(math.hypot(c.cx - 600, c.cy - 450), 6) for c in symmetric}
    assert len(distances) == 1
    assert symmetric[0].cy < 450

    organic = layout_sets(sets, CANVAS, ThemeCapabilities(organic_circle_layout=True), CONFIG)
    assert len({round(circle.r, 6) for circle in organic}) > 1
    assert [circle.name for circle in organic] == ["A", "B", "C"]


def test_five_sets_form_a_ring() -> None:
    sets = [SetEntry(name) for name in "ABCDE"]
    circles = layout_sets(sets, CANVAS, ThemeCapabilities(), CONFIG)
    assert [circle.index for circle in circles] == [0, 1, 2, 3, 4]


def test_label_pushed_away_from_centre() -> None:
    circles = layout_sets([SetEntry("A"), SetEntry("B")], CANVAS, ThemeCapabilities(), CONFIG)
    left_x, _ = set_label_position(circles[0], (600, 450))
    right_x, _ = set_label_position(circles[1], (600, 450))
    assert left_x < circles[0].cx
    assert right_x > circles[1].cx


def test_bracket_sits_below_members() -> None:
    circles = layout_sets([SetEntry("A"), SetEntry("B")], CANVAS, ThemeCapabilities(), CONFIG)
    connector = bracket_connector(circles)
    lowest = max(circle.bottom for circle in circles)
    assert connector.stem_start[1] > lowest
    assert connector.bracket[0][0] == pytest.approx(circles[0].cx)
    assert connector.bracket[-1][0] == pytest.approx(circles[1].cx)
    assert connector.badge_center[1] > connector.stem_end[1] - 1


def test_node_dimensions_by_shape() -> None:
    assert node_dimensions("Hi", "rectangle") == (100.0, 40.0)
    assert node_dimensions("Hi", "diamond") == (120.0, 80.0)
    width, height = node_dimensions("A longer label", "circle")
    assert width == height == 14 * 8 + 40
    assert node_dimensions("Line one\nLine two", "rectangle") == (104.0, 52.0)


def test_unknown_shapes_become_rectangles() -> None:
    assert normalize_shape("hexagon") == "rectangle"
    assert normalize_shape("oval") == "circle"
    assert normalize_shape(None) == "rectangle"


def test_unplaced_nodes_stack_down_the_middle() -> None:
    data = NodeDiagramData(nodes=(FlowNode("a", "Start"), FlowNode("b", "Decide", shape="diamond")))
    first, second = layout_nodes(data, CANVAS, COLORS)
    assert (first.x, first.y) == (600, 100)
    assert (second.x, second.y) == (600, 220)
    assert second.color == COLORS["diamond"]


def test_horizontal_rectangles_connect_on_facing_edges() -> None:
    data = NodeDiagramData(
        nodes=(FlowNode("a", "Start", x=200, y=300), FlowNode("b", "End", x=500, y=300))
    )
    a, b = layout_nodes(data, CANVAS, COLORS)
    assert connection_point(a, b) == (250, 300)
    assert connection_point(b, a) == (450, 300)


def test_vertical_connection_uses_top_and_bottom() -> None:
    data = NodeDiagramData(nodes=(FlowNode("a", "Start", x=200, y=100), FlowNode("b", "End", x=210, y=400)))
    a, b = layout_nodes(data, CANVAS, COLORS)
    assert connection_point(a, b) == (200, 120)
    assert connection_point(b, a) == (210, 380)


def test_circle_connection_on_circumference() -> None:
    data = NodeDiagramData(
        nodes=(FlowNode("a", "Go", shape="circle", x=100, y=100), FlowNode("b", "End", x=400, y=400))
    )
    a, b = layout_nodes(data, CANVAS, COLORS)
    x, y = connection_point(a, b)
    assert math.hypot(x - 100, y - 100) == pytest.approx(a.width / 2)
    assert x == pytest.approx(y)


def test_arrowhead_back_vertices_are_symmetric() -> None:
    tip, left, right = arrowhead((100, 0), (0, 0), length=8)
    assert tip == (100, 0)
    assert left[0] == pytest.approx(right[0])
    assert left[1] == pytest.approx(-right[1])
    assert math.hypot(left[0] - 100, left[1]) == pytest.approx(8)


def test_plot_frame_maps_corners() -> None:
    frame = PlotFrame(width=1200, height=900, x_range=(0, 10), y_range=(0, 10))
    assert frame.origin == (80, 820)
    assert frame.to_pixel(0, 0) == pytest.approx((80, 820))
    assert frame.to_pixel(10, 10) == pytest.approx((1120, 60))


def test_plot_frame_grid_has_nine_interior_lines_per_axis() -> None:
    frame = PlotFrame(width=1200, height=900, x_range=(0, 10), y_range=(0, 10))
    vertical, horizontal = frame.grid_lines()
    assert len(vertical) == len(horizontal) == 9
    assert vertical[0][0][0] == pytest.approx(80 + 104)


def test_caption_box_flips_inside_plot() -> None:
    frame = PlotFrame(width=1200, height=900, x_range=(0, 10), y_range=(0, 10))
    box = frame.caption_box("Peak", frame.to_pixel(10, 10))
    assert box.width == 4 * 7 + 16
    assert box.height == 18
    assert box.right <= frame.right
    assert box.y >= frame.top


def test_legend_box_anchors() -> None:
    frame = PlotFrame(width=1200, height=900, x_range=(0, 10), y_range=(0, 10))
    box = frame.legend_box(2, 50, "bottom-left")
    assert box.height == 2 * 18 + 12
    assert box.x < 600 and box.y > 450
    fallback = frame.legend_box(1, 50, "middle")
    assert fallback.right < frame.right and fallback.y < 450
