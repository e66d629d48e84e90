from __future__ import annotations

import numpy as np
import pytest

from graphinate.paths import PathCommand, organic_path, smooth_path, to_svg_path

POINTS = [(0.0, 0.0), (10.0, 20.0), (30.0, 5.0), (45.0, 40.0)]


def test_two_points_make_a_straight_line() -> None:
    commands = smooth_path([(0, 0), (10, 10)])
    assert [command.op for command in commands] == ["M", "L"]
    assert commands[-1].end == (10.0, 10.0)


def test_too_few_points_yield_nothing() -> None:
    assert smooth_path([]) == []
    assert smooth_path([(1, 1)]) == []
    assert organic_path([(1, 1)]) == []


def test_smooth_path_passes_through_every_point() -> None:
    commands = smooth_path(POINTS)
    assert commands[0].op == "M"
    assert commands[0].end == POINTS[0]
    assert [command.op for command in commands[1:]] == ["C"] * (len(POINTS) - 1)
    assert [command.end for command in commands[1:]] == POINTS[1:]


def test_smooth_path_control_points_follow_neighbours() -> None:
    commands = smooth_path(POINTS, tension=0.3)
    # First segment: p0 is clamped to p1.
    cp1, cp2, _ = commands[1].points
    assert cp1 == pytest.approx((0 + (10 - 0) * 0.3, 0 + (20 - 0) * 0.3))
    assert cp2 == pytest.approx((10 - (30 - 0) * 0.3, 20 - (5 - 0) * 0.3))


def test_organic_path_keeps_anchors_and_bounds_jitter() -> None:
    smooth = smooth_path(POINTS)
    organic = organic_path(POINTS, seed=7, wobble=2.0)
    assert [command.end for command in organic] == [command.end for command in smooth]
    for rough, clean in zip(organic[1:], smooth[1:]):
        for (rx, ry), (cx, cy) in zip(rough.points[:2], clean.points[:2]):
            assert abs(rx - cx) <= 1.0
            assert abs(ry - cy) <= 1.0


def test_organic_path_is_reproducible_with_seed() -> None:
    assert organic_path(POINTS, seed=3) == organic_path(POINTS, seed=3)
    assert organic_path(POINTS, seed=3) != organic_path(POINTS, seed=4)


def test_organic_path_uses_injected_generator() -> None:
    first = organic_path(POINTS, rng=np.random.default_rng(11))
    second = organic_path(POINTS, rng=np.random.default_rng(11))
    assert first == second


def test_to_svg_path_formats_compactly() -> None:
    commands = [PathCommand("M", ((0.0, 0.0),)), PathCommand("L", ((10.5, 2.0),))]
    assert to_svg_path(commands) == "M 0 0 L 10.5 2"
