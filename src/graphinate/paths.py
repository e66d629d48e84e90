"""Curve construction through ordered point sequences.

Both builders produce one cubic Bezier segment per pair of consecutive input
points, with Catmull-Rom style tangents, so the curve passes through every
input point exactly.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import numpy as np

from graphinate.config import DEFAULT_SEED
from graphinate.models import Point

SMOOTH_TENSION = 0.3
ORGANIC_TENSION = 0.3
ORGANIC_WOBBLE = 2.0


@dataclass(frozen=True)
class PathCommand:
    """One SVG path command: op is 'M', 'L' or 'C'."""
    op: str
    points: tuple[Point, ...]

    @property
    def end(self) -> Point:
        return self.points[-1]


def _fmt(value: float) -> str:
    text = f"{value:.3f}".rstrip("0").rstrip(".")
    return "0" if text in {"-0", ""} else text


def to_svg_path(commands: Sequence[PathCommand]) -> str:
    parts: list[str] = []
    for command in commands:
        coords = " ".join(f"{_fmt(x)} {_fmt(y)}" for x, y in command.points)
        parts.append(f"{command.op} {coords}")
    return " ".join(parts)


def _as_point(values: np.ndarray) -> Point:
    return (float(values[0]), float(values[1]))


def _control_points(points: np.ndarray, index: int, tension: float) -> tuple[np.ndarray, np.ndarray]:
    """Control points for the segment points[index] -> points[index + 1]."""
    last = len(points) - 1
    p0 = points[max(0, index - 1)]
    p1 = points[index]
    p2 = points[index + 1]
    p3 = points[min(last, index + 2)]
    return p1 + (p2 - p0) * tension, p2 - (p3 - p1) * tension


def smooth_path(points: Sequence[Point], tension: float = SMOOTH_TENSION) -> list[PathCommand]:
    if len(points) < 2:
        return []
    start = (float(points[0][0]), float(points[0][1]))
    if len(points) == 2:
        end = (float(points[1][0]), float(points[1][1]))
        return [PathCommand("M", (start,)), PathCommand("L", (end,))]

    array = np.asarray(points, dtype=float)
    commands = [PathCommand("M", (start,))]
    for index in range(len(array) - 1):
        cp1, cp2 = _control_points(array, index, tension)
        end = (float(points[index + 1][0]), float(points[index + 1][1]))
        commands.append(PathCommand("C", (_as_point(cp1), _as_point(cp2), end)))
    return commands


def organic_path(
    points: Sequence[Point],
    rng: np.random.Generator | None = None,
    seed: int | None = DEFAULT_SEED,
    wobble: float = ORGANIC_WOBBLE,
    tension: float = ORGANIC_TENSION,
) -> list[PathCommand]:
    """Hand-drawn variant of :func:`smooth_path`.

    Each control point is nudged by up to ``wobble / 2`` on both axes. The
    anchors themselves are never moved. Pass ``rng`` to share a generator
    across several paths; otherwise one is created from ``seed``.
    """
    if len(points) < 2:
        return []
    generator = rng if rng is not None else np.random.default_rng(seed)
    half = wobble / 2
    array = np.asarray(points, dtype=float)
    commands = [PathCommand("M", ((float(points[0][0]), float(points[0][1])),))]
    for index in range(len(array) - 1):
        cp1, cp2 = _control_points(array, index, tension)
        jitter = generator.uniform(-half, half, size=(2, 2))
        end = (float(points[index + 1][0]), float(points[index + 1][1]))
        commands.append(
            PathCommand("C", (_as_point(cp1 + jitter[0]), _as_point(cp2 + jitter[1]), end))
        )
    return commands
