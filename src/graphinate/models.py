"""Typed chart description consumed by the layout engine."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union

Point = tuple[float, float]


class ChartKind(str, Enum):
    SET_OVERLAP = "venn"
    NODE_DIAGRAM = "flowchart"
    PLOT = "plot"


class NodeShape(str, Enum):
    DIAMOND = "diamond"
    RECTANGLE = "rectangle"
    CIRCLE = "circle"


@dataclass(frozen=True)
class SetEntry:
    name: str
    size: float = 100.0
    color: str | None = None


@dataclass(frozen=True)
class Intersection:
    member_names: tuple[str, ...]
    size: float = 0.0
    label: str | None = None
    # None defers to the theme's connector capability.
    has_arrow: bool | None = None


@dataclass(frozen=True)
class SetOverlapData:
    sets: tuple[SetEntry, ...]
    intersections: tuple[Intersection, ...] = ()
    background: str | None = None


@dataclass(frozen=True)
class FlowNode:
    id: str
    text: str
    shape: str = NodeShape.RECTANGLE.value
    color: str | None = None
    x: float | None = None
    y: float | None = None


@dataclass(frozen=True)
class Connection:
    from_id: str
    to_id: str
    label: str | None = None


@dataclass(frozen=True)
class NodeDiagramData:
    nodes: tuple[FlowNode, ...]
    connections: tuple[Connection, ...] = ()
    caption: str | None = None
    subtitle: str | None = None
    background: str | None = None


@dataclass(frozen=True)
class LineSeries:
    points: tuple[Point, ...]
    style: str = "solid"
    color: str | None = None
    width: float | None = None
    label: str | None = None


@dataclass(frozen=True)
class Marker:
    x: float
    y: float
    shape: str = "circle"
    size: float | None = None
    color: str | None = None
    label: str | None = None


@dataclass(frozen=True)
class PlotCaption:
    text: str
    x: float
    y: float


@dataclass(frozen=True)
class GridOptions:
    show: bool = True
    color: str | None = None
    style: str = "dotted"


@dataclass(frozen=True)
class LegendOptions:
    show: bool = True
    position: str = "top-right"


@dataclass(frozen=True)
class PlotData:
    x_axis_label: str
    y_axis_label: str
    x_range: tuple[float, float] = (0.0, 10.0)
    y_range: tuple[float, float] = (0.0, 10.0)
    lines: tuple[LineSeries, ...] = ()
    markers: tuple[Marker, ...] = ()
    captions: tuple[PlotCaption, ...] = ()
    grid: GridOptions | None = None
    legend: LegendOptions | None = None
    background: str | None = None


ChartData = Union[SetOverlapData, NodeDiagramData, PlotData]


@dataclass(frozen=True)
class ChartSpec:
    kind: str
    data: ChartData
    title: str | None = None
    theme: str | None = None


@dataclass
class LayoutNode:
    """A chart node with resolved position and pixel size (centre-based)."""

    id: str
    shape: str
    text: str
    color: str
    x: float
    y: float
    width: float
    height: float
