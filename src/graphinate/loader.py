"""Markdown front-matter loader producing validated :class:`ChartSpec` objects.

A chart document is Markdown whose YAML header describes the chart::

    ---
    type: venn
    title: Skills
    sets:
      - "Best Practices (olive)"
      - "Zen and the Art Of (orange)"
    overlap: Wisdom
    ---

Everything structural is checked here so the renderer can trust its input.
"""
from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any

import yaml

from graphinate.colors import resolve_color
from graphinate.errors import GraphinateError, UnsupportedChartKind
from graphinate.models import (
    ChartKind,
    ChartSpec,
    Connection,
    FlowNode,
    GridOptions,
    Intersection,
    LegendOptions,
    LineSeries,
    Marker,
    NodeDiagramData,
    PlotCaption,
    PlotData,
    SetEntry,
    SetOverlapData,
)

logger = logging.getLogger(__name__)

MIN_SETS = 2
MAX_SETS = 5
DEFAULT_SET_SIZE = 100.0
DEFAULT_OVERLAP_SIZE = 30.0

_FRONT_MATTER_RE = re.compile(r"\A---\s*\n(.*?)\n---\s*(?:\n|\Z)", re.DOTALL)
_SET_WITH_COLOR_RE = re.compile(r"^(.+?)\s*\(([^)]+)\)\s*$")


def _error(code: str, message: str, hint: str) -> GraphinateError:
    return GraphinateError(code=code, message=message, hint=hint)


def _color(value: Any, where: str) -> str | None:
    if value is None or value == "":
        return None
    resolution = resolve_color(str(value))
    if resolution.hint:
        logger.warning("Unknown colour '%s' in %s. %s", value, where, resolution.hint)
    return resolution.value


def _number(value: Any, where: str) -> float:
    if isinstance(value, bool):
        raise _error("E1015_VALUE_INVALID", f"{where} must be a number.", f"Provide a numeric {where}.")
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise _error(
            "E1015_VALUE_INVALID",
            f"{where} must be a number.",
            f"Provide a numeric {where}.",
        ) from exc


def _list(data: dict[str, Any], key: str) -> list[Any]:
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise _error("E1014_FIELD_TYPE", f"'{key}' must be a list.", f"Write '{key}' as a YAML list.")
    return value


def _mapping(item: Any, where: str) -> dict[str, Any]:
    if not isinstance(item, dict):
        raise _error("E1014_FIELD_TYPE", f"{where} must be a mapping.", f"Write {where} as key: value pairs.")
    return item


def _required(data: dict[str, Any], key: str, where: str) -> Any:
    value = data.get(key)
    if value is None or value == "":
        raise _error(
            "E1013_FIELD_MISSING",
            f"Required field '{key}' is missing in {where}.",
            f"Add '{key}' to {where}.",
        )
    return value


def extract_front_matter(text: str) -> dict[str, Any]:
    match = _FRONT_MATTER_RE.match(text.lstrip("﻿"))
    if match is None:
        raise _error(
            "E1010_FRONT_MATTER_MISSING",
            "Invalid chart specification: no YAML front matter found.",
            "Start the document with a '---' delimited YAML header.",
        )
    try:
        data = yaml.safe_load(match.group(1))
    except yaml.YAMLError as exc:
        raise _error(
            "E1011_FRONT_MATTER_INVALID",
            f"Failed to parse front matter YAML: {exc}",
            "Ensure the header between the '---' lines is valid YAML.",
        ) from exc
    if not isinstance(data, dict):
        raise _error(
            "E1012_FRONT_MATTER_TYPE",
            "Front matter must be a YAML mapping.",
            "Use key: value pairs such as 'type: venn'.",
        )
    return data


def _parse_set(item: Any, index: int) -> SetEntry:
    if isinstance(item, str):
        match = _SET_WITH_COLOR_RE.match(item)
        if match:
            name = match.group(1).strip()
            return SetEntry(name=name, color=_color(match.group(2).strip(), f"set '{name}'"))
        return SetEntry(name=item.strip())
    entry = _mapping(item, f"sets[{index}]")
    name = str(_required(entry, "name", f"sets[{index}]"))
    size = _number(entry.get("size", DEFAULT_SET_SIZE), f"sets[{index}].size")
    if size <= 0:
        raise _error("E1016_VALUE_RANGE", f"sets[{index}].size must be positive.", "Use a size greater than 0.")
    return SetEntry(name=name, size=size, color=_color(entry.get("color"), f"set '{name}'"))


def _parse_intersection(item: Any, index: int, names: set[str]) -> Intersection:
    entry = _mapping(item, f"intersections[{index}]")
    members = entry.get("sets")
    if not isinstance(members, list) or len(members) < 2:
        raise _error(
            "E1017_INTERSECTION_INVALID",
            f"intersections[{index}].sets must list at least two set names.",
            "Name two or more sets the intersection belongs to.",
        )
    unknown = [str(name) for name in members if str(name) not in names]
    if unknown:
        raise _error(
            "E1017_INTERSECTION_INVALID",
            f"intersections[{index}] references unknown sets: {', '.join(unknown)}.",
            "Intersection members must match set names exactly.",
        )
    arrow = entry.get("arrow")
    label = entry.get("label")
    return Intersection(
        member_names=tuple(str(name) for name in members),
        size=_number(entry.get("size", 0), f"intersections[{index}].size"),
        label=str(label) if label is not None else None,
        has_arrow=bool(arrow) if arrow is not None else None,
    )


def parse_venn(data: dict[str, Any]) -> SetOverlapData:
    raw_sets = _list(data, "sets")
    if len(raw_sets) < MIN_SETS:
        raise _error(
            "E1018_SET_COUNT",
            f"Venn diagrams require at least {MIN_SETS} sets.",
            "List two or more entries under 'sets'.",
        )
    if len(raw_sets) > MAX_SETS:
        raise _error(
            "E1018_SET_COUNT",
            f"Venn diagrams support at most {MAX_SETS} sets.",
            "Split the diagram or merge sets.",
        )
    sets = tuple(_parse_set(item, index) for index, item in enumerate(raw_sets))
    names = {entry.name for entry in sets}
    if len(names) != len(sets):
        raise _error("E1024_SET_DUPLICATE", "Set names must be unique.", "Rename duplicate sets.")
    intersections = [
        _parse_intersection(item, index, names) for index, item in enumerate(_list(data, "intersections"))
    ]
    overlap = data.get("overlap")
    if overlap:
        intersections.append(
            Intersection(
                member_names=tuple(entry.name for entry in sets),
                size=DEFAULT_OVERLAP_SIZE,
                label=str(overlap),
            )
        )
    return SetOverlapData(
        sets=sets,
        intersections=tuple(intersections),
        background=_color(data.get("background"), "background"),
    )


def parse_flowchart(data: dict[str, Any]) -> NodeDiagramData:
    raw_nodes = _list(data, "nodes")
    if not raw_nodes:
        raise _error(
            "E1019_NODES_EMPTY",
            "Flowcharts require at least one node.",
            "Add entries under 'nodes' with id and text.",
        )
    nodes = []
    for index, item in enumerate(raw_nodes):
        entry = _mapping(item, f"nodes[{index}]")
        where = f"nodes[{index}]"
        nodes.append(
            FlowNode(
                id=str(_required(entry, "id", where)),
                text=str(_required(entry, "text", where)),
                shape=str(entry.get("type") or entry.get("shape") or "rectangle"),
                color=_color(entry.get("color"), f"node '{entry.get('id')}'"),
                x=_number(entry["x"], f"{where}.x") if entry.get("x") is not None else None,
                y=_number(entry["y"], f"{where}.y") if entry.get("y") is not None else None,
            )
        )
    ids = {node.id for node in nodes}
    if len(ids) != len(nodes):
        raise _error("E1020_NODE_DUPLICATE", "Node ids must be unique.", "Rename duplicate node ids.")

    connections = []
    for index, item in enumerate(_list(data, "connections")):
        entry = _mapping(item, f"connections[{index}]")
        source = str(_required(entry, "from", f"connections[{index}]"))
        target = str(_required(entry, "to", f"connections[{index}]"))
        for node_id in (source, target):
            if node_id not in ids:
                raise _error(
                    "E1021_CONNECTION_INVALID",
                    f"connections[{index}] references unknown node '{node_id}'.",
                    "Connections must reference existing node ids.",
                )
        label = entry.get("label")
        connections.append(Connection(from_id=source, to_id=target, label=str(label) if label else None))

    caption = data.get("caption")
    subtitle = data.get("subtitle")
    return NodeDiagramData(
        nodes=tuple(nodes),
        connections=tuple(connections),
        caption=str(caption) if caption else None,
        subtitle=str(subtitle) if subtitle else None,
        background=_color(data.get("background"), "background"),
    )


def _range(data: dict[str, Any], key: str) -> tuple[float, float]:
    value = data.get(key)
    if value is None:
        return (0.0, 10.0)
    if not isinstance(value, list) or len(value) != 2:
        raise _error("E1022_RANGE_INVALID", f"'{key}' must be [min, max].", f"Write {key} as [min, max].")
    low, high = _number(value[0], f"{key}[0]"), _number(value[1], f"{key}[1]")
    if low >= high:
        raise _error(
            "E1022_RANGE_INVALID",
            f"'{key}' must have min < max.",
            "Ranges must be [min, max] where min < max.",
        )
    return (low, high)


def _points(value: Any, where: str) -> tuple[tuple[float, float], ...]:
    if not isinstance(value, list):
        raise _error("E1014_FIELD_TYPE", f"{where}.points must be a list.", "Use [[x, y], ...].")
    points = []
    for index, point in enumerate(value):
        if not isinstance(point, (list, tuple)) or len(point) != 2:
            raise _error(
                "E1023_POINT_INVALID",
                f"{where}.points[{index}] must be [x, y].",
                "Coordinates must be numbers in [x, y] format.",
            )
        points.append((_number(point[0], f"{where}.points[{index}]"), _number(point[1], f"{where}.points[{index}]")))
    return tuple(points)


def _parse_line(item: Any, where: str) -> LineSeries:
    entry = _mapping(item, where)
    width = entry.get("width")
    label = entry.get("label")
    return LineSeries(
        points=_points(entry.get("points", []), where),
        style=str(entry.get("style") or "solid"),
        color=_color(entry.get("color"), where),
        width=_number(width, f"{where}.width") if width is not None else None,
        label=str(label) if label else None,
    )


def _parse_marker(item: Any, index: int) -> Marker:
    where = f"markers[{index}]"
    entry = _mapping(item, where)
    size = entry.get("size")
    label = entry.get("label")
    return Marker(
        x=_number(_required(entry, "x", where), f"{where}.x"),
        y=_number(_required(entry, "y", where), f"{where}.y"),
        shape=str(entry.get("shape") or "circle"),
        size=_number(size, f"{where}.size") if size is not None else None,
        color=_color(entry.get("color"), where),
        label=str(label) if label else None,
    )


def _parse_caption(item: Any, index: int) -> PlotCaption:
    where = f"captions[{index}]"
    entry = _mapping(item, where)
    return PlotCaption(
        text=str(_required(entry, "text", where)),
        x=_number(_required(entry, "x", where), f"{where}.x"),
        y=_number(_required(entry, "y", where), f"{where}.y"),
    )


def _parse_grid(value: Any) -> GridOptions | None:
    if value is None:
        return None
    if isinstance(value, bool):
        return GridOptions(show=value)
    entry = _mapping(value, "grid")
    return GridOptions(
        show=bool(entry.get("show", True)),
        color=_color(entry.get("color"), "grid"),
        style=str(entry.get("style") or "dotted"),
    )


def _parse_legend(value: Any) -> LegendOptions | None:
    if value is None:
        return None
    if isinstance(value, bool):
        return LegendOptions(show=value)
    entry = _mapping(value, "legend")
    return LegendOptions(show=bool(entry.get("show", True)), position=str(entry.get("position") or "top-right"))


def parse_plot(data: dict[str, Any]) -> PlotData:
    lines = []
    # 'line' is the single-series shorthand.
    if data.get("line") is not None:
        lines.append(_parse_line(data["line"], "line"))
    for index, item in enumerate(_list(data, "lines")):
        lines.append(_parse_line(item, f"lines[{index}]"))
    return PlotData(
        x_axis_label=str(_required(data, "x_axis", "plot")),
        y_axis_label=str(_required(data, "y_axis", "plot")),
        x_range=_range(data, "x_range"),
        y_range=_range(data, "y_range"),
        lines=tuple(lines),
        markers=tuple(_parse_marker(item, index) for index, item in enumerate(_list(data, "markers"))),
        captions=tuple(_parse_caption(item, index) for index, item in enumerate(_list(data, "captions"))),
        grid=_parse_grid(data.get("grid")),
        legend=_parse_legend(data.get("legend")),
        background=_color(data.get("background"), "background"),
    )


_PARSERS = {
    ChartKind.SET_OVERLAP.value: parse_venn,
    ChartKind.NODE_DIAGRAM.value: parse_flowchart,
    ChartKind.PLOT.value: parse_plot,
}


def spec_from_mapping(data: dict[str, Any]) -> ChartSpec:
    kind = str(data.get("type") or ChartKind.SET_OVERLAP.value).strip().lower()
    parser = _PARSERS.get(kind)
    if parser is None:
        raise UnsupportedChartKind(kind, list(_PARSERS))
    title = data.get("title")
    theme = data.get("theme")
    return ChartSpec(
        kind=kind,
        data=parser(data),
        title=str(title) if title else None,
        theme=str(theme) if theme else None,
    )


def parse_chart_spec(text: str) -> ChartSpec:
    return spec_from_mapping(extract_front_matter(text))


def load_chart_spec(path: Path) -> ChartSpec:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise _error(
            "E1009_INPUT_UNREADABLE",
            f"Cannot read chart document {path}: {exc.strerror}",
            "Check the input path.",
        ) from exc
    return parse_chart_spec(text)
