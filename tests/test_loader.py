from __future__ import annotations

from pathlib import Path

import pytest

from graphinate import GraphinateError, UnsupportedChartKind, load_chart_spec, parse_chart_spec
from graphinate.models import NodeDiagramData, PlotData, SetOverlapData

VENN_DOC = """---
type: venn
theme: robotpony
title: Skills
sets:
  - "Best Practices (olive)"
  - "Zen and the Art Of (orange)"
overlap: Wisdom
---

# Skills
"""


def _codes(doc: str) -> str:
    with pytest.raises(GraphinateError) as excinfo:
        parse_chart_spec(doc)
    return excinfo.value.code


def test_venn_document_with_colour_shorthand() -> None:
    spec = parse_chart_spec(VENN_DOC)
    assert spec.kind == "venn"
    assert spec.theme == "robotpony"
    assert spec.title == "Skills"
    assert isinstance(spec.data, SetOverlapData)
    first, second = spec.data.sets
    assert (first.name, first.color, first.size) == ("Best Practices", "#9fb665", 100.0)
    assert (second.name, second.color) == ("Zen and the Art Of", "#c8986b")
    (overlap,) = spec.data.intersections
    assert overlap.label == "Wisdom"
    assert overlap.member_names == ("Best Practices", "Zen and the Art Of")


def test_venn_object_sets_and_intersections() -> None:
    doc = """---
type: venn
sets:
  - {name: A, size: 100, color: "#112233"}
  - {name: B, size: 40}
intersections:
  - {sets: [A, B], size: 10, label: Shared, arrow: true}
---
"""
    spec = parse_chart_spec(doc)
    assert spec.data.sets[0].color == "#112233"
    assert spec.data.sets[1].size == 40
    assert spec.data.intersections[0].has_arrow is True


def test_missing_type_defaults_to_venn() -> None:
    spec = parse_chart_spec("---\nsets: [A, B]\n---\n")
    assert spec.kind == "venn"


def test_flowchart_document() -> None:
    doc = """---
type: flowchart
caption: Figure 1
nodes:
  - {id: a, type: oval, text: Start}
  - {id: b, type: diamond, text: "Ok?", x: 300, y: 200}
connections:
  - {from: a, to: b, label: check}
---
"""
    spec = parse_chart_spec(doc)
    assert isinstance(spec.data, NodeDiagramData)
    assert spec.data.nodes[0].shape == "oval"
    assert spec.data.nodes[1].x == 300.0
    assert spec.data.connections[0].label == "check"
    assert spec.data.caption == "Figure 1"


def test_plot_document_with_single_line_shorthand() -> None:
    doc = """---
type: plot
x_axis: Time
y_axis: Value
x_range: [0, 20]
line:
  style: dotted
  points: [[0, 0], [5, 8], [10, 6]]
captions:
  - {text: Start, x: 0, y: 0}
grid: true
---
"""
    spec = parse_chart_spec(doc)
    assert isinstance(spec.data, PlotData)
    assert spec.data.x_range == (0.0, 20.0)
    assert spec.data.y_range == (0.0, 10.0)
    assert spec.data.lines[0].style == "dotted"
    assert spec.data.lines[0].points[1] == (5.0, 8.0)
    assert spec.data.captions[0].text == "Start"
    assert spec.data.grid is not None and spec.data.grid.show


def test_missing_front_matter() -> None:
    assert _codes("# Just a title\n\nNo front matter here.") == "E1010_FRONT_MATTER_MISSING"


def test_invalid_yaml() -> None:
    assert _codes("---\ntype: venn\ninvalid: yaml: structure: [\n---\n") == "E1011_FRONT_MATTER_INVALID"


def test_set_count_limits() -> None:
    assert _codes("---\ntype: venn\nsets: [A]\n---\n") == "E1018_SET_COUNT"
    assert _codes("---\ntype: venn\nsets: [A, B, C, D, E, F]\n---\n") == "E1018_SET_COUNT"


def test_set_size_must_be_positive() -> None:
    for size in ("0", "-5"):
        doc = f"---\ntype: venn\nsets:\n  - {{name: A, size: 100}}\n  - {{name: B, size: {size}}}\n---\n"
        assert _codes(doc) == "E1016_VALUE_RANGE"


def test_set_names_must_be_unique() -> None:
    assert _codes("---\ntype: venn\nsets: [A, A]\n---\n") == "E1024_SET_DUPLICATE"
    doc = "---\ntype: venn\nsets:\n  - {name: A, size: 50}\n  - \"A (red)\"\n---\n"
    assert _codes(doc) == "E1024_SET_DUPLICATE"


def test_intersection_must_name_known_sets() -> None:
    doc = "---\ntype: venn\nsets: [A, B]\nintersections:\n  - {sets: [A, C]}\n---\n"
    assert _codes(doc) == "E1017_INTERSECTION_INVALID"


def test_connections_must_reference_nodes() -> None:
    doc = "---\ntype: flowchart\nnodes:\n  - {id: a, text: A}\nconnections:\n  - {from: a, to: z}\n---\n"
    assert _codes(doc) == "E1021_CONNECTION_INVALID"


def test_flowchart_needs_nodes() -> None:
    assert _codes("---\ntype: flowchart\n---\n") == "E1019_NODES_EMPTY"


def test_plot_requires_axis_labels() -> None:
    assert _codes("---\ntype: plot\ny_axis: Y\n---\n") == "E1013_FIELD_MISSING"


def test_plot_range_must_increase() -> None:
    doc = "---\ntype: plot\nx_axis: X\ny_axis: Y\nx_range: [5, 1]\n---\n"
    assert _codes(doc) == "E1022_RANGE_INVALID"


def test_unknown_type_is_unsupported() -> None:
    with pytest.raises(UnsupportedChartKind):
        parse_chart_spec("---\ntype: pie\n---\n")


def test_load_from_file(tmp_path: Path) -> None:
    path = tmp_path / "chart.md"
    path.write_text(VENN_DOC)
    assert load_chart_spec(path).title == "Skills"


def test_missing_file(tmp_path: Path) -> None:
    with pytest.raises(GraphinateError) as excinfo:
        load_chart_spec(tmp_path / "missing.md")
    assert excinfo.value.code == "E1009_INPUT_UNREADABLE"
