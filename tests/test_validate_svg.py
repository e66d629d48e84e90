from __future__ import annotations

from pathlib import Path

from graphinate import ChartSpec, render_chart
from graphinate.models import PlotData
from validators import validate_svg, validate_svg_text
from validators.validate import (
    E1000_PARSE_ERROR,
    E2001_ROOT_INVALID,
    E2002_DEFS_MISSING,
    E2003_STYLE_COUNT,
    E2004_ROOT_GROUP_MISSING,
    E2005_GROUP_ORDER,
    W2101_TEXT_ID_MISSING,
)


def _build_svg(groups: list[str], head: str = "<defs/><style>.a{}</style>", size: str = 'width="100" height="100" viewBox="0 0 100 100"') -> str:
    group_markup = "".join(f'<g id="{group}"/>' for group in groups)
    return (
        f'<svg xmlns="http://www.w3.org/2000/svg" {size}>'
        f'{head}<g id="figure_root">{group_markup}</g></svg>'
    )


VENN_GROUPS = ["g_background", "g_circles", "g_connectors", "g_labels", "g_overlays"]


def test_rendered_plot_passes(tmp_path: Path) -> None:
    svg = render_chart(ChartSpec(kind="plot", data=PlotData(x_axis_label="X", y_axis_label="Y")))
    path = tmp_path / "plot.svg"
    path.write_text(svg)
    report = validate_svg(path, "plot")
    assert report.ok, report.to_dict()
    assert report.stats["kind"] == "plot"
    assert report.warnings == []


def test_kind_is_inferred_from_groups() -> None:
    report = validate_svg_text(_build_svg(VENN_GROUPS))
    assert report.ok
    assert report.stats["kind"] == "venn"


def test_wrong_group_order() -> None:
    groups = ["g_background", "g_labels", "g_circles", "g_connectors", "g_overlays"]
    report = validate_svg_text(_build_svg(groups), "venn")
    assert E2005_GROUP_ORDER in report.codes()


def test_overlays_must_come_last() -> None:
    groups = ["g_background", "g_overlays", "g_circles", "g_connectors", "g_labels"]
    report = validate_svg_text(_build_svg(groups))
    assert E2005_GROUP_ORDER in report.codes()


def test_defs_must_lead() -> None:
    report = validate_svg_text(_build_svg(VENN_GROUPS, head="<style>.a{}</style><defs/>"))
    assert E2002_DEFS_MISSING in report.codes()
    assert E2003_STYLE_COUNT in report.codes()


def test_single_style_block() -> None:
    report = validate_svg_text(_build_svg(VENN_GROUPS, head="<defs/><style/><style/>"))
    assert E2003_STYLE_COUNT in report.codes()


def test_root_size_required() -> None:
    report = validate_svg_text(_build_svg(VENN_GROUPS, size='width="0" height="100"'))
    assert report.codes().count(E2001_ROOT_INVALID) == 2


def test_missing_figure_root() -> None:
    svg = '<svg xmlns="http://www.w3.org/2000/svg" width="10" height="10" viewBox="0 0 10 10"><defs/><style/></svg>'
    assert E2004_ROOT_GROUP_MISSING in validate_svg_text(svg).codes()


def test_text_without_id_warns() -> None:
    svg = _build_svg(VENN_GROUPS).replace('<g id="g_labels"/>', '<g id="g_labels"><text>Hi</text></g>')
    report = validate_svg_text(svg)
    assert report.ok
    assert [issue.code for issue in report.warnings] == [W2101_TEXT_ID_MISSING]


def test_unparseable_input() -> None:
    report = validate_svg_text("<svg")
    assert report.status == "fail"
    assert report.codes() == [E1000_PARSE_ERROR]
