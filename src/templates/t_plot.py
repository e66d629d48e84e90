from __future__ import annotations

import logging
import math

from common.svg_builder import SvgBuilder
from graphinate.context import RenderContext
from graphinate.geometry import LEGEND_PADDING, LEGEND_ROW_HEIGHT, LEGEND_SWATCH, PlotFrame
from graphinate.models import ChartSpec, LineSeries, Marker, PlotData
from graphinate.paths import organic_path, smooth_path, to_svg_path
from graphinate.text_layout import TextElement, measure_bounds, resolve_collisions

logger = logging.getLogger(__name__)

LINE_STYLES = ("solid", "dotted", "dashed", "dash-dot")
MARKER_SHAPES = ("circle", "square", "triangle", "diamond", "cross")
DEFAULT_MARKER_SIZE = 6.0
AXIS_LABEL_GAP = 50
SYMBOL_GAP = 15
_GRID_DASHES = {"dotted": "2,4", "dashed": "6,4", "solid": None}


def _line_style(style: str) -> str:
    if style in LINE_STYLES:
        return style
    logger.debug("Unknown line style %r, using solid", style)
    return "solid"


def _marker_shape(shape: str) -> str:
    if shape in MARKER_SHAPES:
        return shape
    logger.debug("Unknown marker shape %r, using circle", shape)
    return "circle"


def _draw_grid(builder: SvgBuilder, frame: PlotFrame, data: PlotData) -> None:
    grid = data.grid
    if grid is None or not grid.show:
        return
    group = builder.group("g_grid")
    style_parts = []
    if grid.color:
        style_parts.append(f"stroke: {grid.color};")
    dashes = _GRID_DASHES.get(grid.style, _GRID_DASHES["dotted"])
    if dashes:
        style_parts.append(f"stroke-dasharray: {dashes};")
    extra = {"style": " ".join(style_parts)} if style_parts else {}
    vertical, horizontal = frame.grid_lines()
    for start, end in [*vertical, *horizontal]:
        group.add(builder.drawing.line(start=start, end=end, class_="grid-line", **extra))


def _draw_axes(builder: SvgBuilder, frame: PlotFrame, data: PlotData) -> None:
    group = builder.group("g_axes")
    ox, oy = frame.origin
    group.add(builder.drawing.line(start=(ox, oy), end=(frame.right, oy), class_="axis-line", id="x_axis"))
    group.add(builder.drawing.line(start=(ox, oy), end=(ox, frame.top), class_="axis-line", id="y_axis"))

    builder.add_text(
        "g_axes",
        data.x_axis_label,
        ox + frame.plot_width / 2,
        oy + AXIS_LABEL_GAP,
        "axis-label",
        text_id="txt_x_axis",
    )
    y_label_x = ox - AXIS_LABEL_GAP
    y_label_y = frame.top + frame.plot_height / 2
    builder.add_text(
        "g_axes",
        data.y_axis_label,
        y_label_x,
        y_label_y,
        "axis-label",
        text_id="txt_y_axis",
        transform=f"rotate(-90 {y_label_x:g} {y_label_y:g})",
    )

    # +/- mark the direction of each axis.
    symbols = [
        ("txt_x_minus", "−", ox, oy + SYMBOL_GAP + 5),
        ("txt_x_plus", "+", frame.right, oy + SYMBOL_GAP + 5),
        ("txt_y_minus", "−", ox - SYMBOL_GAP, oy),
        ("txt_y_plus", "+", ox - SYMBOL_GAP, frame.top + 5),
    ]
    for text_id, symbol, x, y in symbols:
        builder.add_text("g_axes", symbol, x, y, "axis-label", text_id=text_id)


def _draw_lines(builder: SvgBuilder, frame: PlotFrame, data: PlotData, ctx: RenderContext) -> list[tuple[str, str]]:
    group = builder.group("g_lines")
    series = ctx.theme.palette.series()
    organic = ctx.theme.capabilities.organic_paths
    legend: list[tuple[str, str]] = []
    for index, line in enumerate(data.lines):
        if len(line.points) < 2:
            logger.debug("Skipping line %d with fewer than two points", index)
            continue
        pixels = [frame.to_pixel(x, y) for x, y in line.points]
        commands = organic_path(pixels, rng=ctx.rng) if organic else smooth_path(pixels)
        color = line.color or series[index % len(series)]
        group.add(
            builder.drawing.path(
                d=to_svg_path(commands),
                class_=f"plot-line {_line_style(line.style)}",
                id=f"line_{index}",
                style=_line_css(line, color),
            )
        )
        if line.label:
            legend.append((line.label, color))
    return legend


def _line_css(line: LineSeries, color: str) -> str:
    css = f"stroke: {color};"
    if line.width is not None:
        css += f" stroke-width: {line.width:g};"
    return css


def _marker_element(builder: SvgBuilder, marker: Marker, point: tuple[float, float], index: int, ink: str):
    x, y = point
    size = marker.size if marker.size is not None else DEFAULT_MARKER_SIZE
    shape = _marker_shape(marker.shape)
    kwargs = {"class_": f"marker {shape}", "id": f"marker_{index}"}
    if marker.color:
        kwargs["style"] = f"fill: {marker.color};"
    if shape == "square":
        return builder.drawing.rect(insert=(x - size, y - size), size=(size * 2, size * 2), **kwargs)
    if shape == "triangle":
        # Equilateral, centred on the point.
        h = size * math.sqrt(3)
        points = [(x, y - h * 2 / 3), (x + size, y + h / 3), (x - size, y + h / 3)]
        return builder.drawing.polygon(points=points, **kwargs)
    if shape == "diamond":
        points = [(x, y - size), (x + size, y), (x, y + size), (x - size, y)]
        return builder.drawing.polygon(points=points, **kwargs)
    if shape == "cross":
        d = f"M {x - size:g} {y - size:g} L {x + size:g} {y + size:g} M {x - size:g} {y + size:g} L {x + size:g} {y - size:g}"
        stroke = marker.color or ink
        kwargs["style"] = f"stroke: {stroke}; stroke-width: 2; fill: none;"
        return builder.drawing.path(d=d, **kwargs)
    return builder.drawing.circle(center=(x, y), r=size, **kwargs)


def _draw_markers(
    builder: SvgBuilder, frame: PlotFrame, data: PlotData, ctx: RenderContext
) -> list[tuple[str, str]]:
    group = builder.group("g_markers")
    label_style = ctx.theme.class_style("legend-text")
    legend: list[tuple[str, str]] = []
    labels: list[TextElement] = []
    for index, marker in enumerate(data.markers):
        point = frame.to_pixel(marker.x, marker.y)
        group.add(_marker_element(builder, marker, point, index, ctx.theme.palette.text))
        size = marker.size if marker.size is not None else DEFAULT_MARKER_SIZE
        if marker.label:
            labels.append(
                TextElement(
                    text=marker.label,
                    x=point[0] + size + 4,
                    y=point[1],
                    style=label_style,
                    element_id=f"txt_marker_{index}",
                )
            )
            legend.append((marker.label, marker.color or ctx.theme.palette.primary))
    for label in resolve_collisions(labels):
        builder.add_text(
            "g_markers",
            label.text,
            label.x,
            label.y,
            "legend-text",
            text_id=label.element_id,
            anchor="start",
            dominant_baseline="middle",
        )
    return legend


def _draw_captions(builder: SvgBuilder, frame: PlotFrame, data: PlotData, ctx: RenderContext) -> None:
    group = builder.group("g_captions")
    style = ctx.theme.class_style("caption-text")
    anchors = []
    elements = []
    for index, caption in enumerate(data.captions):
        point = frame.to_pixel(caption.x, caption.y)
        box = frame.caption_box(caption.text, point)
        anchors.append((point, box))
        elements.append(
            TextElement(
                text=caption.text,
                x=box.x + box.width / 2,
                y=box.y + box.height / 2,
                style=style,
                element_id=f"txt_caption_{index}",
            )
        )

    for (point, box), placed in zip(anchors, resolve_collisions(elements)):
        left = placed.x - box.width / 2
        top = placed.y - box.height / 2
        group.add(
            builder.drawing.line(start=point, end=(placed.x, placed.y), class_="caption-connector")
        )
        group.add(
            builder.drawing.rect(insert=(left, top), size=(box.width, box.height), class_="caption-box")
        )
        builder.add_text(
            "g_captions",
            placed.text,
            placed.x,
            placed.y,
            "caption-text",
            text_id=placed.element_id,
            dominant_baseline="middle",
        )


def _draw_legend(
    builder: SvgBuilder, frame: PlotFrame, data: PlotData, ctx: RenderContext, entries: list[tuple[str, str]]
) -> None:
    options = data.legend
    if not entries or (options is not None and not options.show):
        return
    position = options.position if options is not None else "top-right"
    style = ctx.theme.class_style("legend-text")
    label_width = max(measure_bounds(label, style, 0, 0).width for label, _ in entries)
    box = frame.legend_box(len(entries), label_width, position)

    group = builder.group("g_legend")
    group.add(builder.drawing.rect(insert=(box.x, box.y), size=(box.width, box.height), class_="legend-box"))
    swatch_x = box.x + LEGEND_PADDING
    text_x = swatch_x + LEGEND_SWATCH + LEGEND_PADDING
    for index, (label, color) in enumerate(entries):
        row_y = box.y + LEGEND_PADDING / 2 + (index + 0.5) * LEGEND_ROW_HEIGHT
        group.add(
            builder.drawing.line(
                start=(swatch_x, row_y),
                end=(swatch_x + LEGEND_SWATCH, row_y),
                style=f"stroke: {color}; stroke-width: 3;",
            )
        )
        builder.add_text(
            "g_legend",
            label,
            text_x,
            row_y,
            "legend-text",
            text_id=f"txt_legend_{index}",
            anchor="start",
            dominant_baseline="middle",
        )


def render(builder: SvgBuilder, spec: ChartSpec, ctx: RenderContext) -> None:
    data: PlotData = spec.data
    frame = PlotFrame(
        width=builder.width,
        height=builder.height,
        x_range=data.x_range,
        y_range=data.y_range,
    )
    _draw_grid(builder, frame, data)
    _draw_axes(builder, frame, data)
    entries = _draw_lines(builder, frame, data, ctx)
    entries.extend(_draw_markers(builder, frame, data, ctx))
    _draw_captions(builder, frame, data, ctx)
    _draw_legend(builder, frame, data, ctx, entries)
