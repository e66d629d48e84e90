from __future__ import annotations

import logging

from common.svg_builder import SvgBuilder, safe_id
from graphinate.context import RenderContext
from graphinate.geometry import (
    ArrowConnector,
    BracketConnector,
    CircleLayout,
    arrow_connector,
    bracket_connector,
    layout_sets,
    set_label_position,
)
from graphinate.models import ChartSpec, Intersection, SetOverlapData
from graphinate.text_layout import TextElement, measure_bounds, resolve_collisions, wrap
from graphinate.themes import SET_CLASSES, ConnectorStyle, Theme

logger = logging.getLogger(__name__)

BADGE_PADDING = 6
BADGE_HALF_HEIGHT = 12


def _set_colors(data: SetOverlapData, theme: Theme) -> list[str]:
    series = theme.palette.series()
    return [entry.color or series[idx % len(series)] for idx, entry in enumerate(data.sets)]


def _set_id(circle: CircleLayout) -> str:
    return f"set_{circle.index}_{safe_id(circle.name)}"


def _uses_arrow(intersection: Intersection, theme: Theme) -> bool:
    if intersection.has_arrow is not None:
        return intersection.has_arrow
    return theme.capabilities.connector_style is ConnectorStyle.ARROW


def _members(intersection: Intersection, circles: list[CircleLayout]) -> list[CircleLayout] | None:
    by_name: dict[str, CircleLayout] = {}
    for circle in circles:
        by_name.setdefault(circle.name, circle)
    if len(intersection.member_names) < 2:
        return None
    missing = [name for name in intersection.member_names if name not in by_name]
    if missing:
        logger.debug("Skipping intersection with unknown sets: %s", ", ".join(missing))
        return None
    return [by_name[name] for name in intersection.member_names]


def _draw_circles(
    builder: SvgBuilder, circles: list[CircleLayout], colors: list[str], data: SetOverlapData, theme: Theme
) -> None:
    group = builder.group("g_circles")
    textured = theme.capabilities.textures
    for circle, color in zip(circles, colors):
        css_class = f"venn-circle {SET_CLASSES[circle.index % len(SET_CLASSES)]}"
        kwargs = {
            "center": (circle.cx, circle.cy),
            "r": circle.r,
            "class_": css_class,
            "id": _set_id(circle),
        }
        if data.sets[circle.index].color:
            # Inline style so the explicit colour beats the set-* class rule.
            kwargs["style"] = f"fill: {color}; fill-opacity: 0.4; stroke: {color};"
        if textured:
            kwargs["filter"] = "url(#drop-shadow)"
        group.add(builder.drawing.circle(**kwargs))
        if textured:
            group.add(
                builder.drawing.circle(
                    center=(circle.cx, circle.cy),
                    r=circle.r,
                    fill="url(#circle-gradient)",
                    class_="venn-shading",
                )
            )
            group.add(
                builder.drawing.circle(
                    center=(circle.cx, circle.cy),
                    r=circle.r,
                    fill="url(#vintage-texture)",
                    class_="venn-texture",
                )
            )


def _draw_bracket(builder: SvgBuilder, connector: BracketConnector, badge: TextElement) -> None:
    group = builder.group("g_connectors")
    group.add(
        builder.drawing.polyline(points=list(connector.bracket), class_="connector-line")
    )
    group.add(
        builder.drawing.line(
            start=connector.stem_start,
            end=(badge.x, badge.y - BADGE_HALF_HEIGHT),
            class_="connector-line",
        )
    )


def _draw_arrow(builder: SvgBuilder, connector: ArrowConnector, badge: TextElement) -> None:
    group = builder.group("g_connectors")
    start, tip, head = connector.line_from((badge.x, badge.y))
    group.add(builder.drawing.line(start=start, end=tip, class_="connector-line"))
    group.add(builder.drawing.polygon(points=list(head), class_="arrowhead"))


def _draw_badge(builder: SvgBuilder, badge: TextElement, index: int) -> None:
    group = builder.group("g_labels")
    bounds = measure_bounds(badge.text, badge.style, badge.x, badge.y)
    group.add(
        builder.drawing.rect(
            insert=(bounds.x - BADGE_PADDING, bounds.y - BADGE_PADDING / 2),
            size=(bounds.width + BADGE_PADDING * 2, bounds.height + BADGE_PADDING),
            class_="intersection-badge",
        )
    )
    builder.add_text(
        "g_labels",
        badge.text,
        badge.x,
        badge.y,
        "intersection-label",
        text_id=f"txt_intersection_{index}",
        font_size=badge.style.font_size,
        dominant_baseline="middle",
    )


def render(builder: SvgBuilder, spec: ChartSpec, ctx: RenderContext) -> None:
    data: SetOverlapData = spec.data
    theme = ctx.theme
    canvas = (builder.width, builder.height)
    center = (builder.width / 2, builder.height / 2)

    circles = layout_sets(data.sets, canvas, theme.capabilities, ctx.config)
    _draw_circles(builder, circles, _set_colors(data, theme), data, theme)

    label_style = theme.class_style("set-label")
    badge_style = theme.class_style("intersection-label")
    elements: list[TextElement] = []
    for circle in circles:
        x, y = set_label_position(circle, center)
        elements.append(
            TextElement(
                text=wrap(circle.name, ctx.config.label_max_chars),
                x=x,
                y=y,
                style=label_style,
                element_id=f"txt_{_set_id(circle)}",
            )
        )

    connectors: list[ArrowConnector | BracketConnector] = []
    for intersection in data.intersections:
        members = _members(intersection, circles)
        if members is None:
            continue
        connector = arrow_connector(members) if _uses_arrow(intersection, theme) else bracket_connector(members)
        text = intersection.label if intersection.label else f"{intersection.size:g}"
        x, y = connector.badge_center
        elements.append(TextElement(text=text, x=x, y=y, style=badge_style))
        connectors.append(connector)

    placed = resolve_collisions(elements)
    set_labels = placed[: len(circles)]
    badges = placed[len(circles):]

    for connector, badge in zip(connectors, badges):
        if isinstance(connector, ArrowConnector):
            _draw_arrow(builder, connector, badge)
        else:
            _draw_bracket(builder, connector, badge)

    for label in set_labels:
        builder.add_text(
            "g_labels",
            label.text,
            label.x,
            label.y,
            "set-label",
            text_id=label.element_id,
            font_size=label.style.font_size,
            dominant_baseline="middle",
        )
    for index, badge in enumerate(badges):
        _draw_badge(builder, badge, index)
