from __future__ import annotations

import logging

from common.svg_builder import SvgBuilder, safe_id
from graphinate.colors import accessible_foreground
from graphinate.context import RenderContext
from graphinate.geometry import arrowhead, connection_point, layout_nodes
from graphinate.models import ChartSpec, LayoutNode, NodeDiagramData, NodeShape
from graphinate.text_layout import TextElement, resolve_collisions

logger = logging.getLogger(__name__)

CAPTION_OFFSET = 60
SUBTITLE_GAP = 20
LABEL_LIFT = 5


def _default_colors(ctx: RenderContext) -> dict[str, str]:
    palette = ctx.theme.palette
    return {
        NodeShape.DIAMOND.value: palette.secondary,
        NodeShape.RECTANGLE.value: palette.primary,
        NodeShape.CIRCLE.value: palette.primary,
    }


def _draw_node(builder: SvgBuilder, node: LayoutNode, textured: bool, font_size: float) -> None:
    group = builder.group("g_nodes")
    css_class = f"flowchart-shape {node.shape}-shape"
    common = {"fill": node.color, "class_": css_class, "id": f"node_{safe_id(node.id)}"}
    if textured:
        common["filter"] = "url(#drop-shadow)"
    half_w = node.width / 2
    half_h = node.height / 2
    if node.shape == NodeShape.DIAMOND.value:
        points = [
            (node.x, node.y - half_h),
            (node.x + half_w, node.y),
            (node.x, node.y + half_h),
            (node.x - half_w, node.y),
        ]
        group.add(builder.drawing.polygon(points=points, **common))
    elif node.shape == NodeShape.CIRCLE.value:
        group.add(
            builder.drawing.circle(
                center=(node.x, node.y), r=min(node.width, node.height) / 2, **common
            )
        )
    else:
        group.add(
            builder.drawing.rect(
                insert=(node.x - half_w, node.y - half_h),
                size=(node.width, node.height),
                rx=4,
                ry=4,
                **common,
            )
        )
    builder.add_text(
        "g_nodes",
        node.text,
        node.x,
        node.y,
        "node-text",
        text_id=f"txt_node_{safe_id(node.id)}",
        font_size=font_size,
        style=f"fill: {accessible_foreground(node.color)};",
        dominant_baseline="middle",
    )


def render(builder: SvgBuilder, spec: ChartSpec, ctx: RenderContext) -> None:
    data: NodeDiagramData = spec.data
    theme = ctx.theme
    nodes = layout_nodes(data, (builder.width, builder.height), _default_colors(ctx))
    by_id = {node.id: node for node in nodes}

    connections = builder.group("g_connections")
    label_style = theme.class_style("connection-label")
    labels: list[TextElement] = []
    for index, connection in enumerate(data.connections):
        source = by_id.get(connection.from_id)
        target = by_id.get(connection.to_id)
        if source is None or target is None:
            logger.debug(
                "Skipping connection %s -> %s with unknown endpoint",
                connection.from_id,
                connection.to_id,
            )
            continue
        start = connection_point(source, target)
        end = connection_point(target, source)
        connections.add(
            builder.drawing.line(
                start=start,
                end=end,
                class_="connection-line",
                id=f"conn_{index}",
            )
        )
        connections.add(
            builder.drawing.polygon(points=list(arrowhead(end, start)), class_="arrowhead")
        )
        if connection.label:
            labels.append(
                TextElement(
                    text=connection.label,
                    x=(start[0] + end[0]) / 2,
                    y=(start[1] + end[1]) / 2 - LABEL_LIFT,
                    style=label_style,
                    element_id=f"txt_conn_{index}",
                )
            )

    for label in resolve_collisions(labels):
        builder.add_text(
            "g_connections",
            label.text,
            label.x,
            label.y,
            "connection-label",
            text_id=label.element_id,
            font_size=label.style.font_size,
        )

    body_size = theme.class_style("node-text").font_size
    for node in nodes:
        _draw_node(builder, node, theme.capabilities.textures, body_size)

    caption_y = builder.height - CAPTION_OFFSET
    if data.caption:
        builder.add_text(
            "g_captions",
            data.caption,
            builder.width / 2,
            caption_y,
            "flowchart-caption",
            text_id="txt_caption",
        )
    if data.subtitle:
        builder.add_text(
            "g_captions",
            data.subtitle,
            builder.width / 2,
            caption_y + SUBTITLE_GAP if data.caption else caption_y,
            "flowchart-subtitle",
            text_id="txt_subtitle",
        )
