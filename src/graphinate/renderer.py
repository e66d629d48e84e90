from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable

from common.svg_builder import BODY_GROUPS, SvgBuilder
from graphinate.config import RenderConfig
from graphinate.context import RenderContext
from graphinate.errors import UnsupportedChartKind
from graphinate.loader import load_chart_spec
from graphinate.models import ChartKind, ChartSpec
from graphinate.themes import Theme, resolve_theme
from templates.t_flowchart import render as render_flowchart
from templates.t_plot import render as render_plot
from templates.t_venn import render as render_venn

logger = logging.getLogger(__name__)

TemplateRenderer = Callable[[SvgBuilder, ChartSpec, RenderContext], None]

_RENDERERS: dict[str, TemplateRenderer] = {
    ChartKind.SET_OVERLAP.value: render_venn,
    ChartKind.NODE_DIAGRAM.value: render_flowchart,
    ChartKind.PLOT.value: render_plot,
}


def supported_kinds() -> list[str]:
    return list(_RENDERERS)


def _kind_key(kind: object) -> str:
    if isinstance(kind, ChartKind):
        return kind.value
    return str(kind).strip().lower()


def _background(spec: ChartSpec, theme: Theme) -> str:
    explicit = getattr(spec.data, "background", None)
    if explicit:
        return explicit
    if theme.capabilities.textures:
        return "url(#paper-texture)"
    return theme.palette.background


def render_chart(
    spec: ChartSpec, theme_id: str | None = None, config: RenderConfig | None = None
) -> str:
    """Render a chart description to an SVG document string.

    ``theme_id`` overrides ``spec.theme``. Raises :class:`UnsupportedChartKind`
    when no template handles ``spec.kind``.
    """
    key = _kind_key(spec.kind)
    template = _RENDERERS.get(key)
    if template is None:
        raise UnsupportedChartKind(str(spec.kind), supported_kinds())

    config = config or RenderConfig()
    theme = resolve_theme(theme_id or spec.theme)
    ctx = RenderContext.create(theme, config)
    logger.debug("Rendering %s chart with theme '%s' at %dx%d", key, theme.id, config.width, config.height)

    builder = SvgBuilder.create(config.width, config.height, BODY_GROUPS[key], theme.style_sheet)
    builder.add_definitions(theme.capabilities.textures, theme.palette.background)
    builder.add_background(_background(spec, theme))
    template(builder, spec, ctx)
    if spec.title:
        builder.add_title(spec.title, font_size=theme.class_style("chart-title").font_size)
    if theme.capabilities.watermark:
        builder.add_watermark(theme.capabilities.watermark)
    return builder.to_string()


def render_file(
    input_md: Path,
    output_svg: Path,
    theme_id: str | None = None,
    config: RenderConfig | None = None,
) -> None:
    spec = load_chart_spec(input_md)
    svg = render_chart(spec, theme_id=theme_id, config=config)
    output_svg.parent.mkdir(parents=True, exist_ok=True)
    output_svg.write_text(svg)
    logger.info("Wrote %s", output_svg)
