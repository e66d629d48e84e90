"""graphinate library package."""

from .config import RenderConfig, load_render_config
from .errors import GraphinateError, UnsupportedChartKind
from .loader import load_chart_spec, parse_chart_spec
from .models import ChartKind, ChartSpec
from .renderer import render_chart, render_file, supported_kinds
from .themes import available_themes, resolve_theme

__all__ = [
    "ChartKind",
    "ChartSpec",
    "GraphinateError",
    "RenderConfig",
    "UnsupportedChartKind",
    "available_themes",
    "load_chart_spec",
    "load_render_config",
    "parse_chart_spec",
    "render_chart",
    "render_file",
    "resolve_theme",
    "supported_kinds",
]
