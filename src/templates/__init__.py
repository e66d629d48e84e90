"""Per-kind chart templates."""

from .t_flowchart import render as render_flowchart
from .t_plot import render as render_plot
from .t_venn import render as render_venn

__all__ = ["render_flowchart", "render_plot", "render_venn"]
