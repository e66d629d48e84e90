from __future__ import annotations

import io
import re
from dataclasses import dataclass
from typing import Sequence

import svgwrite

ROOT_GROUP_ID = "figure_root"
BACKGROUND_GROUP_ID = "g_background"
OVERLAY_GROUP_ID = "g_overlays"

BODY_GROUPS: dict[str, list[str]] = {
    "venn": ["g_circles", "g_connectors", "g_labels"],
    # Connections before nodes so edges render beneath shapes.
    "flowchart": ["g_connections", "g_nodes", "g_captions"],
    "plot": ["g_grid", "g_axes", "g_lines", "g_markers", "g_captions", "g_legend"],
}

DEFAULT_TEXT_ANCHOR = "middle"
LINE_HEIGHT_RATIO = 1.3

_UNSAFE_ID_CHARS = re.compile(r"[^A-Za-z0-9_-]+")


def safe_id(value: str) -> str:
    """Make a user-supplied name usable inside an XML id."""
    return _UNSAFE_ID_CHARS.sub("_", str(value)).strip("_") or "item"


@dataclass
class SvgBuilder:
    drawing: svgwrite.Drawing
    root: svgwrite.container.Group
    groups: dict[str, svgwrite.container.Group]
    width: int
    height: int

    @classmethod
    def create(
        cls, width: int, height: int, body_groups: Sequence[str], style_sheet: str = ""
    ) -> "SvgBuilder":
        # debug=False: user colours may be CSS literals svgwrite's validator rejects.
        drawing = svgwrite.Drawing(size=(width, height), profile="full", debug=False)
        drawing.viewbox(0, 0, width, height)
        # defs is always the first child; one style block follows it.
        drawing.add(drawing.style(style_sheet))
        root = drawing.g(id=ROOT_GROUP_ID)
        drawing.add(root)

        groups: dict[str, svgwrite.container.Group] = {}
        for group_id in [BACKGROUND_GROUP_ID, *body_groups, OVERLAY_GROUP_ID]:
            group = drawing.g(id=group_id)
            root.add(group)
            groups[group_id] = group

        return cls(
            drawing=drawing,
            root=root,
            groups=groups,
            width=int(width),
            height=int(height),
        )

    def group(self, group_id: str) -> svgwrite.container.Group:
        return self.groups[group_id]

    def add_definitions(self, textures: bool, paper_color: str) -> None:
        defs = self.drawing.defs
        shadow = self.drawing.filter(
            id="drop-shadow", start=("-20%", "-20%"), size=("140%", "140%")
        )
        shadow.feGaussianBlur(in_="SourceAlpha", stdDeviation=3, result="blur")
        shadow.feOffset(in_="blur", dx=2, dy=2, result="offset")
        shadow.feMerge(layernames=["offset", "SourceGraphic"])
        defs.add(shadow)
        if not textures:
            return

        rough = self.drawing.filter(
            id="rough-edges", start=("-50%", "-50%"), size=("200%", "200%")
        )
        rough.feTurbulence(baseFrequency=0.04, numOctaves=3, result="noise")
        rough.feDisplacementMap(in_="SourceGraphic", in2="noise", scale=2)
        defs.add(rough)

        vintage = self.drawing.pattern(size=(4, 4), patternUnits="userSpaceOnUse", id="vintage-texture")
        vintage.add(self.drawing.rect(size=(4, 4), fill="#ffffff", fill_opacity=0.05))
        vintage.add(self.drawing.circle(center=(2, 2), r=0.5, fill="#000000", fill_opacity=0.08))
        defs.add(vintage)

        paper = self.drawing.pattern(size=(8, 8), patternUnits="userSpaceOnUse", id="paper-texture")
        paper.add(self.drawing.rect(size=(8, 8), fill=paper_color))
        paper.add(self.drawing.circle(center=(2, 2), r=0.3, fill="#8b7d6b", fill_opacity=0.2))
        paper.add(self.drawing.circle(center=(6, 6), r=0.2, fill="#8b7d6b", fill_opacity=0.3))
        defs.add(paper)

        gradient = self.drawing.radialGradient(center=("30%", "30%"), id="circle-gradient")
        gradient.add_stop_color(offset="0%", color="#ffffff", opacity=0.4)
        gradient.add_stop_color(offset="100%", color="#000000", opacity=0.15)
        defs.add(gradient)

    def add_background(self, fill: str) -> None:
        self.groups[BACKGROUND_GROUP_ID].add(
            self.drawing.rect(
                insert=(0, 0),
                size=("100%", "100%"),
                fill=fill,
                id="background",
            )
        )

    def add_text(
        self,
        group_id: str,
        content: str,
        x: float,
        y: float,
        css_class: str,
        text_id: str | None = None,
        anchor: str | None = None,
        font_size: float | None = None,
        **extra: object,
    ) -> None:
        """Add a text element; multi-line content becomes tspans centred on y."""
        kwargs: dict[str, object] = {
            "insert": (x, y),
            "class_": css_class,
            "text_anchor": anchor or DEFAULT_TEXT_ANCHOR,
        }
        if text_id:
            kwargs["id"] = text_id
        kwargs.update(extra)
        lines = [line.strip() for line in str(content).splitlines() if line.strip()]
        if len(lines) <= 1:
            self.groups[group_id].add(self.drawing.text(lines[0] if lines else "", **kwargs))
            return
        line_height = (font_size or 14) * LINE_HEIGHT_RATIO
        start_y = y - (len(lines) - 1) * line_height / 2
        kwargs["insert"] = (x, start_y)
        text = self.drawing.text("", **kwargs)
        for idx, line in enumerate(lines):
            if idx == 0:
                tspan = self.drawing.tspan(line, x=[x], y=[start_y])
            else:
                tspan = self.drawing.tspan(line, x=[x], dy=[line_height])
            text.add(tspan)
        self.groups[group_id].add(text)

    def add_title(self, title: str, font_size: float | None = None) -> None:
        self.add_text(
            OVERLAY_GROUP_ID,
            title,
            self.width / 2,
            30,
            "chart-title",
            text_id="txt_title",
            font_size=font_size,
        )

    def add_watermark(self, text: str) -> None:
        self.add_text(
            OVERLAY_GROUP_ID,
            text,
            self.width - 10,
            self.height - 10,
            "watermark",
            text_id="txt_watermark",
            anchor="end",
            opacity=0.7,
        )

    def to_string(self) -> str:
        buffer = io.StringIO()
        self.drawing.write(buffer, pretty=False)
        return buffer.getvalue()
