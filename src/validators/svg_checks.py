from __future__ import annotations

import re
import xml.etree.ElementTree as ET

NUMBER_RE = re.compile(r"^\s*([-+]?\d*\.?\d+(?:[eE][-+]?\d+)?)")
VIEWBOX_SPLIT_RE = re.compile(r"[\s,]+")


def local_name(tag: str) -> str:
    if "}" in tag:
        return tag.split("}", 1)[1]
    return tag


def parse_number(value: str | None) -> float | None:
    if value is None:
        return None
    match = NUMBER_RE.match(value)
    if not match:
        return None
    try:
        return float(match.group(1))
    except ValueError:
        return None


def parse_view_box(value: str | None) -> tuple[float, float, float, float] | None:
    if not value:
        return None
    parts = [part for part in VIEWBOX_SPLIT_RE.split(value.strip()) if part]
    if len(parts) != 4:
        return None
    try:
        x, y, width, height = (float(part) for part in parts)
    except ValueError:
        return None
    return (x, y, width, height)


def child_tags(node: ET.Element) -> list[str]:
    return [local_name(child.tag) for child in node]


def child_group_ids(node: ET.Element) -> list[str]:
    return [child.get("id", "") for child in node if local_name(child.tag) == "g"]


def element_context(node: ET.Element) -> dict[str, str]:
    context: dict[str, str] = {"tag": local_name(node.tag)}
    node_id = node.get("id")
    if node_id:
        context["id"] = node_id
    return context
