from __future__ import annotations

import xml.etree.ElementTree as ET
from pathlib import Path

from common.svg_builder import BACKGROUND_GROUP_ID, BODY_GROUPS, OVERLAY_GROUP_ID, ROOT_GROUP_ID

from .report import ValidationIssue, ValidationReport
from .svg_checks import child_group_ids, child_tags, element_context, local_name, parse_number, parse_view_box

E1000_PARSE_ERROR = "E1000_PARSE_ERROR"
E2001_ROOT_INVALID = "E2001_ROOT_INVALID"
E2002_DEFS_MISSING = "E2002_DEFS_MISSING"
E2003_STYLE_COUNT = "E2003_STYLE_COUNT"
E2004_ROOT_GROUP_MISSING = "E2004_ROOT_GROUP_MISSING"
E2005_GROUP_ORDER = "E2005_GROUP_ORDER"
E2006_KIND_UNKNOWN = "E2006_KIND_UNKNOWN"
W2101_TEXT_ID_MISSING = "W2101_TEXT_ID_MISSING"


def _check_root(root: ET.Element) -> list[ValidationIssue]:
    issues: list[ValidationIssue] = []
    if local_name(root.tag) != "svg":
        return [
            ValidationIssue(
                code=E2001_ROOT_INVALID,
                message=f"Root element is <{local_name(root.tag)}>, expected <svg>.",
                hint="Render the chart with render_chart.",
                context=element_context(root),
            )
        ]
    for attr in ("width", "height"):
        value = parse_number(root.get(attr))
        if value is None or value <= 0:
            issues.append(
                ValidationIssue(
                    code=E2001_ROOT_INVALID,
                    message=f"Root {attr} must be a positive number, got {root.get(attr)!r}.",
                    hint="Use a positive canvas size.",
                    context={"tag": "svg", "attribute": attr},
                )
            )
    view_box = parse_view_box(root.get("viewBox"))
    if view_box is None or view_box[2] <= 0 or view_box[3] <= 0:
        issues.append(
            ValidationIssue(
                code=E2001_ROOT_INVALID,
                message=f"Root viewBox is missing or empty: {root.get('viewBox')!r}.",
                hint="The viewBox must be '0 0 width height'.",
                context={"tag": "svg", "attribute": "viewBox"},
            )
        )
    return issues


def _check_head(root: ET.Element) -> list[ValidationIssue]:
    issues: list[ValidationIssue] = []
    tags = child_tags(root)
    if not tags or tags[0] != "defs":
        issues.append(
            ValidationIssue(
                code=E2002_DEFS_MISSING,
                message="The first child of <svg> must be <defs>.",
                hint="Filters and patterns belong in a leading defs block.",
                context={"children": tags[:3]},
            )
        )
    style_count = sum(1 for node in root.iter() if local_name(node.tag) == "style")
    if style_count != 1 or tags[1:2] != ["style"]:
        issues.append(
            ValidationIssue(
                code=E2003_STYLE_COUNT,
                message=f"Expected exactly one <style> right after <defs>, found {style_count}.",
                hint="Emit the theme style sheet once.",
                context={"children": tags[:3]},
            )
        )
    return issues


def _find_root_group(root: ET.Element) -> ET.Element | None:
    for child in root:
        if local_name(child.tag) == "g" and child.get("id") == ROOT_GROUP_ID:
            return child
    return None


def _infer_kind(body: list[str]) -> str | None:
    for kind, groups in BODY_GROUPS.items():
        if body == groups:
            return kind
    return None


def _check_groups(
    figure_root: ET.Element, kind: str | None
) -> tuple[list[ValidationIssue], str | None]:
    group_ids = child_group_ids(figure_root)
    issues: list[ValidationIssue] = []
    if group_ids[:1] != [BACKGROUND_GROUP_ID] or group_ids[-1:] != [OVERLAY_GROUP_ID]:
        issues.append(
            ValidationIssue(
                code=E2005_GROUP_ORDER,
                message=f"{ROOT_GROUP_ID} must start with {BACKGROUND_GROUP_ID} and end with {OVERLAY_GROUP_ID}.",
                hint="Keep background and overlay groups around the body groups.",
                context={"groups": group_ids},
            )
        )
        return issues, kind
    body = group_ids[1:-1]
    if kind is None:
        kind = _infer_kind(body)
        if kind is None:
            issues.append(
                ValidationIssue(
                    code=E2006_KIND_UNKNOWN,
                    message=f"Body groups {body} do not match any chart kind.",
                    hint=f"Known kinds: {', '.join(BODY_GROUPS)}.",
                    context={"groups": group_ids},
                )
            )
        return issues, kind
    expected = BODY_GROUPS.get(kind)
    if expected is None:
        issues.append(
            ValidationIssue(
                code=E2006_KIND_UNKNOWN,
                message=f"Unknown chart kind '{kind}'.",
                hint=f"Known kinds: {', '.join(BODY_GROUPS)}.",
            )
        )
    elif body != expected:
        issues.append(
            ValidationIssue(
                code=E2005_GROUP_ORDER,
                message=f"Body groups for {kind} must be {expected}, found {body}.",
                hint="Group order is part of the output contract.",
                context={"groups": group_ids},
            )
        )
    return issues, kind


def _check_text_ids(root: ET.Element) -> list[ValidationIssue]:
    warnings: list[ValidationIssue] = []
    for node in root.iter():
        if local_name(node.tag) == "text" and not node.get("id"):
            text = "".join(node.itertext()).strip()
            warnings.append(
                ValidationIssue(
                    code=W2101_TEXT_ID_MISSING,
                    message=f"Text element without id: {text[:30]!r}.",
                    hint="Give text elements stable ids so they stay editable.",
                    context=element_context(node),
                )
            )
    return warnings


def _validate_root(root: ET.Element, kind: str | None) -> ValidationReport:
    errors = _check_root(root)
    if errors and local_name(root.tag) != "svg":
        return ValidationReport.from_issues(errors)
    errors.extend(_check_head(root))
    figure_root = _find_root_group(root)
    if figure_root is None:
        errors.append(
            ValidationIssue(
                code=E2004_ROOT_GROUP_MISSING,
                message=f"No <g id='{ROOT_GROUP_ID}'> under <svg>.",
                hint="All drawing content lives in the figure root group.",
            )
        )
        return ValidationReport.from_issues(errors)
    group_issues, detected = _check_groups(figure_root, kind)
    errors.extend(group_issues)
    stats = {
        "kind": detected,
        "groups": child_group_ids(figure_root),
        "text_count": sum(1 for node in root.iter() if local_name(node.tag) == "text"),
    }
    return ValidationReport.from_issues(errors, _check_text_ids(root), stats)


def validate_svg_text(svg: str, kind: str | None = None) -> ValidationReport:
    """Check a rendered document against the output contract.

    ``kind`` pins the expected body groups; without it the kind is inferred
    from the groups found.
    """
    try:
        root = ET.fromstring(svg)
    except ET.ParseError as exc:
        return ValidationReport.from_issues(
            [
                ValidationIssue(
                    code=E1000_PARSE_ERROR,
                    message=f"Failed to parse SVG: {exc}",
                    hint="Ensure the SVG is well-formed XML.",
                    context={"tag": "svg"},
                )
            ]
        )
    return _validate_root(root, kind)


def validate_svg(svg_path: Path | str, kind: str | None = None) -> ValidationReport:
    try:
        text = Path(svg_path).read_text(encoding="utf-8")
    except OSError as exc:
        return ValidationReport.from_issues(
            [
                ValidationIssue(
                    code=E1000_PARSE_ERROR,
                    message=f"Failed to read SVG: {exc}",
                    hint="Check the SVG path.",
                    context={"path": str(svg_path), "tag": "svg"},
                )
            ]
        )
    return validate_svg_text(text, kind)
