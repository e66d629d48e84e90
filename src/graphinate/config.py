from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

import yaml

from graphinate.errors import GraphinateError

DEFAULT_WIDTH = 1200
DEFAULT_HEIGHT = 900
DEFAULT_SEED = 0
# Size ratio (smaller / larger) below which two sets are drawn nested.
NESTED_RATIO_THRESHOLD = 0.8


@dataclass(frozen=True)
class RenderConfig:
    width: int = DEFAULT_WIDTH
    height: int = DEFAULT_HEIGHT
    seed: int | None = DEFAULT_SEED
    venn_radius_fraction: float = 0.2
    venn_offset_fraction: float = 0.7
    nested_ratio_threshold: float = NESTED_RATIO_THRESHOLD
    label_max_chars: int = 12

    @property
    def canvas(self) -> tuple[int, int]:
        return (self.width, self.height)


def _load_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text())
    except yaml.YAMLError as exc:
        raise GraphinateError(
            code="E1001_CONFIG_INVALID",
            message=f"Failed to parse config YAML: {exc}",
            hint="Ensure the config file is valid YAML.",
        ) from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise GraphinateError(
            code="E1002_CONFIG_TYPE",
            message=f"Expected mapping at top of YAML: {path}",
            hint="Wrap settings in a mapping with keys like canvas/venn/text.",
        )
    return data


def _positive_int(value: Any, name: str) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError) as exc:
        raise GraphinateError(
            code="E1003_CONFIG_VALUE",
            message=f"{name} must be an integer.",
            hint=f"Provide a numeric {name}.",
        ) from exc
    if number <= 0:
        raise GraphinateError(
            code="E1004_CONFIG_RANGE",
            message=f"{name} must be positive.",
            hint=f"Provide a positive {name}.",
        )
    return number


def _seed(value: Any) -> int | None:
    if value is None:
        return None
    try:
        seed = int(value)
    except (TypeError, ValueError) as exc:
        raise GraphinateError(
            code="E1003_CONFIG_VALUE",
            message="seed must be an integer or null.",
            hint="Use a non-negative integer seed, or null for fresh jitter.",
        ) from exc
    if seed < 0:
        raise GraphinateError(
            code="E1004_CONFIG_RANGE",
            message="seed must be non-negative.",
            hint="Use a non-negative integer seed.",
        )
    return seed


def _fraction(value: Any, name: str) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise GraphinateError(
            code="E1003_CONFIG_VALUE",
            message=f"{name} must be numeric.",
            hint=f"Provide a number between 0 and 1 for {name}.",
        ) from exc
    if not 0.0 < number <= 1.0:
        raise GraphinateError(
            code="E1004_CONFIG_RANGE",
            message=f"{name} must be in (0, 1].",
            hint=f"Provide a number between 0 and 1 for {name}.",
        )
    return number


def config_from_dict(data: dict[str, Any], base: RenderConfig | None = None) -> RenderConfig:
    config = base or RenderConfig()
    canvas = data.get("canvas", {}) or {}
    venn = data.get("venn", {}) or {}
    text = data.get("text", {}) or {}
    changes: dict[str, Any] = {}

    if "width" in canvas:
        changes["width"] = _positive_int(canvas["width"], "canvas.width")
    if "height" in canvas:
        changes["height"] = _positive_int(canvas["height"], "canvas.height")
    if "seed" in data:
        changes["seed"] = _seed(data["seed"])
    if "radius_fraction" in venn:
        changes["venn_radius_fraction"] = _fraction(venn["radius_fraction"], "venn.radius_fraction")
    if "offset_fraction" in venn:
        changes["venn_offset_fraction"] = _fraction(venn["offset_fraction"], "venn.offset_fraction")
    if "nested_ratio_threshold" in venn:
        changes["nested_ratio_threshold"] = _fraction(
            venn["nested_ratio_threshold"], "venn.nested_ratio_threshold"
        )
    if "label_max_chars" in text:
        changes["label_max_chars"] = _positive_int(text["label_max_chars"], "text.label_max_chars")
    return replace(config, **changes)


def load_render_config(path: Path) -> RenderConfig:
    return config_from_dict(_load_yaml(path))
