from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from graphinate.config import RenderConfig
from graphinate.themes import Theme


@dataclass(frozen=True)
class RenderContext:
    """Per-render services handed to every template."""

    theme: Theme
    config: RenderConfig
    rng: np.random.Generator

    @classmethod
    def create(cls, theme: Theme, config: RenderConfig) -> "RenderContext":
        return cls(theme=theme, config=config, rng=np.random.default_rng(config.seed))
