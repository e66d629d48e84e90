from __future__ import annotations

from dataclasses import dataclass


@dataclass
class GraphinateError(Exception):
    code: str
    message: str
    hint: str

    def __str__(self) -> str:
        return self.message


class UnsupportedChartKind(GraphinateError):
    """Raised when a chart kind has no renderer."""

    def __init__(self, kind: str, supported: list[str]) -> None:
        super().__init__(
            code="E2100_KIND_UNSUPPORTED",
            message=f"Unsupported chart kind '{kind}'.",
            hint=f"Use one of: {', '.join(supported)}.",
        )
        self.kind = kind
