"""Output contract checks for rendered charts."""

from .report import ValidationIssue, ValidationReport
from .validate import validate_svg, validate_svg_text

__all__ = ["ValidationIssue", "ValidationReport", "validate_svg", "validate_svg_text"]
