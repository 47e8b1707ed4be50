"""Delivery calendar rules."""

from .absence import is_absent
from .dates import format_ddmmyyyy, normalize_date, parse_universal_date
from .eligibility import evaluate_lines, should_deliver

__all__ = [
    "evaluate_lines",
    "format_ddmmyyyy",
    "is_absent",
    "normalize_date",
    "parse_universal_date",
    "should_deliver",
]
