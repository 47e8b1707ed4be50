"""Per-day sequential order numbers: ``ORD-<YYYYMMDD>-<NNNN>``."""

from __future__ import annotations

from datetime import date

from ...config import settings
from ...persistence.orders import next_order_sequence


def format_order_number(day: date, sequence: int, prefix: str | None = None) -> str:
    if sequence < 1:
        raise ValueError("Order sequence starts at 1")
    return f"{prefix or settings.order_number_prefix}-{day.strftime('%Y%m%d')}-{sequence:04d}"


def generate_order_number(day: date) -> str:
    """Reserve the next number for ``day`` from the atomic database counter."""
    return format_order_number(day, next_order_sequence(day))
