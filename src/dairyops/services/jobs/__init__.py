"""Scheduled order generation."""

from .runner import JobSummary, renewal_end_date, run_daily_orders, run_lookahead_orders, run_order_generation
from .scheduler import OrderScheduler, next_run_after

__all__ = [
    "JobSummary",
    "OrderScheduler",
    "next_run_after",
    "renewal_end_date",
    "run_daily_orders",
    "run_lookahead_orders",
    "run_order_generation",
]
