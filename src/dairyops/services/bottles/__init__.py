"""Returnable bottle tracking."""

from .tracking import BOTTLE_SIZES, bottle_balance, bottle_size, issue_bottles_for_order, record_bottle_transaction

__all__ = ["BOTTLE_SIZES", "bottle_balance", "bottle_size", "issue_bottles_for_order", "record_bottle_transaction"]
