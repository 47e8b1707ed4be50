"""Delivery sheet reports."""

from .delivery_sheet import generate_delivery_sheet, resolve_sheet_file, schedule_to_csv, schedule_to_xlsx

__all__ = ["generate_delivery_sheet", "resolve_sheet_file", "schedule_to_csv", "schedule_to_xlsx"]
