"""Shared schema helpers."""

from __future__ import annotations

from datetime import date
from typing import Any, Optional

from pydantic import BaseModel

from ..services.scheduling.dates import normalize_date


def coerce_date(value: Any, field_name: str) -> date:
    day = normalize_date(value)
    if day is None:
        raise ValueError(f"{field_name} must be a date (DD/MM/YYYY, DD-MM-YYYY or YYYY-MM-DD)")
    return day


def coerce_optional_date(value: Any, field_name: str) -> Optional[date]:
    if value is None or value == "":
        return None
    return coerce_date(value, field_name)


def coerce_date_list(values: Any, field_name: str) -> list[date]:
    if values is None:
        return []
    return sorted({coerce_date(value, field_name) for value in values})


def validate_phone_number(value: Any) -> str:
    digits = str(value).strip()
    if len(digits) != 10 or not digits.isdigit():
        raise ValueError("Phone number must be exactly 10 digits")
    return digits


class Pagination(BaseModel):
    page: int
    page_size: int
    total: int
    has_next_page: bool

