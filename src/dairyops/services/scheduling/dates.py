"""Calendar-day normalisation and formatting.

Every comparison in the delivery rules is made on ``datetime.date`` values in
the configured business timezone. Timezone-aware datetimes and epoch numbers
are converted into that zone before the time component is dropped; naive
datetimes are assumed to already be business-local.
"""

from __future__ import annotations

import calendar
import re
from datetime import date, datetime, time, timedelta, timezone
from functools import lru_cache
from typing import Any
from zoneinfo import ZoneInfo

from ...config import settings

_DAY_FIRST_PATTERN = re.compile(r"^\s*(\d{1,2})([/-])(\d{1,2})\2(\d{4})\s*$")
_ISO_DATE_PATTERN = re.compile(r"^\s*(\d{4})-(\d{2})-(\d{2})\s*$")

# Epoch values at or above this magnitude are treated as milliseconds.
_EPOCH_MILLIS_THRESHOLD = 1e11


@lru_cache(maxsize=8)
def business_timezone(name: str | None = None) -> ZoneInfo:
    return ZoneInfo(name or settings.timezone)


def today() -> date:
    return datetime.now(business_timezone()).date()


def tomorrow() -> date:
    return today() + timedelta(days=1)


def now() -> datetime:
    return datetime.now(business_timezone())


def parse_universal_date(text: str | None) -> date | None:
    """Parse ``DD/MM/YYYY`` or ``DD-MM-YYYY``; ``None`` when it is neither."""
    if not text or not isinstance(text, str):
        return None
    match = _DAY_FIRST_PATTERN.match(text)
    if not match:
        return None
    day, _, month, year = match.groups()
    try:
        return date(int(year), int(month), int(day))
    except ValueError:
        return None


def _from_datetime(value: datetime) -> date:
    if value.tzinfo is not None:
        value = value.astimezone(business_timezone())
    return value.date()


def _parse_iso(text: str) -> date | None:
    match = _ISO_DATE_PATTERN.match(text)
    if match:
        year, month, day = (int(part) for part in match.groups())
        try:
            return date(year, month, day)
        except ValueError:
            return None

    candidate = text.strip()
    if candidate.endswith(("Z", "z")):
        candidate = candidate[:-1] + "+00:00"
    try:
        return _from_datetime(datetime.fromisoformat(candidate))
    except ValueError:
        return None


def normalize_date(value: Any) -> date | None:
    """Truncate a date-like value to its calendar day.

    Accepts ``date``/``datetime`` objects, ISO strings, ``DD/MM/YYYY``,
    ``DD-MM-YYYY`` and epoch numbers (seconds or milliseconds). Returns
    ``None`` for anything it cannot interpret instead of raising.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return _from_datetime(value)
    if isinstance(value, date):
        return value
    if isinstance(value, (int, float)):
        seconds = value / 1000 if abs(value) >= _EPOCH_MILLIS_THRESHOLD else value
        try:
            return _from_datetime(datetime.fromtimestamp(seconds, tz=timezone.utc))
        except (OverflowError, OSError, ValueError):
            return None
    if isinstance(value, str):
        if not value.strip():
            return None
        return parse_universal_date(value) or _parse_iso(value)
    return None


def format_ddmmyyyy(value: Any) -> str | None:
    """Render a date-like value as ``DD/MM/YYYY`` (the display format)."""
    day = normalize_date(value)
    if day is None:
        return None
    return day.strftime("%d/%m/%Y")


def to_iso(value: Any) -> str | None:
    """Storage format for date columns."""
    day = normalize_date(value)
    return day.isoformat() if day else None


def end_of_next_month(day: date) -> date:
    year, month = (day.year + 1, 1) if day.month == 12 else (day.year, day.month + 1)
    return date(year, month, calendar.monthrange(year, month)[1])


def parse_clock_time(value: str) -> time:
    hour, minute = value.split(":")
    return time(int(hour), int(minute))
