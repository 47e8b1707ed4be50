"""Customer absence lookups."""

from __future__ import annotations

import logging
from typing import Any

from ...models.domain import Customer
from .dates import normalize_date

logger = logging.getLogger(__name__)


def absent_dates(customer: Customer) -> set:
    days = set()
    for entry in customer.absent_days or ():
        day = normalize_date(entry)
        if day is None:
            logger.debug(f"Ignoring unparsable absent day {entry!r} for customer {customer.id}")
            continue
        days.add(day)
    return days


def is_absent(customer: Customer, target_date: Any) -> bool:
    """True when the customer opted out of deliveries on the target day."""
    if not customer.absent_days:
        return False
    target = normalize_date(target_date)
    if target is None:
        return False
    return target in absent_dates(customer)
