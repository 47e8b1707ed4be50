"""Rules deciding whether a subscribed product is delivered on a given day."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Callable, Optional

from ...models.domain import Customer, DeliveryCadence, ProductLine, SubscriptionPlan
from .absence import is_absent
from .dates import format_ddmmyyyy, normalize_date

logger = logging.getLogger(__name__)

_PLAN_CADENCE = {
    SubscriptionPlan.MONTHLY.value: DeliveryCadence.DAILY,
    SubscriptionPlan.ALTERNATE_DAYS.value: DeliveryCadence.ALTERNATE_DAYS,
    SubscriptionPlan.CUSTOM_DATE.value: DeliveryCadence.CUSTOM,
}

_CADENCE_ALIASES = {
    "custom date": DeliveryCadence.CUSTOM,
    "weekdays": DeliveryCadence.WEEKDAYS,
}


@dataclass(slots=True)
class DeliveryWindow:
    """Effective schedule of one product line after customer defaults apply."""

    cadence: Optional[DeliveryCadence]
    start: Optional[date]
    end: Optional[date]
    custom_dates: list[Any]


@dataclass(slots=True)
class LineEligibility:
    product_id: str
    product_name: Optional[str]
    cadence: Optional[str]
    eligible: bool


def parse_cadence(value: Optional[str]) -> Optional[DeliveryCadence]:
    if not value:
        return None
    try:
        return DeliveryCadence(value)
    except ValueError:
        return _CADENCE_ALIASES.get(value.strip().lower())


def resolve_window(customer: Customer, line: ProductLine) -> DeliveryWindow:
    if line.delivery_days:
        cadence = parse_cadence(line.delivery_days)
    else:
        cadence = _PLAN_CADENCE.get(customer.subscription_plan)
    custom_dates = line.custom_delivery_dates
    if custom_dates is None:
        custom_dates = customer.custom_delivery_dates or []
    return DeliveryWindow(
        cadence=cadence,
        start=normalize_date(line.start_date if line.start_date is not None else customer.start_date),
        end=normalize_date(line.end_date if line.end_date is not None else customer.end_date),
        custom_dates=list(custom_dates),
    )


def _deliver_daily(window: DeliveryWindow, target: date) -> bool:
    return True


def _deliver_alternate_days(window: DeliveryWindow, target: date) -> bool:
    # Parity is anchored at the window start, not at any absolute epoch.
    return (target - window.start).days % 2 == 0


def _deliver_weekdays(window: DeliveryWindow, target: date) -> bool:
    return target.weekday() < 5


def _deliver_weekends(window: DeliveryWindow, target: date) -> bool:
    return target.weekday() >= 5


def _deliver_custom(window: DeliveryWindow, target: date) -> bool:
    if not window.custom_dates:
        return False
    wanted = format_ddmmyyyy(target)
    return any(format_ddmmyyyy(entry) == wanted for entry in window.custom_dates)


CADENCE_RULES: dict[DeliveryCadence, Callable[[DeliveryWindow, date], bool]] = {
    DeliveryCadence.DAILY: _deliver_daily,
    DeliveryCadence.ALTERNATE_DAYS: _deliver_alternate_days,
    DeliveryCadence.WEEKDAYS: _deliver_weekdays,
    DeliveryCadence.WEEKENDS: _deliver_weekends,
    DeliveryCadence.CUSTOM: _deliver_custom,
}

_missing_rules = set(DeliveryCadence) - set(CADENCE_RULES)
if _missing_rules:
    raise RuntimeError(f"No delivery rule for cadence(s): {sorted(c.value for c in _missing_rules)}")


def should_deliver(customer: Customer, line: ProductLine, target_date: Any) -> bool:
    """Decide whether ``line`` is delivered to ``customer`` on ``target_date``.

    Never raises: malformed input yields ``False`` and is logged.
    """
    try:
        target = normalize_date(target_date)
        if target is None:
            logger.warning(f"Unparsable target date {target_date!r} for customer {customer.id}")
            return False

        if is_absent(customer, target):
            return False

        window = resolve_window(customer, line)
        if window.start is None or window.end is None:
            logger.warning(
                f"Customer {customer.id} product {line.product_id} has no usable delivery window "
                f"(start={line.start_date or customer.start_date!r}, end={line.end_date or customer.end_date!r})"
            )
            return False
        if target < window.start or target > window.end:
            return False

        if window.cadence is None:
            return False
        return CADENCE_RULES[window.cadence](window, target)
    except Exception:
        logger.exception(f"Eligibility check failed for customer {customer.id} product {line.product_id}")
        return False


def evaluate_lines(customer: Customer, target_date: Any) -> list[LineEligibility]:
    results: list[LineEligibility] = []
    for line in customer.products:
        window_cadence = resolve_window(customer, line).cadence
        results.append(
            LineEligibility(
                product_id=line.product_id,
                product_name=line.product.product_name if line.product else None,
                cadence=window_cadence.value if window_cadence else None,
                eligible=should_deliver(customer, line, target_date),
            )
        )
    return results
