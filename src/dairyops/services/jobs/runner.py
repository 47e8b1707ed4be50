"""Daily order generation over all active subscriptions."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from ...models.domain import Customer, SubscriptionPlan
from ...persistence import customers as customer_store
from ..orders.creator import create_automatic_orders
from ..scheduling.dates import end_of_next_month, normalize_date, today, tomorrow

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class JobSummary:
    target_date: date
    customers: int = 0
    orders_created: int = 0
    skipped: int = 0
    renewed: list[str] = field(default_factory=list)
    failures: list[dict] = field(default_factory=list)

    def as_dict(self) -> dict:
        return {
            "target_date": self.target_date.isoformat(),
            "customers": self.customers,
            "orders_created": self.orders_created,
            "skipped": self.skipped,
            "renewed": list(self.renewed),
            "failures": list(self.failures),
        }


def renewal_end_date(customer: Customer, run_date: date) -> Optional[date]:
    """New end date for a Monthly subscription ending on ``run_date``, else ``None``."""
    if customer.subscription_plan != SubscriptionPlan.MONTHLY.value:
        return None
    if normalize_date(customer.end_date) != run_date:
        return None
    return end_of_next_month(run_date)


def _renew(customer: Customer, run_date: date) -> bool:
    new_end = renewal_end_date(customer, run_date)
    if new_end is None:
        return False
    customer_store.update_customer(customer.id, {"end_date": new_end.isoformat()})
    customer.end_date = new_end
    logger.info(f"Renewed subscription for {customer.name} ({customer.id}) until {new_end.isoformat()}")
    return True


def run_order_generation(
    target_date: date,
    *,
    run_date: Optional[date] = None,
    renew: bool = False,
) -> JobSummary:
    """Create orders for every active customer due on ``target_date``.

    One failing customer is logged and recorded; the batch continues.
    """
    run_date = run_date or today()
    summary = JobSummary(target_date=target_date)
    customers = customer_store.list_active_customers_for_date(target_date)
    summary.customers = len(customers)

    for customer in customers:
        try:
            if renew and _renew(customer, run_date):
                summary.renewed.append(customer.id)
            result = create_automatic_orders(customer.id, customer.delivery_boy_id, target_date)
            summary.orders_created += len(result.created)
            if result.skipped:
                summary.skipped += 1
        except Exception as exc:
            logger.exception(f"Order generation failed for customer {customer.id}: {exc}")
            summary.failures.append({"customer_id": customer.id, "error": str(exc)})

    logger.info(
        f"Order generation for {target_date.isoformat()}: {summary.orders_created} created, "
        f"{summary.skipped} skipped, {len(summary.failures)} failed across {summary.customers} customers"
    )
    return summary


def run_daily_orders() -> JobSummary:
    """Today's orders, with Monthly renewal."""
    day = today()
    return run_order_generation(day, run_date=day, renew=True)


def run_lookahead_orders() -> JobSummary:
    """Tomorrow's orders, generated a day ahead."""
    return run_order_generation(tomorrow(), run_date=today(), renew=False)
