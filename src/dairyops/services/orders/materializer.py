"""Turn eligible product lines into order lines."""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Iterable, Optional, Sequence

from ...models.domain import Customer, OrderLine, Product
from ..scheduling.dates import format_ddmmyyyy, normalize_date
from ..scheduling.eligibility import resolve_window, should_deliver

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class MaterializedOrder:
    lines: list[OrderLine] = field(default_factory=list)
    total_amount: float = 0.0

    @property
    def is_empty(self) -> bool:
        return not self.lines


@dataclass(slots=True)
class CustomItem:
    """One line of an ad hoc order supplied by the caller."""

    product: Product
    quantity: int
    price: Optional[float] = None
    product_size: Optional[str] = None


def _aggregate(lines: Iterable[OrderLine]) -> MaterializedOrder:
    collected = list(lines)
    return MaterializedOrder(lines=collected, total_amount=sum(line.total_price for line in collected))


def materialize_order(customer: Customer, target_date: Any) -> MaterializedOrder:
    """Collect the customer's lines due on ``target_date``.

    Lines whose product reference is not resolved are skipped. An empty
    result means there is nothing to deliver.
    """
    lines: list[OrderLine] = []
    for line in customer.products:
        if line.product is None:
            logger.debug(f"Skipping unresolved product {line.product_id} for customer {customer.id}")
            continue
        if not should_deliver(customer, line, target_date):
            continue
        lines.append(
            OrderLine(
                product_id=line.product.id,
                product_name=line.product.product_name,
                price=line.price,
                product_size=line.product_size,
                quantity=line.quantity,
                total_price=line.quantity * line.price,
            )
        )
    return _aggregate(lines)


def materialize_items(items: Sequence[CustomItem]) -> MaterializedOrder:
    lines: list[OrderLine] = []
    for item in items:
        if item.quantity < 1:
            raise ValueError(f"Quantity for product {item.product.id} must be at least 1")
        price = item.price if item.price is not None else item.product.price
        if price < 0:
            raise ValueError(f"Price for product {item.product.id} cannot be negative")
        lines.append(
            OrderLine(
                product_id=item.product.id,
                product_name=item.product.product_name,
                price=price,
                product_size=item.product_size or item.product.size,
                quantity=item.quantity,
                total_price=item.quantity * price,
            )
        )
    return _aggregate(lines)


def build_delivery_schedule(customers: Sequence[Customer], target_date: Any) -> dict:
    """Delivery-boy view of what to drop off on ``target_date``.

    Groups eligible lines per customer and totals the bottles needed per size.
    """
    day = normalize_date(target_date)
    if day is None:
        raise ValueError(f"Invalid date: {target_date!r}")

    entries: list[dict] = []
    bottles_by_size: dict[str, int] = defaultdict(int)
    for customer in customers:
        deliveries: list[dict] = []
        for line in customer.products:
            if line.product is None or not should_deliver(customer, line, day):
                continue
            window = resolve_window(customer, line)
            deliveries.append(
                {
                    "product_id": line.product.id,
                    "product_name": line.product.product_name or "Unknown Product",
                    "product_size": line.product_size,
                    "quantity": line.quantity,
                    "price": line.price,
                    "total_price": line.total_price,
                    "delivery_days": window.cadence.value if window.cadence else None,
                }
            )
            bottles_by_size[line.product_size] += line.quantity
        if not deliveries:
            continue
        entries.append(
            {
                "customer_id": customer.id,
                "name": customer.name or "N/A",
                "phone_number": customer.phone_number or "N/A",
                "address": customer.address or "N/A",
                "subscription_plan": customer.subscription_plan,
                "deliveries": deliveries,
                "total_amount": sum(item["total_price"] for item in deliveries),
            }
        )

    return {
        "date": format_ddmmyyyy(day),
        "customers": entries,
        "total_customers": len(entries),
        "total_deliveries": sum(len(entry["deliveries"]) for entry in entries),
        "bottles_by_size": dict(bottles_by_size),
        "total_bottles": sum(bottles_by_size.values()),
    }
