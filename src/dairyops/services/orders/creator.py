"""Persist materialised orders.

Order creation is not wrapped in a transaction: the counter increment, the
insert and the notification are separate steps, so a failure between them
can leave a skipped sequence number. Numbers stay unique because
``orders.order_number`` carries a unique constraint and conflicts are
retried with a fresh sequence.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Optional, Sequence

from ...config import settings
from ...errors import ConflictError, NotFoundError
from ...models.domain import Customer, Order, OrderStatus, OrderType
from ...persistence import customers as customer_store
from ...persistence import delivery_boys as delivery_boy_store
from ...persistence import orders as order_store
from ...persistence import products as product_store
from ..notifications.whatsapp import dispatch_order_notification
from ..scheduling.dates import normalize_date, today
from .materializer import CustomItem, MaterializedOrder, materialize_items, materialize_order
from .numbering import generate_order_number

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class AutomaticOrderResult:
    customer_id: str
    delivery_date: Optional[date]
    created: list[Order] = field(default_factory=list)
    skipped: Optional[str] = None

    @property
    def message(self) -> str:
        day = self.delivery_date.strftime("%d/%m/%Y") if self.delivery_date else "unknown date"
        if self.skipped == "duplicate":
            return f"Order already exists for {day}"
        if self.skipped == "not_eligible":
            return f"No products due for delivery on {day}"
        return f"Created {len(self.created)} automatic orders for {day}"


def _load_customer(customer_id: str) -> Customer:
    customer = customer_store.get_customer(customer_id, populate=True)
    if customer is None:
        raise NotFoundError(f"Customer {customer_id} not found")
    return customer


def _resolve_delivery_boy(customer: Customer, delivery_boy_id: Optional[str]) -> str:
    resolved = delivery_boy_id or customer.delivery_boy_id
    if not resolved:
        raise ValueError(f"Customer {customer.id} has no delivery boy assigned")
    if delivery_boy_id and delivery_boy_store.get_delivery_boy(delivery_boy_id) is None:
        raise NotFoundError(f"Delivery boy {delivery_boy_id} not found")
    return resolved


def persist_order(
    customer: Customer,
    delivery_boy_id: str,
    delivery_date: date,
    materialized: MaterializedOrder,
    *,
    order_type: str = OrderType.SUBSCRIPTION.value,
) -> Order:
    """Insert one order, retrying on order-number conflicts."""
    attempt = 0
    while True:
        order = Order(
            id=None,
            order_number=generate_order_number(delivery_date),
            customer_id=customer.id,
            delivery_boy_id=delivery_boy_id,
            delivery_date=delivery_date,
            lines=materialized.lines,
            total_amount=materialized.total_amount,
            status=OrderStatus.SCHEDULED.value,
            payment_method=customer.payment_method,
            order_type=order_type,
        )
        try:
            saved = order_store.insert_order(order)
        except ConflictError:
            attempt += 1
            if attempt > settings.order_number_max_retries:
                raise
            logger.warning(
                f"Order number {order.order_number} already taken, retrying "
                f"({attempt}/{settings.order_number_max_retries})"
            )
            continue
        logger.info(f"Created order {saved.order_number} for customer {customer.id} on {delivery_date.isoformat()}")
        dispatch_order_notification(customer, saved)
        return saved


def create_automatic_orders(
    customer_id: str,
    delivery_boy_id: Optional[str] = None,
    target_date: Any = None,
) -> AutomaticOrderResult:
    """Create the subscription order due for ``customer_id`` on ``target_date``.

    Without ``target_date`` the customer's start date is used (initial creation).
    At most one order is written; an existing subscription order for the same
    customer and day is left alone.
    """
    customer = _load_customer(customer_id)
    assigned = _resolve_delivery_boy(customer, delivery_boy_id)

    raw_date = target_date if target_date is not None else customer.start_date
    delivery_date = normalize_date(raw_date)
    if delivery_date is None:
        raise ValueError(f"Invalid delivery date: {raw_date!r}")

    result = AutomaticOrderResult(customer_id=customer.id, delivery_date=delivery_date)
    if order_store.find_order_for_customer_on(customer.id, delivery_date, order_type=OrderType.SUBSCRIPTION.value):
        result.skipped = "duplicate"
        return result

    materialized = materialize_order(customer, delivery_date)
    if materialized.is_empty:
        result.skipped = "not_eligible"
        return result

    result.created.append(persist_order(customer, assigned, delivery_date, materialized))
    return result


def create_custom_order(
    customer_id: str,
    items: Sequence[dict],
    delivery_date: Any = None,
    delivery_boy_id: Optional[str] = None,
) -> Order:
    """One-off order built from caller-supplied items instead of the subscription.

    Each item is a mapping with ``product_id``, ``quantity`` and optional
    ``price``/``product_size`` overrides.
    """
    if not items:
        raise ValueError("At least one item is required")

    customer = _load_customer(customer_id)
    assigned = _resolve_delivery_boy(customer, delivery_boy_id)

    if delivery_date is None:
        day = today()
    else:
        day = normalize_date(delivery_date)
        if day is None:
            raise ValueError(f"Invalid delivery date: {delivery_date!r}")

    products = product_store.get_products_by_ids(item["product_id"] for item in items)
    custom_items: list[CustomItem] = []
    for item in items:
        product = products.get(str(item["product_id"]))
        if product is None:
            raise NotFoundError(f"Product {item['product_id']} not found")
        custom_items.append(
            CustomItem(
                product=product,
                quantity=int(item.get("quantity") or 0),
                price=item.get("price"),
                product_size=item.get("product_size"),
            )
        )

    materialized = materialize_items(custom_items)
    return persist_order(customer, assigned, day, materialized, order_type=OrderType.CUSTOM.value)
