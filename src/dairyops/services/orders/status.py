"""Order status transitions after materialisation.

Delivering an order bills it to the customer and records the bottles that
went out with it.
"""

from __future__ import annotations

from ...errors import NotFoundError
from ...models.domain import Order, OrderStatus
from ...persistence import orders as order_store
from ..bottles.tracking import issue_bottles_for_order
from ..payments.ledger import refresh_customer_balance

ALLOWED_TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.SCHEDULED: frozenset({OrderStatus.OUT_FOR_DELIVERY, OrderStatus.CANCELLED}),
    OrderStatus.OUT_FOR_DELIVERY: frozenset({OrderStatus.DELIVERED, OrderStatus.FAILED, OrderStatus.CANCELLED}),
    OrderStatus.DELIVERED: frozenset(),
    OrderStatus.FAILED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}


def can_transition(current: str, target: str) -> bool:
    try:
        return OrderStatus(target) in ALLOWED_TRANSITIONS[OrderStatus(current)]
    except ValueError:
        return False


def transition_order_status(order_id: str, target: str) -> Order:
    try:
        OrderStatus(target)
    except ValueError as exc:
        allowed = ", ".join(status.value for status in OrderStatus)
        raise ValueError(f"Unknown order status '{target}'. Expected one of: {allowed}") from exc

    order = order_store.get_order(order_id)
    if order is None:
        raise NotFoundError(f"Order {order_id} not found")
    if not can_transition(order.status, target):
        raise ValueError(f"Cannot move order {order.order_number} from '{order.status}' to '{target}'")

    updated = order_store.update_order_status(order_id, target)
    if updated is None:
        raise NotFoundError(f"Order {order_id} not found")
    if updated.status == OrderStatus.DELIVERED.value:
        issue_bottles_for_order(updated)
        refresh_customer_balance(updated.customer_id)
    return updated
