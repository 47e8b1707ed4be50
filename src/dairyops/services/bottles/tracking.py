"""Returnable bottle tracking per customer.

Bottles go out with delivered orders and come back later; the pending count
per size is everything issued minus everything returned.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Any, Optional

from ...errors import NotFoundError
from ...models.domain import BottleTransaction, Order
from ...persistence import bottles as bottle_store
from ...persistence import customers as customer_store
from ..scheduling.dates import normalize_date, today

logger = logging.getLogger(__name__)

HALF_LITRE = "1/2ltr"
ONE_LITRE = "1ltr"
BOTTLE_SIZES = (HALF_LITRE, ONE_LITRE)


def bottle_size(product_size: Optional[str]) -> str:
    """Map a product size label onto one of the two bottle sizes; unknown sizes count as 1ltr."""
    label = str(product_size or "").lower().replace(" ", "")
    if "1/2" in label or "0.5" in label or "500ml" in label:
        return HALF_LITRE
    return ONE_LITRE


def _ensure_customer(customer_id: str) -> None:
    if customer_store.get_customer(customer_id, populate=False) is None:
        raise NotFoundError(f"Customer {customer_id} not found")


def bottle_balance(customer_id: str) -> dict:
    _ensure_customer(customer_id)
    transactions = bottle_store.list_bottle_transactions(customer_id)
    sizes = {size: {"issued": 0, "returned": 0, "pending": 0} for size in BOTTLE_SIZES}
    for transaction in transactions:
        entry = sizes.setdefault(transaction.bottle_size, {"issued": 0, "returned": 0, "pending": 0})
        entry["issued"] += transaction.issued
        entry["returned"] += transaction.returned
    for entry in sizes.values():
        entry["pending"] = entry["issued"] - entry["returned"]
    return {
        "customer_id": customer_id,
        "sizes": sizes,
        "total_pending": sum(entry["pending"] for entry in sizes.values()),
        "transactions": transactions,
    }


def record_bottle_transaction(
    customer_id: str,
    size: str,
    *,
    issued: int = 0,
    returned: int = 0,
    day: Any = None,
    delivery_boy_id: Optional[str] = None,
    remarks: Optional[str] = None,
) -> BottleTransaction:
    """Record bottles handed over and/or collected; returns cannot exceed what is pending."""
    if size not in BOTTLE_SIZES:
        raise ValueError(f"Unknown bottle size '{size}'. Expected one of: {', '.join(BOTTLE_SIZES)}")
    if issued < 0 or returned < 0:
        raise ValueError("Bottle counts must not be negative")
    if issued == 0 and returned == 0:
        raise ValueError("Record at least one issued or returned bottle")
    transaction_date = today() if day is None else normalize_date(day)
    if transaction_date is None:
        raise ValueError(f"Invalid transaction date: {day!r}")

    pending = bottle_balance(customer_id)["sizes"][size]["pending"]
    if returned > pending + issued:
        raise ValueError(f"Cannot return {returned} {size} bottles; only {pending + issued} are with the customer")

    saved = bottle_store.insert_bottle_transaction(
        BottleTransaction(
            id=None,
            customer_id=customer_id,
            bottle_size=size,
            transaction_date=transaction_date,
            issued=issued,
            returned=returned,
            delivery_boy_id=delivery_boy_id,
            remarks=remarks,
        )
    )
    logger.info(f"Customer {customer_id}: {issued} {size} bottles issued, {returned} returned")
    return saved


def issue_bottles_for_order(order: Order) -> list[BottleTransaction]:
    """Record the bottles that went out with a delivered order, one row per bottle size."""
    counts: dict[str, int] = defaultdict(int)
    for line in order.lines:
        counts[bottle_size(line.product_size)] += line.quantity
    saved = []
    for size, count in sorted(counts.items()):
        if count <= 0:
            continue
        saved.append(
            bottle_store.insert_bottle_transaction(
                BottleTransaction(
                    id=None,
                    customer_id=order.customer_id,
                    bottle_size=size,
                    transaction_date=order.delivery_date,
                    issued=count,
                    order_id=order.id,
                    delivery_boy_id=order.delivery_boy_id,
                    remarks=f"Delivered with {order.order_number}",
                )
            )
        )
    return saved
