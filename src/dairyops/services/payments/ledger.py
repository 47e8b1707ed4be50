"""Customer billing: what has been delivered, what has been paid, what is due.

Only delivered orders are billed. A payment is spread over the outstanding
delivered orders oldest first, so each order's ``paid_amount`` and
``payment_status`` always sum up to the customer's running totals.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Optional

from ...errors import NotFoundError
from ...models.domain import Customer, Payment, PaymentAllocation, PaymentMethod, PaymentStatus
from ...persistence import customers as customer_store
from ...persistence import orders as order_store
from ...persistence import payments as payment_store
from ..scheduling.dates import normalize_date, today

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class CustomerBalance:
    customer_id: str
    total_billed: float
    amount_paid: float
    amount_due: float
    payment_status: str

    def as_dict(self) -> dict:
        return {
            "customer_id": self.customer_id,
            "total_billed": self.total_billed,
            "amount_paid": self.amount_paid,
            "amount_due": self.amount_due,
            "payment_status": self.payment_status,
        }


def payment_status_for(amount_paid: float, amount_due: float) -> str:
    if amount_paid > 0 and amount_due <= 0:
        return PaymentStatus.PAID.value
    if amount_paid > 0:
        return PaymentStatus.PARTIALLY_PAID.value
    return PaymentStatus.UNPAID.value


def _order_payment_status(paid: float, total: float) -> str:
    if paid >= total:
        return PaymentStatus.PAID.value
    if paid > 0:
        return PaymentStatus.PARTIALLY_PAID.value
    return PaymentStatus.PENDING.value


def _load_customer(customer_id: str) -> Customer:
    customer = customer_store.get_customer(customer_id, populate=False)
    if customer is None:
        raise NotFoundError(f"Customer {customer_id} not found")
    return customer


def customer_balance(customer_id: str) -> CustomerBalance:
    _load_customer(customer_id)
    orders = order_store.list_delivered_orders_for_customer(customer_id)
    billed = round(sum(order.total_amount for order in orders), 2)
    paid = round(sum(order.paid_amount for order in orders), 2)
    due = round(max(billed - paid, 0.0), 2)
    return CustomerBalance(
        customer_id=customer_id,
        total_billed=billed,
        amount_paid=paid,
        amount_due=due,
        payment_status=payment_status_for(paid, due),
    )


def refresh_customer_balance(customer_id: str) -> CustomerBalance:
    """Recompute the customer's paid/due totals from their delivered orders and store them."""
    balance = customer_balance(customer_id)
    customer_store.update_customer(
        customer_id,
        {
            "amount_paid_till_date": balance.amount_paid,
            "amount_due": balance.amount_due,
            "payment_status": balance.payment_status,
        },
    )
    return balance


def record_payment(
    customer_id: str,
    amount: float,
    payment_method: str = PaymentMethod.COD.value,
    paid_on: Any = None,
) -> tuple[Payment, CustomerBalance]:
    """Apply ``amount`` to the customer's outstanding delivered orders, oldest first."""
    if amount is None or amount <= 0:
        raise ValueError("Payment amount must be greater than zero")
    try:
        method = PaymentMethod(payment_method).value
    except ValueError as exc:
        raise ValueError(f"Unknown payment method '{payment_method}'") from exc
    day: Optional[date] = today() if paid_on is None else normalize_date(paid_on)
    if day is None:
        raise ValueError(f"Invalid payment date: {paid_on!r}")

    _load_customer(customer_id)
    orders = [order for order in order_store.list_delivered_orders_for_customer(customer_id) if order.outstanding > 0]
    outstanding = round(sum(order.outstanding for order in orders), 2)
    if round(amount, 2) > outstanding:
        raise ValueError(f"Payment of {amount:.2f} exceeds the outstanding balance of {outstanding:.2f}")

    remaining = round(amount, 2)
    allocations: list[PaymentAllocation] = []
    for order in orders:
        if remaining <= 0:
            break
        applied = round(min(remaining, order.outstanding), 2)
        new_paid = round(order.paid_amount + applied, 2)
        order_store.update_order_payment(
            order.id,
            paid_amount=new_paid,
            payment_status=_order_payment_status(new_paid, order.total_amount),
            payment_method=method,
        )
        allocations.append(PaymentAllocation(order_id=order.id, order_number=order.order_number, amount=applied))
        remaining = round(remaining - applied, 2)

    balance = refresh_customer_balance(customer_id)
    payment = payment_store.insert_payment(
        Payment(
            id=None,
            customer_id=customer_id,
            amount=round(amount, 2),
            payment_method=method,
            paid_on=day,
            total_billed=balance.total_billed,
            balance=balance.amount_due,
            payment_status=balance.payment_status,
            allocations=allocations,
        )
    )
    logger.info(
        f"Recorded {method} payment of {amount:.2f} for customer {customer_id} "
        f"across {len(allocations)} orders; {balance.amount_due:.2f} still due"
    )
    return payment, balance


def list_payments(customer_id: str) -> list[Payment]:
    _load_customer(customer_id)
    return payment_store.list_payments_for_customer(customer_id)
