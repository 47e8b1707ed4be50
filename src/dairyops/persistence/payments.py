"""Customer payment records."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from ..models.domain import Payment, PaymentAllocation
from ..services.scheduling.dates import normalize_date
from .base import as_float, require_client, run

TABLE = "payments"


def payment_from_row(row: dict[str, Any]) -> Payment:
    created_at = row.get("created_at")
    if isinstance(created_at, str):
        try:
            created_at = datetime.fromisoformat(created_at.replace("Z", "+00:00"))
        except ValueError:
            created_at = None
    return Payment(
        id=str(row["id"]) if row.get("id") is not None else None,
        customer_id=str(row["customer_id"]),
        amount=as_float(row.get("amount")),
        payment_method=row.get("payment_method") or "COD",
        paid_on=normalize_date(row.get("paid_on")),
        total_billed=as_float(row.get("total_billed")),
        balance=as_float(row.get("balance")),
        payment_status=row.get("payment_status") or "Unpaid",
        allocations=[
            PaymentAllocation(
                order_id=str(item.get("order_id") or ""),
                order_number=item.get("order_number") or "",
                amount=as_float(item.get("amount")),
            )
            for item in (row.get("allocations") or [])
        ],
        created_at=created_at,
    )


def payment_to_row(payment: Payment) -> dict[str, Any]:
    return {
        "customer_id": payment.customer_id,
        "amount": payment.amount,
        "payment_method": payment.payment_method,
        "paid_on": payment.paid_on.isoformat(),
        "total_billed": payment.total_billed,
        "balance": payment.balance,
        "payment_status": payment.payment_status,
        "allocations": [
            {"order_id": item.order_id, "order_number": item.order_number, "amount": item.amount}
            for item in payment.allocations
        ],
    }


def insert_payment(payment: Payment) -> Payment:
    supabase = require_client()
    response = run(supabase.table(TABLE).insert(payment_to_row(payment)))
    return payment_from_row(response.data[0])


def list_payments_for_customer(customer_id: str) -> list[Payment]:
    supabase = require_client()
    response = run(
        supabase.table(TABLE).select("*").eq("customer_id", customer_id).order("created_at", desc=True)
    )
    return [payment_from_row(row) for row in (response.data or [])]
