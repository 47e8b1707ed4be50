"""Bottle issue/return ledger rows."""

from __future__ import annotations

from typing import Any

from ..models.domain import BottleTransaction
from ..services.scheduling.dates import normalize_date
from .base import require_client, run

TABLE = "bottle_transactions"


def bottle_transaction_from_row(row: dict[str, Any]) -> BottleTransaction:
    return BottleTransaction(
        id=str(row["id"]) if row.get("id") is not None else None,
        customer_id=str(row["customer_id"]),
        bottle_size=row.get("bottle_size") or "",
        transaction_date=normalize_date(row.get("transaction_date")),
        issued=int(row.get("issued") or 0),
        returned=int(row.get("returned") or 0),
        order_id=str(row["order_id"]) if row.get("order_id") else None,
        delivery_boy_id=str(row["delivery_boy_id"]) if row.get("delivery_boy_id") else None,
        remarks=row.get("remarks"),
    )


def bottle_transaction_to_row(transaction: BottleTransaction) -> dict[str, Any]:
    return {
        "customer_id": transaction.customer_id,
        "bottle_size": transaction.bottle_size,
        "transaction_date": transaction.transaction_date.isoformat(),
        "issued": transaction.issued,
        "returned": transaction.returned,
        "order_id": transaction.order_id,
        "delivery_boy_id": transaction.delivery_boy_id,
        "remarks": transaction.remarks,
    }


def insert_bottle_transaction(transaction: BottleTransaction) -> BottleTransaction:
    supabase = require_client()
    response = run(supabase.table(TABLE).insert(bottle_transaction_to_row(transaction)))
    return bottle_transaction_from_row(response.data[0])


def list_bottle_transactions(customer_id: str) -> list[BottleTransaction]:
    supabase = require_client()
    response = run(
        supabase.table(TABLE).select("*").eq("customer_id", customer_id).order("transaction_date")
    )
    return [bottle_transaction_from_row(row) for row in (response.data or [])]
