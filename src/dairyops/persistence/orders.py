"""Order persistence and the per-day order-number counter."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from ..models.domain import Order, OrderLine, OrderStatus
from ..services.scheduling.dates import normalize_date
from .base import as_float, first_row, require_client, run

TABLE = "orders"
SEQUENCE_FUNCTION = "next_order_sequence"


def order_line_from_row(row: dict[str, Any]) -> OrderLine:
    return OrderLine(
        product_id=str(row.get("product_id") or ""),
        product_name=row.get("product_name") or "",
        price=as_float(row.get("price")),
        product_size=row.get("product_size") or "",
        quantity=int(row.get("quantity") or 0),
        total_price=as_float(row.get("total_price")),
    )


def order_line_to_row(line: OrderLine) -> dict[str, Any]:
    return {
        "product_id": line.product_id,
        "product_name": line.product_name,
        "price": line.price,
        "product_size": line.product_size,
        "quantity": line.quantity,
        "total_price": line.total_price,
    }


def order_from_row(row: dict[str, Any]) -> Order:
    created_at = row.get("created_at")
    if isinstance(created_at, str):
        try:
            created_at = datetime.fromisoformat(created_at.replace("Z", "+00:00"))
        except ValueError:
            created_at = None
    return Order(
        id=str(row["id"]) if row.get("id") is not None else None,
        order_number=row["order_number"],
        customer_id=str(row["customer_id"]),
        delivery_boy_id=str(row["delivery_boy_id"]),
        delivery_date=normalize_date(row.get("delivery_date")),
        lines=[order_line_from_row(item) for item in (row.get("products") or [])],
        total_amount=as_float(row.get("total_amount")),
        status=row.get("status") or "Scheduled",
        payment_status=row.get("payment_status") or "Pending",
        payment_method=row.get("payment_method") or "COD",
        order_type=row.get("order_type") or "subscription",
        paid_amount=as_float(row.get("paid_amount")),
        created_at=created_at,
    )


def order_to_row(order: Order) -> dict[str, Any]:
    return {
        "order_number": order.order_number,
        "customer_id": order.customer_id,
        "delivery_boy_id": order.delivery_boy_id,
        "delivery_date": order.delivery_date.isoformat(),
        "products": [order_line_to_row(line) for line in order.lines],
        "total_amount": order.total_amount,
        "status": order.status,
        "payment_status": order.payment_status,
        "payment_method": order.payment_method,
        "order_type": order.order_type,
        "paid_amount": order.paid_amount,
    }


def next_order_sequence(day: date) -> int:
    """Atomically increment and return the order counter for ``day``."""
    supabase = require_client()
    response = supabase.rpc(SEQUENCE_FUNCTION, {"p_day": day.isoformat()}).execute()
    value = response.data
    if isinstance(value, list):
        value = value[0] if value else None
    if isinstance(value, dict):
        value = next(iter(value.values()), None)
    if value is None:
        raise RuntimeError(f"{SEQUENCE_FUNCTION} returned no value for {day.isoformat()}")
    return int(value)


def insert_order(order: Order) -> Order:
    """Persist ``order``; raises ``ConflictError`` when the order number is taken."""
    supabase = require_client()
    response = run(
        supabase.table(TABLE).insert(order_to_row(order)),
        conflict_message=f"Order number {order.order_number} already exists",
    )
    return order_from_row(response.data[0])


def find_order_for_customer_on(customer_id: str, day: date, *, order_type: str | None = None) -> Order | None:
    supabase = require_client()
    query = (
        supabase.table(TABLE)
        .select("*")
        .eq("customer_id", customer_id)
        .eq("delivery_date", day.isoformat())
    )
    if order_type:
        query = query.eq("order_type", order_type)
    row = first_row(run(query.limit(1)))
    return order_from_row(row) if row else None


def get_order(order_id: str) -> Order | None:
    supabase = require_client()
    row = first_row(run(supabase.table(TABLE).select("*").eq("id", order_id).limit(1)))
    return order_from_row(row) if row else None


def list_orders(
    *,
    status: str | None = None,
    customer_id: str | None = None,
    delivery_boy_id: str | None = None,
    delivery_date: date | None = None,
    offset: int = 0,
    limit: int = 10,
) -> tuple[list[Order], int]:
    supabase = require_client()
    query = supabase.table(TABLE).select("*", count="exact")
    if status:
        query = query.eq("status", status)
    if customer_id:
        query = query.eq("customer_id", customer_id)
    if delivery_boy_id:
        query = query.eq("delivery_boy_id", delivery_boy_id)
    if delivery_date:
        query = query.eq("delivery_date", delivery_date.isoformat())
    response = run(query.order("created_at", desc=True).range(offset, offset + limit - 1))
    orders = [order_from_row(row) for row in (response.data or [])]
    return orders, response.count if response.count is not None else len(orders)


def update_order_status(order_id: str, status: str) -> Order | None:
    supabase = require_client()
    row = first_row(run(supabase.table(TABLE).update({"status": status}).eq("id", order_id)))
    return order_from_row(row) if row else None


def list_delivered_orders_for_customer(customer_id: str) -> list[Order]:
    """Delivered orders for ``customer_id``, oldest delivery first."""
    supabase = require_client()
    response = run(
        supabase.table(TABLE)
        .select("*")
        .eq("customer_id", customer_id)
        .eq("status", OrderStatus.DELIVERED.value)
        .order("delivery_date")
    )
    orders = [order_from_row(row) for row in (response.data or [])]
    return sorted(orders, key=lambda order: (order.delivery_date or date.min, order.order_number))


def update_order_payment(order_id: str, *, paid_amount: float, payment_status: str, payment_method: str) -> Order | None:
    supabase = require_client()
    changes = {"paid_amount": paid_amount, "payment_status": payment_status, "payment_method": payment_method}
    row = first_row(run(supabase.table(TABLE).update(changes).eq("id", order_id)))
    return order_from_row(row) if row else None


def delete_order(order_id: str) -> bool:
    supabase = require_client()
    response = run(supabase.table(TABLE).delete().eq("id", order_id))
    return bool(response.data)
