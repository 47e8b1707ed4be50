"""Customer database persistence.

Product lines, custom delivery dates and absent days are stored as JSON
columns on the customer row; product references are resolved against the
``products`` table on load.
"""

from __future__ import annotations

from datetime import date
from typing import Any, Iterable

from ..models.domain import Customer, ProductLine, SubscriptionStatus
from ..services.scheduling.dates import normalize_date
from .base import as_float, first_row, require_client, run
from .products import get_products_by_ids

TABLE = "customers"


def product_line_from_row(row: dict[str, Any]) -> ProductLine:
    return ProductLine(
        product_id=str(row.get("product_id") or ""),
        product_size=row.get("product_size") or "",
        quantity=int(row.get("quantity") or 0),
        price=as_float(row.get("price")),
        delivery_days=row.get("delivery_days"),
        start_date=row.get("start_date"),
        end_date=row.get("end_date"),
        custom_delivery_dates=row.get("custom_delivery_dates"),
    )


def product_line_to_row(line: ProductLine) -> dict[str, Any]:
    row: dict[str, Any] = {
        "product_id": line.product_id,
        "product_size": line.product_size,
        "quantity": line.quantity,
        "price": line.price,
        "total_price": line.total_price,
    }
    for key in ("delivery_days", "start_date", "end_date", "custom_delivery_dates"):
        value = getattr(line, key)
        if value is not None:
            row[key] = value.isoformat() if isinstance(value, date) else value
    return row


def customer_from_row(row: dict[str, Any]) -> Customer:
    return Customer(
        id=str(row["id"]),
        name=row.get("name") or "",
        phone_number=str(row.get("phone_number") or ""),
        address=row.get("address") or "",
        subscription_plan=row.get("subscription_plan") or "",
        subscription_status=row.get("subscription_status") or SubscriptionStatus.INACTIVE.value,
        start_date=row.get("start_date"),
        end_date=row.get("end_date"),
        custom_delivery_dates=list(row.get("custom_delivery_dates") or []),
        absent_days=list(row.get("absent_days") or []),
        products=[product_line_from_row(item) for item in (row.get("products") or [])],
        delivery_boy_id=str(row["delivery_boy_id"]) if row.get("delivery_boy_id") else None,
        amount_paid_till_date=as_float(row.get("amount_paid_till_date")),
        amount_due=as_float(row.get("amount_due")),
        payment_method=row.get("payment_method") or "COD",
        payment_status=row.get("payment_status") or "Unpaid",
        is_deleted=bool(row.get("is_deleted")),
    )


def populate_products(customers: Iterable[Customer]) -> None:
    """Resolve ``ProductLine.product`` references in place (one query for all customers)."""
    customers = list(customers)
    product_ids = {line.product_id for customer in customers for line in customer.products}
    products = get_products_by_ids(product_ids)
    for customer in customers:
        for line in customer.products:
            line.product = products.get(line.product_id)


def get_customer(customer_id: str, *, populate: bool = True, include_deleted: bool = False) -> Customer | None:
    supabase = require_client()
    row = first_row(run(supabase.table(TABLE).select("*").eq("id", customer_id).limit(1)))
    if not row:
        return None
    customer = customer_from_row(row)
    if customer.is_deleted and not include_deleted:
        return None
    if populate:
        populate_products([customer])
    return customer


def list_customers(
    *,
    status: str | None = None,
    delivery_boy_id: str | None = None,
    search: str | None = None,
    offset: int = 0,
    limit: int = 50,
    populate: bool = True,
) -> tuple[list[Customer], int]:
    supabase = require_client()
    query = supabase.table(TABLE).select("*", count="exact").eq("is_deleted", False)
    if status:
        query = query.eq("subscription_status", status)
    if delivery_boy_id:
        query = query.eq("delivery_boy_id", delivery_boy_id)
    if search:
        query = query.ilike("name", f"%{search}%")
    response = run(query.order("created_at", desc=True).range(offset, offset + limit - 1))
    customers = [customer_from_row(row) for row in (response.data or [])]
    if populate:
        populate_products(customers)
    return customers, response.count if response.count is not None else len(customers)


def _window_contains(start: Any, end: Any, day: date) -> bool:
    start, end = normalize_date(start), normalize_date(end)
    return start is not None and end is not None and start <= day <= end


def covers_day(customer: Customer, day: date) -> bool:
    """Whether the customer window, or any product line's own window, contains ``day``."""
    if _window_contains(customer.start_date, customer.end_date, day):
        return True
    return any(
        _window_contains(
            line.start_date if line.start_date is not None else customer.start_date,
            line.end_date if line.end_date is not None else customer.end_date,
            day,
        )
        for line in customer.products
    )


def list_active_customers_for_date(day: date) -> list[Customer]:
    """Active, non-deleted customers with a subscription window containing ``day``.

    Product lines may carry their own window reaching past the customer's, so
    the window check runs here rather than as a column filter.
    """
    supabase = require_client()
    response = run(
        supabase.table(TABLE)
        .select("*")
        .eq("subscription_status", SubscriptionStatus.ACTIVE.value)
        .eq("is_deleted", False)
    )
    customers = [customer_from_row(row) for row in (response.data or [])]
    customers = [customer for customer in customers if covers_day(customer, day)]
    populate_products(customers)
    return customers


def list_customers_for_delivery_boy(delivery_boy_id: str) -> list[Customer]:
    """Active, non-deleted customers on ``delivery_boy_id``'s round."""
    supabase = require_client()
    response = run(
        supabase.table(TABLE)
        .select("*")
        .eq("delivery_boy_id", delivery_boy_id)
        .eq("subscription_status", SubscriptionStatus.ACTIVE.value)
        .eq("is_deleted", False)
    )
    customers = [customer_from_row(row) for row in (response.data or [])]
    populate_products(customers)
    return customers


def phone_number_taken(phone_number: str, *, exclude_id: str | None = None) -> bool:
    supabase = require_client()
    response = run(supabase.table(TABLE).select("id").eq("phone_number", phone_number))
    return any(str(row["id"]) != exclude_id for row in (response.data or []))


def insert_customer(data: dict[str, Any]) -> Customer:
    supabase = require_client()
    response = run(
        supabase.table(TABLE).insert({**data, "is_deleted": False}),
        conflict_message=f"Customer with phone number {data.get('phone_number')} already exists",
    )
    customer = customer_from_row(response.data[0])
    populate_products([customer])
    return customer


def update_customer(customer_id: str, changes: dict[str, Any]) -> Customer | None:
    supabase = require_client()
    response = run(
        supabase.table(TABLE).update(changes).eq("id", customer_id),
        conflict_message="Customer with this phone number already exists",
    )
    row = first_row(response)
    if not row:
        return None
    customer = customer_from_row(row)
    populate_products([customer])
    return customer


def save_product_lines(customer_id: str, lines: list[ProductLine]) -> Customer | None:
    return update_customer(customer_id, {"products": [product_line_to_row(line) for line in lines]})


def soft_delete_customer(customer_id: str) -> bool:
    return update_customer(customer_id, {"is_deleted": True}) is not None
