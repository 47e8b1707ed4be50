"""Customer subscription management.

Dates are stored as ISO strings; product lines keep the price agreed at
subscription time, defaulting to the catalogue price.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Iterable, Optional

from ...errors import ConflictError, NotFoundError
from ...models.domain import Customer, ProductLine, SubscriptionPlan
from ...persistence import customers as customer_store
from ...persistence import delivery_boys as delivery_boy_store
from ...persistence import products as product_store
from ...persistence.customers import product_line_to_row
from ..orders.creator import AutomaticOrderResult, create_automatic_orders
from ..scheduling.absence import absent_dates, is_absent
from ..scheduling.dates import normalize_date, to_iso
from ..scheduling.eligibility import LineEligibility, evaluate_lines

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class CustomerCreation:
    customer: Customer
    orders: Optional[AutomaticOrderResult] = None
    order_error: Optional[str] = None


def _iso_dates(values: Iterable[Any]) -> list[str]:
    days = {normalize_date(value) for value in values}
    return sorted(day.isoformat() for day in days if day is not None)


def get_customer_or_raise(customer_id: str) -> Customer:
    customer = customer_store.get_customer(customer_id, populate=True)
    if customer is None:
        raise NotFoundError(f"Customer {customer_id} not found")
    return customer


def _ensure_delivery_boy(delivery_boy_id: Optional[str]) -> None:
    if delivery_boy_id and delivery_boy_store.get_delivery_boy(delivery_boy_id) is None:
        raise NotFoundError(f"Delivery boy {delivery_boy_id} not found")


def build_product_lines(items: Iterable[dict[str, Any]]) -> list[ProductLine]:
    """Resolve requested product lines against the catalogue."""
    items = list(items)
    products = product_store.get_products_by_ids(item["product_id"] for item in items)
    lines: list[ProductLine] = []
    for item in items:
        product = products.get(str(item["product_id"]))
        if product is None:
            raise NotFoundError(f"Product {item['product_id']} not found")
        custom_dates = item.get("custom_delivery_dates")
        lines.append(
            ProductLine(
                product_id=product.id,
                product_size=item.get("product_size") or product.size,
                quantity=int(item["quantity"]),
                price=float(item["price"]) if item.get("price") is not None else product.price,
                product=product,
                delivery_days=item.get("delivery_days"),
                start_date=to_iso(item.get("start_date")),
                end_date=to_iso(item.get("end_date")),
                custom_delivery_dates=_iso_dates(custom_dates) if custom_dates is not None else None,
            )
        )
    return lines


def create_customer(data: dict[str, Any]) -> CustomerCreation:
    """Register a subscriber and, with a delivery boy assigned, create the start-date order."""
    if customer_store.phone_number_taken(data["phone_number"]):
        raise ConflictError(f"Customer with phone number {data['phone_number']} already exists")
    _ensure_delivery_boy(data.get("delivery_boy_id"))

    lines = build_product_lines(data.get("products") or [])
    row = {
        "name": data["name"].strip(),
        "phone_number": data["phone_number"],
        "address": data["address"].strip(),
        "subscription_plan": data["subscription_plan"],
        "subscription_status": data.get("subscription_status") or "active",
        "start_date": to_iso(data["start_date"]),
        "end_date": to_iso(data["end_date"]),
        "custom_delivery_dates": _iso_dates(data.get("custom_delivery_dates") or []),
        "absent_days": _iso_dates(data.get("absent_days") or []),
        "products": [product_line_to_row(line) for line in lines],
        "delivery_boy_id": data.get("delivery_boy_id"),
        "payment_method": data.get("payment_method") or "COD",
        "payment_status": "Unpaid",
        "amount_paid_till_date": 0,
        "amount_due": 0,
    }
    customer = customer_store.insert_customer(row)
    logger.info(f"Created customer {customer.name} ({customer.id})")

    creation = CustomerCreation(customer=customer)
    if customer.delivery_boy_id:
        # The customer row is already committed; an order failure is reported, not rolled back.
        try:
            creation.orders = create_automatic_orders(customer.id, customer.delivery_boy_id)
        except Exception as exc:
            logger.exception(f"Automatic order creation failed for new customer {customer.id}: {exc}")
            creation.order_error = str(exc)
    return creation


def update_customer(customer_id: str, changes: dict[str, Any]) -> Customer:
    current = get_customer_or_raise(customer_id)
    changes = {key: value for key, value in changes.items() if value is not None}

    phone = changes.get("phone_number")
    if phone and customer_store.phone_number_taken(phone, exclude_id=customer_id):
        raise ConflictError(f"Customer with phone number {phone} already exists")
    _ensure_delivery_boy(changes.get("delivery_boy_id"))

    start = normalize_date(changes.get("start_date", current.start_date))
    end = normalize_date(changes.get("end_date", current.end_date))
    if start and end and end < start:
        raise ValueError("end_date must not be before start_date")

    plan = changes.get("subscription_plan", current.subscription_plan)
    custom_dates = changes.get("custom_delivery_dates", current.custom_delivery_dates)
    if plan == SubscriptionPlan.CUSTOM_DATE.value and not _iso_dates(custom_dates or []):
        raise ValueError("custom_delivery_dates are required for the Custom Date plan")

    for key in ("start_date", "end_date"):
        if key in changes:
            changes[key] = to_iso(changes[key])
    if "custom_delivery_dates" in changes:
        changes["custom_delivery_dates"] = _iso_dates(changes["custom_delivery_dates"])
    if not changes:
        return current

    updated = customer_store.update_customer(customer_id, changes)
    if updated is None:
        raise NotFoundError(f"Customer {customer_id} not found")
    return updated


def delete_customer(customer_id: str) -> None:
    get_customer_or_raise(customer_id)
    customer_store.soft_delete_customer(customer_id)
    logger.info(f"Soft-deleted customer {customer_id}")


def add_product_line(customer_id: str, item: dict[str, Any]) -> Customer:
    """Subscribe to a product; an existing line for the same product is replaced."""
    customer = get_customer_or_raise(customer_id)
    (line,) = build_product_lines([item])
    lines = [existing for existing in customer.products if existing.product_id != line.product_id]
    lines.append(line)
    updated = customer_store.save_product_lines(customer_id, lines)
    if updated is None:
        raise NotFoundError(f"Customer {customer_id} not found")
    return updated


def remove_product_line(customer_id: str, product_id: str) -> Customer:
    customer = get_customer_or_raise(customer_id)
    lines = [line for line in customer.products if line.product_id != product_id]
    if len(lines) == len(customer.products):
        raise NotFoundError(f"Product {product_id} is not part of customer {customer_id}'s subscription")
    updated = customer_store.save_product_lines(customer_id, lines)
    if updated is None:
        raise NotFoundError(f"Customer {customer_id} not found")
    return updated


def add_absent_days(customer_id: str, days: Iterable[date]) -> Customer:
    customer = get_customer_or_raise(customer_id)
    merged = absent_dates(customer) | set(days)
    return _save_absent_days(customer_id, merged)


def remove_absent_days(customer_id: str, days: Iterable[date]) -> Customer:
    customer = get_customer_or_raise(customer_id)
    remaining = absent_dates(customer) - set(days)
    return _save_absent_days(customer_id, remaining)


def _save_absent_days(customer_id: str, days: set[date]) -> Customer:
    updated = customer_store.update_customer(
        customer_id, {"absent_days": sorted(day.isoformat() for day in days)}
    )
    if updated is None:
        raise NotFoundError(f"Customer {customer_id} not found")
    return updated


def customer_eligibility(customer_id: str, target_date: date) -> tuple[Customer, bool, list[LineEligibility]]:
    customer = get_customer_or_raise(customer_id)
    return customer, is_absent(customer, target_date), evaluate_lines(customer, target_date)
