"""Delivery boy management and per-day delivery lists."""

from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Any

from ...errors import NotFoundError
from ...models.domain import DeliveryBoy
from ...persistence import customers as customer_store
from ...persistence import delivery_boys as delivery_boy_store
from ..orders.materializer import build_delivery_schedule
from ..scheduling.dates import format_ddmmyyyy

logger = logging.getLogger(__name__)

MAX_RANGE_DAYS = 62


def get_delivery_boy_or_raise(delivery_boy_id: str) -> DeliveryBoy:
    delivery_boy = delivery_boy_store.get_delivery_boy(delivery_boy_id)
    if delivery_boy is None:
        raise NotFoundError(f"Delivery boy {delivery_boy_id} not found")
    return delivery_boy


def create_delivery_boy(data: dict[str, Any]) -> DeliveryBoy:
    delivery_boy = delivery_boy_store.insert_delivery_boy(data)
    logger.info(f"Registered delivery boy {delivery_boy.name} ({delivery_boy.id})")
    return delivery_boy


def update_delivery_boy(delivery_boy_id: str, changes: dict[str, Any]) -> DeliveryBoy:
    current = get_delivery_boy_or_raise(delivery_boy_id)
    changes = {key: value for key, value in changes.items() if value is not None}
    if "email" in changes:
        changes["email"] = changes["email"].strip().lower()
    if not changes:
        return current
    updated = delivery_boy_store.update_delivery_boy(delivery_boy_id, changes)
    if updated is None:
        raise NotFoundError(f"Delivery boy {delivery_boy_id} not found")
    return updated


def delete_delivery_boy(delivery_boy_id: str) -> None:
    get_delivery_boy_or_raise(delivery_boy_id)
    delivery_boy_store.soft_delete_delivery_boy(delivery_boy_id)
    logger.info(f"Soft-deleted delivery boy {delivery_boy_id}")


def deliveries_for_day(delivery_boy_id: str, day: date) -> dict:
    """Customers and bottles the delivery boy drops off on ``day``."""
    delivery_boy = get_delivery_boy_or_raise(delivery_boy_id)
    customers = customer_store.list_customers_for_delivery_boy(delivery_boy.id)
    schedule = build_delivery_schedule(customers, day)
    schedule["delivery_boy"] = {"id": delivery_boy.id, "name": delivery_boy.name, "area": delivery_boy.area}
    return schedule


def deliveries_for_range(delivery_boy_id: str, start: date, end: date) -> dict:
    """Day-by-day delivery lists; days without deliveries are omitted."""
    if start > end:
        raise ValueError("start_date cannot be after end_date")
    span = (end - start).days + 1
    if span > MAX_RANGE_DAYS:
        raise ValueError(f"Date range cannot exceed {MAX_RANGE_DAYS} days")

    delivery_boy = get_delivery_boy_or_raise(delivery_boy_id)
    customers = customer_store.list_customers_for_delivery_boy(delivery_boy.id)
    days: list[dict] = []
    for offset in range(span):
        schedule = build_delivery_schedule(customers, start + timedelta(days=offset))
        if schedule["total_customers"]:
            days.append(schedule)

    return {
        "delivery_boy": {"id": delivery_boy.id, "name": delivery_boy.name, "area": delivery_boy.area},
        "start_date": format_ddmmyyyy(start),
        "end_date": format_ddmmyyyy(end),
        "total_days": len(days),
        "days": days,
    }
