"""Delivery boy services."""

from .roster import (
    create_delivery_boy,
    deliveries_for_day,
    deliveries_for_range,
    delete_delivery_boy,
    get_delivery_boy_or_raise,
    update_delivery_boy,
)

__all__ = [
    "create_delivery_boy",
    "deliveries_for_day",
    "deliveries_for_range",
    "delete_delivery_boy",
    "get_delivery_boy_or_raise",
    "update_delivery_boy",
]
