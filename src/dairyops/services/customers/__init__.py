"""Customer service helpers."""

from .management import (
    CustomerCreation,
    add_absent_days,
    add_product_line,
    create_customer,
    customer_eligibility,
    delete_customer,
    get_customer_or_raise,
    remove_absent_days,
    remove_product_line,
    update_customer,
)

__all__ = [
    "CustomerCreation",
    "create_customer",
    "get_customer_or_raise",
    "update_customer",
    "delete_customer",
    "add_product_line",
    "remove_product_line",
    "add_absent_days",
    "remove_absent_days",
    "customer_eligibility",
]
