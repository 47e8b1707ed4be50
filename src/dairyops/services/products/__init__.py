"""Product catalogue services."""

from .catalog import (
    adjust_stock,
    create_product,
    delete_product,
    get_product_or_raise,
    next_product_code,
    update_product,
)

__all__ = [
    "adjust_stock",
    "create_product",
    "delete_product",
    "get_product_or_raise",
    "next_product_code",
    "update_product",
]
