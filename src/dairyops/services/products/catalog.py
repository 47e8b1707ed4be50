"""Product catalogue management."""

from __future__ import annotations

import logging
import re
from typing import Any, Optional

from ...errors import NotFoundError
from ...models.domain import Product
from ...persistence import products as product_store

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s+")


def product_code_prefix(product_name: str) -> str:
    return _WHITESPACE.sub("-", product_name.strip().upper())


def next_product_code(product_name: str, latest_code: Optional[str]) -> str:
    """``<NAME>-NNN`` numbered after the latest code issued for the same name."""
    number = 1
    if latest_code:
        tail = latest_code.rsplit("-", 1)[-1]
        if tail.isdigit():
            number = int(tail) + 1
    return f"{product_code_prefix(product_name)}-{number:03d}"


def create_product(data: dict[str, Any]) -> Product:
    name = data["product_name"].strip()
    code = next_product_code(name, product_store.latest_product_code(name))
    product = product_store.insert_product({**data, "product_name": name, "product_code": code})
    logger.info(f"Created product {product.product_code} ({product.id})")
    return product


def get_product_or_raise(product_id: str) -> Product:
    product = product_store.get_product(product_id)
    if product is None:
        raise NotFoundError(f"Product {product_id} not found")
    return product


def update_product(product_id: str, changes: dict[str, Any]) -> Product:
    changes = {key: value for key, value in changes.items() if value is not None}
    if not changes:
        return get_product_or_raise(product_id)
    product = product_store.update_product(product_id, changes)
    if product is None:
        raise NotFoundError(f"Product {product_id} not found")
    return product


def delete_product(product_id: str) -> None:
    if not product_store.delete_product(product_id):
        raise NotFoundError(f"Product {product_id} not found")


def adjust_stock(product_id: str, delta: int) -> Product:
    """Add (positive ``delta``) or remove (negative) stock."""
    product = get_product_or_raise(product_id)
    new_stock = product.stock + delta
    if new_stock < 0:
        raise ValueError(
            f"Insufficient stock for {product.product_name}: {product.stock} available, {-delta} requested"
        )
    updated = product_store.update_product(product_id, {"stock": new_stock})
    if updated is None:
        raise NotFoundError(f"Product {product_id} not found")
    return updated
