"""Product catalogue persistence."""

from __future__ import annotations

from typing import Any, Iterable

from ..models.domain import Product
from .base import as_float, first_row, require_client, run

TABLE = "products"


def product_from_row(row: dict[str, Any]) -> Product:
    return Product(
        id=str(row["id"]),
        product_name=row.get("product_name") or "",
        description=row.get("description") or "",
        size=row.get("size") or "",
        price=as_float(row.get("price")),
        stock=int(row.get("stock") or 0),
        product_code=row.get("product_code"),
    )


def get_product(product_id: str) -> Product | None:
    supabase = require_client()
    row = first_row(run(supabase.table(TABLE).select("*").eq("id", product_id).limit(1)))
    return product_from_row(row) if row else None


def get_products_by_ids(product_ids: Iterable[str]) -> dict[str, Product]:
    ids = sorted({str(pid) for pid in product_ids if pid})
    if not ids:
        return {}
    supabase = require_client()
    response = run(supabase.table(TABLE).select("*").in_("id", ids))
    return {str(row["id"]): product_from_row(row) for row in (response.data or [])}


def list_products(*, search: str | None = None, offset: int = 0, limit: int = 50) -> tuple[list[Product], int]:
    supabase = require_client()
    query = supabase.table(TABLE).select("*", count="exact")
    if search:
        query = query.ilike("product_name", f"%{search}%")
    response = run(query.order("created_at", desc=True).range(offset, offset + limit - 1))
    items = [product_from_row(row) for row in (response.data or [])]
    return items, response.count if response.count is not None else len(items)


def latest_product_code(product_name: str) -> str | None:
    """Most recent product code issued for products sharing ``product_name``."""
    supabase = require_client()
    response = run(
        supabase.table(TABLE)
        .select("product_code")
        .eq("product_name", product_name)
        .order("created_at", desc=True)
        .limit(1)
    )
    row = first_row(response)
    return row.get("product_code") if row else None


def insert_product(data: dict[str, Any]) -> Product:
    supabase = require_client()
    response = run(
        supabase.table(TABLE).insert(data),
        conflict_message=f"Product code {data.get('product_code')} already exists",
    )
    return product_from_row(response.data[0])


def update_product(product_id: str, changes: dict[str, Any]) -> Product | None:
    supabase = require_client()
    response = run(supabase.table(TABLE).update(changes).eq("id", product_id))
    row = first_row(response)
    return product_from_row(row) if row else None


def delete_product(product_id: str) -> bool:
    supabase = require_client()
    response = run(supabase.table(TABLE).delete().eq("id", product_id))
    return bool(response.data)
