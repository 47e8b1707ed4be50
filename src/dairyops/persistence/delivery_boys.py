"""Delivery boy persistence."""

from __future__ import annotations

from typing import Any

from ..models.domain import DeliveryBoy
from .base import first_row, require_client, run

TABLE = "delivery_boys"


def delivery_boy_from_row(row: dict[str, Any]) -> DeliveryBoy:
    return DeliveryBoy(
        id=str(row["id"]),
        name=row.get("name") or "",
        email=row.get("email") or "",
        phone_number=str(row.get("phone_number") or ""),
        area=row.get("area") or "",
        is_deleted=bool(row.get("is_deleted")),
    )


def get_delivery_boy(delivery_boy_id: str, *, include_deleted: bool = False) -> DeliveryBoy | None:
    supabase = require_client()
    row = first_row(run(supabase.table(TABLE).select("*").eq("id", delivery_boy_id).limit(1)))
    if not row:
        return None
    delivery_boy = delivery_boy_from_row(row)
    if delivery_boy.is_deleted and not include_deleted:
        return None
    return delivery_boy


def list_delivery_boys(
    *, search: str | None = None, offset: int = 0, limit: int = 50
) -> tuple[list[DeliveryBoy], int]:
    supabase = require_client()
    query = supabase.table(TABLE).select("*", count="exact").eq("is_deleted", False)
    if search:
        query = query.ilike("name", f"%{search}%")
    response = run(query.order("created_at", desc=True).range(offset, offset + limit - 1))
    items = [delivery_boy_from_row(row) for row in (response.data or [])]
    return items, response.count if response.count is not None else len(items)


def insert_delivery_boy(data: dict[str, Any]) -> DeliveryBoy:
    supabase = require_client()
    response = run(
        supabase.table(TABLE).insert({**data, "is_deleted": False}),
        conflict_message="A delivery boy with this email or phone number already exists",
    )
    return delivery_boy_from_row(response.data[0])


def update_delivery_boy(delivery_boy_id: str, changes: dict[str, Any]) -> DeliveryBoy | None:
    supabase = require_client()
    response = run(
        supabase.table(TABLE).update(changes).eq("id", delivery_boy_id),
        conflict_message="A delivery boy with this email or phone number already exists",
    )
    row = first_row(response)
    return delivery_boy_from_row(row) if row else None


def soft_delete_delivery_boy(delivery_boy_id: str) -> bool:
    return update_delivery_boy(delivery_boy_id, {"is_deleted": True}) is not None
