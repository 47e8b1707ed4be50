"""Health endpoints."""

from __future__ import annotations

from fastapi import APIRouter, status

from ...config import settings
from ...db.supabase import get_supabase_client

router = APIRouter(tags=["health"])

_TABLES = ("customers", "products", "delivery_boys", "orders", "payments", "bottle_transactions")


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {"status": "ok"}


@router.get("/health/database", status_code=status.HTTP_200_OK)
def check_database() -> dict:
    """Check database connection and row counts per table."""
    supabase = get_supabase_client()
    if not supabase:
        return {
            "configured": False,
            "message": "Supabase not configured. Set DAIRY_SUPABASE_URL and DAIRY_SUPABASE_KEY environment variables.",
        }

    try:
        counts: dict[str, int] = {}
        for table in _TABLES:
            response = supabase.table(table).select("id", count="exact").limit(1).execute()
            counts[table] = response.count or 0
        return {
            "configured": True,
            "connected": True,
            "tables": counts,
            "timezone": settings.timezone,
            "message": f"Database connected. {counts['customers']} customers, {counts['orders']} orders.",
        }
    except Exception as exc:
        return {
            "configured": True,
            "connected": False,
            "error": str(exc),
            "message": f"Database connection error: {exc}",
        }
