"""Shared helpers for Supabase-backed persistence modules."""

from __future__ import annotations

from typing import Any

from postgrest.exceptions import APIError

from ..db.supabase import get_supabase_client
from ..errors import ConflictError, DatabaseNotConfiguredError

UNIQUE_VIOLATION = "23505"


def require_client() -> Any:
    supabase = get_supabase_client()
    if not supabase:
        raise DatabaseNotConfiguredError(
            "Supabase not configured. Set DAIRY_SUPABASE_URL and DAIRY_SUPABASE_KEY environment variables."
        )
    return supabase


def run(query: Any, *, conflict_message: str | None = None) -> Any:
    """Execute a PostgREST query, translating unique violations to ``ConflictError``."""
    try:
        return query.execute()
    except APIError as exc:
        if exc.code == UNIQUE_VIOLATION:
            raise ConflictError(conflict_message or exc.message or "Duplicate record") from exc
        raise


def first_row(response: Any) -> dict | None:
    rows = response.data or []
    return rows[0] if rows else None


def as_float(value: Any, default: float = 0.0) -> float:
    if value is None or value == "":
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default
