"""Supabase client for the delivery backend."""

import logging
from functools import lru_cache
from supabase import create_client, Client
from ..config import settings


@lru_cache()
def get_supabase_client() -> Client | None:
    """Get cached Supabase client instance.

    Returns:
        Supabase Client instance if configured, None otherwise.
        Note: This does not test the connection - actual queries may fail with network errors.
    """
    if not settings.supabase_url or not settings.supabase_key:
        logging.warning("Supabase credentials not configured (missing URL or key)")
        return None

    try:
        return create_client(settings.supabase_url, settings.supabase_key)
    except Exception as e:
        logging.error(f"Failed to create Supabase client: {e}")
        return None


# Example usage patterns:
#
# # Active customers whose window contains a day
# result = supabase.table('customers') \
#     .select('*') \
#     .eq('subscription_status', 'active') \
#     .lte('start_date', '2025-01-05') \
#     .gte('end_date', '2025-01-05') \
#     .execute()
#
# # Per-day order sequence (atomic upsert-increment, see supabase/schema.sql)
# result = supabase.rpc('next_order_sequence', {'p_day': '2025-01-05'}).execute()
