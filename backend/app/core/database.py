"""
Database connections: Supabase client setup.
"""

from functools import lru_cache
from supabase import create_client, Client

from app.config import get_settings


@lru_cache
def get_supabase_client() -> Client:
    """Get the Supabase client (singleton).

    Uses the service_role key: every table here is written server-side
    (documents, chunks, query_cache, analytics) and storage uploads bypass RLS.
    """
    settings = get_settings()
    if not settings.SUPABASE_SERVICE_KEY:
        raise ValueError("SUPABASE_SERVICE_KEY not configured")
    return create_client(settings.SUPABASE_URL, settings.SUPABASE_SERVICE_KEY)
