"""Supabase client construction. The app caches it; scripts and the CLI build their own."""
from supabase import Client, create_client

from ensayos import config


def get_supabase_uncached() -> Client:
    if not config.SUPABASE_URL or not config.SUPABASE_KEY:
        raise ValueError("SUPABASE_URL and SUPABASE_KEY must be set")
    return create_client(config.SUPABASE_URL, config.SUPABASE_KEY)
