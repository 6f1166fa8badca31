"""Database clients for Startup Setu."""

from src.db.supabase import SupabaseClient

__all__ = ["SupabaseClient"]
