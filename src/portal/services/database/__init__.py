"""Database connection and models."""

from src.portal.services.database.connection import (
    create_supabase_admin_client,
    create_supabase_client,
)
from src.portal.services.database.utils import SupabaseQueryBuilder

__all__ = [
    "create_supabase_client",
    "create_supabase_admin_client",
    "SupabaseQueryBuilder",
]
