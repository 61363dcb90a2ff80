"""Data access layer."""

from __future__ import annotations

from .supabase import SupabaseGateway, SupabaseNotInitializedError

__all__ = ["SupabaseGateway", "SupabaseNotInitializedError"]
