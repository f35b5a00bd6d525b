"""
Repository pattern implementations for Supabase.

Repositories translate between domain models and table rows.
"""

from .videos import DatabaseError, SupabaseConfig, VideoRepository

__all__ = ["DatabaseError", "SupabaseConfig", "VideoRepository"]
