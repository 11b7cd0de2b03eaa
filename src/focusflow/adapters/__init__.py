"""Adapters - I/O implementations of ports."""

from .supabase_auth import SupabaseAuthAdapter, AuthenticationError
from .supabase_tasks import SupabaseTaskAdapter

__all__ = [
    "SupabaseAuthAdapter",
    "AuthenticationError",
    "SupabaseTaskAdapter",
]
