"""Hosted authentication provider boundary."""

from .provider import ADMIN_ROLE, AuthProvider, AuthSession, AuthUser
from .supabase_client import SupabaseAuthClient

__all__ = ["ADMIN_ROLE", "AuthProvider", "AuthSession", "AuthUser", "SupabaseAuthClient"]
