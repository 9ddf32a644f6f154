"""
Supabase client factory.

Provides the anon-key client used for end-user authentication and a
service-role client for admin operations such as deleting an account.
"""

from typing import Optional
from supabase import create_client, Client

from .config import get_settings

# Module-level client cache
_auth_client: Optional[Client] = None
_admin_client: Optional[Client] = None


def get_supabase_client() -> Client:
    """
    Get Supabase client with the anon key.

    This is the client whose session represents the signed-in user.

    Returns:
        Supabase client configured with the anon key
    """
    global _auth_client

    if _auth_client is None:
        settings = get_settings()
        if not settings.supabase_url or not settings.supabase_anon_key:
            raise RuntimeError(
                "Supabase configuration missing. "
                "Set SUPABASE_URL and SUPABASE_ANON_KEY environment variables."
            )
        _auth_client = create_client(
            settings.supabase_url,
            settings.supabase_anon_key,
        )

    return _auth_client


def get_supabase_admin_client() -> Optional[Client]:
    """
    Get Supabase client with service role (bypasses RLS).

    Only needed for admin operations like deleting users. Returns None when
    no service role key is configured so callers can degrade gracefully.
    """
    global _admin_client

    if _admin_client is None:
        settings = get_settings()
        if not settings.supabase_url or not settings.supabase_service_role_key:
            return None
        _admin_client = create_client(
            settings.supabase_url,
            settings.supabase_service_role_key,
        )

    return _admin_client


def reset_client_cache() -> None:
    """
    Reset the cached clients.

    Useful for testing or when configuration changes.
    """
    global _auth_client, _admin_client
    _auth_client = None
    _admin_client = None
