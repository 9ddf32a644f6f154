"""Identity provider implementations."""

from .factory import create_auth_provider, create_event_sink, get_provider_names
from .memory import InMemoryAuthProvider, make_mock_user
from .supabase import SupabaseAuthProvider

__all__ = [
    "InMemoryAuthProvider",
    "SupabaseAuthProvider",
    "make_mock_user",
    "create_auth_provider",
    "create_event_sink",
    "get_provider_names",
]
