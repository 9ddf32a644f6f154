"""
Shared infrastructure for AuthSync.

This package contains cross-cutting concerns that are used by multiple modules:
- config: Centralized settings management
- database: Supabase client factory
- exceptions: Base exception classes
- models: The authenticated user snapshot

Note: Business logic should NOT go here. This is for infrastructure only.
"""

from .config import Settings, get_settings
from .database import get_supabase_client, get_supabase_admin_client, reset_client_cache
from .exceptions import (
    AuthSyncError,
    NotFoundError,
    ValidationError,
    AuthenticationError,
    ConfigurationError,
)
from .models import AuthenticatedUser, AuthProviderType

__all__ = [
    "Settings",
    "get_settings",
    "get_supabase_client",
    "get_supabase_admin_client",
    "reset_client_cache",
    "AuthSyncError",
    "NotFoundError",
    "ValidationError",
    "AuthenticationError",
    "ConfigurationError",
    "AuthenticatedUser",
    "AuthProviderType",
]
