"""Factory functions for creating identity providers and event sinks."""

from typing import Optional

from shared.config import Settings, get_settings
from shared.database import get_supabase_admin_client, get_supabase_client
from shared.exceptions import ConfigurationError
from modules.analytics.interfaces import IEventSink
from modules.analytics.service import LoggingEventSink, NullEventSink
from modules.auth.interfaces import IAuthProvider

from .memory import InMemoryAuthProvider
from .supabase import SupabaseAuthProvider


def get_provider_names() -> list[str]:
    """Names accepted by the AUTH_PROVIDER setting."""
    return ["memory", "supabase"]


def create_auth_provider(settings: Optional[Settings] = None) -> IAuthProvider:
    """Create the identity provider selected by settings.

    Args:
        settings: Settings to use; defaults to the cached application settings

    Returns:
        A provider instance

    Raises:
        ConfigurationError: If AUTH_PROVIDER names an unknown provider
    """
    settings = settings or get_settings()
    name = settings.auth_provider.lower()

    if name == "memory":
        return InMemoryAuthProvider()
    if name == "supabase":
        return SupabaseAuthProvider(
            client=get_supabase_client(),
            admin_client=get_supabase_admin_client(),
            password_reset_redirect_url=settings.password_reset_redirect_url,
        )

    raise ConfigurationError(
        f"Unknown auth provider '{settings.auth_provider}'. "
        f"Expected one of: {', '.join(get_provider_names())}",
        code="UNKNOWN_PROVIDER",
        details={"auth_provider": settings.auth_provider},
    )


def create_event_sink(settings: Optional[Settings] = None) -> IEventSink:
    """Create the event sink selected by settings."""
    settings = settings or get_settings()
    if settings.enable_event_logging:
        return LoggingEventSink(settings.event_logger_name)
    return NullEventSink()
