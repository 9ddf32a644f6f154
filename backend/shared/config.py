"""
Centralized configuration for AuthSync.

All settings are loaded from environment variables with sensible defaults.
Provider-specific settings are namespaced (e.g., SUPABASE_*).
"""

from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "AuthSync"
    app_version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"

    # Auth provider selection: "supabase" or "memory"
    auth_provider: str = "supabase"

    # Supabase
    supabase_url: str = ""
    supabase_anon_key: str = ""
    supabase_service_role_key: str = ""

    # Where password reset emails send the user back to (empty = provider default)
    password_reset_redirect_url: str = ""

    # Analytics events
    enable_event_logging: bool = True
    event_logger_name: str = "authsync.events"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()
