"""
Shared test fixtures and utilities.

This module provides common test infrastructure used across all test modules.
"""

import asyncio
from datetime import datetime, timezone

import pytest

from shared.config import get_settings
from shared.database import reset_client_cache
from shared.models import AuthenticatedUser, AuthProviderType
from modules.analytics.service import InMemoryEventSink
from modules.auth.service import reset_auth_manager
from providers.memory import InMemoryAuthProvider


@pytest.fixture(autouse=True)
def reset_singletons():
    """Reset cached settings, clients and the manager singleton around each test."""
    get_settings.cache_clear()
    reset_client_cache()
    reset_auth_manager()
    yield
    get_settings.cache_clear()
    reset_client_cache()
    reset_auth_manager()


@pytest.fixture
def settle():
    """
    Let background listener tasks run.

    Returns a coroutine function; await it after pushing a provider change.
    """

    async def _settle() -> None:
        await asyncio.sleep(0.01)

    return _settle


@pytest.fixture
def test_user_email() -> str:
    """Provide a consistent test user email."""
    return "test@example.com"


@pytest.fixture
def test_user(test_user_email: str) -> AuthenticatedUser:
    """An email/password user."""
    now = datetime(2024, 9, 28, 12, 0, tzinfo=timezone.utc)
    return AuthenticatedUser(
        uid="test-user-123",
        email=test_user_email,
        display_name="Test User",
        auth_providers=frozenset({AuthProviderType.EMAIL}),
        creation_date=now,
        last_sign_in_date=now,
    )


@pytest.fixture
def event_sink() -> InMemoryEventSink:
    """Recording event sink."""
    return InMemoryEventSink()


@pytest.fixture
def signed_out_provider() -> InMemoryAuthProvider:
    """In-memory provider with nobody signed in."""
    return InMemoryAuthProvider()


@pytest.fixture
def signed_in_provider(test_user: AuthenticatedUser) -> InMemoryAuthProvider:
    """In-memory provider with the test user signed in."""
    return InMemoryAuthProvider(user=test_user)
