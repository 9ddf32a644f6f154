"""
Shared data models used across modules.

These models are shared infrastructure, not business logic.
Module-specific models should stay in their respective module directories.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from pydantic import BaseModel, Field


class AuthProviderType(str, Enum):
    """Identity providers an account can be linked to."""

    APPLE = "apple"
    GOOGLE = "google"
    EMAIL = "email"
    ANONYMOUS = "anonymous"


class AuthenticatedUser(BaseModel):
    """
    Point-in-time snapshot of the authenticated user.

    The uid never changes for a logical account; every other field may
    change when the user re-authenticates or edits their profile.
    """

    uid: str = Field(..., min_length=1, description="Stable user ID from the provider")
    email: Optional[str] = Field(None, description="User's email address")
    display_name: Optional[str] = Field(None, description="Display name")
    is_anonymous: bool = Field(default=False, description="Whether the account is anonymous")
    auth_providers: frozenset[AuthProviderType] = Field(
        default_factory=frozenset,
        description="Providers used at least once for this identity",
    )

    creation_date: Optional[datetime] = Field(None, description="Account creation time")
    last_sign_in_date: Optional[datetime] = Field(None, description="Last sign-in time")

    model_config = {"frozen": True}  # Make immutable for safety

    @property
    def event_parameters(self) -> dict[str, Any]:
        """Flat attributes forwarded to analytics as user properties."""
        params: dict[str, Any] = {
            "auth_uid": self.uid,
            "auth_is_anonymous": self.is_anonymous,
        }
        if self.email:
            params["auth_email"] = self.email
        if self.display_name:
            params["auth_display_name"] = self.display_name
        if self.auth_providers:
            params["auth_providers"] = ",".join(sorted(p.value for p in self.auth_providers))
        if self.creation_date:
            params["auth_creation_date"] = self.creation_date.isoformat()
        if self.last_sign_in_date:
            params["auth_last_sign_in_date"] = self.last_sign_in_date.isoformat()
        return params
