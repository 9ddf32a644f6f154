"""
Authentication module data models.

These models define the data structures used by the auth module
and exposed to other modules through the interface.
"""

from typing import Any, NamedTuple, Optional
from pydantic import BaseModel, Field

from shared.models import AuthenticatedUser, AuthProviderType


class SignInOption(BaseModel):
    """
    How the user wants to sign in.

    Carries no secrets; used for dispatch and for labelling events.
    Only Google carries extra data (the OAuth client ID).
    """

    provider: AuthProviderType = Field(..., description="Provider to sign in with")
    client_id: Optional[str] = Field(None, description="OAuth client ID (Google only)")

    model_config = {"frozen": True}

    @classmethod
    def anonymous(cls) -> "SignInOption":
        return cls(provider=AuthProviderType.ANONYMOUS)

    @classmethod
    def apple(cls) -> "SignInOption":
        return cls(provider=AuthProviderType.APPLE)

    @classmethod
    def email(cls) -> "SignInOption":
        return cls(provider=AuthProviderType.EMAIL)

    @classmethod
    def google(cls, client_id: str) -> "SignInOption":
        return cls(provider=AuthProviderType.GOOGLE, client_id=client_id)

    @property
    def string_value(self) -> str:
        """Label used in analytics. Email sign-in is reported as "password"."""
        if self.provider == AuthProviderType.EMAIL:
            return "password"
        return self.provider.value

    @property
    def event_parameters(self) -> dict[str, Any]:
        return {"sign_in_option": self.string_value}


class SignInResult(NamedTuple):
    """Outcome of a successful sign-in or account creation."""

    user: AuthenticatedUser
    is_new_user: bool
