"""
Authentication module.

Keeps track of who is signed in, relays sign-in / account operations to an
identity provider and reports every operation to an analytics event sink.

Public API:
- IAuthProvider: Interface identity providers implement
- SignInOption, SignInResult: Sign-in models
- AuthenticatedUser, AuthProviderType: The user snapshot (from shared)
- Auth exceptions: NotSignedInError, InvalidCredentialsError, etc.

The AuthStateManager itself lives in modules.auth.service.
"""

from shared.models import AuthenticatedUser, AuthProviderType

from .interfaces import IAuthProvider
from .models import SignInOption, SignInResult
from .exceptions import (
    NotSignedInError,
    InvalidEmailError,
    InvalidCredentialsError,
    UserNotFoundError,
    MissingClientIdError,
    SignInOptionNotSupportedError,
)

__all__ = [
    # Interface
    "IAuthProvider",
    # Models
    "AuthenticatedUser",
    "AuthProviderType",
    "SignInOption",
    "SignInResult",
    # Exceptions
    "NotSignedInError",
    "InvalidEmailError",
    "InvalidCredentialsError",
    "UserNotFoundError",
    "MissingClientIdError",
    "SignInOptionNotSupportedError",
]
