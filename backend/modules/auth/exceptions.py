"""
Authentication module exceptions.

NotSignedInError is the only error the auth state manager raises itself.
The rest are raised by the bundled providers; the manager passes them
through untouched.
"""

from shared.exceptions import (
    AuthenticationError,
    ConfigurationError,
    NotFoundError,
    ValidationError,
)


class NotSignedInError(AuthenticationError):
    """Raised when an operation needs a signed-in user and there is none."""

    def __init__(self, message: str = "No user is signed in"):
        super().__init__(message, code="NOT_SIGNED_IN")


class InvalidEmailError(ValidationError):
    """Raised when an email address is malformed."""

    def __init__(self, email: str):
        super().__init__(
            f"Invalid email address: {email}",
            code="INVALID_EMAIL",
            details={"email": email},
        )


class InvalidCredentialsError(AuthenticationError):
    """Raised when email or password is incorrect."""

    def __init__(self, message: str = "Invalid email or password"):
        super().__init__(message, code="INVALID_CREDENTIALS")


class UserNotFoundError(NotFoundError):
    """Raised when the targeted user doesn't exist."""

    def __init__(self, identifier: str):
        super().__init__(
            f"User not found: {identifier}",
            code="USER_NOT_FOUND",
            details={"identifier": identifier},
        )


class MissingClientIdError(ValidationError):
    """Raised when Google sign-in is attempted without a client ID."""

    def __init__(self, message: str = "Google sign-in requires a client ID"):
        super().__init__(message, code="MISSING_CLIENT_ID")


class SignInOptionNotSupportedError(ConfigurationError):
    """Raised when a provider can't perform an operation with its current setup."""

    def __init__(self, operation: str, reason: str):
        super().__init__(
            f"{operation} is not supported: {reason}",
            code="NOT_SUPPORTED",
            details={"operation": operation},
        )
