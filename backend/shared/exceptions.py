"""
Error hierarchy for AuthSync.

Modules raise subclasses of these bases. Every error carries a stable
`code` that analytics events and callers can match on without parsing
the message.
"""

from typing import Optional, Any


class AuthSyncError(Exception):
    """
    Root of every error AuthSync raises itself.

    Errors coming out of a third-party identity backend are not wrapped
    in this class; they reach the caller unchanged.
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        # Without an explicit code the class name is used.
        self.code = code or type(self).__name__
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Serialize the error for logs and analytics payloads."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


class NotFoundError(AuthSyncError):
    """An account or user the operation targets does not exist."""


class ValidationError(AuthSyncError):
    """An argument was rejected before reaching the identity backend."""


class AuthenticationError(AuthSyncError):
    """Credentials are wrong, or the operation needs a signed-in user."""


class ConfigurationError(AuthSyncError):
    """A provider or service is missing required configuration."""
