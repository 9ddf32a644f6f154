"""
Authentication module interface.

The auth state manager depends on IAuthProvider, not on a concrete
identity backend. This enables testing with the in-memory provider and
swapping Supabase for another backend without touching the manager.
"""

from typing import AsyncGenerator, Optional, Protocol, runtime_checkable

from shared.models import AuthenticatedUser

from .models import SignInOption, SignInResult


@runtime_checkable
class IAuthProvider(Protocol):
    """
    Interface for an identity backend.

    Every implementation must provide all of these methods; there are no
    defaults. Errors are provider-defined and reach callers unchanged.
    """

    def get_current_snapshot(self) -> Optional[AuthenticatedUser]:
        """
        Return who is signed in right now, without I/O where possible.

        Called once when the auth state manager is constructed.
        """
        ...

    def subscribe_to_changes(self) -> AsyncGenerator[Optional[AuthenticatedUser], None]:
        """
        Stream auth state changes.

        Yields the current snapshot first, then every change in the order
        it happened. None means nobody is signed in. Closing the generator
        ends the subscription.
        """
        ...

    async def sign_in(self, option: SignInOption) -> SignInResult:
        """
        Sign in with the given option.

        Args:
            option: Which provider to use

        Returns:
            SignInResult with the user and whether the account is new
        """
        ...

    def sign_out(self) -> None:
        """Sign out locally. Synchronous and fails fast."""
        ...

    async def delete_account(self) -> None:
        """Delete the signed-in account."""
        ...

    async def create_user_with_email(self, email: str, password: str) -> SignInResult:
        """
        Create an email/password account and sign it in.

        Validation of email and password is the provider's job.
        """
        ...

    async def sign_in_with_email(self, email: str, password: str) -> SignInResult:
        """Sign in with an existing email/password account."""
        ...

    async def send_password_reset(self, email: str) -> None:
        """Send a password reset email."""
        ...

    async def update_password(self, uid: str, new_password: str) -> None:
        """Change the password of the given user."""
        ...

    async def update_email(self, uid: str, new_email: str) -> None:
        """
        Change the email of the given user.

        The updated snapshot is delivered through subscribe_to_changes().
        """
        ...
