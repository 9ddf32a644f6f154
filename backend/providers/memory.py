"""In-memory identity provider for tests, demos and local development."""

import asyncio
import uuid
from datetime import datetime, timezone
from typing import AsyncGenerator, Optional

from shared.models import AuthenticatedUser, AuthProviderType
from modules.auth.exceptions import (
    InvalidCredentialsError,
    InvalidEmailError,
    MissingClientIdError,
    UserNotFoundError,
)
from modules.auth.interfaces import IAuthProvider
from modules.auth.models import SignInOption, SignInResult


def make_mock_user(
    provider: AuthProviderType = AuthProviderType.APPLE,
    email: Optional[str] = None,
    display_name: Optional[str] = None,
) -> AuthenticatedUser:
    """Build a freshly created user signed in with `provider`."""
    now = datetime.now(timezone.utc)
    uid = uuid.uuid4().hex
    if email is None and provider != AuthProviderType.ANONYMOUS:
        email = f"{uid[:8]}@example.com"
    return AuthenticatedUser(
        uid=uid,
        email=email,
        display_name=display_name,
        is_anonymous=provider == AuthProviderType.ANONYMOUS,
        auth_providers=frozenset({provider}),
        creation_date=now,
        last_sign_in_date=now,
    )


class InMemoryAuthProvider(IAuthProvider):
    """
    Identity provider that keeps a single current user in memory.

    Every change to the current user is pushed to all subscribers, which
    makes it suitable for exercising the auth listener end to end.
    """

    def __init__(self, user: Optional[AuthenticatedUser] = None):
        self._current_user = user
        self._subscribers: list[asyncio.Queue] = []

    @property
    def current_user(self) -> Optional[AuthenticatedUser]:
        return self._current_user

    @property
    def subscriber_count(self) -> int:
        """Number of open change subscriptions."""
        return len(self._subscribers)

    def _set_current_user(self, user: Optional[AuthenticatedUser]) -> None:
        self._current_user = user
        for queue in self._subscribers:
            queue.put_nowait(user)

    def simulate_remote_change(self, user: Optional[AuthenticatedUser]) -> None:
        """Change the current user as if it happened elsewhere (another device, token refresh)."""
        self._set_current_user(user)

    def get_current_snapshot(self) -> Optional[AuthenticatedUser]:
        return self._current_user

    async def subscribe_to_changes(self) -> AsyncGenerator[Optional[AuthenticatedUser], None]:
        queue: asyncio.Queue = asyncio.Queue()
        queue.put_nowait(self._current_user)
        self._subscribers.append(queue)
        try:
            while True:
                yield await queue.get()
        finally:
            self._subscribers.remove(queue)

    async def sign_in(self, option: SignInOption) -> SignInResult:
        if option.provider == AuthProviderType.GOOGLE and not option.client_id:
            raise MissingClientIdError()
        user = make_mock_user(option.provider)
        self._set_current_user(user)
        return SignInResult(user=user, is_new_user=False)

    def sign_out(self) -> None:
        self._set_current_user(None)

    async def delete_account(self) -> None:
        self._set_current_user(None)

    async def create_user_with_email(self, email: str, password: str) -> SignInResult:
        if "@" not in email:
            raise InvalidEmailError(email)
        user = make_mock_user(AuthProviderType.EMAIL, email=email)
        self._set_current_user(user)
        return SignInResult(user=user, is_new_user=True)

    async def sign_in_with_email(self, email: str, password: str) -> SignInResult:
        # Passwords aren't stored; a matching current user is enough.
        current = self._current_user
        if current is None or current.email != email:
            raise InvalidCredentialsError()
        return SignInResult(user=current, is_new_user=False)

    async def send_password_reset(self, email: str) -> None:
        if self._current_user is None or self._current_user.email != email:
            raise UserNotFoundError(email)

    async def update_password(self, uid: str, new_password: str) -> None:
        if self._current_user is None or self._current_user.uid != uid:
            raise UserNotFoundError(uid)

    async def update_email(self, uid: str, new_email: str) -> None:
        if self._current_user is None or self._current_user.uid != uid:
            raise UserNotFoundError(uid)
        self._set_current_user(self._current_user.model_copy(update={"email": new_email}))
