"""
Supabase Auth identity provider.

Wraps the synchronous supabase-py client. Blocking calls run in a worker
thread via asyncio.to_thread; auth state callbacks from the client are
bridged onto the event loop with call_soon_threadsafe.
"""

import asyncio
import logging
from datetime import datetime, timedelta
from typing import Any, AsyncGenerator, Awaitable, Callable, Optional

from supabase import Client

from shared.models import AuthenticatedUser, AuthProviderType
from modules.auth.exceptions import (
    InvalidCredentialsError,
    MissingClientIdError,
    SignInOptionNotSupportedError,
    UserNotFoundError,
)
from modules.auth.interfaces import IAuthProvider
from modules.auth.models import SignInOption, SignInResult

logger = logging.getLogger(__name__)

# An id-token sign-in counts as a new account if the user was created
# within this window of the sign-in itself.
NEW_USER_WINDOW = timedelta(seconds=10)

# Returns an OpenID Connect ID token for Apple / Google. Obtaining it
# (native SDK, browser flow) happens outside this library.
IdTokenSupplier = Callable[[SignInOption], Awaitable[str]]

_KNOWN_PROVIDERS = {p.value: p for p in AuthProviderType}


def to_authenticated_user(user: Any) -> AuthenticatedUser:
    """Map a Supabase (gotrue) User onto an AuthenticatedUser snapshot."""
    user_metadata = user.user_metadata or {}
    app_metadata = user.app_metadata or {}

    providers = app_metadata.get("providers") or []
    if not providers and app_metadata.get("provider"):
        providers = [app_metadata["provider"]]

    is_anonymous = bool(getattr(user, "is_anonymous", False))
    tags = {_KNOWN_PROVIDERS[p] for p in providers if p in _KNOWN_PROVIDERS}
    if is_anonymous:
        tags.add(AuthProviderType.ANONYMOUS)

    return AuthenticatedUser(
        uid=user.id,
        email=user.email or None,
        display_name=user_metadata.get("full_name") or user_metadata.get("name"),
        is_anonymous=is_anonymous,
        auth_providers=frozenset(tags),
        creation_date=user.created_at,
        last_sign_in_date=user.last_sign_in_at,
    )


def _is_recent_account(user: AuthenticatedUser) -> bool:
    created: Optional[datetime] = user.creation_date
    last_sign_in: Optional[datetime] = user.last_sign_in_date
    if created is None or last_sign_in is None:
        return False
    return abs(last_sign_in - created) <= NEW_USER_WINDOW


class SupabaseAuthProvider(IAuthProvider):
    """
    Identity provider backed by Supabase Auth.

    Args:
        client: Supabase client created with the anon key; its session is
            the signed-in user
        admin_client: Optional service-role client, required for
            delete_account
        id_token_supplier: Optional coroutine returning an ID token for
            Apple / Google sign-in
        password_reset_redirect_url: Where reset emails send the user
    """

    def __init__(
        self,
        client: Client,
        admin_client: Optional[Client] = None,
        id_token_supplier: Optional[IdTokenSupplier] = None,
        password_reset_redirect_url: str = "",
    ):
        self._client = client
        self._admin_client = admin_client
        self._id_token_supplier = id_token_supplier
        self._password_reset_redirect_url = password_reset_redirect_url

    def get_current_snapshot(self) -> Optional[AuthenticatedUser]:
        session = self._client.auth.get_session()
        if session is None or session.user is None:
            return None
        return to_authenticated_user(session.user)

    async def subscribe_to_changes(self) -> AsyncGenerator[Optional[AuthenticatedUser], None]:
        loop = asyncio.get_running_loop()
        queue: asyncio.Queue = asyncio.Queue()

        def on_change(event: str, session: Any) -> None:
            if event == "SIGNED_OUT" or session is None or session.user is None:
                value = None
            else:
                value = to_authenticated_user(session.user)
            loop.call_soon_threadsafe(queue.put_nowait, value)

        # Register before reading the snapshot so no change slips between them.
        subscription = self._client.auth.on_auth_state_change(on_change)
        try:
            yield await asyncio.to_thread(self.get_current_snapshot)
            while True:
                yield await queue.get()
        finally:
            subscription.unsubscribe()

    def _require_user(self, response: Any) -> AuthenticatedUser:
        if response is None or response.user is None:
            raise InvalidCredentialsError()
        return to_authenticated_user(response.user)

    async def sign_in(self, option: SignInOption) -> SignInResult:
        if option.provider == AuthProviderType.ANONYMOUS:
            response = await asyncio.to_thread(self._client.auth.sign_in_anonymously)
            return SignInResult(user=self._require_user(response), is_new_user=True)

        if option.provider == AuthProviderType.EMAIL:
            raise SignInOptionNotSupportedError(
                "sign_in(email)", "use sign_in_with_email with credentials"
            )

        if option.provider == AuthProviderType.GOOGLE and not option.client_id:
            raise MissingClientIdError()

        if self._id_token_supplier is None:
            raise SignInOptionNotSupportedError(
                f"sign_in({option.string_value})", "no ID token supplier configured"
            )

        token = await self._id_token_supplier(option)
        credentials = {"provider": option.provider.value, "token": token}
        response = await asyncio.to_thread(self._client.auth.sign_in_with_id_token, credentials)
        user = self._require_user(response)
        return SignInResult(user=user, is_new_user=_is_recent_account(user))

    def sign_out(self) -> None:
        self._client.auth.sign_out()

    async def delete_account(self) -> None:
        if self._admin_client is None:
            raise SignInOptionNotSupportedError(
                "delete_account", "SUPABASE_SERVICE_ROLE_KEY is not configured"
            )
        user = await asyncio.to_thread(self.get_current_snapshot)
        if user is None:
            raise UserNotFoundError("current session")

        await asyncio.to_thread(self._admin_client.auth.admin.delete_user, user.uid)
        logger.info("Deleted Supabase user %s", user.uid)
        # The session is dead server-side; drop it locally too.
        await asyncio.to_thread(self._client.auth.sign_out)

    async def create_user_with_email(self, email: str, password: str) -> SignInResult:
        response = await asyncio.to_thread(
            self._client.auth.sign_up, {"email": email, "password": password}
        )
        return SignInResult(user=self._require_user(response), is_new_user=True)

    async def sign_in_with_email(self, email: str, password: str) -> SignInResult:
        response = await asyncio.to_thread(
            self._client.auth.sign_in_with_password, {"email": email, "password": password}
        )
        return SignInResult(user=self._require_user(response), is_new_user=False)

    async def send_password_reset(self, email: str) -> None:
        options = {}
        if self._password_reset_redirect_url:
            options["redirect_to"] = self._password_reset_redirect_url
        await asyncio.to_thread(self._client.auth.reset_password_for_email, email, options)

    async def _ensure_session_user(self, uid: str) -> None:
        user = await asyncio.to_thread(self.get_current_snapshot)
        if user is None or user.uid != uid:
            raise UserNotFoundError(uid)

    async def update_password(self, uid: str, new_password: str) -> None:
        await self._ensure_session_user(uid)
        await asyncio.to_thread(self._client.auth.update_user, {"password": new_password})

    async def update_email(self, uid: str, new_email: str) -> None:
        # Supabase emits USER_UPDATED, which reaches subscribers as a new snapshot.
        await self._ensure_session_user(uid)
        await asyncio.to_thread(self._client.auth.update_user, {"email": new_email})
