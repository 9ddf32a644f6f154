"""
Auth state manager.

Holds the single source of truth for who is signed in, relays operations
to the identity provider, republishes state changes to observers and
keeps a push listener subscribed to out-of-band changes (token refresh,
sign-out from another device, ...).

The manager is confined to the event loop it was created on. Local state
changes are synchronous; the only suspension points are provider calls.
"""

import asyncio
import logging
from contextlib import aclosing
from typing import AsyncIterator, Callable, Optional

from shared.models import AuthenticatedUser
from modules.analytics.interfaces import IEventSink
from modules.analytics.models import EventRecord
from modules.analytics.service import NullEventSink
from providers.factory import create_auth_provider, create_event_sink

from . import events
from .exceptions import NotSignedInError
from .interfaces import IAuthProvider
from .models import SignInOption, SignInResult

logger = logging.getLogger(__name__)

AuthObserver = Callable[[Optional[AuthenticatedUser]], None]


class AuthStateManager:
    """
    Owns the current auth state and the provider listener.

    Must be constructed inside a running event loop; every mutating call
    has to happen on that same loop.
    """

    def __init__(self, provider: IAuthProvider, event_sink: Optional[IEventSink] = None):
        self._loop = asyncio.get_running_loop()
        self._provider = provider
        self._sink: IEventSink = event_sink if event_sink is not None else NullEventSink()

        self._current_user: Optional[AuthenticatedUser] = provider.get_current_snapshot()
        self._observers: list[AuthObserver] = []
        self._watchers: list[asyncio.Queue] = []

        self._listener_task: Optional[asyncio.Task] = None
        self._listener_generation = 0
        self._closed = False
        self._start_listener()

    # State

    @property
    def current_user(self) -> Optional[AuthenticatedUser]:
        return self._current_user

    def get_current_user_id(self) -> str:
        """
        Return the signed-in user's ID.

        Raises:
            NotSignedInError: If nobody is signed in
        """
        if self._current_user is None:
            raise NotSignedInError()
        return self._current_user.uid

    def add_observer(self, callback: AuthObserver) -> Callable[[], None]:
        """
        Call `callback` with every new value of current_user.

        Returns:
            A function that removes the observer again
        """
        self._observers.append(callback)

        def remove() -> None:
            if callback in self._observers:
                self._observers.remove(callback)

        return remove

    async def watch(self) -> AsyncIterator[Optional[AuthenticatedUser]]:
        """
        Yield the current user, then every change in order.

        Changes are buffered per watcher until the generator is closed, so
        consumers that stop early must close it, e.g. with
        `contextlib.aclosing(manager.watch())`.
        """
        queue: asyncio.Queue = asyncio.Queue()
        queue.put_nowait(self._current_user)
        self._watchers.append(queue)
        try:
            while True:
                yield await queue.get()
        finally:
            self._watchers.remove(queue)

    def _ensure_owner(self) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            loop = None
        if loop is not self._loop:
            raise RuntimeError("AuthStateManager used outside the event loop that owns it")

    def _set_current_user(self, user: Optional[AuthenticatedUser]) -> None:
        self._current_user = user
        for queue in self._watchers:
            queue.put_nowait(user)
        for observer in list(self._observers):
            try:
                observer(user)
            except Exception:
                logger.warning("Auth observer %r failed", observer, exc_info=True)

    def _publish(self, user: Optional[AuthenticatedUser]) -> None:
        """Store a new auth value and report it to the sink."""
        self._set_current_user(user)

        if user is not None:
            self._call_sink("identify", user.uid, name=user.display_name, email=user.email)
            self._call_sink("set_properties", user.event_parameters, high_priority=True)
            self._track(events.listener_success(user))
        else:
            self._track(events.listener_empty())

    # Event sink

    def _call_sink(self, method: str, *args, **kwargs) -> None:
        try:
            getattr(self._sink, method)(*args, **kwargs)
        except Exception:
            logger.warning("Event sink %s() failed", method, exc_info=True)

    def _track(self, event: EventRecord) -> None:
        self._call_sink("track", event.name, event.parameters, event.severity)

    # Listener

    def _start_listener(self) -> None:
        self._listener_generation += 1
        generation = self._listener_generation
        self._listener_task = self._loop.create_task(
            self._listen(generation), name=f"auth-listener-{generation}"
        )
        logger.debug("Auth listener %d started", generation)

    async def _listen(self, generation: int) -> None:
        try:
            async with aclosing(self._provider.subscribe_to_changes()) as stream:
                async for user in stream:
                    if generation != self._listener_generation:
                        break
                    self._publish(user)
        except asyncio.CancelledError:
            logger.debug("Auth listener %d cancelled", generation)
            raise
        except Exception:
            logger.exception("Auth listener %d stopped: provider stream failed", generation)

    async def _stop_listener(self) -> None:
        # Loop in case a concurrent resubscribe started a listener while we waited.
        while self._listener_task is not None and not self._listener_task.done():
            task = self._listener_task
            self._listener_generation += 1
            task.cancel()
            await asyncio.wait({task})

    async def resubscribe(self) -> None:
        """
        Replace the provider listener with a fresh subscription.

        The old listener is cancelled and has stopped before the new one
        starts, so there is never more than one live subscription. If the
        caller is cancelled while waiting, the new listener still starts
        once the old one has stopped.
        """
        self._ensure_owner()
        try:
            await self._stop_listener()
        except asyncio.CancelledError:
            self._restart_when_stopped()
            raise
        if not self._closed:
            self._start_listener()

    def _restart_when_stopped(self) -> None:
        task = self._listener_task
        if self._closed:
            return
        if task is None or task.done():
            self._start_listener()
            return

        def restart(stopped: asyncio.Task) -> None:
            # Skip if another resubscribe or aclose got there first.
            if not self._closed and self._listener_task is stopped:
                self._start_listener()

        task.add_done_callback(restart)

    async def aclose(self) -> None:
        """Stop listening for provider changes."""
        self._closed = True
        await self._stop_listener()
        self._listener_task = None

    async def __aenter__(self) -> "AuthStateManager":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    # Sign in

    async def sign_in_anonymously(self) -> SignInResult:
        return await self._sign_in(SignInOption.anonymous())

    async def sign_in_with_apple(self) -> SignInResult:
        return await self._sign_in(SignInOption.apple())

    async def sign_in_with_google(self, client_id: str) -> SignInResult:
        return await self._sign_in(SignInOption.google(client_id))

    async def _sign_in(self, option: SignInOption) -> SignInResult:
        self._ensure_owner()
        self._track(events.sign_in_start(option))

        try:
            result = await self._provider.sign_in(option)
            self._publish(result.user)
            self._track(events.sign_in_success(option, result.user, result.is_new_user))
            return result
        except Exception as e:
            self._track(events.sign_in_fail(e))
            raise
        finally:
            # Linking an anonymous account keeps the same uid, and some
            # providers don't push a change for that. A fresh listener
            # picks up the new snapshot either way.
            await self.resubscribe()

    def sign_out(self) -> None:
        """Sign out. current_user is cleared as soon as the provider returns."""
        self._ensure_owner()
        self._track(events.sign_out_start())

        try:
            self._provider.sign_out()
        except Exception as e:
            self._track(events.sign_out_fail(e))
            raise

        self._set_current_user(None)
        self._track(events.sign_out_success())

    async def delete_account(self) -> None:
        self._ensure_owner()
        self._track(events.delete_account_start())

        try:
            await self._provider.delete_account()
        except Exception as e:
            self._track(events.delete_account_fail(e))
            raise

        self._set_current_user(None)
        self._track(events.delete_account_success())

    # Email & password

    async def create_user_with_email(self, email: str, password: str) -> SignInResult:
        """Create an email/password account and sign it in."""
        self._ensure_owner()
        self._track(events.create_user_start(email))

        try:
            result = await self._provider.create_user_with_email(email, password)
        except Exception as e:
            self._track(events.create_user_fail(email, e))
            raise

        self._publish(result.user)
        self._track(events.create_user_success(email, result.user))
        return result

    async def sign_in_with_email(self, email: str, password: str) -> SignInResult:
        self._ensure_owner()
        option = SignInOption.email()
        self._track(events.sign_in_start(option))

        try:
            result = await self._provider.sign_in_with_email(email, password)
        except Exception as e:
            self._track(events.sign_in_fail(e))
            raise

        self._publish(result.user)
        self._track(events.sign_in_success(option, result.user, result.is_new_user))
        return result

    async def reset_password(self, email: str) -> None:
        self._ensure_owner()
        self._track(events.reset_password_start(email))

        try:
            await self._provider.send_password_reset(email)
        except Exception as e:
            self._track(events.reset_password_fail(email, e))
            raise

        self._track(events.reset_password_success(email))

    async def update_password(self, new_password: str) -> None:
        """
        Change the signed-in user's password.

        Raises:
            NotSignedInError: If nobody is signed in (nothing is tracked)
        """
        user_id = self.get_current_user_id()
        self._ensure_owner()
        self._track(events.update_password_start(user_id))

        try:
            await self._provider.update_password(user_id, new_password)
        except Exception as e:
            self._track(events.update_password_fail(user_id, e))
            raise

        self._track(events.update_password_success(user_id))

    async def update_email(self, new_email: str) -> None:
        """
        Change the signed-in user's email.

        current_user is not touched here. The new email shows up once the
        provider pushes the updated snapshot through the listener.

        Raises:
            NotSignedInError: If nobody is signed in (nothing is tracked)
        """
        user_id = self.get_current_user_id()
        self._ensure_owner()
        self._track(events.update_email_start(user_id, new_email))

        try:
            await self._provider.update_email(user_id, new_email)
        except Exception as e:
            self._track(events.update_email_fail(user_id, new_email, e))
            raise

        self._track(events.update_email_success(user_id, new_email))


# Module-level instance getter
_manager_instance: Optional[AuthStateManager] = None


def get_auth_manager() -> AuthStateManager:
    """
    Get the auth state manager singleton.

    Built from settings on first call, which has to happen inside the
    event loop that will own it.
    """
    global _manager_instance
    if _manager_instance is None:
        _manager_instance = AuthStateManager(
            provider=create_auth_provider(),
            event_sink=create_event_sink(),
        )
    return _manager_instance


def reset_auth_manager() -> None:
    """Reset the auth state manager singleton (for testing)."""
    global _manager_instance
    _manager_instance = None
