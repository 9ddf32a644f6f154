import asyncio

import pytest

from modules.auth.exceptions import (
    InvalidCredentialsError,
    InvalidEmailError,
    MissingClientIdError,
    UserNotFoundError,
)
from modules.auth.models import SignInOption
from providers.memory import InMemoryAuthProvider, make_mock_user
from shared.models import AuthProviderType


class TestMakeMockUser:
    def test_anonymous_user_has_no_email(self):
        user = make_mock_user(AuthProviderType.ANONYMOUS)
        assert user.is_anonymous is True
        assert user.email is None
        assert user.auth_providers == frozenset({AuthProviderType.ANONYMOUS})

    def test_unique_uids(self):
        assert make_mock_user().uid != make_mock_user().uid

    def test_explicit_email(self):
        user = make_mock_user(AuthProviderType.EMAIL, email="test@example.com")
        assert user.email == "test@example.com"
        assert user.creation_date == user.last_sign_in_date


class TestSubscription:
    @pytest.mark.asyncio
    async def test_yields_current_then_changes(self, test_user):
        """The stream starts with the snapshot and follows every change."""
        provider = InMemoryAuthProvider(user=test_user)
        stream = provider.subscribe_to_changes()

        assert await stream.__anext__() == test_user
        assert provider.subscriber_count == 1

        provider.sign_out()
        assert await asyncio.wait_for(stream.__anext__(), 1) is None

        await stream.aclose()
        assert provider.subscriber_count == 0

    @pytest.mark.asyncio
    async def test_every_subscriber_gets_every_change(self):
        provider = InMemoryAuthProvider()
        first, second = provider.subscribe_to_changes(), provider.subscribe_to_changes()
        await first.__anext__()
        await second.__anext__()

        user = make_mock_user()
        provider.simulate_remote_change(user)

        assert await asyncio.wait_for(first.__anext__(), 1) == user
        assert await asyncio.wait_for(second.__anext__(), 1) == user
        await first.aclose()
        await second.aclose()


class TestSignIn:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("option", [
        SignInOption.anonymous(),
        SignInOption.apple(),
        SignInOption.google("client-123"),
        SignInOption.email(),
    ])
    async def test_sign_in_sets_current_user(self, option):
        provider = InMemoryAuthProvider()
        user, is_new_user = await provider.sign_in(option)

        assert provider.get_current_snapshot() == user
        assert option.provider in user.auth_providers
        assert user.is_anonymous == (option.provider == AuthProviderType.ANONYMOUS)
        assert is_new_user is False

    @pytest.mark.asyncio
    async def test_google_without_client_id(self):
        provider = InMemoryAuthProvider()
        with pytest.raises(MissingClientIdError):
            await provider.sign_in(SignInOption.google(""))
        assert provider.current_user is None

    @pytest.mark.asyncio
    async def test_sign_out_and_delete(self, test_user):
        provider = InMemoryAuthProvider(user=test_user)
        provider.sign_out()
        assert provider.current_user is None

        provider = InMemoryAuthProvider(user=test_user)
        await provider.delete_account()
        assert provider.current_user is None


class TestEmailPassword:
    @pytest.mark.asyncio
    async def test_create_user(self):
        provider = InMemoryAuthProvider()
        user, is_new_user = await provider.create_user_with_email("test@example.com", "pw")
        assert is_new_user is True
        assert user.email == "test@example.com"
        assert user.auth_providers == frozenset({AuthProviderType.EMAIL})
        assert provider.current_user == user

    @pytest.mark.asyncio
    async def test_create_user_invalid_email(self):
        provider = InMemoryAuthProvider()
        with pytest.raises(InvalidEmailError):
            await provider.create_user_with_email("invalid-email", "pw")
        assert provider.current_user is None

    @pytest.mark.asyncio
    async def test_sign_in_with_email(self, test_user):
        provider = InMemoryAuthProvider(user=test_user)
        user, is_new_user = await provider.sign_in_with_email(test_user.email, "pw")
        assert user == test_user
        assert is_new_user is False

    @pytest.mark.asyncio
    async def test_sign_in_with_email_wrong_email(self, test_user):
        provider = InMemoryAuthProvider(user=test_user)
        with pytest.raises(InvalidCredentialsError):
            await provider.sign_in_with_email("other@example.com", "pw")

    @pytest.mark.asyncio
    async def test_password_reset(self, test_user):
        provider = InMemoryAuthProvider(user=test_user)
        await provider.send_password_reset(test_user.email)
        with pytest.raises(UserNotFoundError):
            await provider.send_password_reset("other@example.com")

    @pytest.mark.asyncio
    async def test_update_password_requires_matching_uid(self, test_user):
        provider = InMemoryAuthProvider(user=test_user)
        await provider.update_password(test_user.uid, "new")
        with pytest.raises(UserNotFoundError):
            await provider.update_password("someone-else", "new")

    @pytest.mark.asyncio
    async def test_update_email_pushes_new_snapshot(self, test_user):
        provider = InMemoryAuthProvider(user=test_user)
        stream = provider.subscribe_to_changes()
        await stream.__anext__()

        await provider.update_email(test_user.uid, "new@example.com")

        updated = await asyncio.wait_for(stream.__anext__(), 1)
        assert updated.email == "new@example.com"
        assert updated.uid == test_user.uid
        assert provider.current_user == updated
        await stream.aclose()

    @pytest.mark.asyncio
    async def test_update_email_unknown_uid(self):
        provider = InMemoryAuthProvider()
        with pytest.raises(UserNotFoundError):
            await provider.update_email("user-123", "new@example.com")
