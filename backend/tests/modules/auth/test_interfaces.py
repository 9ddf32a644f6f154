from modules.auth.interfaces import IAuthProvider
from providers.memory import InMemoryAuthProvider
from providers.supabase import SupabaseAuthProvider


PROVIDER_METHODS = [
    "get_current_snapshot",
    "subscribe_to_changes",
    "sign_in",
    "sign_out",
    "delete_account",
    "create_user_with_email",
    "sign_in_with_email",
    "send_password_reset",
    "update_password",
    "update_email",
]


class TestAuthProviderInterface:
    def test_interface_methods_exist(self):
        """IAuthProvider should define the full provider surface."""
        for method in PROVIDER_METHODS:
            assert hasattr(IAuthProvider, method)

    def test_providers_implement_every_method(self):
        """Both bundled providers implement every method themselves."""
        for provider_cls in (InMemoryAuthProvider, SupabaseAuthProvider):
            for method in PROVIDER_METHODS:
                assert method in vars(provider_cls), f"{provider_cls.__name__}.{method}"

    def test_in_memory_provider_satisfies_protocol(self):
        """IAuthProvider is runtime checkable."""
        assert isinstance(InMemoryAuthProvider(), IAuthProvider)
