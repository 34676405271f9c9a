"""Tests for SecretManager and SecretRegistry"""

import pytest

from kubeweave.secrets.application.secret_manager import SecretManager
from kubeweave.secrets.application.secret_registry import SecretRegistry
from kubeweave.secrets.connectors.in_memory import InMemoryConnector
from kubeweave.secrets.domain.models import SecretDefinition
from kubeweave.secrets.providers.base import BaseProvider
from kubeweave.secrets.providers.basic_auth import BasicAuthSecretProvider
from kubeweave.secrets.providers.opaque import OpaqueSecretProvider
from kubeweave.shared.domain.exceptions import ConfigurationError, ResolutionError


class NoStrategyProvider(BaseProvider):
    """Provider declaring no strategies at all"""

    def prepare(self, name, value):
        return []

    def get_injection_payload(self, injections):
        return []

    def get_target_path(self, strategy):
        return "spec"


class TestSecretManagerRegistration:
    def test_duplicate_connector(self):
        """Connector names are unique"""
        manager = SecretManager().add_connector("env", InMemoryConnector())

        with pytest.raises(ConfigurationError, match="Connector 'env' is already registered"):
            manager.add_connector("env", InMemoryConnector())

    def test_duplicate_provider(self):
        """Provider names are unique"""
        manager = SecretManager().add_provider("opaque", OpaqueSecretProvider(name="a"))

        with pytest.raises(ConfigurationError, match="Provider 'opaque' is already registered"):
            manager.add_provider("opaque", OpaqueSecretProvider(name="b"))

    def test_duplicate_secret(self):
        """Secret names are unique within a manager"""
        manager = SecretManager().add_secret("API_KEY")

        with pytest.raises(ConfigurationError, match="already declared"):
            manager.add_secret(SecretDefinition(name="API_KEY", provider="other"))

    def test_provider_takes_registration_name(self):
        """add_provider names the instance after its key"""
        provider = OpaqueSecretProvider(name="app-secret")
        SecretManager().add_provider("opaque", provider)

        assert provider.name == "opaque"

    def test_capabilities_checked_on_registration(self):
        """A provider without strategies cannot be registered"""
        with pytest.raises(ConfigurationError, match="at least one injection strategy"):
            SecretManager().add_provider("broken", NoStrategyProvider())

    def test_default_must_be_registered(self):
        """Defaults can only name registered instances"""
        manager = SecretManager()

        with pytest.raises(ResolutionError, match="Provider 'missing' not found"):
            manager.set_default_provider("missing")
        with pytest.raises(ResolutionError, match="Connector 'missing' not found"):
            manager.set_default_connector("missing")


class TestSecretManagerResolution:
    def test_single_instances_are_implicit_defaults(self, opaque_manager):
        """With one provider and one connector, no default needs to be set"""
        assert opaque_manager.get_default_provider() == "opaque"
        assert opaque_manager.get_default_connector() == "mem"
        assert opaque_manager.resolve_provider().name == "opaque"

    def test_ambiguous_provider_without_default(self):
        """Two providers and no default cannot resolve an unnamed reference"""
        manager = (
            SecretManager()
            .add_provider("a", OpaqueSecretProvider(name="a"))
            .add_provider("b", OpaqueSecretProvider(name="b"))
            .add_secret("API_KEY")
        )

        with pytest.raises(ResolutionError, match="no default provider"):
            manager.resolve_provider_for("API_KEY")

    def test_explicit_default_is_used(self):
        """An explicit default wins when a secret names no provider"""
        manager = (
            SecretManager()
            .add_provider("a", OpaqueSecretProvider(name="a"))
            .add_provider("b", BasicAuthSecretProvider(name="b"))
            .set_default_provider("b")
            .add_secret("DB")
            .add_secret("API_KEY", provider="a")
        )

        provider, provider_id = manager.resolve_provider_for("DB")
        assert provider_id == "b"
        assert isinstance(provider, BasicAuthSecretProvider)
        assert manager.resolve_provider_for("API_KEY")[1] == "a"

    def test_defaults_do_not_rewrite_definitions(self, opaque_manager):
        """Definitions stay as declared"""
        assert opaque_manager.get_secrets()["API_KEY"] == SecretDefinition(name="API_KEY")

    def test_unknown_secret(self, opaque_manager):
        """Resolving an undeclared secret fails"""
        with pytest.raises(ResolutionError, match="not declared"):
            opaque_manager.resolve_provider_for("NOPE")

    def test_unknown_named_provider(self):
        """A secret naming an unregistered provider fails on resolution"""
        manager = (
            SecretManager()
            .add_provider("a", OpaqueSecretProvider(name="a"))
            .add_secret("API_KEY", provider="ghost")
        )

        with pytest.raises(ResolutionError, match="Provider 'ghost' not found"):
            manager.resolve_provider_for("API_KEY")

    def test_unknown_named_connector(self, opaque_manager):
        """resolve_connector fails for unregistered names"""
        with pytest.raises(ResolutionError, match="Connector 'ghost' not found"):
            opaque_manager.resolve_connector("ghost")


class TestSecretRegistry:
    def test_list_keeps_registration_order(self):
        """Managers come back in the order they were added"""
        first, second = SecretManager(), SecretManager()
        registry = SecretRegistry().add("frontend", first).add("backend", second)

        assert list(registry.list()) == ["frontend", "backend"]
        assert registry.get("backend") is second

    def test_duplicate_name(self):
        """Manager names are unique"""
        registry = SecretRegistry().add("frontend", SecretManager())

        with pytest.raises(ConfigurationError, match="already registered"):
            registry.add("frontend", SecretManager())

    def test_missing_name(self):
        """get fails for unknown names"""
        with pytest.raises(ResolutionError, match="Secret manager 'nope' not found"):
            SecretRegistry().get("nope")
