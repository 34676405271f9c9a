"""Scope handed to a stack's `use_secrets` callback."""

from typing import TYPE_CHECKING

from kubeweave.secrets.application.injection_builder import SecretInjectionBuilder
from kubeweave.secrets.application.secret_manager import SecretManager
from kubeweave.secrets.domain.models import Injection

if TYPE_CHECKING:
    from kubeweave.stack.stack import Stack


class SecretsInjectionContext:
    """Creates injection builders for one manager within one stack."""

    def __init__(self, stack: "Stack", manager: SecretManager, manager_id: str = "default"):
        self.stack = stack
        self.manager = manager
        self.manager_id = manager_id
        self._default_resource_id: str | None = None
        self._builders: list[SecretInjectionBuilder] = []

    def set_default_resource_id(self, resource_id: str) -> None:
        self._default_resource_id = resource_id

    def get_default_resource_id(self) -> str | None:
        return self._default_resource_id

    def secrets(self, name: str) -> SecretInjectionBuilder:
        """Start an injection for a declared secret. Resolves the provider, not the value."""
        provider, provider_id = self.manager.resolve_provider_for(name)
        builder = SecretInjectionBuilder(self.stack, name, provider, provider_id, self)
        self._builders.append(builder)
        return builder

    def resolve_all(self) -> list[Injection]:
        return [builder.resolve_injection() for builder in self._builders]
