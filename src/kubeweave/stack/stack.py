"""
Stack: a named set of resources plus the secret injections targeting them.
"""

import copy
from collections.abc import Callable
from typing import Any

from kubeweave.secrets.application.injection_context import SecretsInjectionContext
from kubeweave.secrets.application.secret_manager import SecretManager
from kubeweave.secrets.domain.models import Injection
from kubeweave.shared.infrastructure.logging import get_logger
from kubeweave.stack.composer import ResourceComposer

logger = get_logger(__name__)


class Stack:
    def __init__(self, name: str, composer: ResourceComposer | None = None):
        self.name = name
        self.composer = composer or ResourceComposer()
        self._injections: list[Injection] = []
        self._secret_managers: dict[str, SecretManager] = {}

    def use_secrets(
        self,
        manager: SecretManager,
        configure: Callable[[SecretsInjectionContext], Any],
    ) -> "Stack":
        """
        Declare injections from `manager`.

        `configure` receives a context and builds injections on it; they are
        resolved as soon as it returns.
        """
        manager_id = manager.name or str(len(self._secret_managers))
        self._secret_managers[manager_id] = manager
        ctx = SecretsInjectionContext(self, manager, manager_id)
        configure(ctx)
        ctx.resolve_all()
        return self

    def register_secret_injection(self, injection: Injection) -> None:
        self._injections.append(injection)

    def get_target_injects(self) -> list[Injection]:
        return list(self._injections)

    def get_secret_managers(self) -> dict[str, SecretManager]:
        return dict(self._secret_managers)

    def build(self) -> dict[str, dict[str, Any]]:
        """Return the composed manifests with every injection payload written in. The stack itself is not modified."""
        composer = copy.deepcopy(self.composer)
        # Grouped per provider instance: two managers may register providers under the same name
        groups: dict[tuple[int, str, str], list[Injection]] = {}
        for injection in self._injections:
            groups.setdefault((id(injection.provider), injection.resource_id, injection.path), []).append(injection)

        for (_, resource_id, path), injections in groups.items():
            payload = injections[0].provider.get_injection_payload(injections)
            composer.inject(resource_id, path, payload)
            logger.debug(
                "secret_payload_injected",
                stack=self.name,
                provider=injections[0].provider_id,
                resource_id=resource_id,
                path=path,
                count=len(injections),
            )

        return composer.build()
