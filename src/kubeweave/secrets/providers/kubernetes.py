"""
Shared behaviour of providers that materialise a Kubernetes Secret.

Subclasses declare the Secret type and the keys they expose, and implement
`build_data` to turn a validated value into the Secret's `data` map.
"""

import base64
from abc import abstractmethod
from dataclasses import dataclass
from typing import Any, ClassVar

from kubeweave.secrets.domain.enums import EffectKind, StrategyKind
from kubeweave.secrets.domain.models import (
    EnvFromStrategy,
    EnvStrategy,
    Injection,
    InjectionStrategy,
    PreparedEffect,
)
from kubeweave.secrets.providers.base import BaseProvider
from kubeweave.secrets.providers.merge_utils import create_kubernetes_merge_handler, secret_identity
from kubeweave.shared.domain.exceptions import InjectionResolutionError

CONTAINERS_PATH = "spec.template.spec.containers"
IMAGE_PULL_SECRETS_PATH = "spec.template.spec.imagePullSecrets"


def encode_base64(text: str) -> str:
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


@dataclass
class KubernetesSecretConfig:
    """Name and namespace of the Secret a provider writes."""

    name: str
    namespace: str = "default"


class KubernetesSecretProvider(BaseProvider):
    """Base for providers whose effects are `kubectl` Secret manifests."""

    secret_type: ClassVar[str] = "Opaque"
    supported_strategies = (StrategyKind.ENV, StrategyKind.ENV_FROM)

    def __init__(self, config: KubernetesSecretConfig):
        super().__init__(config)
        self._merge_handler = create_kubernetes_merge_handler()

    @property
    def label(self) -> str:
        return self.name or type(self).__name__

    @abstractmethod
    def build_data(self, name: str, value: Any) -> dict[str, str]:
        """Validate `value` and return base64-encoded Secret data."""
        pass

    def prepare(self, name: str, value: Any) -> list[PreparedEffect]:
        manifest = {
            "apiVersion": "v1",
            "kind": "Secret",
            "metadata": {
                "name": self.config.name,
                "namespace": self.config.namespace or "default",
            },
            "type": self.secret_type,
            "data": self.build_data(name, value),
        }
        return [PreparedEffect(kind=EffectKind.KUBECTL, payload=manifest, provider_name=self.name, secret_name=name)]

    def get_target_path(self, strategy: InjectionStrategy) -> str:
        self.ensure_supported(strategy)
        if strategy.target_path:
            return strategy.target_path

        if isinstance(strategy, EnvStrategy):
            return f"{CONTAINERS_PATH}[{strategy.container_index}].env"
        if isinstance(strategy, EnvFromStrategy):
            return f"{CONTAINERS_PATH}[{strategy.container_index}].envFrom"
        if strategy.kind == StrategyKind.IMAGE_PULL_SECRET:
            return IMAGE_PULL_SECRETS_PATH
        raise InjectionResolutionError(
            f"Provider '{self.label}' has no target path for strategy '{strategy.kind.value}'"
        )

    def env_key_for(self, injection: Injection) -> str:
        """Secret data key an env injection reads. Requires a valid `key` on the strategy."""
        key = getattr(injection.meta.strategy, "key", None)
        if not key:
            raise InjectionResolutionError(
                f"Provider '{self.label}' requires 'key' for env injection of secret '{injection.meta.secret_name}'",
                context={"supported_keys": list(self.supported_env_keys or ())},
            )
        if self.supported_env_keys is not None and key not in self.supported_env_keys:
            raise InjectionResolutionError(
                f"Invalid key '{key}' for provider '{self.label}'. Must be one of: {', '.join(self.supported_env_keys)}",
                context={"supported_keys": list(self.supported_env_keys)},
            )
        return key

    def get_injection_payload(self, injections: list[Injection]) -> Any:
        if not injections:
            return []
        self.ensure_routed(injections)

        kinds = {injection.meta.strategy.kind for injection in injections}
        if len(kinds) > 1:
            raise InjectionResolutionError(
                f"Mixed injection strategies are not allowed in one payload for provider '{self.label}'",
                context={"kinds": sorted(kind.value for kind in kinds)},
            )
        kind = kinds.pop()
        if not self.supports(kind):
            raise InjectionResolutionError(f"Provider '{self.label}' does not support strategy '{kind.value}'")

        if kind == StrategyKind.ENV:
            return [
                {
                    "name": injection.meta.target_name,
                    "valueFrom": {
                        "secretKeyRef": {
                            "name": self.config.name,
                            "key": self.env_key_for(injection),
                        }
                    },
                }
                for injection in injections
            ]

        if kind == StrategyKind.ENV_FROM:
            prefixes = {getattr(injection.meta.strategy, "prefix", None) for injection in injections}
            if len(prefixes) > 1:
                raise InjectionResolutionError(
                    f"Multiple envFrom prefixes for provider '{self.label}': {sorted(p or '' for p in prefixes)}"
                )
            prefix = prefixes.pop()
            entry: dict[str, Any] = {"secretRef": {"name": self.config.name}}
            if prefix:
                entry = {"prefix": prefix, **entry}
            return [entry]

        if kind == StrategyKind.IMAGE_PULL_SECRET:
            return [{"name": self.config.name}]

        raise InjectionResolutionError(f"Provider '{self.label}' cannot build a payload for '{kind.value}'")

    def get_effect_identifier(self, effect: PreparedEffect) -> str | None:
        if not isinstance(effect.payload, dict):
            return None
        namespace, name = secret_identity(effect.payload)
        return f"{namespace}/{name}"

    def merge_secrets(self, effects: list[PreparedEffect]) -> list[PreparedEffect]:
        return self._merge_handler(effects)
