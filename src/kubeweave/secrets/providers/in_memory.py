"""In-memory provider producing `custom` effects, for tests and local development."""

from typing import Any

from kubeweave.secrets.domain.enums import EffectKind, StrategyKind
from kubeweave.secrets.domain.models import EnvStrategy, Injection, InjectionStrategy, PreparedEffect
from kubeweave.secrets.providers.base import BaseProvider
from kubeweave.secrets.providers.kubernetes import CONTAINERS_PATH, KubernetesSecretConfig


class InMemoryProvider(BaseProvider):
    supported_strategies = (StrategyKind.ENV,)

    def __init__(self, name: str = "in-memory", namespace: str = "default"):
        super().__init__(KubernetesSecretConfig(name=name, namespace=namespace))

    def prepare(self, name: str, value: Any) -> list[PreparedEffect]:
        return [
            PreparedEffect(
                kind=EffectKind.CUSTOM,
                payload={"secretName": name, "value": value},
                provider_name=self.name,
                secret_name=name,
            )
        ]

    def get_target_path(self, strategy: InjectionStrategy) -> str:
        self.ensure_supported(strategy)
        if strategy.target_path:
            return strategy.target_path
        index = strategy.container_index if isinstance(strategy, EnvStrategy) else 0
        return f"{CONTAINERS_PATH}[{index}].env"

    def get_injection_payload(self, injections: list[Injection]) -> Any:
        self.ensure_routed(injections)
        return [
            {
                "name": injection.meta.target_name,
                "valueFrom": {"secretKeyRef": {"name": self.config.name, "key": injection.meta.secret_name}},
            }
            for injection in injections
        ]

    def get_effect_identifier(self, effect: PreparedEffect) -> str | None:
        return f"{self.config.name}/{effect.payload['secretName']}"
